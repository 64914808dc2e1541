"""
Price calculation for configurable services.

compute_price turns a service schema, a billing period and a selection into a
line-item breakdown with GST applied. It never raises: a missing schema
prices to an empty breakdown, an unknown period prices the base at zero, and
option names that no longer exist in the schema are skipped.
"""

import logging
from collections.abc import Iterator, Mapping
from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from core.models import (
    BreakdownLine,
    InputType,
    LineKind,
    OptionGroup,
    PriceBreakdown,
    ServiceSchema,
    normalize_period,
)
from core.selection import SelectionValue

logger = logging.getLogger(__name__)

GST_RATE = Decimal("0.18")
GST_LABEL = "GST (18%)"
SUBTOTAL_LABEL = "Subtotal"

# Add-ons are priced per month; these scale them to the billing period
BILLING_MULTIPLIERS: dict[str, int] = {
    "monthly": 1,
    "quarterly": 3,
    "half_yearly": 6,
    "yearly": 12,
    "one_time": 1,
}


def period_label(period: str) -> str:
    """Human-readable billing period, e.g. "One-Time" or "Half yearly"."""
    period = normalize_period(period)
    if period == "one_time":
        return "One-Time"
    spaced = period.replace("_", " ")
    return spaced[:1].upper() + spaced[1:]


def period_multiplier(period: str) -> int:
    """Add-on multiplier for a billing period. Unknown periods scale by 1."""
    return BILLING_MULTIPLIERS.get(normalize_period(period), 1)


def parse_service_schema(document: Any) -> ServiceSchema | None:
    """
    Validate a raw schema document.

    Returns None instead of raising when the document is missing or too
    malformed to price, so callers degrade to an empty breakdown.
    """
    if document is None:
        return None
    if isinstance(document, ServiceSchema):
        return document
    try:
        return ServiceSchema.model_validate(document)
    except ValidationError as e:
        logger.warning(f"Malformed service schema ignored: {e.error_count()} error(s)")
        return None


def default_period(schema: ServiceSchema, fallback: str = "one_time") -> str:
    """First offered period, else the legacy period, else fallback."""
    if schema.pricing_structure:
        return schema.periods[0]
    return schema.period or normalize_period(fallback)


def repair_period(schema: ServiceSchema, period: str | None, fallback: str = "one_time") -> str:
    """
    Return period if the schema offers it, otherwise its default period.

    A schema without a pricing structure accepts any period unless it
    carries a legacy period of its own.
    """
    wanted = normalize_period(period) if period else None

    if schema.pricing_structure:
        if wanted in schema.periods:
            return wanted
    elif wanted is not None and schema.period in (None, wanted):
        return wanted

    return default_period(schema, fallback)


def resolve_base_price(schema: ServiceSchema, period: str) -> Decimal:
    """
    Base price for the selected period.

    Falls back to the legacy single price when the schema has no
    pricing structure. Returns zero when the period is not offered.
    """
    if not schema.pricing_structure:
        return schema.price if schema.price is not None else Decimal("0")

    price = schema.price_for(period)
    if price is None:
        logger.debug(f"Period '{period}' not offered by service {schema.id}, base price is 0")
        return Decimal("0")
    return price


def _option_contribution(group: OptionGroup, option_name: str) -> Iterator[tuple[str, Decimal, bool]]:
    option = group.find_option(option_name)
    if option is None:
        logger.debug(f"Option '{option_name}' not found in group '{group.name}', ignoring")
        return
    yield f"{group.name}: {option.name}", option.price_modifier, option.needs_quotation


def _group_contributions(
    group: OptionGroup,
    selected: SelectionValue | None,
) -> Iterator[tuple[str, Decimal, bool]]:
    """Yield (label, modifier, needs_quotation) for each priced choice in a group."""
    if not selected:
        return

    if group.input_type is InputType.DROPDOWN:
        if isinstance(selected, str):
            yield from _option_contribution(group, selected)
        return

    if not group.options:
        # Bare toggle: the group prices itself
        yield group.name, group.price_modifier, False
        return

    if group.is_multiple_select:
        names = [selected] if isinstance(selected, str) else selected
        if isinstance(names, list):
            # Duplicates are applied once per occurrence
            for name in names:
                yield from _option_contribution(group, name)
        return

    if isinstance(selected, str):
        yield from _option_contribution(group, selected)


def compute_price(
    schema: ServiceSchema | Mapping | None,
    selected_period: str,
    selection: Mapping | None = None,
    *,
    scale_modifiers: bool = False,
) -> PriceBreakdown:
    """
    Price a configured service.

    Args:
        schema: Service schema or its raw document, None if it could not be loaded
        selected_period: Billing period the user picked
        selection: Option group name -> option name(s)
        scale_modifiers: Multiply add-on modifiers by the billing period
            multiplier (monthly add-on prices). Off by default.

    Returns:
        PriceBreakdown with lines in order: base, one per applied option,
        subtotal, GST.
    """
    schema = parse_service_schema(schema)
    if schema is None:
        return PriceBreakdown()

    if not isinstance(selection, Mapping):
        selection = {}

    base_price = resolve_base_price(schema, selected_period)
    label_period = selected_period
    if not schema.pricing_structure and schema.period:
        label_period = schema.period

    lines = [BreakdownLine(label=period_label(label_period), amount=base_price, kind=LineKind.BASE)]
    multiplier = period_multiplier(selected_period) if scale_modifiers else 1

    total_modifiers = Decimal("0")
    needs_quotation = False

    for group in schema.requests:
        selected = selection.get(group.name)

        for label, modifier, option_quote in _group_contributions(group, selected):
            amount = modifier * multiplier
            total_modifiers += amount
            lines.append(BreakdownLine(label=label, amount=amount, kind=LineKind.MODIFIER))
            needs_quotation = needs_quotation or option_quote

        # Group-level quotation applies to any selection, matched or not
        if group.needs_quotation and selected:
            needs_quotation = True

    subtotal = base_price + total_modifiers
    tax = subtotal * GST_RATE

    lines.append(BreakdownLine(label=SUBTOTAL_LABEL, amount=subtotal, kind=LineKind.BASE))
    lines.append(BreakdownLine(label=GST_LABEL, amount=tax, kind=LineKind.MODIFIER))

    return PriceBreakdown(
        lines=tuple(lines),
        base_price=base_price,
        total_modifiers=total_modifiers,
        tax=tax,
        needs_quotation=needs_quotation,
        total=subtotal + tax,
    )
