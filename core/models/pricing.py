"""Computed pricing models: breakdowns and outbound payloads.

Breakdowns keep full Decimal precision. Rounding happens only in
display_total, which is what the checkout payload carries.
"""

from decimal import Decimal, ROUND_FLOOR
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class LineKind(str, Enum):
    """Whether a breakdown line is a base amount or a modifier on top of it."""

    BASE = "base"
    MODIFIER = "modifier"


class BreakdownLine(BaseModel):
    """One labelled amount in a price breakdown."""

    model_config = ConfigDict(frozen=True)

    label: str
    amount: Decimal
    kind: LineKind


class PriceBreakdown(BaseModel):
    """
    Result of pricing a configured service.

    Invariant: total == base_price + total_modifiers + tax, where
    tax is the GST share of the subtotal.
    """

    model_config = ConfigDict(frozen=True)

    lines: tuple[BreakdownLine, ...] = ()
    base_price: Decimal = Decimal("0")
    total_modifiers: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    needs_quotation: bool = False
    total: Decimal = Decimal("0")

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return self.base_price + self.total_modifiers

    @computed_field
    @property
    def display_total(self) -> int:
        """Total rounded to whole currency units, halves rounded up."""
        return int((self.total + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))

    @property
    def modifier_lines(self) -> list[BreakdownLine]:
        """Lines contributed by selected options (tax excluded)."""
        return [line for line in self.lines[1:-2] if line.kind is LineKind.MODIFIER]


_PAYLOAD_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CheckoutPayload(BaseModel):
    """Payment-initiation request for a configured service."""

    model_config = _PAYLOAD_CONFIG

    item_type: str = "service"
    item_id: str
    price: int = Field(..., description="Rounded, tax-inclusive total")
    billing_period: str
    selected_options: dict[str, str | list[str]] = Field(default_factory=dict)


class InterestPayload(BaseModel):
    """Free-consultation interest request."""

    model_config = _PAYLOAD_CONFIG

    item_type: str = "service"
    item_id: str
    selected_features: list[str] = Field(default_factory=list)
