"""
Service configurator.

Holds the user's configuration of one service (billing period and option
selection) and keeps the derived price breakdown and purchase state current.
Every change recomputes the full breakdown synchronously and publishes it on
the event bus.
"""

import logging
from collections.abc import Iterable, Mapping

from core.checkout import build_checkout_payload, build_interest_payload
from core.config import PricingConfig
from core.event_bus import EventBus
from core.events import BreakdownUpdated, PeriodRepaired, PurchaseStateResolved
from core.models import (
    CheckoutPayload,
    InterestPayload,
    OptionGroup,
    PriceBreakdown,
    PurchaseRecord,
    PurchaseState,
    ServiceSchema,
    normalize_period,
)
from core.pricing import compute_price, repair_period
from core.purchases import parse_purchase_records, resolve_purchase_state
from core.selection import (
    SelectionState,
    apply_selection,
    clear_group,
    copy_selection,
    toggle_group,
)

logger = logging.getLogger(__name__)


class ServiceConfigurator:
    """Configuration state and derived pricing for a single service."""

    def __init__(
        self,
        schema: ServiceSchema,
        event_bus: EventBus | None = None,
        config: PricingConfig | None = None,
        period: str | None = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.config = config or PricingConfig()
        self._schema = schema
        self._selection: SelectionState = {}
        self._purchases: list[PurchaseRecord] = []
        self._purchase_state = PurchaseState.NOT_ENGAGED
        self._period = self._repair_period(period)
        self._breakdown = self._recompute()

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def schema(self) -> ServiceSchema:
        return self._schema

    @property
    def period(self) -> str:
        return self._period

    @property
    def selection(self) -> SelectionState:
        return copy_selection(self._selection)

    @property
    def breakdown(self) -> PriceBreakdown:
        return self._breakdown

    @property
    def purchase_state(self) -> PurchaseState:
        return self._purchase_state

    # -------------------------------------------------------------------------
    # Changes
    # -------------------------------------------------------------------------

    def load_schema(self, schema: ServiceSchema) -> PriceBreakdown:
        """
        Replace the schema (e.g. after a refetch).

        The selection is kept; choices the new schema no longer knows price to
        nothing. The period is repaired if the new schema does not offer it.
        """
        self._schema = schema
        self._period = self._repair_period(self._period)
        self._resolve_purchase_state()
        return self._update()

    def select_period(self, period: str) -> PriceBreakdown:
        self._period = self._repair_period(period)
        return self._update()

    def select_option(self, group_name: str, option_name: str) -> PriceBreakdown:
        """
        Choose an option in a group.

        Multi-select groups toggle the option; other groups replace the
        current choice.

        Raises:
            ValueError: If the schema has no group with that name
        """
        group = self._require_group(group_name)
        self._selection = apply_selection(
            self._selection, group.name, option_name, group.is_multiple
        )
        return self._update()

    def toggle(self, group_name: str, enabled: bool) -> PriceBreakdown:
        """
        Switch a bare toggle group on or off.

        Raises:
            ValueError: If the schema has no group with that name
        """
        group = self._require_group(group_name)
        self._selection = toggle_group(self._selection, group.name, enabled)
        return self._update()

    def clear(self, group_name: str) -> PriceBreakdown:
        self._selection = clear_group(self._selection, group_name)
        return self._update()

    def load_purchases(self, purchases: Iterable[PurchaseRecord | Mapping] | None) -> PurchaseState:
        """Resolve the purchase state from freshly fetched history."""
        self._purchases = parse_purchase_records(purchases)
        return self._resolve_purchase_state()

    # -------------------------------------------------------------------------
    # Outbound payloads
    # -------------------------------------------------------------------------

    def checkout_payload(self) -> CheckoutPayload:
        """
        Payment-initiation request for the current configuration.

        Raises:
            QuotationRequiredError: If the configuration needs a manual quote
        """
        return build_checkout_payload(
            self._schema.id, self._period, self._selection, self._breakdown
        )

    def interest_payload(self) -> InterestPayload:
        return build_interest_payload(self._schema.id, self._selection)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_group(self, group_name: str) -> OptionGroup:
        group = self._schema.group(group_name)
        if group is None:
            raise ValueError(f"Option group '{group_name}' not found on service {self._schema.id}")
        return group

    def _repair_period(self, period: str | None) -> str:
        """Return period if the schema offers it, publishing PeriodRepaired otherwise."""
        schema = self._schema
        wanted = normalize_period(period) if period else None
        repaired = repair_period(schema, wanted, self.config.default_period)

        if wanted is not None and repaired != wanted:
            logger.info(
                f"Period '{wanted}' not offered by service {schema.id}, using '{repaired}'"
            )
            self.event_bus.publish(
                PeriodRepaired.create(service_id=schema.id, previous=wanted, period=repaired)
            )
        return repaired

    def _resolve_purchase_state(self) -> PurchaseState:
        self._purchase_state = resolve_purchase_state(self._schema.id, self._purchases)
        self.event_bus.publish(
            PurchaseStateResolved.create(service_id=self._schema.id, state=self._purchase_state)
        )
        return self._purchase_state

    def _recompute(self) -> PriceBreakdown:
        return compute_price(
            self._schema,
            self._period,
            self._selection,
            scale_modifiers=self.config.scale_addons_by_period,
        )

    def _update(self) -> PriceBreakdown:
        self._breakdown = self._recompute()
        self.event_bus.publish(
            BreakdownUpdated.create(
                service_id=self._schema.id,
                period=self._period,
                selection=copy_selection(self._selection),
                breakdown=self._breakdown,
            )
        )
        return self._breakdown
