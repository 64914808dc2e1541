"""
Outbound payloads built from a configured service.

The pricing core produces these requests but never sends them; the
marketplace client does.
"""

import logging
from collections.abc import Mapping

from core.exceptions import QuotationRequiredError
from core.models import CheckoutPayload, InterestPayload, PriceBreakdown, normalize_period
from core.selection import copy_selection, flatten_selection

logger = logging.getLogger(__name__)


def build_checkout_payload(
    service_id: str,
    selected_period: str,
    selection: Mapping | None,
    breakdown: PriceBreakdown,
) -> CheckoutPayload:
    """
    Build the payment-initiation request for a configured service.

    Raises:
        QuotationRequiredError: If the selection needs a manual quotation
    """
    if breakdown.needs_quotation:
        logger.info(f"Checkout blocked for service {service_id}: quotation required")
        raise QuotationRequiredError(service_id)

    return CheckoutPayload(
        item_id=str(service_id),
        price=breakdown.display_total,
        billing_period=normalize_period(selected_period),
        selected_options=copy_selection(selection),
    )


def build_interest_payload(service_id: str, selection: Mapping | None) -> InterestPayload:
    """Build the free-consultation interest request from a selection."""
    return InterestPayload(
        item_id=str(service_id),
        selected_features=flatten_selection(selection),
    )
