"""
Purchase-state resolution for a service.

Decides which call-to-action a user sees for a service from their purchase
history. Only the first active service record for the service is considered;
both is_purchased and is_free_consultation_pending derive from that same
record so they can never disagree.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from core.models import (
    ItemType,
    PaymentStatus,
    PurchaseRecord,
    PurchaseState,
    PurchaseStatus,
)

logger = logging.getLogger(__name__)


def parse_purchase_records(raw: Iterable[Any] | None) -> list[PurchaseRecord]:
    """
    Parse purchase documents from the marketplace API.

    Records that fail validation are skipped with a warning so one bad
    document cannot hide the rest of the history.
    """
    if not raw or not isinstance(raw, Iterable) or isinstance(raw, (str, bytes, Mapping)):
        return []

    records = []
    for item in raw:
        if isinstance(item, PurchaseRecord):
            records.append(item)
            continue
        try:
            records.append(PurchaseRecord.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed purchase record: {e.error_count()} error(s)")
    return records


def find_active_purchase(
    service_id: str,
    purchases: Iterable[PurchaseRecord | Mapping] | None,
) -> PurchaseRecord | None:
    """
    First active service purchase for service_id, in list order.

    Raw purchase documents are accepted; malformed ones are skipped.
    """
    wanted = str(service_id)
    for record in parse_purchase_records(purchases):
        if (
            record.item_id == wanted
            and record.item_type is ItemType.SERVICE
            and record.status is PurchaseStatus.ACTIVE
        ):
            return record
    return None


def resolve_purchase_state(
    service_id: str,
    purchases: Iterable[PurchaseRecord | Mapping] | None,
) -> PurchaseState:
    """
    Resolve the user's relationship to a service.

    Args:
        service_id: Service being viewed
        purchases: The user's purchase history (None if it could not be fetched)

    Returns:
        NOT_ENGAGED when no active record exists, FREE_CONSULTATION_PENDING
        when the record's payment is a free consultation, PURCHASED otherwise.
        A bare payment reference or an unrecognised payment status counts as
        purchased.
    """
    record = find_active_purchase(service_id, purchases)
    if record is None:
        return PurchaseState.NOT_ENGAGED

    status = record.payment_status
    if status == PaymentStatus.FREE_CONSULTATION.value:
        return PurchaseState.FREE_CONSULTATION_PENDING
    if status == PaymentStatus.COMPLETED.value:
        return PurchaseState.PURCHASED

    return PurchaseState.PURCHASED


def is_purchased(service_id: str, purchases: Iterable[PurchaseRecord | Mapping] | None) -> bool:
    return resolve_purchase_state(service_id, purchases) is PurchaseState.PURCHASED


def is_free_consultation_pending(service_id: str, purchases: Iterable[PurchaseRecord | Mapping] | None) -> bool:
    return (
        resolve_purchase_state(service_id, purchases)
        is PurchaseState.FREE_CONSULTATION_PENDING
    )
