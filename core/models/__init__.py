"""Core domain models."""

from core.models.service_schema import (
    ServiceSchema, OptionGroup, RequestOption, PricingTier,
    InputType, PeriodKind, normalize_period,
)
from core.models.purchase import (
    PurchaseRecord, PaymentOrderRef, PurchaseState,
    ItemType, PurchaseStatus, PaymentStatus,
)
from core.models.pricing import (
    PriceBreakdown, BreakdownLine, LineKind,
    CheckoutPayload, InterestPayload,
)

__all__ = [
    # Service schema
    "ServiceSchema", "OptionGroup", "RequestOption", "PricingTier",
    "InputType", "PeriodKind", "normalize_period",
    # Purchases
    "PurchaseRecord", "PaymentOrderRef", "PurchaseState",
    "ItemType", "PurchaseStatus", "PaymentStatus",
    # Pricing
    "PriceBreakdown", "BreakdownLine", "LineKind",
    "CheckoutPayload", "InterestPayload",
]
