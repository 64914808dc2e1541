"""Purchase history models.

Purchase records are created by the checkout and consultation flows of the
marketplace and are read-only here. The payment reference is either the
embedded payment order (when the API populates it) or its bare id.
"""

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ItemType(str, Enum):
    """Kind of item a purchase refers to."""

    SERVICE = "service"
    COURSE = "course"


class PurchaseStatus(str, Enum):
    """Lifecycle of a purchase record."""

    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment order statuses known to the marketplace."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    FREE_CONSULTATION = "free_consultation"
    FREE_SERVICE = "free_service"


class PurchaseState(str, Enum):
    """A user's relationship to a service."""

    NOT_ENGAGED = "not_engaged"
    FREE_CONSULTATION_PENDING = "free_consultation_pending"
    PURCHASED = "purchased"


class PaymentOrderRef(BaseModel):
    """Embedded payment order. Unknown statuses are kept as plain strings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str | None = Field(None, validation_alias=AliasChoices("_id", "id"))
    status: str | None = None
    amount: Decimal | None = None
    currency: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value


class PurchaseRecord(BaseModel):
    """A single purchase of a service or course."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    item_id: str
    item_type: ItemType
    status: PurchaseStatus = PurchaseStatus.ACTIVE
    billing_period: str | None = None
    selected_features: tuple[str, ...] = ()
    payment: PaymentOrderRef | str | None = Field(
        None, validation_alias=AliasChoices("paymentOrderId", "payment_order_id", "payment")
    )

    @field_validator("item_id", mode="before")
    @classmethod
    def stringify_item_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("selected_features", mode="before")
    @classmethod
    def default_features(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def payment_status(self) -> str | None:
        """Status of the embedded payment order, None for a bare reference."""
        if isinstance(self.payment, PaymentOrderRef):
            return self.payment.status
        return None
