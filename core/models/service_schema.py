"""Service configuration schema models.

A schema is authored by admins and fetched from the marketplace document store.
Documents arrive loosely typed (camelCase keys, inconsistent casing, legacy
option ``title`` fields, missing arrays), so every shape repair happens here at
ingestion. Pricing code only ever sees normalized, frozen models.

Amounts are Decimal to keep full precision until presentation.
"""

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


_SCHEMA_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


class InputType(str, Enum):
    """How an option group is presented and selected."""

    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"


class PeriodKind(str, Enum):
    """Known billing periods. Schemas may carry others."""

    ONE_TIME = "one_time"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half_yearly"
    YEARLY = "yearly"


def normalize_period(value: Any) -> str:
    """
    Normalize a billing period tag.

    Lowercases and turns hyphens into underscores, so the legacy
    ``"one-time"`` tag matches ``one_time``.
    """
    if isinstance(value, PeriodKind):
        return value.value
    return str(value).strip().lower().replace("-", "_")


def _zero_if_none(value: Any) -> Any:
    return Decimal("0") if value is None else value


class RequestOption(BaseModel):
    """A selectable option inside an option group."""

    model_config = _SCHEMA_CONFIG

    name: str = ""
    price_modifier: Decimal = Decimal("0")
    needs_quotation: bool = False

    @model_validator(mode="before")
    @classmethod
    def rename_legacy_title(cls, data: Any) -> Any:
        """Older documents store the option label under ``title``."""
        if isinstance(data, dict) and not data.get("name") and data.get("title"):
            data = dict(data)
            data["name"] = data.pop("title")
        return data

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("price_modifier", mode="before")
    @classmethod
    def default_modifier(cls, value: Any) -> Any:
        return _zero_if_none(value)

    @field_validator("needs_quotation", mode="before")
    @classmethod
    def default_quotation(cls, value: Any) -> Any:
        return bool(value)


class OptionGroup(BaseModel):
    """
    An admin-configured unit of choice within a service (e.g. "Complexity").

    Groups without options are bare toggles: selecting the group applies the
    group's own price_modifier. Group-level needs_quotation forces a manual
    quote whenever the group has any selection.
    """

    model_config = _SCHEMA_CONFIG

    name: str = Field(..., min_length=1)
    input_type: InputType = InputType.CHECKBOX
    is_multiple_select: bool = False
    price_modifier: Decimal = Decimal("0")
    needs_quotation: bool = False
    options: tuple[RequestOption, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def normalize_document(cls, data: Any) -> Any:
        """Repair the loosely typed admin document before field validation."""
        if not isinstance(data, dict):
            return data

        data = dict(data)

        raw_type = data.pop("inputType", data.pop("input_type", None))
        input_type = str(raw_type).strip().lower() if raw_type is not None else ""
        if input_type not in {t.value for t in InputType}:
            # Unknown or missing input types are treated as checkboxes
            input_type = InputType.CHECKBOX.value
        data["input_type"] = input_type

        options = data.pop("options", None)
        data["options"] = [] if options is None else options

        return data

    @field_validator("price_modifier", mode="before")
    @classmethod
    def default_modifier(cls, value: Any) -> Any:
        return _zero_if_none(value)

    @field_validator("is_multiple_select", "needs_quotation", mode="before")
    @classmethod
    def coerce_flags(cls, value: Any) -> Any:
        return bool(value)

    @property
    def is_toggle(self) -> bool:
        """True for a checkbox group with no options (priced by the group itself)."""
        return self.input_type is InputType.CHECKBOX and not self.options

    @property
    def is_multiple(self) -> bool:
        """True when the group holds a list of selected option names."""
        return (
            self.input_type is InputType.CHECKBOX
            and self.is_multiple_select
            and bool(self.options)
        )

    def find_option(self, name: str) -> RequestOption | None:
        """Exact-name option lookup."""
        for option in self.options:
            if option.name == name:
                return option
        return None


class PricingTier(BaseModel):
    """Base price for one billing period."""

    model_config = _SCHEMA_CONFIG

    period: str
    price: Decimal = Field(Decimal("0"), ge=0)

    @field_validator("period", mode="before")
    @classmethod
    def normalize(cls, value: Any) -> str:
        return normalize_period(value)

    @field_validator("price", mode="before")
    @classmethod
    def default_price(cls, value: Any) -> Any:
        return _zero_if_none(value)


class ServiceSchema(BaseModel):
    """
    Full pricing schema of a configurable service.

    pricing_structure is ordered and unique by period. The legacy single
    price/period pair is only used when pricing_structure is empty.
    """

    model_config = _SCHEMA_CONFIG

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    title: str | None = None
    price: Decimal | None = Field(None, ge=0)
    period: str | None = None
    pricing_structure: tuple[PricingTier, ...] = ()
    requests: tuple[OptionGroup, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("period", mode="before")
    @classmethod
    def normalize_legacy_period(cls, value: Any) -> Any:
        return normalize_period(value) if value is not None else None

    @field_validator("pricing_structure", "requests", mode="before")
    @classmethod
    def default_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("pricing_structure", mode="after")
    @classmethod
    def first_tier_per_period(cls, tiers: tuple[PricingTier, ...]) -> tuple[PricingTier, ...]:
        """Keep only the first tier for each period."""
        seen: set[str] = set()
        unique = []
        for tier in tiers:
            if tier.period in seen:
                continue
            seen.add(tier.period)
            unique.append(tier)
        return tuple(unique)

    @property
    def periods(self) -> list[str]:
        """Billing periods offered, in schema order."""
        return [tier.period for tier in self.pricing_structure]

    def price_for(self, period: str) -> Decimal | None:
        """Base price of a period, or None if the period is not offered."""
        wanted = normalize_period(period)
        for tier in self.pricing_structure:
            if tier.period == wanted:
                return tier.price
        return None

    def group(self, name: str) -> OptionGroup | None:
        """Option group by display name."""
        for group in self.requests:
            if group.name == name:
                return group
        return None
