"""Pricing configuration."""

from pydantic import BaseModel, Field


class PricingConfig(BaseModel):
    """
    Runtime settings for the pricing service.

    GST is fixed at 18% and is not configurable here.
    """

    currency: str = Field(
        default="INR",
        description="ISO currency code of all schema prices",
        min_length=3,
        max_length=3,
    )
    scale_addons_by_period: bool = Field(
        default=False,
        description="Multiply add-on modifiers by the billing period length in months",
    )
    default_period: str = Field(
        default="one_time",
        description="Period used when a schema offers no pricing structure and no legacy period",
    )
    request_timeout_seconds: int = Field(
        default=10,
        description="Timeout for calls to the marketplace API",
        ge=1,
        le=60,
    )
