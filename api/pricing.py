"""Pricing endpoints: quotes, selection updates, purchase state and checkout payloads."""

import logging
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from api.base import success_response
from clients.marketplace_client import MarketplaceClient
from core.checkout import build_checkout_payload, build_interest_payload
from core.config import PricingConfig
from core.models import ServiceSchema, normalize_period
from core.pricing import compute_price, parse_service_schema, repair_period
from core.purchases import parse_purchase_records, resolve_purchase_state
from core.selection import apply_selection, toggle_group

logger = logging.getLogger(__name__)


class QuoteRequest(BaseModel):
    """Either an inline schema document or a service_id to fetch."""

    service_id: str | None = None
    service: dict[str, Any] | None = None
    period: str | None = None
    selection: dict[str, str | list[str]] = Field(default_factory=dict)


class CheckoutRequest(QuoteRequest):
    submit: bool = False


class SelectionRequest(BaseModel):
    selection: dict[str, str | list[str]] = Field(default_factory=dict)
    group: str = Field(..., min_length=1)
    value: str | None = None
    multiple: bool = False
    enabled: bool | None = Field(None, description="Set for bare toggle groups")


class PurchaseStateRequest(BaseModel):
    service_id: str = Field(..., min_length=1)
    purchases: list[dict[str, Any]] | None = None


class InterestRequest(BaseModel):
    service_id: str = Field(..., min_length=1)
    selection: dict[str, str | list[str]] = Field(default_factory=dict)
    submit: bool = False


def create_pricing_router(
    client: MarketplaceClient | None = None,
    config: PricingConfig | None = None,
) -> APIRouter:
    router = APIRouter()
    config = config or PricingConfig()

    def resolve_schema(body: QuoteRequest) -> ServiceSchema | None:
        if body.service is not None:
            return parse_service_schema(body.service)

        if body.service_id is None:
            raise ValueError("Either 'service' or 'service_id' is required")
        if client is None:
            raise ValueError("Marketplace API is not configured; pass 'service' inline")

        schema = client.get_service_schema(body.service_id)
        if schema is None:
            raise ValueError(f"Service {body.service_id} not found")
        return schema

    def quote(body: QuoteRequest) -> tuple[ServiceSchema | None, str, Any]:
        schema = resolve_schema(body)
        if schema is None:
            period = body.period or config.default_period
        else:
            period = repair_period(schema, body.period, config.default_period)
            if body.period and period != normalize_period(body.period):
                logger.info(
                    f"Period '{body.period}' not offered by service {schema.id}, using '{period}'"
                )
        breakdown = compute_price(
            schema, period, body.selection, scale_modifiers=config.scale_addons_by_period
        )
        return schema, period, breakdown

    @router.post("/pricing/quote")
    async def price_quote(request: Request, body: QuoteRequest):
        schema, period, breakdown = quote(body)
        return success_response(
            {
                "service_id": schema.id if schema else body.service_id,
                "period": period,
                "currency": config.currency,
                "breakdown": breakdown.model_dump(mode="json"),
            },
            request.state.request_id,
        ).model_dump(mode="json")

    @router.post("/pricing/selection")
    async def update_selection(request: Request, body: SelectionRequest):
        if body.enabled is not None:
            selection = toggle_group(body.selection, body.group, body.enabled)
        elif body.value is None:
            raise ValueError("'value' is required unless 'enabled' is set")
        else:
            selection = apply_selection(body.selection, body.group, body.value, body.multiple)
        return success_response(
            {"selection": selection}, request.state.request_id
        ).model_dump(mode="json")

    @router.post("/purchases/state")
    async def purchase_state(request: Request, body: PurchaseStateRequest):
        if body.purchases is not None:
            purchases = parse_purchase_records(body.purchases)
        elif client is not None:
            purchases = client.list_purchases()
        else:
            purchases = []

        state = resolve_purchase_state(body.service_id, purchases)
        return success_response(
            {"service_id": body.service_id, "state": state.value}, request.state.request_id
        ).model_dump(mode="json")

    @router.post("/checkout/payload")
    async def checkout_payload(request: Request, body: CheckoutRequest):
        schema, period, breakdown = quote(body)
        if schema is None:
            raise ValueError("Cannot check out a service without a valid schema")

        payload = build_checkout_payload(schema.id, period, body.selection, breakdown)
        data = {"payload": payload.model_dump(mode="json", by_alias=True)}
        if body.submit:
            if client is None:
                raise ValueError("Marketplace API is not configured; cannot submit")
            data["result"] = client.initiate_payment(payload)
        return success_response(data, request.state.request_id).model_dump(mode="json")

    @router.post("/consultation/interest")
    async def consultation_interest(request: Request, body: InterestRequest):
        payload = build_interest_payload(body.service_id, body.selection)
        data = {"payload": payload.model_dump(mode="json", by_alias=True)}
        if body.submit:
            if client is None:
                raise ValueError("Marketplace API is not configured; cannot submit")
            data["result"] = client.save_interest(payload)
        return success_response(data, request.state.request_id).model_dump(mode="json")

    return router
