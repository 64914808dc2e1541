"""FastAPI application factory."""

from fastapi import FastAPI

from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from api.pricing import create_pricing_router
from clients.marketplace_client import MarketplaceClient
from core.config import PricingConfig


def create_app(
    client: MarketplaceClient | None = None,
    config: PricingConfig | None = None,
) -> FastAPI:
    """
    Build the pricing API.

    Without a client, endpoints only accept inline schemas and purchase
    lists; use create_app_from_vault() to enable fetching.
    """
    app = FastAPI(title="Service Pricing")
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(create_pricing_router(client, config), prefix="/api")
    return app


def create_app_from_vault(config: PricingConfig | None = None) -> FastAPI:
    """Build the pricing API with a marketplace client configured from Vault."""
    config = config or PricingConfig()
    client = MarketplaceClient.from_vault(timeout=config.request_timeout_seconds)
    return create_app(client=client, config=config)
