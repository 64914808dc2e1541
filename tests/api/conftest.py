"""API test fixtures: app built by create_app with a mocked marketplace client."""

from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from api.app import create_app
from clients.marketplace_client import MarketplaceClient
from core.config import PricingConfig


@pytest.fixture
def marketplace():
    """MarketplaceClient double; configure return values per test."""
    client = Mock(spec=MarketplaceClient)
    client.list_purchases.return_value = []
    client.initiate_payment.return_value = {"orderId": "order_1"}
    client.save_interest.return_value = {"_id": "cr_1"}
    return client


@pytest.fixture
def pricing_config():
    return PricingConfig()


@pytest.fixture
def app(marketplace, pricing_config):
    return create_app(client=marketplace, config=pricing_config)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def offline_client():
    """App with no marketplace client: inline schemas only."""
    return TestClient(create_app(), raise_server_exceptions=False)
