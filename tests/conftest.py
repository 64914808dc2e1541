"""Shared test fixtures for the pricing test suite."""

import copy

import pytest
from pathlib import Path

from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Reset vault client singleton so tests never share a cached client
import clients.vault_client as vault_module
vault_module._vault_client_instance = None
vault_module._secret_cache.clear()

from core.models import PurchaseRecord, ServiceSchema


# =============================================================================
# SCHEMA DOCUMENTS (as served by the marketplace API)
# =============================================================================


COMPLEXITY_DOC = {
    "_id": "svc-itr-1",
    "title": "ITR-1 Filing",
    "pricingStructure": [{"period": "one_time", "price": 2000}],
    "requests": [
        {
            "name": "Complexity",
            "inputType": "dropdown",
            "options": [
                {"name": "Simple", "priceModifier": 0, "needsQuotation": False},
                {"name": "Complex", "priceModifier": 500, "needsQuotation": True},
            ],
        }
    ],
}

GST_RETURNS_DOC = {
    "_id": "svc-gst-returns",
    "title": "GSTR-1 & GSTR-3B",
    "pricingStructure": [
        {"period": "monthly", "price": 100},
        {"period": "yearly", "price": 1000},
    ],
    "requests": [
        {
            "name": "Invoice volume",
            "inputType": "Dropdown",
            "options": [
                {"name": "Up to 50", "priceModifier": 50},
                {"name": "Loyalty discount", "priceModifier": -20},
            ],
        },
        {
            "name": "Add-ons",
            "inputType": "checkbox",
            "isMultipleSelect": True,
            "options": [
                {"name": "Reconciliation", "priceModifier": 10},
                {"name": "HSN summary", "priceModifier": 20},
            ],
        },
        {
            "name": "Filing mode",
            "inputType": "checkbox",
            "isMultipleSelect": False,
            "options": [
                {"name": "Self", "priceModifier": 0},
                {"name": "Assisted", "priceModifier": 30},
            ],
        },
        {
            "name": "Express processing",
            "inputType": "checkbox",
            "priceModifier": 75,
            "needsQuotation": False,
        },
        {
            "name": "Notice handling",
            "inputType": "checkbox",
            "priceModifier": 0,
            "needsQuotation": True,
        },
    ],
}


@pytest.fixture
def complexity_doc() -> dict:
    """Raw schema document, safe to modify."""
    return copy.deepcopy(COMPLEXITY_DOC)


@pytest.fixture
def gst_doc() -> dict:
    return copy.deepcopy(GST_RETURNS_DOC)


@pytest.fixture
def complexity_schema() -> ServiceSchema:
    """One-time service with a single dropdown, one option needing a quote."""
    return ServiceSchema.model_validate(COMPLEXITY_DOC)


@pytest.fixture
def gst_schema() -> ServiceSchema:
    """Monthly/yearly service exercising every option group shape."""
    return ServiceSchema.model_validate(GST_RETURNS_DOC)


@pytest.fixture
def plain_schema() -> ServiceSchema:
    """Monthly/yearly service without any option groups."""
    return ServiceSchema.model_validate({
        "_id": "svc-plain",
        "pricingStructure": [
            {"period": "monthly", "price": 100},
            {"period": "yearly", "price": 1000},
        ],
    })


# =============================================================================
# PURCHASE RECORDS
# =============================================================================


def make_purchase(item_id: str = "svc-itr-1", payment=None, **overrides) -> PurchaseRecord:
    """Build a purchase record from API-shaped fields."""
    doc = {
        "itemId": item_id,
        "itemType": "service",
        "status": "active",
        "paymentOrderId": payment,
    }
    doc.update(overrides)
    return PurchaseRecord.model_validate(doc)


@pytest.fixture
def purchase():
    """Factory fixture: purchase(item_id, payment, **api_fields)."""
    return make_purchase
