"""
HTTP client for the marketplace document-store API.

Fetches service schemas and purchase history, and sends the checkout and
free-consultation requests produced by the pricing core. Every response uses
the marketplace envelope: {"success": bool, "message": str, "data": ...}.
"""

import json
import logging
from typing import Any

import requests

from clients.vault_client import get_marketplace_api_config
from core.models import CheckoutPayload, InterestPayload, PurchaseRecord, ServiceSchema
from core.pricing import parse_service_schema
from core.purchases import parse_purchase_records

logger = logging.getLogger(__name__)


class MarketplaceApiError(Exception):
    """Raised when a marketplace API request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class MarketplaceClient:
    """Thin wrapper over the marketplace REST API."""

    SCHEMA_PATH = "/sub-services/{service_id}"
    PURCHASES_PATH = "/user-purchases"
    PAYMENT_PATH = "/payment/initiate-payment"
    INTEREST_PATH = "/consultation-requests"

    def __init__(self, base_url: str, api_token: str | None = None, timeout: int = 10):
        """
        Initialize with API location and credentials.

        Args:
            base_url: API root, e.g. "https://api.example.com/api/v1"
            api_token: Bearer token for authenticated endpoints
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout = timeout

    @classmethod
    def from_vault(cls, timeout: int = 10) -> "MarketplaceClient":
        """Build a client from the marketplace API secrets in Vault."""
        config = get_marketplace_api_config()
        return cls(config["base_url"], config["api_token"], timeout=timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def _request(self, method: str, path: str, payload: dict | None = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return requests.request(
                method,
                url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Marketplace API connection failed ({method} {path}): {e}")
            raise MarketplaceApiError(f"Connection failed: {e}")

    def _unwrap(self, response: requests.Response) -> Any:
        """Return the envelope's data, raising on any failure."""
        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError):
            logger.error(f"Marketplace API returned invalid JSON: {response.text[:200]}")
            raise MarketplaceApiError("Invalid response from marketplace API", response.status_code)

        if not isinstance(body, dict):
            raise MarketplaceApiError("Unexpected response shape from marketplace API", response.status_code)

        if response.status_code >= 400 or not body.get("success", False):
            message = body.get("message", "Unknown error")
            logger.error(f"Marketplace API error ({response.status_code}): {message}")
            raise MarketplaceApiError(f"API error: {message}", response.status_code)

        return body.get("data")

    def get_service_schema(self, service_id: str) -> ServiceSchema | None:
        """
        Fetch a service's pricing schema.

        Returns:
            The schema, or None if the service does not exist or its document
            is too malformed to price.

        Raises:
            MarketplaceApiError: On connection or server failure
        """
        response = self._request("GET", self.SCHEMA_PATH.format(service_id=service_id))
        if response.status_code == 404:
            return None

        data = self._unwrap(response)
        if isinstance(data, dict) and "subService" in data:
            data = data["subService"]
        return parse_service_schema(data)

    def list_purchases(self) -> list[PurchaseRecord]:
        """
        Fetch the caller's purchase history.

        Any failure degrades to an empty history, which resolves every
        service to not engaged.
        """
        try:
            data = self._unwrap(self._request("GET", self.PURCHASES_PATH))
        except MarketplaceApiError as e:
            logger.warning(f"Purchase history unavailable, treating as empty: {e}")
            return []

        if isinstance(data, dict):
            data = data.get("purchases", [])
        if not isinstance(data, list):
            return []
        return parse_purchase_records(data)

    def initiate_payment(self, payload: CheckoutPayload) -> dict:
        """
        Send a payment-initiation request.

        Raises:
            MarketplaceApiError: On any failure
        """
        data = self._unwrap(
            self._request("POST", self.PAYMENT_PATH, payload.model_dump(mode="json", by_alias=True))
        )
        logger.info(f"Payment initiated for service {payload.item_id} ({payload.price})")
        return data or {}

    def save_interest(self, payload: InterestPayload) -> dict:
        """
        Record a free-consultation interest.

        Raises:
            MarketplaceApiError: On any failure
        """
        data = self._unwrap(
            self._request("POST", self.INTEREST_PATH, payload.model_dump(mode="json", by_alias=True))
        )
        logger.info(f"Consultation interest saved for service {payload.item_id}")
        return data or {}
