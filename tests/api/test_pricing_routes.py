"""Tests for the pricing endpoints."""

from core.models import PurchaseRecord, ServiceSchema
from clients.marketplace_client import MarketplaceApiError


# =============================================================================
# QUOTE
# =============================================================================


class TestQuote:

    def test_inline_schema_quote(self, offline_client, complexity_doc):
        response = offline_client.post("/api/pricing/quote", json={
            "service": complexity_doc,
            "selection": {"Complexity": "Complex"},
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["service_id"] == "svc-itr-1"
        assert data["period"] == "one_time"
        assert data["currency"] == "INR"
        breakdown = data["breakdown"]
        assert breakdown["total"] == "2950.00"
        assert breakdown["display_total"] == 2950
        assert breakdown["needs_quotation"] is True
        assert [line["label"] for line in breakdown["lines"]] == [
            "One-Time", "Complexity: Complex", "Subtotal", "GST (18%)",
        ]

    def test_fetches_schema_by_id(self, client, marketplace, gst_doc):
        marketplace.get_service_schema.return_value = ServiceSchema.model_validate(gst_doc)

        response = client.post("/api/pricing/quote", json={
            "service_id": "svc-gst-returns",
            "period": "yearly",
            "selection": {"Add-ons": ["Reconciliation"]},
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["period"] == "yearly"
        assert data["breakdown"]["subtotal"] == "1010"
        marketplace.get_service_schema.assert_called_once_with("svc-gst-returns")

    def test_unknown_service_is_404(self, client, marketplace):
        marketplace.get_service_schema.return_value = None

        response = client.post("/api/pricing/quote", json={"service_id": "nope"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_missing_service_is_400(self, client):
        response = client.post("/api/pricing/quote", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_fetch_without_client_is_400(self, offline_client):
        response = offline_client.post("/api/pricing/quote", json={"service_id": "svc-itr-1"})

        assert response.status_code == 400
        assert "not configured" in response.json()["error"]["message"]

    def test_malformed_inline_schema_prices_empty(self, offline_client):
        response = offline_client.post("/api/pricing/quote", json={
            "service": {"title": "no id"},
            "period": "monthly",
        })

        assert response.status_code == 200
        breakdown = response.json()["data"]["breakdown"]
        assert breakdown["lines"] == []
        assert breakdown["display_total"] == 0

    def test_marketplace_outage_is_503(self, client, marketplace):
        marketplace.get_service_schema.side_effect = MarketplaceApiError("down", 500)

        response = client.post("/api/pricing/quote", json={"service_id": "svc-itr-1"})

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SERVICE_UNAVAILABLE"

    def test_invalid_selection_shape_is_422(self, offline_client, complexity_doc):
        response = offline_client.post("/api/pricing/quote", json={
            "service": complexity_doc,
            "selection": {"Complexity": 5},
        })

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_response_carries_request_id(self, offline_client, complexity_doc):
        response = offline_client.post(
            "/api/pricing/quote",
            json={"service": complexity_doc},
            headers={"X-Request-ID": "req-9"},
        )

        assert response.json()["meta"]["request_id"] == "req-9"


# =============================================================================
# SELECTION
# =============================================================================


class TestSelection:

    def test_multi_select_toggle(self, offline_client):
        response = offline_client.post("/api/pricing/selection", json={
            "selection": {"Add-ons": ["Reconciliation", "HSN summary"]},
            "group": "Add-ons",
            "value": "Reconciliation",
            "multiple": True,
        })

        assert response.status_code == 200
        assert response.json()["data"]["selection"] == {"Add-ons": ["HSN summary"]}

    def test_single_select_replace(self, offline_client):
        response = offline_client.post("/api/pricing/selection", json={
            "selection": {"Complexity": "Simple"},
            "group": "Complexity",
            "value": "Complex",
        })

        assert response.json()["data"]["selection"] == {"Complexity": "Complex"}

    def test_toggle_off_removes_key(self, offline_client):
        response = offline_client.post("/api/pricing/selection", json={
            "selection": {"Express processing": "Express processing"},
            "group": "Express processing",
            "enabled": False,
        })

        assert response.json()["data"]["selection"] == {}

    def test_missing_value_is_400(self, offline_client):
        response = offline_client.post("/api/pricing/selection", json={"group": "Complexity"})

        assert response.status_code == 400


# =============================================================================
# PURCHASE STATE
# =============================================================================


class TestPurchaseState:

    def test_inline_purchases(self, offline_client):
        response = offline_client.post("/api/purchases/state", json={
            "service_id": "svc-itr-1",
            "purchases": [{
                "itemId": "svc-itr-1", "itemType": "service", "status": "active",
                "paymentOrderId": {"_id": "po", "status": "free_consultation"},
            }],
        })

        assert response.status_code == 200
        assert response.json()["data"] == {
            "service_id": "svc-itr-1",
            "state": "free_consultation_pending",
        }

    def test_fetches_purchases_from_marketplace(self, client, marketplace):
        marketplace.list_purchases.return_value = [
            PurchaseRecord.model_validate({"itemId": "svc-itr-1", "itemType": "service",
                                           "paymentOrderId": "po-1"}),
        ]

        response = client.post("/api/purchases/state", json={"service_id": "svc-itr-1"})

        assert response.json()["data"]["state"] == "purchased"

    def test_no_history_is_not_engaged(self, offline_client):
        response = offline_client.post("/api/purchases/state", json={"service_id": "svc-itr-1"})

        assert response.json()["data"]["state"] == "not_engaged"


# =============================================================================
# CHECKOUT AND CONSULTATION
# =============================================================================


class TestCheckout:

    def test_builds_payload(self, client, marketplace, gst_doc):
        response = client.post("/api/checkout/payload", json={
            "service": gst_doc,
            "period": "monthly",
            "selection": {"Filing mode": "Assisted"},
        })

        assert response.status_code == 200
        assert response.json()["data"] == {
            "payload": {
                "itemType": "service",
                "itemId": "svc-gst-returns",
                "price": 153,
                "billingPeriod": "monthly",
                "selectedOptions": {"Filing mode": "Assisted"},
            },
        }
        marketplace.initiate_payment.assert_not_called()

    def test_submit_initiates_payment(self, client, marketplace, complexity_doc):
        response = client.post("/api/checkout/payload", json={
            "service": complexity_doc,
            "selection": {"Complexity": "Simple"},
            "submit": True,
        })

        assert response.status_code == 200
        assert response.json()["data"]["result"] == {"orderId": "order_1"}
        payload = marketplace.initiate_payment.call_args.args[0]
        assert payload.price == 2360

    def test_quotation_is_409(self, client, marketplace, complexity_doc):
        response = client.post("/api/checkout/payload", json={
            "service": complexity_doc,
            "selection": {"Complexity": "Complex"},
            "submit": True,
        })

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "QUOTATION_REQUIRED"
        marketplace.initiate_payment.assert_not_called()

    def test_invalid_schema_is_400(self, offline_client):
        response = offline_client.post("/api/checkout/payload", json={"service": {"title": "x"}})

        assert response.status_code == 400


class TestConsultationInterest:

    def test_builds_payload(self, offline_client):
        response = offline_client.post("/api/consultation/interest", json={
            "service_id": "svc-itr-1",
            "selection": {"Complexity": "Complex"},
        })

        assert response.json()["data"] == {
            "payload": {
                "itemType": "service",
                "itemId": "svc-itr-1",
                "selectedFeatures": ["Complex"],
            },
        }

    def test_submit_saves_interest(self, client, marketplace):
        response = client.post("/api/consultation/interest", json={
            "service_id": "svc-itr-1",
            "selection": {"Complexity": "Complex"},
            "submit": True,
        })

        assert response.json()["data"]["result"] == {"_id": "cr_1"}
        marketplace.save_interest.assert_called_once()

    def test_submit_without_client_is_400(self, offline_client):
        response = offline_client.post("/api/consultation/interest", json={
            "service_id": "svc-itr-1",
            "submit": True,
        })

        assert response.status_code == 400


# =============================================================================
# BILLING PERIOD REPAIR
# =============================================================================


class TestPeriodRepair:

    def test_quote_repairs_unoffered_period(self, offline_client, gst_doc):
        response = offline_client.post("/api/pricing/quote", json={"service": gst_doc, "period": "weekly"})

        data = response.json()["data"]
        assert data["period"] == "monthly"
        assert data["breakdown"]["base_price"] == "100"

    def test_quote_defaults_missing_period(self, offline_client, gst_doc):
        response = offline_client.post("/api/pricing/quote", json={"service": gst_doc})

        assert response.json()["data"]["period"] == "monthly"

    def test_quote_normalizes_offered_period(self, offline_client, gst_doc):
        response = offline_client.post("/api/pricing/quote", json={"service": gst_doc, "period": "Yearly"})

        data = response.json()["data"]
        assert data["period"] == "yearly"
        assert data["breakdown"]["base_price"] == "1000"

    def test_checkout_never_sends_unoffered_period(self, client, marketplace, gst_doc):
        response = client.post("/api/checkout/payload", json={
            "service": gst_doc,
            "period": "weekly",
            "submit": True,
        })

        assert response.status_code == 200
        payload = response.json()["data"]["payload"]
        assert payload["billingPeriod"] == "monthly"
        assert payload["price"] == 118
        sent = marketplace.initiate_payment.call_args.args[0]
        assert sent.billing_period == "monthly"
        assert sent.price == 118

    def test_checkout_without_period_uses_first_offered(self, offline_client, gst_doc):
        response = offline_client.post("/api/checkout/payload", json={"service": gst_doc})

        payload = response.json()["data"]["payload"]
        assert payload["billingPeriod"] == "monthly"
        assert payload["price"] == 118
