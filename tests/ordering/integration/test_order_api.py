"""Integration tests for the order and PayPal endpoints via TestClient."""

import pytest
from protean import current_domain

from storefront.catalogue.product.product import Product


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


@pytest.fixture()
def shopper(customer, auth_headers):
    customer_id, address_id = customer
    return {"id": customer_id, "address_id": address_id, "headers": auth_headers(customer_id)}


@pytest.fixture()
def admin_headers(admin, auth_headers):
    admin_id, _ = admin
    return auth_headers(admin_id)


def _place(client, shopper, product_id, quantity=3):
    return client.post(
        "/orders",
        json={"items": [{"productId": product_id, "quantity": quantity}], "addressId": shopper["address_id"]},
        headers=shopper["headers"],
    )


class TestPlaceOrder:
    def test_created(self, client, shopper, make_product):
        product_id = make_product(price=10.0, stock=5)

        response = _place(client, shopper, product_id)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PENDING"
        assert body["subtotal"] == 30.0
        assert body["shipping"] == 5.99
        assert body["total"] == 35.99
        assert body["orderNumber"].startswith("SAS-")
        assert body["items"][0]["unitPrice"] == 10.0
        assert body["shippingAddress"]["postalCode"] == "69003"
        assert _stock(product_id) == 2

    def test_requires_authentication(self, client, make_product):
        response = client.post("/orders", json={"items": [], "addressId": "a"})
        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}

    def test_invalid_token(self, client):
        response = client.post(
            "/orders",
            json={"items": [], "addressId": "a"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    def test_empty_cart(self, client, shopper):
        response = client.post(
            "/orders", json={"items": [], "addressId": shopper["address_id"]}, headers=shopper["headers"]
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Cart is empty"}

    def test_insufficient_stock(self, client, shopper, make_product):
        product_id = make_product(name="Ear defenders", stock=5)

        response = _place(client, shopper, product_id, quantity=6)

        assert response.status_code == 400
        assert response.json() == {"error": "Insufficient stock for Ear defenders"}
        assert _stock(product_id) == 5

    def test_invalid_address(self, client, shopper, make_product):
        product_id = make_product()
        response = client.post(
            "/orders",
            json={"items": [{"productId": product_id, "quantity": 1}], "addressId": "elsewhere"},
            headers=shopper["headers"],
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid address"}

    def test_malformed_body(self, client, shopper):
        response = client.post("/orders", json={"items": "three"}, headers=shopper["headers"])
        assert response.status_code == 400
        assert "error" in response.json()


class TestReadAndCancel:
    def test_get_own_order(self, client, shopper, make_product):
        order_id = _place(client, shopper, make_product()).json()["id"]
        response = client.get(f"/orders/{order_id}", headers=shopper["headers"])
        assert response.status_code == 200
        assert response.json()["id"] == order_id

    def test_get_other_customers_order(self, client, shopper, make_product, make_customer, auth_headers):
        order_id = _place(client, shopper, make_product()).json()["id"]
        stranger, _ = make_customer()
        response = client.get(f"/orders/{order_id}", headers=auth_headers(stranger))
        assert response.status_code == 403

    def test_get_missing_order(self, client, shopper):
        response = client.get("/orders/missing", headers=shopper["headers"])
        assert response.status_code == 404
        assert "error" in response.json()

    def test_cancel_restores_stock(self, client, shopper, make_product):
        product_id = make_product(stock=5)
        order_id = _place(client, shopper, product_id).json()["id"]

        response = client.post(f"/orders/{order_id}/cancel", headers=shopper["headers"])

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        assert _stock(product_id) == 5

    def test_cancel_twice(self, client, shopper, make_product):
        product_id = make_product(stock=5)
        order_id = _place(client, shopper, product_id).json()["id"]
        client.post(f"/orders/{order_id}/cancel", headers=shopper["headers"])

        response = client.post(f"/orders/{order_id}/cancel", headers=shopper["headers"])

        assert response.status_code == 400
        assert response.json() == {"error": "Cannot cancel order in CANCELLED state"}
        assert _stock(product_id) == 5

    def test_cancel_by_stranger(self, client, shopper, make_product, make_customer, auth_headers):
        order_id = _place(client, shopper, make_product()).json()["id"]
        stranger, _ = make_customer()
        response = client.post(f"/orders/{order_id}/cancel", headers=auth_headers(stranger))
        assert response.status_code == 403

    def test_cancel_missing_order(self, client, shopper):
        response = client.post("/orders/missing/cancel", headers=shopper["headers"])
        assert response.status_code == 404


class TestAdminStatus:
    def test_admin_updates_status(self, client, shopper, admin_headers, make_product):
        order_id = _place(client, shopper, make_product()).json()["id"]
        response = client.put(f"/orders/{order_id}/status", json={"status": "PROCESSING"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "PROCESSING"

    def test_unknown_status(self, client, shopper, admin_headers, make_product):
        order_id = _place(client, shopper, make_product()).json()["id"]
        response = client.put(f"/orders/{order_id}/status", json={"status": "LOST"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid status"}

    def test_customer_cannot_update_status(self, client, shopper, make_product):
        order_id = _place(client, shopper, make_product()).json()["id"]
        response = client.put(f"/orders/{order_id}/status", json={"status": "SHIPPED"}, headers=shopper["headers"])
        assert response.status_code == 403

    def test_admin_moves_delivered_order_back(self, client, shopper, admin_headers, make_product):
        order_id = _place(client, shopper, make_product()).json()["id"]
        client.put(f"/orders/{order_id}/status", json={"status": "DELIVERED"}, headers=admin_headers)
        response = client.put(f"/orders/{order_id}/status", json={"status": "SHIPPED"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "SHIPPED"

    def test_refund_restores_stock(self, client, shopper, admin_headers, make_product):
        product_id = make_product(stock=5)
        order_id = _place(client, shopper, product_id).json()["id"]
        client.put(f"/orders/{order_id}/status", json={"status": "REFUNDED"}, headers=admin_headers)
        assert _stock(product_id) == 5


class TestPayPalEndpoints:
    def test_create_and_capture(self, client, shopper, make_product, fake_gateway):
        order_id = _place(client, shopper, make_product()).json()["id"]

        created = client.post("/paypal/create-order", json={"orderId": order_id}, headers=shopper["headers"])
        assert created.status_code == 200
        paypal_order_id = created.json()["paypalOrderId"]
        assert created.json()["approvalUrl"]

        captured = client.post(
            "/paypal/capture-order", json={"paypalOrderId": paypal_order_id}, headers=shopper["headers"]
        )
        assert captured.status_code == 200
        assert captured.json()["success"] is True
        assert captured.json()["order"]["status"] == "PAID"

    def test_create_for_other_customers_order(self, client, shopper, make_product, make_customer, auth_headers):
        order_id = _place(client, shopper, make_product()).json()["id"]
        stranger, _ = make_customer()
        response = client.post("/paypal/create-order", json={"orderId": order_id}, headers=auth_headers(stranger))
        assert response.status_code == 403

    def test_create_for_non_pending_order(self, client, shopper, make_product, fake_gateway):
        order_id = _place(client, shopper, make_product()).json()["id"]
        client.post(f"/orders/{order_id}/cancel", headers=shopper["headers"])
        response = client.post("/paypal/create-order", json={"orderId": order_id}, headers=shopper["headers"])
        assert response.status_code == 400

    def test_gateway_error_is_surfaced(self, client, shopper, make_product, fake_gateway):
        order_id = _place(client, shopper, make_product()).json()["id"]
        paypal_order_id = client.post(
            "/paypal/create-order", json={"orderId": order_id}, headers=shopper["headers"]
        ).json()["paypalOrderId"]
        fake_gateway.configure(should_succeed=False, failure_reason="Instrument declined")

        response = client.post(
            "/paypal/capture-order", json={"paypalOrderId": paypal_order_id}, headers=shopper["headers"]
        )

        assert response.status_code == 502
        assert response.json() == {"error": "Instrument declined"}
        assert client.get(f"/orders/{order_id}", headers=shopper["headers"]).json()["status"] == "PENDING"

    def test_client_id(self, client, monkeypatch):
        monkeypatch.setenv("PAYPAL_CLIENT_ID", "sandbox-client")
        assert client.get("/paypal/client-id").json() == {"clientId": "sandbox-client"}

    def test_configure_gateway(self, client, fake_gateway):
        response = client.post("/paypal/gateway/configure", json={"shouldSucceed": False, "failureReason": "Nope"})
        assert response.status_code == 200
        assert fake_gateway.should_succeed is False

    def test_configure_gateway_refused_in_production(self, client, fake_gateway, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        response = client.post("/paypal/gateway/configure", json={"shouldSucceed": False})
        assert response.status_code == 403

    def test_create_for_unknown_order(self, client, shopper, fake_gateway):
        response = client.post("/paypal/create-order", json={"orderId": "nope"}, headers=shopper["headers"])
        assert response.status_code == 404
        assert response.json()["error"]
        assert fake_gateway.calls == []

    def test_capture_unknown_reference(self, client, shopper, fake_gateway):
        response = client.post("/paypal/capture-order", json={"paypalOrderId": "FAKE-NONE"}, headers=shopper["headers"])
        assert response.status_code == 404
        assert response.json()["error"]
        assert fake_gateway.calls == []
