# tests/v1/test_admin.py
"""Tests for the admin panel endpoints."""

from fastapi import status

from sheworks.models import Product, Vendor


def test_admin_endpoints_require_admin(client, customer_headers, vendor_headers) -> None:
    for headers in (customer_headers, vendor_headers):
        response = client.get("/api/v1/admin/stats", headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN


def test_dashboard_stats(
    client, order_body, customer_headers, admin_headers, product, other_vendor
) -> None:
    client.post(
        "/api/v1/orders/",
        json=order_body([{"productId": product.id, "quantity": 1}]),
        headers=customer_headers,
    )

    stats = client.get("/api/v1/admin/stats", headers=admin_headers).json()

    assert stats == {
        "customers": 1,
        "vendors": 2,
        "activeVendors": 2,
        "pendingVendors": 0,
        "products": 1,
        "orders": 1,
        "revenue": 115.0,
    }


def test_cancelled_orders_do_not_count_as_revenue(
    client, order_body, customer_headers, vendor_headers, admin_headers, product
) -> None:
    order = client.post(
        "/api/v1/orders/",
        json=order_body([{"productId": product.id, "quantity": 1}]),
        headers=customer_headers,
    ).json()["order"]
    client.put(
        f"/api/v1/orders/{order['id']}/status",
        json={"status": "cancelled"},
        headers=vendor_headers,
    )

    stats = client.get("/api/v1/admin/stats", headers=admin_headers).json()
    assert stats["revenue"] == 0.0


def test_suspend_customer_blocks_login(client, customer, admin_headers) -> None:
    response = client.put(f"/api/v1/admin/customers/{customer.id}/suspend", headers=admin_headers)
    assert response.json()["isActive"] is False

    login = client.post(
        "/api/v1/auth/login/customer",
        json={"email": "amara@example.com", "password": "password123"},
    )
    assert login.status_code == status.HTTP_403_FORBIDDEN


def test_activate_pending_vendor(client, db_session, vendor, admin_headers) -> None:
    vendor.status = "pending"
    vendor.is_verified = False
    db_session.flush()

    response = client.put(f"/api/v1/admin/vendors/{vendor.id}/activate", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "active"
    assert response.json()["isVerified"] is True


def test_suspend_vendor(client, vendor, admin_headers) -> None:
    response = client.put(f"/api/v1/admin/vendors/{vendor.id}/suspend", headers=admin_headers)
    assert response.json()["status"] == "suspended"


def test_delete_vendor_removes_catalog(client, db_session, vendor, product, admin_headers) -> None:
    response = client.delete(f"/api/v1/admin/vendors/{vendor.id}", headers=admin_headers)

    assert response.json() == {"message": "Vendor deleted"}
    assert db_session.get(Vendor, vendor.id) is None
    assert db_session.query(Product).count() == 0


def test_suspend_and_delete_product(client, product, admin_headers) -> None:
    suspended = client.put(f"/api/v1/admin/products/{product.id}/suspend", headers=admin_headers)
    assert suspended.json()["product"]["isActive"] is False

    deleted = client.delete(f"/api/v1/admin/products/{product.id}", headers=admin_headers)
    assert deleted.status_code == status.HTTP_200_OK
    missing = client.delete(f"/api/v1/admin/products/{product.id}", headers=admin_headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_list_customers_and_vendors(client, customer, vendor, admin_headers) -> None:
    customers = client.get("/api/v1/admin/customers", headers=admin_headers).json()
    vendors = client.get("/api/v1/admin/vendors", headers=admin_headers).json()

    assert [c["id"] for c in customers["customers"]] == [customer.id]
    assert [v["id"] for v in vendors["vendors"]] == [vendor.id]
