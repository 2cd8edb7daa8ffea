import pytest
from sqlmodel import select

from app.constants.order_status import OrderEventType, OrderStatus
from app.models.checkout_session import CheckoutSession
from app.models.order import Order
from app.models.order_event import OrderEvent
from app.services.order_event_service import log_order_event

CONTACT = {"full_name": "Ada Client", "email": "ada@example.com", "phone": "+2348000000"}


def _session_token(client):
    response = client.post(
        "/checkout/sessions",
        json={
            "service_id": "landing-page",
            "selected_add_ons": ["WhatsApp Integration", "Live Chat Widget"],
            "installment": True,
        },
    )
    return response.json()["session_token"]


def test_order_from_checkout_session(client, session, gateway, user_headers):
    token = _session_token(client)

    response = client.post(
        "/orders",
        json={"session_token": token, "contact": CONTACT, "project_description": "Bakery site"},
        headers=user_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["total_price"] == 247000
    assert data["payment_url"] == "https://gateway.test/pay/ref_1"
    assert data["payment_link_expires_at"] is not None

    assert gateway.initialized[0]["amount"] == 247000
    assert gateway.initialized[0]["metadata"]["order_id"] == data["order_id"]

    order = session.get(Order, data["order_id"])
    assert order.installment is True
    assert order.custom_request == "Bakery site"
    assert order.contact["phone"] == "+2348000000"

    checkout = session.exec(select(CheckoutSession).where(CheckoutSession.token == token)).one()
    assert checkout.is_completed is True
    assert checkout.order_id == order.id


def test_checkout_session_cannot_place_two_orders(client, user_headers):
    token = _session_token(client)
    client.post("/orders", json={"session_token": token, "contact": CONTACT}, headers=user_headers)

    again = client.post("/orders", json={"session_token": token, "contact": CONTACT}, headers=user_headers)

    assert again.status_code == 409
    # still readable after completion
    assert client.get(f"/checkout/sessions/{token}").json()["is_completed"] is True


def test_direct_order_defaults_contact_to_account(client, session, user_headers):
    response = client.post(
        "/orders",
        json={"service_id": "ecommerce-app", "selected_add_ons": ["Not Offered"]},
        headers=user_headers,
    )

    assert response.status_code == 201
    order = session.get(Order, response.json()["order_id"])
    assert order.total_price == 500000
    assert order.selected_add_ons == []
    assert order.contact["email"] == "ada@example.com"


def test_order_requires_session_or_service(client, user_headers):
    response = client.post("/orders", json={"contact": CONTACT}, headers=user_headers)
    assert response.status_code == 422


def test_order_requires_login(client):
    response = client.post("/orders", json={"service_id": "landing-page"})
    assert response.status_code == 401


def test_gateway_failure_keeps_pending_order(client, session, gateway, user_headers):
    gateway.fail = True

    response = client.post(
        "/orders", json={"service_id": "landing-page", "contact": CONTACT}, headers=user_headers
    )

    assert response.status_code == 502
    body = response.json()
    assert body["retryable"] is True
    order = session.get(Order, body["order_id"])
    assert order.status == OrderStatus.pending
    assert order.payment_url is None

    gateway.fail = False
    retry = client.post(f"/orders/{order.id}/reactivate-payment", headers=user_headers)
    assert retry.status_code == 200
    assert retry.json()["payment_url"].startswith("https://gateway.test/pay/")


def test_list_and_read_own_orders(client, pending_order, user_headers, other_headers):
    listed = client.get("/orders", headers=user_headers)
    assert [o["id"] for o in listed.json()] == [pending_order.id]

    assert client.get(f"/orders/{pending_order.id}", headers=user_headers).status_code == 200
    assert client.get(f"/orders/{pending_order.id}", headers=other_headers).status_code == 404


def test_payment_status_view(client, pending_order, user_headers):
    data = client.get(f"/orders/{pending_order.id}/payment-status", headers=user_headers).json()

    assert data["status"] == "pending"
    assert data["payment_in_progress"] is True
    assert data["can_reactivate"] is True
    assert data["payment_url"] == pending_order.payment_url


def test_reactivate_issues_new_reference(client, pending_order, user_headers):
    old_reference = pending_order.payment_reference

    response = client.post(f"/orders/{pending_order.id}/reactivate-payment", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["payment_reference"] != old_reference


def test_cancel_pending_order(client, session, pending_order, user_headers):
    response = client.delete(f"/orders/{pending_order.id}?reason=changed+my+mind", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    session.refresh(pending_order)
    assert pending_order.processed_at is not None

    again = client.delete(f"/orders/{pending_order.id}", headers=user_headers)
    assert again.status_code == 409
    assert again.json()["current_status"] == "cancelled"


def test_reactivate_cancelled_order_returns_no_url(client, gateway, pending_order, user_headers):
    client.delete(f"/orders/{pending_order.id}", headers=user_headers)
    calls = len(gateway.initialized)

    response = client.post(f"/orders/{pending_order.id}/reactivate-payment", headers=user_headers)

    assert response.status_code == 409
    assert "payment_url" not in response.json()
    assert len(gateway.initialized) == calls


def test_order_timeline(client, pending_order, user_headers):
    events = client.get(f"/orders/{pending_order.id}/events", headers=user_headers).json()

    assert [e["event_type"] for e in events] == ["order_placed", "payment_initialized"]


def test_order_events_are_recorded_for_cancellation(client, session, pending_order, user_headers):
    client.delete(f"/orders/{pending_order.id}", headers=user_headers)

    types = session.exec(
        select(OrderEvent.event_type).where(OrderEvent.order_id == pending_order.id)
    ).all()
    assert "order_cancelled" in types


def test_order_total_survives_catalog_price_change(client, pending_order, user_headers, admin_headers):
    patched = client.patch(
        "/admin/services/landing-page",
        json={
            "price": 999999,
            "add_ons": [{"name": "WhatsApp Integration", "price": 50000}],
        },
        headers=admin_headers,
    )
    assert patched.status_code == 200

    response = client.get(f"/orders/{pending_order.id}", headers=user_headers)

    assert response.json()["total_price"] == 190000
    assert response.json()["selected_add_ons"] == ["WhatsApp Integration", "Live Chat Widget"]
    status = client.get(f"/orders/{pending_order.id}/payment-status", headers=user_headers)
    assert status.json()["status"] == "pending"


def test_timeline_records_status_per_event(client, pending_order, user_headers):
    client.delete(f"/orders/{pending_order.id}", headers=user_headers)

    events = client.get(f"/orders/{pending_order.id}/events", headers=user_headers).json()

    assert [(e["event_type"], e["order_status"]) for e in events] == [
        ("order_placed", "pending"),
        ("payment_initialized", "pending"),
        ("order_cancelled", "cancelled"),
    ]
    assert events[-1]["label"] == "Order cancelled"


def test_unknown_order_event_type_is_refused(session, pending_order):
    with pytest.raises(ValueError):
        log_order_event(session, pending_order.id, "order_teleported")


def test_event_label_defaults_from_type(session, pending_order):
    event = log_order_event(session, pending_order.id, OrderEventType.payment_failed)

    assert event.label == "Payment failed"
    assert event.event_type is OrderEventType.payment_failed
