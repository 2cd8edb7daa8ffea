import inspect
import json

import pytest
from sqlalchemy import update
from sqlmodel import select

from app.constants.order_status import OrderStatus
from app.exceptions import InvalidTransitionError, ValidationError
from app.models.order import Order
from app.models.order_event import OrderEvent
from app.models.payment import Payment
from app.models.project import Project
from app.routes.payments import payment_webhook
from app.services.order_service import cancel_order, reactivate_payment
from app.services.payment_service import mark_order_paid


def _count(session, model, order_id):
    return len(session.exec(select(model).where(model.order_id == order_id)).all())


def _webhook(client, gateway, payload, signature=None):
    body = json.dumps(payload).encode()
    headers = {
        "Content-Type": "application/json",
        "X-Gateway-Signature": signature if signature is not None else gateway.sign(body),
    }
    return client.post("/payments/webhook", content=body, headers=headers)


def _charge(order, event="charge.success", amount=None, status="success"):
    return {
        "event": event,
        "data": {
            "reference": order.payment_reference,
            "status": status,
            "amount": (order.total_price if amount is None else amount) * 100,
            "metadata": {"order_id": order.id},
        },
    }


def test_mark_paid_twice_creates_one_payment_and_project(session, pending_order):
    first = mark_order_paid(session=session, order_id=pending_order.id, reference="ref_1")
    second = mark_order_paid(session=session, order_id=pending_order.id, reference="ref_1")

    assert first.created is True
    assert second.created is False
    assert first.order.status == OrderStatus.paid
    assert second.project.id == first.project.id
    assert _count(session, Payment, pending_order.id) == 1
    assert _count(session, Project, pending_order.id) == 1


def test_paid_order_creates_project_with_timeline(session, pending_order):
    result = mark_order_paid(session=session, order_id=pending_order.id, reference="ref_1")

    project = result.project
    assert project.project_name == "Landing Page"
    assert project.current_stage == "Discovery"
    assert project.progress_percentage == 0
    assert (project.due_date - project.start_date).days == 14


def test_cancelled_order_cannot_be_paid(session, pending_order, user):
    cancel_order(session=session, order_id=pending_order.id, user=user)

    with pytest.raises(InvalidTransitionError):
        mark_order_paid(session=session, order_id=pending_order.id, reference="ref_1")
    assert _count(session, Project, pending_order.id) == 0


def test_paid_order_cannot_be_cancelled(session, pending_order, user):
    mark_order_paid(session=session, order_id=pending_order.id, reference="ref_1")

    with pytest.raises(InvalidTransitionError):
        cancel_order(session=session, order_id=pending_order.id, user=user)


def test_amount_mismatch_is_rejected(session, pending_order):
    with pytest.raises(ValidationError):
        mark_order_paid(session=session, order_id=pending_order.id, reference="ref_1", amount=1)

    session.refresh(pending_order)
    assert pending_order.status == OrderStatus.pending


def test_webhook_requires_valid_signature(client, gateway, pending_order):
    response = _webhook(client, gateway, _charge(pending_order), signature="bogus")
    assert response.status_code == 401


def test_webhook_marks_order_paid_once(client, session, gateway, pending_order):
    first = _webhook(client, gateway, _charge(pending_order))
    second = _webhook(client, gateway, _charge(pending_order))

    assert first.json() == {
        "status": "ok",
        "order_id": pending_order.id,
        "order_status": "paid",
        "created": True,
    }
    assert second.json()["created"] is False
    assert _count(session, Project, pending_order.id) == 1


def test_webhook_failed_charge_keeps_order_pending(client, session, gateway, pending_order):
    response = _webhook(
        client, gateway, _charge(pending_order, event="charge.failed", status="failed")
    )

    assert response.status_code == 200
    session.refresh(pending_order)
    assert pending_order.status == OrderStatus.pending


def test_webhook_for_cancelled_order_is_ignored(client, session, gateway, pending_order, user):
    cancel_order(session=session, order_id=pending_order.id, user=user)

    response = _webhook(client, gateway, _charge(pending_order))

    assert response.status_code == 200
    assert response.json()["status"] == "ignored"
    session.refresh(pending_order)
    assert pending_order.status == OrderStatus.cancelled


def test_webhook_with_wrong_amount_is_rejected(client, session, gateway, pending_order):
    response = _webhook(client, gateway, _charge(pending_order, amount=100))

    assert response.json()["status"] == "rejected"
    session.refresh(pending_order)
    assert pending_order.status == OrderStatus.pending


def test_webhook_ignores_other_events(client, gateway, pending_order):
    response = _webhook(client, gateway, _charge(pending_order, event="transfer.success"))
    assert response.json()["status"] == "ignored"


def test_callback_redirects_with_success(client, gateway, pending_order):
    gateway.set_result(pending_order.payment_reference, pending_order)

    response = client.get(
        "/payments/callback",
        params={"reference": pending_order.payment_reference},
        follow_redirects=False,
    )

    assert response.status_code == 302
    location = response.headers["location"]
    assert "payment=success" in location
    assert f"order_id={pending_order.id}" in location


def test_callback_redirects_with_failed(client, gateway, pending_order):
    gateway.set_result(pending_order.payment_reference, pending_order, success=False)

    response = client.get(
        "/payments/callback",
        params={"reference": pending_order.payment_reference},
        follow_redirects=False,
    )

    assert "payment=failed" in response.headers["location"]


def test_callback_redirects_with_error_when_unverifiable(client):
    response = client.get(
        "/payments/callback", params={"reference": "unknown"}, follow_redirects=False
    )

    assert response.status_code == 302
    assert "payment=error" in response.headers["location"]


def test_admin_can_mark_paid_and_is_limited_to_transitions(client, pending_order, admin_headers):
    paid = client.patch(
        f"/admin/orders/{pending_order.id}/status",
        json={"status": "paid", "reference": "bank_transfer_1"},
        headers=admin_headers,
    )
    assert paid.status_code == 200
    assert paid.json()["status"] == "paid"
    assert paid.json()["payment_reference"] == "bank_transfer_1"

    cancelled = client.patch(
        f"/admin/orders/{pending_order.id}/status",
        json={"status": "cancelled"},
        headers=admin_headers,
    )
    assert cancelled.status_code == 409


def test_admin_order_list_is_paginated(client, pending_order, admin_headers):
    response = client.get("/admin/orders", params={"status": "pending", "limit": 5}, headers=admin_headers)

    data = response.json()
    assert data["total_items"] == 1
    assert data["results"][0]["order_id"] == pending_order.id
    assert data["results"][0]["email"] == "ada@example.com"


def test_admin_order_detail(client, pending_order, admin_headers):
    response = client.get(f"/admin/orders/{pending_order.id}", headers=admin_headers)

    data = response.json()
    assert data["order"]["id"] == pending_order.id
    assert data["payment"] is None
    assert data["payment_status"]["can_cancel"] is True
    assert len(data["events"]) == 2


def _change_behind_session(session, order, status):
    """Another writer commits a new status while this session keeps its loaded copy."""
    session.refresh(order)
    session.expire_on_commit = False
    session.exec(
        update(Order)
        .where(Order.id == order.id)
        .values(status=status)
        .execution_options(synchronize_session=False)
    )
    session.commit()
    assert order.status == OrderStatus.pending


def _event_types(session, order_id):
    return session.exec(
        select(OrderEvent.event_type).where(OrderEvent.order_id == order_id)
    ).all()


def test_mark_paid_loses_race_to_cancellation(session, pending_order):
    _change_behind_session(session, pending_order, OrderStatus.cancelled)

    with pytest.raises(InvalidTransitionError) as exc_info:
        mark_order_paid(session=session, order_id=pending_order.id, reference="ref_1")

    assert exc_info.value.extra["current_status"] == "cancelled"
    assert _count(session, Payment, pending_order.id) == 0
    assert _count(session, Project, pending_order.id) == 0
    assert "payment_success" not in _event_types(session, pending_order.id)


def test_mark_paid_loses_race_to_other_callback(session, pending_order):
    _change_behind_session(session, pending_order, OrderStatus.paid)

    result = mark_order_paid(session=session, order_id=pending_order.id, reference="ref_1")

    assert result.created is False
    assert _count(session, Payment, pending_order.id) == 0
    assert _count(session, Project, pending_order.id) == 0


def test_cancel_loses_race_to_payment(session, pending_order, user):
    _change_behind_session(session, pending_order, OrderStatus.paid)

    with pytest.raises(InvalidTransitionError) as exc_info:
        cancel_order(session=session, order_id=pending_order.id, user=user)

    assert exc_info.value.extra["current_status"] == "paid"
    session.refresh(pending_order)
    assert pending_order.status == OrderStatus.paid
    assert "order_cancelled" not in _event_types(session, pending_order.id)


def test_reactivate_loses_race_while_gateway_is_called(session, gateway, pending_order, user):
    old_reference = pending_order.payment_reference
    real_initialize = gateway.initialize

    def initialize_then_pay(**kwargs):
        checkout = real_initialize(**kwargs)
        # the webhook lands while the gateway call is in flight
        session.exec(
            update(Order)
            .where(Order.id == pending_order.id)
            .values(status=OrderStatus.paid)
            .execution_options(synchronize_session=False)
        )
        session.commit()
        return checkout

    gateway.initialize = initialize_then_pay

    with pytest.raises(InvalidTransitionError) as exc_info:
        reactivate_payment(
            session=session, gateway=gateway, order_id=pending_order.id, user=user
        )

    assert exc_info.value.extra["current_status"] == "paid"
    session.refresh(pending_order)
    assert pending_order.payment_reference == old_reference
    assert _count(session, Payment, pending_order.id) == 0
    assert _count(session, Project, pending_order.id) == 0
    assert "payment_reactivated" not in _event_types(session, pending_order.id)


def test_webhook_handler_runs_in_threadpool():
    assert not inspect.iscoroutinefunction(payment_webhook)


def test_webhook_with_non_numeric_order_id_is_ignored(client, session, gateway, pending_order):
    payload = _charge(pending_order)
    payload["data"]["metadata"] = {"order_id": "abc"}
    payload["data"]["reference"] = "unknown_ref"

    response = _webhook(client, gateway, payload)

    assert response.status_code == 200
    assert response.json()["status"] == "ignored"
    session.refresh(pending_order)
    assert pending_order.status == OrderStatus.pending


def test_webhook_with_non_numeric_order_id_falls_back_to_reference(client, gateway, pending_order):
    payload = _charge(pending_order)
    payload["data"]["metadata"] = {"order_id": "abc"}

    response = _webhook(client, gateway, payload)

    assert response.json()["status"] == "ok"
    assert response.json()["order_id"] == pending_order.id


def test_webhook_rejects_non_object_json(client, gateway):
    body = b'["charge.success"]'
    response = client.post(
        "/payments/webhook",
        content=body,
        headers={"Content-Type": "application/json", "X-Gateway-Signature": gateway.sign(body)},
    )
    assert response.status_code == 400
