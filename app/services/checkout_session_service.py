"""
Server-held checkout sessions.

A visitor can configure a purchase before signing in; the session token
travels through the login redirect and the checkout resumes from the stored
state. Expiry is checked here on every read, never left to the client.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from app.config import settings
from app.exceptions import (
    CheckoutSessionExpired,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.models.checkout_session import CheckoutSession
from app.models.service import Service
from app.services.pricing import calculate_total, select_add_ons

logger = logging.getLogger(__name__)

CONTACT_FIELDS = ("full_name", "email", "phone", "company", "project_description", "timeline")


def generate_session_token() -> str:
    return f"checkout_{secrets.token_urlsafe(24)}"


def service_snapshot(service: Service) -> dict:
    return {
        "id": service.id,
        "name": service.name,
        "price": int(service.price),
        "original_price": service.original_price,
        "duration": service.duration,
        "add_ons": [{"name": a["name"], "price": int(a["price"])} for a in service.add_ons or []],
    }


def _session_ttl() -> timedelta:
    return timedelta(minutes=settings.checkout_session_ttl_minutes)


def _merge_contact(current: Optional[dict], patch: Optional[dict]) -> Optional[dict]:
    if patch is None:
        return current
    merged = dict(current or {})
    for key, value in patch.items():
        if key in CONTACT_FIELDS and value is not None:
            merged[key] = value
    return merged


def create_checkout_session(
    session: Session,
    service: Service,
    selected_add_ons: Iterable[str] = (),
    total_price: Optional[int] = None,
    contact_draft: Optional[dict] = None,
    installment: bool = False,
    user_id: Optional[int] = None,
) -> CheckoutSession:
    snapshot = service_snapshot(service)
    add_ons = [a["name"] for a in select_add_ons(snapshot, selected_add_ons)]
    computed = calculate_total(snapshot, add_ons, installment)

    if total_price is not None and int(total_price) != computed:
        raise ValidationError(
            "Total price does not match the selected service and add-ons",
            expected_total=computed,
        )

    now = datetime.utcnow()
    checkout = CheckoutSession(
        token=generate_session_token(),
        service_id=service.id,
        service_data=snapshot,
        selected_add_ons=add_ons,
        installment=installment,
        total_price=computed,
        contact_data=_merge_contact(None, contact_draft),
        user_id=user_id,
        created_at=now,
        updated_at=now,
        expires_at=now + _session_ttl(),
    )
    session.add(checkout)
    session.commit()
    session.refresh(checkout)

    logger.info(
        "Checkout session created for %s (%s add-ons, total %s)",
        service.id, len(add_ons), computed,
    )
    return checkout


def get_checkout_session(session: Session, token: str) -> CheckoutSession:
    """Read without consuming; safe to call on every page refresh."""
    checkout = session.exec(
        select(CheckoutSession).where(CheckoutSession.token == token)
    ).first()

    if not checkout:
        raise NotFoundError("Checkout session not found")

    if datetime.utcnow() > checkout.expires_at:
        session.delete(checkout)
        session.commit()
        logger.info("Checkout session expired and removed")
        raise CheckoutSessionExpired("Checkout session expired")

    return checkout


def update_checkout_session(session: Session, token: str, patch: dict) -> CheckoutSession:
    """
    Merge `patch` into the session. Concurrent tabs: last write wins.

    Changing add-ons or the installment flag reprices against the snapshot
    taken when the session started.
    """
    checkout = get_checkout_session(session, token)

    if checkout.is_completed:
        raise InvalidTransitionError("Checkout session already completed")

    if "contact_data" in patch:
        checkout.contact_data = _merge_contact(checkout.contact_data, patch["contact_data"])

    if patch.get("user_id") is not None:
        checkout.user_id = patch["user_id"]

    repriced = False
    if patch.get("selected_add_ons") is not None:
        checkout.selected_add_ons = [
            a["name"] for a in select_add_ons(checkout.service_data, patch["selected_add_ons"])
        ]
        repriced = True
    if patch.get("installment") is not None:
        checkout.installment = bool(patch["installment"])
        repriced = True

    if repriced:
        checkout.total_price = calculate_total(
            checkout.service_data, checkout.selected_add_ons, checkout.installment
        )

    checkout.updated_at = datetime.utcnow()
    session.add(checkout)
    session.commit()
    session.refresh(checkout)
    return checkout


def complete_checkout_session(session: Session, checkout: CheckoutSession, order_id: int) -> None:
    """Mark consumed by an order. The caller commits."""
    checkout.is_completed = True
    checkout.order_id = order_id
    checkout.updated_at = datetime.utcnow()
    session.add(checkout)


def purge_expired_checkout_sessions(session: Session) -> int:
    result = session.exec(
        delete(CheckoutSession).where(CheckoutSession.expires_at < datetime.utcnow())
    )
    session.commit()
    return result.rowcount or 0
