import json
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlmodel import Session

from app.config import settings
from app.database import get_session
from app.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    StorefrontError,
    ValidationError,
)
from app.services.payment_gateway import PaymentGateway, get_payment_gateway
from app.services.payment_service import apply_verification

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "X-Gateway-Signature"
SUCCESS_EVENTS = {"charge.success"}
FAILURE_EVENTS = {"charge.failed"}


async def raw_body(request: Request) -> bytes:
    """Signatures are computed over the exact bytes sent."""
    return await request.body()


# -------- WEBHOOK --------

@router.post("/webhook")
def payment_webhook(
    body: bytes = Depends(raw_body),
    x_gateway_signature: Optional[str] = Header(None, alias=SIGNATURE_HEADER),
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Server-to-server notification. Delivered at least once, so every
    outcome other than a bad signature answers 200 to stop redelivery.
    """
    if not gateway.verify_signature(body, x_gateway_signature):
        logger.warning("Rejected payment webhook with invalid signature")
        raise HTTPException(401, "Invalid signature")

    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(400, "Invalid JSON payload")
    if not isinstance(payload, dict):
        raise HTTPException(400, "Invalid JSON payload")

    event = payload.get("event")
    if event not in SUCCESS_EVENTS | FAILURE_EVENTS:
        return {"status": "ignored", "event": event}

    data = payload.get("data")
    verification = gateway.parse_transaction(
        data if isinstance(data, dict) else {},
        success=event in SUCCESS_EVENTS,
    )

    try:
        result = apply_verification(session, verification, created_by="webhook")
    except (NotFoundError, InvalidTransitionError) as exc:
        logger.warning("Payment webhook ignored (%s): %s", verification.reference, exc.message)
        return {"status": "ignored", "detail": exc.message}
    except ValidationError as exc:
        logger.error("Payment webhook rejected (%s): %s", verification.reference, exc.message)
        return {"status": "rejected", "detail": exc.message}

    return {
        "status": "ok",
        "order_id": result.order.id,
        "order_status": result.order.status.value,
        "created": result.created,
    }


# -------- BROWSER CALLBACK --------

def _frontend_redirect(outcome: str, order_id: Optional[int] = None) -> RedirectResponse:
    params = {"payment": outcome}
    if order_id is not None:
        params["order_id"] = order_id
    return RedirectResponse(
        f"{settings.base_url}/payment-success?{urlencode(params)}",
        status_code=302,
    )


@router.get("/callback")
def payment_callback(
    reference: str,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Where the hosted payment page sends the customer back; verified with the provider."""
    try:
        verification = gateway.verify_transaction(reference)
        result = apply_verification(session, verification, created_by="callback")
    except StorefrontError as exc:
        logger.warning("Payment callback failed for %s: %s", reference, exc.message)
        return _frontend_redirect("error")

    outcome = "success" if verification.success else "failed"
    return _frontend_redirect(outcome, result.order.id)
