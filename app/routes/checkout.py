import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from app.database import get_session
from app.exceptions import NotFoundError
from app.models.checkout_session import CheckoutSession
from app.models.user import User
from app.schemas.checkout_schemas import (
    CheckoutSessionCreate,
    CheckoutSessionCreated,
    CheckoutSessionResponse,
    CheckoutSessionUpdate,
    ResumeCheckoutResponse,
)
from app.services.catalog_service import find_service, get_service
from app.services.checkout_session_service import (
    create_checkout_session,
    get_checkout_session,
    update_checkout_session,
)
from app.services.pricing import calculate_total, select_add_ons
from app.utils.checkout_query import build_checkout_query, parse_checkout_query
from app.utils.token import get_optional_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _session_query(checkout: CheckoutSession) -> str:
    return build_checkout_query(
        checkout.service_id,
        price=checkout.total_price,
        add_ons=checkout.selected_add_ons,
        session_token=checkout.token,
        installment=checkout.installment,
    )


def serialize_checkout(checkout: CheckoutSession) -> dict:
    return {
        "session_token": checkout.token,
        "service_id": checkout.service_id,
        "service_data": checkout.service_data,
        "selected_add_ons": checkout.selected_add_ons,
        "installment": checkout.installment,
        "total_price": checkout.total_price,
        "contact_data": checkout.contact_data,
        "user_id": checkout.user_id,
        "is_completed": checkout.is_completed,
        "order_id": checkout.order_id,
        "expires_at": checkout.expires_at,
        "checkout_query": _session_query(checkout),
    }


# -------- CHECKOUT SESSIONS --------

@router.post("/sessions", response_model=CheckoutSessionCreated, status_code=201)
def start_checkout(
    payload: CheckoutSessionCreate,
    session: Session = Depends(get_session),
    current_user: Optional[User] = Depends(get_optional_user),
):
    service = get_service(session, payload.service_id)
    checkout = create_checkout_session(
        session,
        service,
        selected_add_ons=payload.selected_add_ons,
        total_price=payload.total_price,
        contact_draft=payload.contact_data.model_dump(exclude_none=True) if payload.contact_data else None,
        installment=payload.installment,
        user_id=current_user.id if current_user else None,
    )
    return {
        "session_token": checkout.token,
        "total_price": checkout.total_price,
        "expires_at": checkout.expires_at,
        "checkout_query": _session_query(checkout),
    }


@router.get("/sessions/{token}", response_model=CheckoutSessionResponse)
def read_checkout(token: str, session: Session = Depends(get_session)):
    return serialize_checkout(get_checkout_session(session, token))


@router.put("/sessions/{token}", response_model=CheckoutSessionResponse)
def save_checkout(
    token: str,
    payload: CheckoutSessionUpdate,
    session: Session = Depends(get_session),
    current_user: Optional[User] = Depends(get_optional_user),
):
    patch = payload.model_dump(exclude_unset=True, exclude_none=True)
    if current_user:
        patch["user_id"] = current_user.id
    return serialize_checkout(update_checkout_session(session, token, patch))


@router.get("/resume", response_model=ResumeCheckoutResponse)
def resume_checkout(request: Request, session: Session = Depends(get_session)):
    """
    Rebuild the checkout from URL state after a login redirect.

    A live session wins. Otherwise the service and add-ons in the URL are
    repriced from the catalog; the price in the URL is never trusted.
    """
    state = parse_checkout_query(request.url.query)

    if state["session_token"]:
        try:
            checkout = get_checkout_session(session, state["session_token"])
        except NotFoundError:
            logger.info("Checkout session in URL is gone, falling back to URL state")
        else:
            return {
                "found": True,
                "service_id": checkout.service_id,
                "selected_add_ons": checkout.selected_add_ons,
                "installment": checkout.installment,
                "total_price": checkout.total_price,
                "session_token": checkout.token,
                "contact_data": checkout.contact_data,
            }

    service = find_service(session, state["service_id"])
    if service is None:
        return {"found": False, "message": "Service not found. Please choose a service to continue."}

    add_ons = [a["name"] for a in select_add_ons(service, state["add_ons"])]
    return {
        "found": True,
        "service_id": service.id,
        "selected_add_ons": add_ons,
        "installment": state["installment"],
        "total_price": calculate_total(service, add_ons, state["installment"]),
    }
