from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlmodel import Session

from app.database import get_session
from app.schemas.service_schemas import QuoteResponse, ServiceResponse
from app.services.catalog_service import (
    estimate_delivery_date,
    get_service,
    list_active_services,
)
from app.services.pricing import price_breakdown
from app.utils.checkout_query import build_checkout_query, parse_checkout_query

router = APIRouter()


def serialize_service(service) -> dict:
    data = ServiceResponse.model_validate(service).model_dump()
    data["delivery_date"] = estimate_delivery_date(service.duration)
    return data


# -------- PUBLIC CATALOG --------

@router.get("", response_model=List[ServiceResponse])
def list_services(
    category: Optional[str] = Query(None, pattern=r"^(launch|growth|elite|custom)$"),
    session: Session = Depends(get_session),
):
    return [serialize_service(s) for s in list_active_services(session, category)]


@router.get("/{service_id}", response_model=ServiceResponse)
def get_service_detail(service_id: str, session: Session = Depends(get_session)):
    return serialize_service(get_service(session, service_id))


@router.get("/{service_id}/quote", response_model=QuoteResponse)
def quote_service(
    service_id: str,
    request: Request,
    installment: bool = False,
    session: Session = Depends(get_session),
):
    """
    Live price for the add-on picker; unknown add-on names are listed, not rejected.

    `addons` is read from the raw query string: names are comma-separated
    and each one is percent-encoded on its own, as `build_checkout_query`
    writes them.
    """
    service = get_service(session, service_id)
    selected = parse_checkout_query(request.url.query)["add_ons"]
    breakdown = price_breakdown(service, selected, installment)

    return {
        "service_id": service.id,
        **asdict(breakdown),
        "checkout_query": build_checkout_query(
            service.id,
            price=breakdown.total,
            add_ons=[a["name"] for a in breakdown.add_ons],
            installment=installment,
        ),
    }
