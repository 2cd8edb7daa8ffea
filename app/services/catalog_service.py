import logging
import re
from datetime import datetime, timedelta
from typing import List, Optional

from sqlmodel import Session, select

from app.exceptions import NotFoundError, ValidationError
from app.models.service import Service

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(
    r"^\s*(?:(\d+)\s*-\s*)?(\d+)\s*(day|days|week|weeks|month|months)\s*$",
    re.IGNORECASE,
)
_UNIT_DAYS = {"day": 1, "week": 7, "month": 30}


def estimate_delivery_date(duration: Optional[str], start: Optional[datetime] = None) -> Optional[datetime]:
    """Delivery estimate from a duration like "3-5 days": start + upper bound."""
    if not duration:
        return None
    match = _DURATION_RE.match(duration)
    if not match:
        return None
    upper = int(match.group(2))
    unit = match.group(3).lower().rstrip("s")
    start = start or datetime.utcnow()
    return start + timedelta(days=upper * _UNIT_DAYS[unit])


def validate_add_ons(add_ons: List[dict]) -> List[dict]:
    seen = set()
    cleaned = []
    for add_on in add_ons:
        name = str(add_on.get("name", "")).strip()
        price = add_on.get("price")
        if not name:
            raise ValidationError("Add-on name is required")
        if name in seen:
            raise ValidationError(f"Duplicate add-on name: {name}")
        if not isinstance(price, int) or isinstance(price, bool) or price < 0:
            raise ValidationError(f"Add-on price must be a non-negative integer: {name}")
        seen.add(name)
        cleaned.append({"name": name, "price": price})
    return cleaned


def list_active_services(session: Session, category: Optional[str] = None) -> List[Service]:
    query = select(Service).where(Service.is_active == True)  # noqa: E712
    if category:
        query = query.where(Service.category == category)
    return session.exec(query.order_by(Service.price)).all()


def get_service(session: Session, service_id: str, include_inactive: bool = False) -> Service:
    service = session.get(Service, service_id)
    if not service or (not service.is_active and not include_inactive):
        raise NotFoundError("Service not found", service_id=service_id)
    return service


def find_service(session: Session, service_id: Optional[str]) -> Optional[Service]:
    """Lenient lookup for pages that fall back to an empty checkout."""
    if not service_id:
        return None
    service = session.get(Service, service_id)
    if not service or not service.is_active:
        return None
    return service


def create_service(session: Session, data: dict) -> Service:
    if session.get(Service, data["id"]):
        raise ValidationError("Service id already exists", service_id=data["id"])

    data = dict(data)
    data["add_ons"] = validate_add_ons(data.get("add_ons") or [])
    service = Service(**data)
    session.add(service)
    session.commit()
    session.refresh(service)

    logger.info("Service created: %s", service.id)
    return service


def update_service(session: Session, service_id: str, updates: dict) -> Service:
    service = get_service(session, service_id, include_inactive=True)

    if "add_ons" in updates and updates["add_ons"] is not None:
        updates = dict(updates)
        updates["add_ons"] = validate_add_ons(updates["add_ons"])

    for key, value in updates.items():
        setattr(service, key, value)
    service.updated_at = datetime.utcnow()

    session.add(service)
    session.commit()
    session.refresh(service)

    logger.info("Service updated: %s (%s)", service.id, ", ".join(sorted(updates)))
    return service


def deactivate_service(session: Session, service_id: str) -> Service:
    # orders keep referencing the row, so services are never deleted
    return update_service(session, service_id, {"is_active": False})


DEFAULT_SERVICES = [
    {
        "id": "landing-page",
        "name": "Landing Page",
        "description": "Perfect for showcasing your business",
        "price": 150000,
        "original_price": 200000,
        "duration": "3-5 days",
        "spots_remaining": 2,
        "total_spots": 10,
        "features": [
            "Responsive design",
            "Contact form",
            "SEO optimization",
            "Basic analytics",
            "Social media integration",
            "1 month support",
        ],
        "add_ons": [
            {"name": "WhatsApp Integration", "price": 15000},
            {"name": "Live Chat Widget", "price": 25000},
            {"name": "Advanced Analytics", "price": 20000},
        ],
        "recommended": False,
        "category": "launch",
        "industry": ["tech", "consulting", "portfolio"],
    },
    {
        "id": "ecommerce-app",
        "name": "E-commerce App",
        "description": "Complete online store with payment integration",
        "price": 500000,
        "original_price": 600000,
        "duration": "2-3 weeks",
        "spots_remaining": 3,
        "total_spots": 8,
        "features": [
            "Product catalog",
            "Shopping cart",
            "Payment integration",
            "Order management",
            "Customer accounts",
            "Admin dashboard",
            "Mobile responsive",
            "3 months support",
        ],
        "add_ons": [
            {"name": "Advanced Analytics", "price": 50000},
            {"name": "Multi-vendor Support", "price": 100000},
            {"name": "Mobile App", "price": 200000},
        ],
        "recommended": True,
        "category": "growth",
        "industry": ["retail", "restaurant", "ecommerce"],
    },
    {
        "id": "custom-webapp",
        "name": "Custom Web Application",
        "description": "Tailored web applications for your business needs",
        "price": 800000,
        "original_price": 1000000,
        "duration": "4-6 weeks",
        "spots_remaining": 1,
        "total_spots": 5,
        "features": [
            "Custom functionality",
            "Database design",
            "User authentication",
            "API development",
            "Admin panel",
            "6 months support",
        ],
        "add_ons": [
            {"name": "Third-party Integrations", "price": 150000},
            {"name": "Advanced Security", "price": 100000},
        ],
        "recommended": False,
        "category": "elite",
        "industry": ["saas", "fintech", "logistics"],
    },
]


def seed_services(session: Session) -> int:
    """Insert the default catalog; existing ids are left untouched."""
    created = 0
    for data in DEFAULT_SERVICES:
        if session.get(Service, data["id"]):
            continue
        session.add(Service(**data))
        created += 1
    session.commit()
    logger.info("Seeded %s services", created)
    return created
