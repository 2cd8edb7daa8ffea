"""
Checkout pricing.

A total is the service's base price plus the price of every selected add-on
the service actually offers. Names the service does not offer are ignored,
so a stale URL or an edited query string never fails a checkout. The
installment plan multiplies the total by a fixed surcharge and rounds half up
to a whole currency unit.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Mapping, Optional, Union

from app.config import settings

INSTALLMENT_SURCHARGE = Decimal(str(settings.installment_surcharge))
INSTALLMENT_COUNT = settings.installment_count


@dataclass
class PriceBreakdown:
    base_price: int
    add_ons: List[dict]
    ignored_add_ons: List[str]
    add_ons_total: int
    subtotal: int
    installment: bool
    surcharge: float
    total: int
    installment_count: Optional[int] = None
    installment_amount: Optional[int] = None


def _base_price(service) -> int:
    if isinstance(service, Mapping):
        return int(service["price"])
    return int(service.price)


def _offered_add_ons(service) -> List[dict]:
    if isinstance(service, Mapping):
        return list(service.get("add_ons") or [])
    return list(service.add_ons or [])


def apply_installment_surcharge(amount: int, surcharge: Union[Decimal, float, None] = None) -> int:
    factor = Decimal(str(surcharge)) if surcharge is not None else INSTALLMENT_SURCHARGE
    return int((Decimal(amount) * factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def select_add_ons(service, selected: Iterable[str]) -> List[dict]:
    """Offered add-ons whose names are in `selected`, in catalog order."""
    wanted = set(selected or [])
    return [a for a in _offered_add_ons(service) if a["name"] in wanted]


def calculate_total(service, selected: Iterable[str] = (), installment: bool = False) -> int:
    """
    Final price for `service` with the `selected` add-on names.

    `service` may be a Service row or its JSON snapshot (a dict with
    `price` and `add_ons`).
    """
    matched = select_add_ons(service, selected)
    total = _base_price(service) + sum(int(a["price"]) for a in matched)
    if installment:
        total = apply_installment_surcharge(total)
    return max(total, 0)


def price_breakdown(service, selected: Iterable[str] = (), installment: bool = False) -> PriceBreakdown:
    selected = list(selected or [])
    matched = select_add_ons(service, selected)
    offered = {a["name"] for a in matched}
    add_ons_total = sum(int(a["price"]) for a in matched)
    subtotal = _base_price(service) + add_ons_total
    total = calculate_total(service, selected, installment)

    breakdown = PriceBreakdown(
        base_price=_base_price(service),
        add_ons=[{"name": a["name"], "price": int(a["price"])} for a in matched],
        ignored_add_ons=sorted({name for name in selected if name not in offered}),
        add_ons_total=add_ons_total,
        subtotal=subtotal,
        installment=installment,
        surcharge=float(INSTALLMENT_SURCHARGE) if installment else 1.0,
        total=total,
    )
    if installment:
        breakdown.installment_count = INSTALLMENT_COUNT
        breakdown.installment_amount = math.ceil(total / INSTALLMENT_COUNT)
    return breakdown
