"""
Checkout state carried in URL query parameters.

Add-on names are joined with commas; each name is percent-encoded on its own
first so a comma inside a name survives the round trip.
"""

from typing import Iterable, List, Optional
from urllib.parse import quote, unquote_plus as unquote, urlencode

ADDONS_PARAM = "addons"


def build_checkout_query(
    service_id: str,
    price: Optional[int] = None,
    add_ons: Iterable[str] = (),
    session_token: Optional[str] = None,
    installment: bool = False,
) -> str:
    params = {"service": service_id}
    if price is not None:
        params["price"] = str(price)
    if session_token:
        params["session"] = session_token
    if installment:
        params["installment"] = "true"

    query = urlencode(params, quote_via=quote)
    names = [quote(name, safe="") for name in add_ons]
    if names:
        query += f"&{ADDONS_PARAM}=" + ",".join(names)
    return query


def parse_checkout_query(query: str) -> dict:
    """
    Inverse of `build_checkout_query`.

    The add-on list is split on raw commas before decoding, so it is
    parsed by hand rather than through `parse_qs`.
    """
    result = {
        "service_id": None,
        "price": None,
        "add_ons": [],
        "session_token": None,
        "installment": False,
    }
    for pair in (query or "").lstrip("?").split("&"):
        if not pair:
            continue
        key, _, raw = pair.partition("=")
        key = unquote(key)

        if key == ADDONS_PARAM:
            result["add_ons"] = _split_add_ons(raw)
        elif key == "service":
            result["service_id"] = unquote(raw) or None
        elif key == "price":
            try:
                result["price"] = int(unquote(raw))
            except ValueError:
                result["price"] = None
        elif key == "session":
            result["session_token"] = unquote(raw) or None
        elif key == "installment":
            result["installment"] = unquote(raw).lower() in ("1", "true", "yes")
    return result


def _split_add_ons(raw: str) -> List[str]:
    return [unquote(part) for part in raw.split(",") if part]
