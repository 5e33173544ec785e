"""
Authorization Policy

Pure functions deciding who may act and which city-scoped rows they see.
No database access happens here.

Visibility rule:
    A viewer scoped to city V sees a resource tagged with city R when
    V == "All", R == "All", or V == R.

The same rule governs the administrator order list and status updates.
The public menu matches the requested city literally, so asking for "All"
returns only items tagged "All".
"""

import json
import logging
from typing import Any, Optional

from tiffin.core.exceptions import Forbidden, Unauthenticated
from tiffin.core.security import TokenClaims
from tiffin.models import ALL_CITIES

logger = logging.getLogger(__name__)


def require_role(claims: Optional[TokenClaims], role: str) -> TokenClaims:
    """Return the claims when they carry `role`, raise otherwise."""
    if claims is None:
        raise Unauthenticated()
    if claims.role != role:
        raise Forbidden()
    return claims


def city_is_visible(viewer_city: Optional[str], resource_city: Optional[str]) -> bool:
    return (
        viewer_city == ALL_CITIES
        or resource_city == ALL_CITIES
        or (viewer_city is not None and viewer_city == resource_city)
    )


def parse_snapshot(info: Optional[str]) -> Optional[dict[str, Any]]:
    """Decode an order snapshot, returning None when it is not a JSON object."""
    if not info:
        return {}
    try:
        snapshot = json.loads(info)
    except (TypeError, ValueError):
        return None
    return snapshot if isinstance(snapshot, dict) else None


def resolve_order_city(info: Optional[str], strict: bool = False) -> Optional[str]:
    """
    City an order belongs to, read from `info.address.city`.

    An address without a (text) city resolves to "All". An unreadable snapshot
    resolves to "All" as well, unless `strict` is set, in which case None
    is returned and only "All"-scoped viewers will match it.
    """
    snapshot = parse_snapshot(info)
    if snapshot is None:
        logger.warning("Order snapshot could not be parsed; applying fallback visibility")
        return None if strict else ALL_CITIES

    address = snapshot.get("address")
    city = address.get("city") if isinstance(address, dict) else None
    if isinstance(city, str) and city:
        return city
    # Absent or non-text city
    return ALL_CITIES


def order_is_visible(viewer_city: Optional[str], info: Optional[str], strict: bool = False) -> bool:
    return city_is_visible(viewer_city, resolve_order_city(info, strict=strict))
