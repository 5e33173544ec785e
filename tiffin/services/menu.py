"""
Menu Catalog

CRUD over menu items for administrators and the filtered public listing.

Author: Mumma Tiffin Team
Version: 1.0.0
"""

import logging
import time
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tiffin.core.exceptions import Conflict, InvalidInput
from tiffin.models import ALL_CITIES, MenuItem

logger = logging.getLogger(__name__)

# Columns an update may touch. `id` is intentionally absent.
UPDATABLE_FIELDS = frozenset({
    "meal",
    "name_en",
    "name_hi",
    "price",
    "description_en",
    "description_hi",
    "city",
    "available_from",
    "available_to",
    "active",
})


def generate_item_id() -> str:
    """Time-based identifier, e.g. 'm1760860800000'."""
    return f"m{int(time.time() * 1000)}"


class MenuCatalog:
    """Menu items for one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def public_list(self, city: Optional[str] = None) -> list[MenuItem]:
        """
        Active items, ordered by meal then id.

        With a city, only items for that city or for "All" are returned.
        """
        result = await self.db.execute(
            select(MenuItem)
            .where(MenuItem.active.is_(True))
            .order_by(MenuItem.meal, MenuItem.id)
        )
        items = result.scalars().all()
        if not city:
            return list(items)
        return [item for item in items if item.city == city or item.city == ALL_CITIES]

    async def create(self, fields: dict[str, Any]) -> MenuItem:
        item_id = fields.get("id") or generate_item_id()
        if await self.db.get(MenuItem, item_id) is not None:
            raise Conflict(f"menu item {item_id} exists")

        price = fields.get("price") or 0
        if price < 0:
            raise InvalidInput("price must not be negative")

        item = MenuItem(
            id=item_id,
            meal=fields.get("meal"),
            name_en=fields.get("name_en"),
            name_hi=fields.get("name_hi"),
            price=price,
            description_en=fields.get("description_en") or "",
            description_hi=fields.get("description_hi") or "",
            city=fields.get("city") or ALL_CITIES,
            available_from=fields.get("available_from") or "",
            available_to=fields.get("available_to") or "",
            active=bool(fields.get("active", True)),
        )
        self.db.add(item)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict(f"menu item {item_id} exists")

        logger.info(f"Menu item {item.id} created ({item.meal}, city={item.city})")
        return item

    async def update(self, item_id: str, changes: dict[str, Any]) -> Optional[MenuItem]:
        """
        Apply a partial update. Unknown fields are rejected; a missing item
        is a no-op and returns None.
        """
        unknown = set(changes) - UPDATABLE_FIELDS - {"id"}
        if unknown:
            raise InvalidInput(f"unknown fields: {', '.join(sorted(unknown))}")
        if changes.get("price") is not None and changes["price"] < 0:
            raise InvalidInput("price must not be negative")

        item = await self.db.get(MenuItem, item_id)
        if item is None:
            logger.info(f"Menu item {item_id} not found; update ignored")
            return None

        for field, value in changes.items():
            if field in UPDATABLE_FIELDS:
                setattr(item, field, value)
        await self.db.commit()

        logger.info(f"Menu item {item_id} updated: {sorted(k for k in changes if k != 'id')}")
        return item

    async def delete(self, item_id: str) -> None:
        """Remove an item. Deleting an unknown id succeeds."""
        await self.db.execute(delete(MenuItem).where(MenuItem.id == item_id))
        await self.db.commit()
        logger.info(f"Menu item {item_id} deleted")
