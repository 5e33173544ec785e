"""
Order Ledger

Creates orders from a user's cart, lists them for customers and for
city-scoped administrators, and moves them through their status labels.
Order creation and status changes each announce themselves in the
notification feed.

Author: Mumma Tiffin Team
Version: 1.0.0
"""

import json
import logging
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tiffin.core.exceptions import Forbidden, InvalidInput, NotFound
from tiffin.core.security import TokenClaims
from tiffin.models import ALL_CITIES, Admin, Order, OrderStatus, User
from tiffin.services.notifications import NotificationFeed
from tiffin.services.policy import order_is_visible, resolve_order_city

logger = logging.getLogger(__name__)


# Allowed next statuses per current status. Every move is permitted,
# including skipping ahead and going backwards.
TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    status: frozenset(OrderStatus) for status in OrderStatus
}


def parse_status(value: Optional[str]) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        valid = [s.value for s in OrderStatus]
        raise InvalidInput(f"Invalid status. Options: {valid}")


def can_transition(current: str, new: OrderStatus) -> bool:
    """Whether an order in `current` may move to `new`. Unknown stored labels may move anywhere."""
    try:
        current_status = OrderStatus(current)
    except ValueError:
        return True
    return new in TRANSITIONS[current_status]


class OrderLedger:
    """
    Order operations for one database session.

    Args:
        db: Session used for orders and the notifications they emit
        strict_snapshot_visibility: Show orders with unreadable snapshots
            only to administrators scoped to "All"
    """

    def __init__(self, db: AsyncSession, strict_snapshot_visibility: bool = False):
        self.db = db
        self.strict_snapshot_visibility = strict_snapshot_visibility
        self.notifications = NotificationFeed(db)

    async def create_order(
        self,
        user_id: int,
        items: Optional[list[Any]],
        total: int,
        address: Optional[dict[str, Any]],
        date: Optional[str] = None,
        time: Optional[str] = None,
        meal: Optional[str] = None,
    ) -> Order:
        """
        Persist a pending order and announce it to the address city.

        The order is committed before the notification is written. A failed
        notification is logged and leaves the order in place. An empty address
        is accepted and announced to "All".
        """
        if not items or address is None:
            raise InvalidInput("items & address required")
        if total is not None and total < 0:
            raise InvalidInput("total must not be negative")

        snapshot = {
            "items": items,
            "address": address,
            "date": date,
            "time": time,
            "meal": meal,
        }
        order = Order(
            user_id=user_id,
            total=total or 0,
            info=json.dumps(snapshot, ensure_ascii=False),
            status=OrderStatus.PENDING.value,
        )
        self.db.add(order)
        await self.db.commit()

        logger.info(f"Order #{order.id} created for user #{user_id} (total={order.total})")

        # Detach so a rollback of the notification write cannot expire it
        self.db.expunge(order)

        await self._announce(f"New order {order.id} placed", resolve_order_city(order.info))

        return order

    async def list_orders_for_user(self, user_id: int) -> Sequence[Order]:
        """The user's own orders, newest first."""
        result = await self.db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return result.scalars().all()

    async def list_orders_for_admin(self, claims: TokenClaims) -> list[tuple[Order, Optional[str]]]:
        """
        Orders visible to the administrator, newest first, each paired with
        the owner's email.
        """
        admin_city = await self._admin_city(claims)

        result = await self.db.execute(
            select(Order, User.email)
            .outerjoin(User, User.id == Order.user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return [
            (order, email)
            for order, email in result.all()
            if order_is_visible(admin_city, order.info, strict=self.strict_snapshot_visibility)
        ]

    async def update_status(self, order_id: int, new_status: Optional[str], claims: TokenClaims) -> Order:
        """
        Set an order's status and announce the change to every city.

        Concurrent updates of the same order are last-write-wins. As with
        order creation, a failed notification is logged and the new status stays.
        """
        status = parse_status(new_status)

        order = await self.db.get(Order, order_id)
        if order is None:
            raise NotFound(f"Order #{order_id} not found")

        admin_city = await self._admin_city(claims)
        if not order_is_visible(admin_city, order.info, strict=self.strict_snapshot_visibility):
            logger.warning(f"Admin #{claims.id} ({admin_city}) denied update of order #{order_id}")
            raise Forbidden()

        if not can_transition(order.status, status):
            raise InvalidInput(f"Cannot move order from {order.status} to {status.value}")

        previous = order.status
        order.status = status.value
        await self.db.commit()

        logger.info(f"Order #{order_id} status {previous} -> {status.value} by admin #{claims.id}")

        self.db.expunge(order)
        await self._announce(f"Order {order_id} status updated → {status.value}", ALL_CITIES)
        return order

    async def _announce(self, text: str, target_city: str) -> None:
        """Post to the feed after the order change is committed; failures are logged only."""
        try:
            await self.notifications.post(text, target_city)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Notification \"{text}\" could not be written")

    async def _admin_city(self, claims: TokenClaims) -> Optional[str]:
        """City scope from the token, or from the admin record for tokens without one."""
        if claims.city is not None:
            return claims.city
        admin = await self.db.get(Admin, claims.id)
        return admin.city if admin else None
