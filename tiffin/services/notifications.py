"""
Notification Fan-out

Append-only announcement log. Administrators post to it directly and the
order ledger posts to it as a side effect of order events. Every reader
gets the full recent feed: the target city is metadata, not a filter.

Author: Mumma Tiffin Team
Version: 1.0.0
"""

import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tiffin.core.exceptions import InvalidInput
from tiffin.models import ALL_CITIES, Notification

logger = logging.getLogger(__name__)


class NotificationFeed:
    """Writes and reads the notification log through one session."""

    DEFAULT_LIMIT = 50

    def __init__(self, db: AsyncSession):
        self.db = db

    async def post(self, text: Optional[str], target_city: Optional[str] = None) -> Notification:
        """Append a notification and commit it."""
        if not text or not text.strip():
            raise InvalidInput("text required")

        notification = Notification(text=text, target_city=target_city or ALL_CITIES)
        self.db.add(notification)
        await self.db.commit()

        logger.info(f"Notification #{notification.id} posted (target={notification.target_city})")
        return notification

    async def recent(self, limit: int = DEFAULT_LIMIT) -> Sequence[Notification]:
        """Newest notifications first, regardless of target city."""
        result = await self.db.execute(
            select(Notification)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        return result.scalars().all()
