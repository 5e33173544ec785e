"""
Address Book

Saved delivery addresses per user. Append-only: addresses are never
edited or removed, and only the most recent ones are returned.
"""

import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tiffin.models import Address

logger = logging.getLogger(__name__)


class AddressBook:

    DEFAULT_LIMIT = 10

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(
        self,
        user_id: int,
        name: Optional[str] = None,
        line: Optional[str] = None,
        landmark: Optional[str] = None,
        pin: Optional[str] = None,
        city: Optional[str] = None,
    ) -> Address:
        address = Address(
            user_id=user_id,
            name=name or "",
            line=line or "",
            landmark=landmark or "",
            pin=pin or "",
            city=city or "",
        )
        self.db.add(address)
        await self.db.commit()

        logger.info(f"Address #{address.id} saved for user #{user_id}")
        return address

    async def recent(self, user_id: int, limit: int = DEFAULT_LIMIT) -> Sequence[Address]:
        result = await self.db.execute(
            select(Address)
            .where(Address.user_id == user_id)
            .order_by(Address.created_at.desc(), Address.id.desc())
            .limit(limit)
        )
        return result.scalars().all()
