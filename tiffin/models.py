"""
SQLAlchemy Database Models

Tables for accounts, menu, orders, saved addresses and notifications.

Author: Mumma Tiffin Team
Version: 1.0.0
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from tiffin.database import Base

ALL_CITIES = "All"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, enum.Enum):
    """Order status labels shown to customers and administrators."""
    PENDING = "pending"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out for delivery"
    DELIVERED = "delivered"


class User(Base):
    """Registered customer."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<User #{self.id} {self.email}>"


class Admin(Base):
    """
    Administrator bound to a city scope.

    A scope of "All" sees and modifies resources of every city.
    """
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False, default="")
    city = Column(String(50), nullable=False, default=ALL_CITIES)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Admin #{self.id} {self.email} ({self.city})>"


class MenuItem(Base):
    """
    Dish offered for one meal, in one city or in every city.

    The availability window is advisory and never enforced by the server.
    """
    __tablename__ = "menu"

    id = Column(String(64), primary_key=True)
    meal = Column(String(20), nullable=True, index=True)
    name_en = Column(String(200), nullable=True)
    name_hi = Column(String(200), nullable=True)
    price = Column(Integer, nullable=False, default=0)  # minor units
    description_en = Column(Text, nullable=False, default="")
    description_hi = Column(Text, nullable=False, default="")
    city = Column(String(50), nullable=False, default=ALL_CITIES)
    available_from = Column(String(5), nullable=False, default="")
    available_to = Column(String(5), nullable=False, default="")
    active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<MenuItem {self.id} {self.meal} ({self.city})>"


class Order(Base):
    """
    Customer order.

    `info` holds the JSON snapshot (items, address, date, time, meal) taken
    when the order was placed; only `status` changes afterwards. Status is
    kept as free text so rows written with unknown labels still load.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    total = Column(Integer, nullable=False, default=0)
    info = Column(Text, nullable=False)
    status = Column(String(32), nullable=False, default=OrderStatus.PENDING.value, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Order #{self.id} - user {self.user_id} - {self.status}>"


class Address(Base):
    """Saved delivery address. Append-only."""
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False, default="")
    line = Column(String(255), nullable=False, default="")
    landmark = Column(String(255), nullable=False, default="")
    pin = Column(String(10), nullable=False, default="")
    city = Column(String(50), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class Notification(Base):
    """
    Announcement in the public feed.

    `target_city` is informational; reads are never filtered by it.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    text = Column(Text, nullable=False)
    target_city = Column(String(50), nullable=False, default=ALL_CITIES)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<Notification #{self.id} -> {self.target_city}>"
