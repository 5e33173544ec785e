"""
Pydantic Schemas for Request/Response Validation

Request bodies keep required fields optional at the schema level so the
services can answer with their own "missing field" errors.

Author: Mumma Tiffin Team
Version: 1.0.0
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tiffin.models import ALL_CITIES, Order
from tiffin.services.policy import parse_snapshot


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RegisterRequest(BaseModel):
    email: Optional[str] = Field(None, examples=["asha@example.com"])
    password: Optional[str] = Field(None, examples=["s3cret"])
    name: Optional[str] = Field("", max_length=100, examples=["Asha"])


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AdminCreateRequest(BaseModel):
    email: Optional[str] = Field(None, examples=["pune@mummatiffin.com"])
    password: Optional[str] = None
    name: Optional[str] = Field("", max_length=100)
    city: Optional[str] = Field(None, max_length=50, examples=["Pune", ALL_CITIES])


class MenuItemCreate(BaseModel):
    """New menu item. `id` is generated when omitted."""
    id: Optional[str] = Field(None, max_length=64, examples=["l2"])
    meal: Optional[str] = Field(None, max_length=20, examples=["lunch"])
    name_en: Optional[str] = Field(None, max_length=200, examples=["Rajma Chawal"])
    name_hi: Optional[str] = Field(None, max_length=200)
    price: int = Field(0, ge=0, examples=[90])
    description_en: str = ""
    description_hi: str = ""
    city: str = Field(ALL_CITIES, max_length=50)
    available_from: str = Field("", max_length=5, examples=["11:00"])
    available_to: str = Field("", max_length=5, examples=["14:00"])
    active: bool = True


class MenuItemUpdate(BaseModel):
    """
    Partial update of a menu item.

    Only the listed fields are accepted. A supplied `id` is tolerated but
    never applied.
    """
    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = None
    meal: Optional[str] = Field(None, max_length=20)
    name_en: Optional[str] = Field(None, max_length=200)
    name_hi: Optional[str] = Field(None, max_length=200)
    price: Optional[int] = Field(None, ge=0)
    description_en: Optional[str] = None
    description_hi: Optional[str] = None
    city: Optional[str] = Field(None, max_length=50)
    available_from: Optional[str] = Field(None, max_length=5)
    available_to: Optional[str] = Field(None, max_length=5)
    active: Optional[bool] = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied with a value, identifier excluded."""
        fields = self.model_dump(exclude_unset=True, exclude={"id"})
        return {k: v for k, v in fields.items() if v is not None}


class NotificationCreate(BaseModel):
    text: Optional[str] = Field(None, examples=["Diwali specials this week!"])
    target_city: Optional[str] = Field(ALL_CITIES, max_length=50)


class OrderCreate(BaseModel):
    """Order placed by a logged-in user. Stored verbatim as the snapshot."""
    items: Optional[List[dict[str, Any]]] = Field(
        None, examples=[[{"id": "l1", "price": 85, "qty": 1}]]
    )
    total: int = Field(0, ge=0, examples=[85])
    address: Optional[dict[str, Any]] = Field(
        None, examples=[{"name": "Home", "line": "12 MG Road", "city": "Delhi"}]
    )
    date: Optional[str] = Field(None, examples=["2026-10-20"])
    time: Optional[str] = Field(None, examples=["13:00"])
    meal: Optional[str] = Field(None, examples=["lunch"])


class OrderStatusUpdate(BaseModel):
    status: Optional[str] = Field(None, examples=["preparing"])


class AddressCreate(BaseModel):
    name: str = Field("", max_length=100)
    line: str = Field("", max_length=255)
    landmark: str = Field("", max_length=255)
    pin: str = Field("", max_length=10)
    city: str = Field("", max_length=50)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class OkResponse(BaseModel):
    ok: bool = True


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str


class AuthResponse(BaseModel):
    user: UserPublic
    token: str


class AdminPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    city: str
    created_at: Optional[datetime] = None


class AdminAuthResponse(BaseModel):
    admin: AdminPublic
    token: str


class AdminListResponse(BaseModel):
    admins: List[AdminPublic]


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    meal: Optional[str]
    name_en: Optional[str]
    name_hi: Optional[str]
    price: int
    description_en: str
    description_hi: str
    city: str
    available_from: str
    available_to: str
    active: bool


class MenuListResponse(BaseModel):
    menu: List[MenuItemResponse]


class MenuCreateResponse(OkResponse):
    id: str


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    target_city: str
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]


class OrderCreateResponse(OkResponse):
    model_config = ConfigDict(populate_by_name=True)

    order_id: int = Field(..., alias="orderId")


class OrderResponse(BaseModel):
    """Order with its snapshot unpacked. Snapshot fields are null when unreadable."""
    id: int
    user_id: int
    user_email: Optional[str] = None
    total: int
    status: str
    created_at: datetime
    items: Optional[List[Any]] = None
    address: Optional[dict[str, Any]] = None
    date: Optional[str] = None
    time: Optional[str] = None
    meal: Optional[str] = None

    @classmethod
    def from_order(cls, order: Order, user_email: Optional[str] = None) -> "OrderResponse":
        snapshot = parse_snapshot(order.info) or {}
        items = snapshot.get("items")
        address = snapshot.get("address")
        return cls(
            id=order.id,
            user_id=order.user_id,
            user_email=user_email,
            total=order.total,
            status=order.status,
            created_at=order.created_at,
            items=items if isinstance(items, list) else None,
            address=address if isinstance(address, dict) else None,
            date=_as_text(snapshot.get("date")),
            time=_as_text(snapshot.get("time")),
            meal=_as_text(snapshot.get("meal")),
        )


class OrderListResponse(BaseModel):
    orders: List[OrderResponse]


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    line: str
    landmark: str
    pin: str
    city: str
    created_at: datetime


class AddressListResponse(BaseModel):
    addresses: List[AddressResponse]


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[Any] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    timestamp: datetime


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)
