# cartengine/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, List, Literal
from decimal import Decimal
from datetime import datetime


class ItemIn(BaseModel):
    """Body of add/remove requests."""

    # amount stays loose here, the service reports bad amounts as a validation error
    item_id: int = Field(..., gt=0, le=2_147_483_647, alias="itemId", description="Inventory item id")
    amount: Any = Field(..., description="Number of units, positive integer")

    model_config = ConfigDict(populate_by_name=True)


class AddItemOut(BaseModel):
    updated_stock: int
    cart_id: int


class RemoveItemOut(BaseModel):
    updated_stock: int
    remaining_in_cart: int


class CartLineOut(BaseModel):
    item_id: int
    title: str
    amount: int
    unit_price: Decimal
    line_total: Decimal


class CartContentsOut(BaseModel):
    cart_id: int | None = None
    lines: List[CartLineOut]
    total_price: Decimal


class CartOut(BaseModel):
    cart_id: int
    user_email: str
    total_price: Decimal
    enabled: bool

    model_config = ConfigDict(from_attributes=True)


class CartStatusOut(BaseModel):
    enabled: bool


class DisabledCartOut(BaseModel):
    cart_id: int


class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=100)
    role: Literal["User", "Admin"] = "User"


class UserRead(BaseModel):
    email: str
    role: str
    cart_id: int | None = None


class OrderCreate(BaseModel):
    payment_method: str | None = Field(None, max_length=50)


class OrderCreated(BaseModel):
    order_id: int


class OrderLineOut(BaseModel):
    item_id: int
    amount: int
    price: Decimal


class OrderOut(BaseModel):
    id: int
    user_email: str
    cart_id: int
    payment_method: str
    total: Decimal
    created_at: datetime
    lines: List[OrderLineOut]

    model_config = ConfigDict(from_attributes=True)
