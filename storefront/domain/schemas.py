# storefront/domain/schemas.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

#upper bound for the quantity of a single cart line
MAX_LINE_QTY = 999


class _RequestModel(BaseModel):
    """Request bodies reject unknown fields."""

    model_config = ConfigDict(extra="forbid")


# ---------- auth ----------

class SignupIn(_RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def email_has_at(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("email must contain @")
        return v


class LoginIn(_RequestModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=255)


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    token: str
    user: UserOut


class MeOut(BaseModel):
    user: UserOut


# ---------- catalog ----------

class ProductOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    price_cents: int
    image_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductListOut(BaseModel):
    products: List[ProductOut]


# ---------- cart ----------

class CartAddIn(_RequestModel):
    """Body of POST /api/cart/add."""

    product_id: int = Field(..., alias="productId", gt=0)
    qty: int = Field(..., ge=1, le=MAX_LINE_QTY)


class CartRemoveIn(_RequestModel):
    product_id: int = Field(..., alias="productId", gt=0)


class CartItemOut(BaseModel):
    product_id: int = Field(..., serialization_alias="productId")
    qty: int


class CartOut(BaseModel):
    items: List[CartItemOut]


class OkOut(BaseModel):
    ok: bool = True


# ---------- orders ----------

class OrderLineOut(BaseModel):
    product_id: int
    name: str
    qty: int
    price_cents: int
    subtotal_cents: int

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    created_at: datetime | None = None
    total_cents: int
    line_items: List[OrderLineOut]


class OrderEnvelope(BaseModel):
    order: OrderOut


class OrderListOut(BaseModel):
    orders: List[OrderOut]
