# mcstore/domain/schemas.py
from datetime import datetime
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

ProductId = int | str


class ProductRef(BaseModel):
    """Produkt tak jak przychodzi z frontu (znormalizowany albo surowy rekord)."""

    id: ProductId
    name: str | None = None
    title: str | None = None
    image_url: str | None = None
    images: List[str] | None = None
    display_price: float | None = None
    promo_price: float | None = None
    price: float | None = None

    model_config = ConfigDict(extra="allow")


class CartAddIn(BaseModel):
    uid: str = Field(..., min_length=1)
    product: ProductRef
    quantity: int = Field(1, gt=0, description="Ilosc (musi byc > 0)")


class CartQuantityIn(BaseModel):
    uid: str = Field(..., min_length=1)
    quantity: int = Field(..., description="<= 0 usuwa pozycje")


class CartAddOut(BaseModel):
    action: Literal["added", "updated"]
    quantity: int


class WishlistAddIn(BaseModel):
    uid: str = Field(..., min_length=1)
    product: ProductRef


class WishlistAddOut(BaseModel):
    action: Literal["added", "already_exists"]


class OrderItemIn(BaseModel):
    product_id: ProductId
    name: str | None = None
    quantity: int = Field(1, gt=0)
    price: float | None = None

    model_config = ConfigDict(extra="allow")


class OrderCreate(BaseModel):
    uid: str = Field(..., min_length=1)
    customer_name: str
    customer_email: str
    customer_phone: str
    items: List[OrderItemIn] = Field(..., min_length=1)
    delivery_street: str
    delivery_city: str
    delivery_state: str
    delivery_landmark: str = ""
    payment_method: str = "paystack"
    payment_ref: str = ""
    subtotal: float = Field(..., ge=0)
    delivery_fee: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)
    total: float = Field(..., ge=0)


class OrderStatusIn(BaseModel):
    status: str = Field(..., min_length=1)


class ReviewIn(BaseModel):
    uid: str = Field(..., min_length=1)
    user_name: str | None = None
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = None


class RecipientAddress(BaseModel):
    full_name: str | None = Field(None, alias="fullName")
    email: str | None = None
    phone: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class ShippingItem(BaseModel):
    name: str | None = None
    quantity: int = 1
    weight: float | None = None


class RatesRequest(BaseModel):
    recipient_address: RecipientAddress = Field(..., alias="recipientAddress")
    items: List[ShippingItem] = []
    total_weight: float | None = Field(0.5, alias="totalWeight")

    model_config = ConfigDict(populate_by_name=True)


class Rate(BaseModel):
    courier_id: str
    courier_name: str
    service_code: str = ""
    delivery_fee: float
    eta: str
    logo: str = ""


class RatesOut(BaseModel):
    rates: List[Rate]
    source: Literal["shipbubble", "fallback"]


class PaymentInitIn(BaseModel):
    email: str
    amount: float = Field(..., gt=0, description="Kwota w naira")
    order_id: str
    customer_name: str | None = None
    phone: str | None = None


class PaymentInitOut(BaseModel):
    authorization_url: str | None = None
    access_code: str | None = None
    reference: str


class SessionIn(BaseModel):
    uid: str = Field(..., min_length=1)
    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    login_at: datetime | None = None


class SessionOut(BaseModel):
    uid: str
    full_name: str
    email: str
    phone: str
    address: str
    login_at: datetime
    saved_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SessionFieldIn(BaseModel):
    field: str
    value: str


class CustomerUpdateIn(BaseModel):
    updates: Dict[str, Any]
