from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

MAX_CUSTOM_MESSAGE_LENGTH = 500

UNKNOWN_CUSTOMER = "Unknown"
NO_EMAIL = "No email provided"
NO_ADDRESS = "No address provided"


class Product(BaseModel):
    id: str
    name: str
    description: str = ""
    price: float = Field(..., ge=0)
    category: str = ""
    images: List[str] = []
    colors: List[str] = []
    sizes: List[str] = []
    production_days: int = 0


class CartItem(BaseModel):
    product_id: str
    name: str
    price: float = Field(..., ge=0)
    color: str
    size: str
    custom_message: Optional[str] = Field(None, max_length=MAX_CUSTOM_MESSAGE_LENGTH)

    @field_validator("custom_message")
    @classmethod
    def blank_message_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Order(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    customer_name: str = UNKNOWN_CUSTOMER
    customer_email: str = NO_EMAIL
    customer_address: str = NO_ADDRESS
    items: List[CartItem]
    total: float
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    payment_id: str


class PaymentResult(BaseModel):
    success: bool
    error: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    name: Optional[str] = None
    consent_required: bool = False
    order_id: Optional[str] = None
    transaction_hash: Optional[str] = None


class AddToCartRequest(BaseModel):
    product_id: str
    color: str
    size: str
    custom_message: Optional[str] = Field(None, max_length=MAX_CUSTOM_MESSAGE_LENGTH)


class CheckoutRequest(BaseModel):
    accepted_privacy: bool = False
    request_email: bool = True
    request_address: bool = True


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
