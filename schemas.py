"""
Database Schemas for the saree shop

Each record model maps to one MongoDB collection (users, products, orders).
Documents are stored with camelCase keys, the same keys the frontend sends,
so every model uses a camelCase alias generator and dumps ``by_alias``.
"""
from enum import Enum
from typing import Dict, List, Optional, Set

from email_validator import EmailNotValidError, validate_email
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MIN_SUB_IMAGES = 3


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        use_enum_values=True,
    )


class Role(str, Enum):
    admin = "admin"
    customer = "customer"


class OrderStatus(str, Enum):
    pending = "pending"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


# Only consulted when STRICT_ORDER_STATUS is on.
ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, Set[OrderStatus]] = {
    OrderStatus.pending: {OrderStatus.shipped, OrderStatus.cancelled},
    OrderStatus.shipped: {OrderStatus.delivered, OrderStatus.cancelled},
    OrderStatus.delivered: set(),
    OrderStatus.cancelled: set(),
}


# ----- Records -----

class User(CamelModel):
    name: str
    email: str
    password: str = Field(..., description="bcrypt hash, never serialized")
    role: Role = Role.customer


class Product(CamelModel):
    name: str
    description: str = Field(..., description="Short description shown on cards")
    detailed_description: str
    main_image: str = Field(..., description="Base64 / data-URL encoded image")
    sub_images: List[str] = Field(..., min_length=MIN_SUB_IMAGES)
    price: float = Field(..., ge=0)


class Order(CamelModel):
    product_id: str
    product_name: str
    price: float = Field(..., ge=0)
    customer_name: str
    customer_email: str
    phone: str
    alt_phone: Optional[str] = None
    address: str
    pincode: str
    city: str
    taluka: str
    status: str = OrderStatus.pending.value


# ----- Requests -----

class SignupRequest(CamelModel):
    name: str = Field(..., min_length=1)
    email: str
    password: str = Field(..., min_length=1)
    # the frontend sends the role as "type"
    role: Role = Field(Role.customer, validation_alias=AliasChoices("role", "type"))

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        # stored as typed; login and order lookups match on the raw string
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(str(e))
        return value


class LoginRequest(CamelModel):
    email: str
    password: str
    role: Optional[Role] = Field(None, validation_alias=AliasChoices("role", "type"))


class ProductFields(CamelModel):
    """Body of product create and update; required fields are checked by the catalog service."""

    name: Optional[str] = None
    description: Optional[str] = None
    detailed_description: Optional[str] = None
    main_image: Optional[str] = None
    sub_images: Optional[List[str]] = None
    price: Optional[float] = Field(None, ge=0)


class OrderFields(CamelModel):
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    phone: Optional[str] = None
    alt_phone: Optional[str] = None
    address: Optional[str] = None
    pincode: Optional[str] = None
    city: Optional[str] = None
    taluka: Optional[str] = None


class StatusChange(BaseModel):
    status: Optional[str] = None
