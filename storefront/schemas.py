"""
Entity and request schemas.

Fields are snake_case everywhere inside the service; JSON responses use camelCase
aliases (userName, imageUrls, totalAmount, ...). Row dicts from the relational
store validate straight into these models because column names are snake_case.
"""
from datetime import datetime, timezone
from typing import Annotated, List, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    # CURRENT_TIMESTAMP columns come back naive but hold UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserPublic(CamelModel):
    id: int
    email: str
    name: str
    created_at: Optional[UtcDatetime] = None


class AuthUser(CamelModel):
    """Identity carried in the access token."""
    id: int
    email: str
    name: str


class Product(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: int
    image_url: Optional[str] = None
    category: Optional[str] = None
    stock: int = 0
    created_at: Optional[UtcDatetime] = None


class CartItem(CamelModel):
    id: int
    product_id: int
    quantity: int


class CartLine(CamelModel):
    """Cart row joined with the current product snapshot."""
    id: int
    product_id: int
    quantity: int
    product_name: str
    product_price: int
    product_image_url: Optional[str] = None
    stock: int


class OrderItem(CamelModel):
    id: Optional[int] = None
    order_id: Optional[int] = None
    product_id: int
    product_name: str
    quantity: int
    price: int


class Order(CamelModel):
    id: int
    user_id: int
    total_amount: int
    status: str
    created_at: Optional[UtcDatetime] = None
    items: List[OrderItem] = Field(default_factory=list)


class ReviewInput(CamelModel):
    product_id: int
    user_id: int
    user_name: str
    rating: int = Field(..., ge=1, le=5)
    content: str = Field(..., min_length=1)
    image_urls: List[str] = Field(default_factory=list)


class Review(CamelModel):
    # integer for the relational store, UUID string for DynamoDB; treat as opaque
    id: Union[int, str]
    product_id: int
    user_id: int
    user_name: str
    rating: int
    content: Optional[str] = None
    image_urls: List[str] = Field(default_factory=list)
    created_at: UtcDatetime


class UploadGrant(CamelModel):
    upload_url: str
    file_url: str


# Request bodies

class SignupRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class CartAddRequest(CamelModel):
    product_id: Optional[int] = None
    quantity: int = 1


class CartUpdateRequest(CamelModel):
    quantity: Optional[int] = None


class ReviewCreateRequest(CamelModel):
    rating: Optional[int] = None
    content: Optional[str] = None
    image_urls: List[str] = Field(default_factory=list)


class PresignedRequest(CamelModel):
    file_name: Optional[str] = None
    file_type: Optional[str] = None
