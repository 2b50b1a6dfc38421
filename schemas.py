"""
Database Schemas for the FAM Sports store

Each Pydantic model corresponds to one MongoDB collection.
Collection name is the lowercase of the class name.

The *Update models are the partial bodies accepted by PUT/PATCH routes: every
field is optional, but whatever is supplied goes through the same checks as
on create. Numeric fields accept numbers or numeric text ("19.99").
"""
from typing import Annotated, List, Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from errors import ValidationError

Text = Annotated[str, Field(min_length=1)]

ProductCategory = Literal["sports", "retro", "home-kit", "player-edition", "football-boots", "none"]
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
OrderChannel = Literal["website", "bkash"]
Role = Literal["user", "admin"]


class Document(BaseModel):
    # JSON has no inf/nan
    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)


def _blank_discount(v):
    # "" / null discount means no discount
    if v is None or (isinstance(v, str) and not v.strip()):
        return 0
    return v


# ----------------------- Catalog -----------------------
class Product(Document):
    name: Text
    model: Text = Field(..., description="Model / SKU label")
    price: float = Field(..., ge=0)
    discount: float = Field(0, ge=0)
    image: Text = Field(..., description="Image URL")
    description: Text
    category: ProductCategory

    @field_validator("discount", mode="before")
    @classmethod
    def _discount(cls, v):
        return _blank_discount(v)


class ProductUpdate(Document):
    name: Optional[Text] = None
    model: Optional[Text] = None
    price: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    image: Optional[Text] = None
    description: Optional[Text] = None
    category: Optional[ProductCategory] = None

    @field_validator("discount", mode="before")
    @classmethod
    def _discount(cls, v):
        if isinstance(v, str) and not v.strip():
            return 0
        return v


class Comboproduct(Document):
    name: Text
    model: Text
    price: float = Field(..., ge=0)
    discount: float = Field(0, ge=0)
    description: Text
    images: List[Text] = Field(..., min_length=1, description="Image URLs, at least one")

    @field_validator("discount", mode="before")
    @classmethod
    def _discount(cls, v):
        return _blank_discount(v)


class ComboproductUpdate(Document):
    name: Optional[Text] = None
    model: Optional[Text] = None
    price: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    description: Optional[Text] = None
    images: Optional[List[Text]] = Field(None, min_length=1)

    @field_validator("discount", mode="before")
    @classmethod
    def _discount(cls, v):
        if isinstance(v, str) and not v.strip():
            return 0
        return v


class Banner(Document):
    image: Text = Field(..., description="Image URL")
    caption: Text


class BannerUpdate(Document):
    image: Optional[Text] = None
    caption: Optional[Text] = None


# ----------------------- List filters -----------------------
class NoFilter(Document):
    pass


class ProductFilter(Document):
    category: Optional[ProductCategory] = None


# ----------------------- Orders -----------------------
class OrderCreate(Document):
    productId: Text
    productName: Text
    quantity: int = Field(..., ge=1)
    totalPrice: float = Field(..., ge=0)
    buyerName: Text
    buyerEmail: EmailStr
    phone: Text
    address: Text
    transactionId: Optional[str] = None
    orderedBy: OrderChannel = "website"

    @field_validator("productId")
    @classmethod
    def _product_ref(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError("Invalid product ID format")
        return v

    @field_validator("orderedBy", mode="before")
    @classmethod
    def _default_channel(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return "website"
        return v


class Order(OrderCreate):
    status: OrderStatus = "pending"


class OrderPatch(Document):
    """Only the fields present in the request body are written."""

    status: Optional[OrderStatus] = None
    transactionId: Optional[str] = None

    @model_validator(mode="after")
    def _has_changes(self):
        if not self.model_fields_set & {"status", "transactionId"}:
            raise ValueError("Provide status and/or transactionId to update")
        if "status" in self.model_fields_set and self.status is None:
            raise ValueError("status cannot be null")
        return self

    def changes(self) -> dict:
        return {k: getattr(self, k) for k in ("status", "transactionId") if k in self.model_fields_set}


# ----------------------- Users -----------------------
class User(Document):
    name: Text = Field(..., description="Full name")
    photo: Optional[str] = Field(None, description="Avatar URL")
    phone: Optional[str] = None
    email: EmailStr
    password: Text = Field(..., description="Stored as submitted (plaintext)")
    role: Role = "user"


_EMAIL = TypeAdapter(EmailStr)


def normalize_email(value: Optional[str]) -> str:
    """Bring a query-string email into the form EmailStr stored it in."""
    if not value or not value.strip():
        raise ValidationError("Query parameter 'email' is required", field="email")
    try:
        return _EMAIL.validate_python(value.strip())
    except PydanticValidationError as exc:
        raise ValidationError(f"'{value}' is not a valid email address", field="email") from exc
