"""
Product Domain Model

Represents a product of the storefront catalog.
"""
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.domain.common import DomainModel, Money

_url_adapter = TypeAdapter(HttpUrl)


def validate_image_url(value: Optional[str]) -> Optional[str]:
    """Accept None, an empty string, or a valid http(s) URL (kept as sent)"""
    if value is None or value == "":
        return value
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Must be a valid URL") from None
    return value


class ProductPublic(DomainModel):
    """Fields shown on public product listings"""
    id: int
    name: str
    description: str
    price: Money
    image_url: Optional[str] = None
    stock: int
    created_at: Optional[datetime] = None


class Product(ProductPublic):
    """
    Product domain model - full record, as seen by its seller and admins

    Fields:
        id: Internal product ID (primary key)
        name: Product name
        description: Product description
        price: Unit sale price
        image_url: Product image (optional)
        stock: Units available for sale
        created_by_id: User (seller/admin) that created the product
        created_at: When product was created
        updated_at: When product was last updated
    """
    created_by_id: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock <= 0


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=3, description="Name must be at least 3 characters long")
    description: str = Field(..., min_length=10, description="Description must be at least 10 characters long")
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Price must be a positive number")
    image_url: Optional[str] = Field(None, description="Product image URL (optional)")
    stock: int = Field(0, ge=0, description="Stock cannot be negative")

    check_image_url = field_validator("image_url")(validate_image_url)


class ProductUpdate(BaseModel):
    """Schema for updating an existing product (only sent fields change)"""
    name: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = Field(None, min_length=10)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    image_url: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)

    check_image_url = field_validator("image_url")(validate_image_url)
