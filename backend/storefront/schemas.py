# storefront/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# bounds of a 32-bit INTEGER column
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


class CamelModel(BaseModel):
    """JSON uses camelCase keys, Python code uses snake_case."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---- Categories ----

class CategoryBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryOut(CategoryBase):
    id: str
    created_at: Optional[datetime] = None


# ---- Products ----

ProductStatus = Literal["active", "inactive"]


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    compare_at_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    sku: str = Field(..., min_length=1, max_length=100)
    category_id: Optional[str] = Field(None, max_length=64)
    status: ProductStatus = "active"
    stock: int = Field(0, ge=INT_MIN, le=INT_MAX)
    min_stock: int = Field(0, ge=0, le=INT_MAX)
    image: Optional[str] = None
    images: Optional[List[str]] = None
    weight: Optional[Decimal] = Field(None, ge=0, max_digits=8, decimal_places=2)
    dimensions: Optional[str] = Field(None, max_length=64)
    tags: Optional[List[str]] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    compare_at_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    sku: Optional[str] = Field(None, min_length=1, max_length=100)
    category_id: Optional[str] = Field(None, max_length=64)
    status: Optional[ProductStatus] = None
    stock: Optional[int] = Field(None, ge=INT_MIN, le=INT_MAX)
    min_stock: Optional[int] = Field(None, ge=0, le=INT_MAX)
    image: Optional[str] = None
    images: Optional[List[str]] = None
    weight: Optional[Decimal] = Field(None, ge=0, max_digits=8, decimal_places=2)
    dimensions: Optional[str] = Field(None, max_length=64)
    tags: Optional[List[str]] = None

    @field_validator("name", "slug", "price", "sku", "status", "stock", "min_stock")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ProductOut(ProductBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductSnapshot(CamelModel):
    """Stand-in for a product that no longer exists, built from the order item."""
    id: Optional[str] = None
    name: Optional[str] = None
    sku: Optional[str] = None


class ProductPage(CamelModel):
    products: List[ProductOut]
    total: int


# ---- Orders ----

class OrderCreate(CamelModel):
    customer_email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    customer_name: Optional[str] = Field(None, max_length=255)
    shipping_address: Optional[Dict[str, Any]] = None
    subtotal: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    tax: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    shipping: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    total: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    status: str = Field("pending", min_length=1, max_length=64)
    payment_intent_id: Optional[str] = Field(None, max_length=255)


class OrderItemCreate(CamelModel):
    product_id: str = Field(..., min_length=1, max_length=64)
    product_name: Optional[str] = Field(None, max_length=255)
    product_sku: Optional[str] = Field(None, max_length=100)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    quantity: int = Field(..., gt=0, le=INT_MAX)
    total: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class OrderCreateRequest(CamelModel):
    order: OrderCreate
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderItemOut(CamelModel):
    id: int
    order_id: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    price: Decimal
    quantity: int
    total: Decimal
    product: Optional[Union[ProductOut, ProductSnapshot]] = None


class OrderOut(CamelModel):
    id: str
    order_number: str
    customer_email: str
    customer_name: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    subtotal: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    shipping: Optional[Decimal] = None
    total: Decimal
    status: str
    payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemOut] = []


class OrderPage(CamelModel):
    orders: List[OrderOut]
    total: int


# ---- Stats ----

class DashboardStats(CamelModel):
    revenue: float
    orders: int
    customers: int
    low_stock: int
