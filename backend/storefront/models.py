# storefront/models.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from .database import Base

# JSONB on Postgres, plain JSON elsewhere (sqlite in tests)
JSONType = JSON().with_variant(JSONB, "postgresql")


def new_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class Category(Base):
    __tablename__ = "categories"
    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class Product(Base):
    __tablename__ = "products"
    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    compare_at_price = Column(Numeric(10, 2), nullable=True)
    sku = Column(String(100), nullable=False, index=True)
    category_id = Column(String(64), ForeignKey("categories.id"), nullable=True, index=True)
    status = Column(String(32), nullable=False, default="active", index=True)
    # not constrained to >= 0: order placement decrements without a check
    stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=0)
    image = Column(Text, nullable=True)
    images = Column(JSONType, nullable=True)
    weight = Column(Numeric(8, 2), nullable=True)
    dimensions = Column(String(64), nullable=True)
    tags = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class Order(Base):
    __tablename__ = "orders"
    id = Column(String(64), primary_key=True, default=new_id)
    order_number = Column(String(64), nullable=False, unique=True, index=True)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_name = Column(String(255), nullable=True)
    shipping_address = Column(JSONType, nullable=True)
    subtotal = Column(Numeric(10, 2), nullable=True)
    tax = Column(Numeric(10, 2), nullable=True)
    shipping = Column(Numeric(10, 2), nullable=True)
    total = Column(Numeric(10, 2), nullable=False)
    # free-form; no transition rules
    status = Column(String(64), nullable=False, default="pending", index=True)
    payment_intent_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(64), ForeignKey("orders.id"), nullable=False, index=True)
    # no FK: products may be deleted while their order history stays
    product_id = Column(String(64), nullable=True, index=True)
    # snapshot of the product at order time
    product_name = Column(String(255), nullable=True)
    product_sku = Column(String(100), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
