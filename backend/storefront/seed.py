# storefront/seed.py
import logging
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.orm import Session

from . import models

logger = logging.getLogger(__name__)

CATEGORIES = [
    {"id": "cat-1", "name": "Electronics", "slug": "electronics",
     "description": "Electronic devices and gadgets"},
    {"id": "cat-2", "name": "Clothing", "slug": "clothing",
     "description": "Fashion and apparel"},
    {"id": "cat-3", "name": "Home & Garden", "slug": "home-garden",
     "description": "Home improvement and garden supplies"},
    {"id": "cat-4", "name": "Sports", "slug": "sports",
     "description": "Sports equipment and accessories"},
]

_IMG = "https://images.unsplash.com/photo-{}?w=400"

PRODUCTS = [
    {"id": "prod-1", "name": "Wireless Headphones", "slug": "wireless-headphones",
     "description": "High-quality wireless headphones with noise cancellation",
     "price": Decimal("199.99"), "sku": "WH-001", "category_id": "cat-1",
     "stock": 50, "min_stock": 10, "image": _IMG.format("1505740420928-5e560c06d30e"),
     "weight": Decimal("0.3"), "dimensions": "20x15x8",
     "tags": ["electronics", "audio", "wireless"]},
    {"id": "prod-2", "name": "Smart Watch", "slug": "smart-watch",
     "description": "Feature-rich smartwatch with health monitoring",
     "price": Decimal("299.99"), "sku": "SW-002", "category_id": "cat-1",
     "stock": 30, "min_stock": 5, "image": _IMG.format("1523275335684-37898b6baf30"),
     "weight": Decimal("0.1"), "dimensions": "4x4x1",
     "tags": ["electronics", "wearable", "smart"]},
    {"id": "prod-3", "name": "Cotton T-Shirt", "slug": "cotton-t-shirt",
     "description": "Comfortable 100% cotton t-shirt in various colors",
     "price": Decimal("24.99"), "sku": "TS-003", "category_id": "cat-2",
     "stock": 100, "min_stock": 20, "image": _IMG.format("1521572163474-6864f9cf17ab"),
     "weight": Decimal("0.2"), "dimensions": "30x25x2",
     "tags": ["clothing", "cotton", "casual"]},
    {"id": "prod-4", "name": "Running Shoes", "slug": "running-shoes",
     "description": "Comfortable running shoes with excellent cushioning",
     "price": Decimal("129.99"), "sku": "RS-004", "category_id": "cat-4",
     "stock": 75, "min_stock": 15, "image": _IMG.format("1542291026-7eec264c27ff"),
     "weight": Decimal("0.8"), "dimensions": "35x25x15",
     "tags": ["sports", "shoes", "running"]},
    {"id": "prod-5", "name": "Garden Tools Set", "slug": "garden-tools-set",
     "description": "Complete set of essential garden tools",
     "price": Decimal("89.99"), "sku": "GT-005", "category_id": "cat-3",
     "stock": 25, "min_stock": 5, "image": _IMG.format("1416879595882-3373a0480b5b"),
     "weight": Decimal("2.5"), "dimensions": "50x30x10",
     "tags": ["garden", "tools", "outdoor"]},
    {"id": "prod-6", "name": "Laptop Stand", "slug": "laptop-stand",
     "description": "Adjustable laptop stand for better ergonomics",
     "price": Decimal("49.99"), "sku": "LS-006", "category_id": "cat-1",
     "stock": 40, "min_stock": 8, "image": _IMG.format("1527864550417-7f91c4c76d3c"),
     "weight": Decimal("0.6"), "dimensions": "30x20x15",
     "tags": ["electronics", "accessories", "laptop"]},
]


def seed_catalog(
    db: Session,
    reset: bool = True,
    progress: Optional[Callable[[int, str], None]] = None,
) -> dict:
    """Load the demo catalog. With ``reset`` existing products and categories go first."""
    report = progress or (lambda percent, status: None)

    if reset:
        report(10, "clearing_catalog")
        db.query(models.Product).delete()
        db.query(models.Category).delete()
        db.flush()

    report(30, "adding_categories")
    db.add_all(models.Category(**c) for c in CATEGORIES)
    db.flush()

    report(60, "adding_products")
    now = models.utcnow()
    db.add_all(
        models.Product(**p, status="active", images=[p["image"]], updated_at=now)
        for p in PRODUCTS
    )
    db.commit()

    logger.info("Seeded %d categories and %d products", len(CATEGORIES), len(PRODUCTS))
    return {"categories": len(CATEGORIES), "products": len(PRODUCTS)}
