# storefront/crud.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas, utils

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "price-low": models.Product.price.asc(),
    "price-high": models.Product.price.desc(),
    "newest": models.Product.created_at.desc(),
    # no sales tracking yet, newest stands in for popularity
    "popular": models.Product.created_at.desc(),
}
DEFAULT_SORT = "newest"


# -------------------- CATEGORIES --------------------

def get_categories(db: Session):
    return db.query(models.Category).order_by(models.Category.name.asc()).all()


def create_category(db: Session, c: schemas.CategoryCreate):
    obj = models.Category(**c.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


# -------------------- PRODUCTS --------------------

def get_product(db: Session, product_id: str):
    return db.query(models.Product).filter(models.Product.id == product_id).first()


def get_product_by_slug(db: Session, slug: str):
    return db.query(models.Product).filter(models.Product.slug == slug).first()


def list_products(
    db: Session,
    skip: int = 0,
    limit: int = 50,
    filters: dict = None,
    sort: Optional[str] = None,
):
    q = db.query(models.Product)
    if filters:
        if filters.get("search"):
            q = q.filter(models.Product.name.icontains(filters["search"], autoescape=True))
        if filters.get("category"):
            q = q.filter(models.Product.category_id == filters["category"])
        if filters.get("status"):
            q = q.filter(models.Product.status == filters["status"])
    total = q.count()
    order_by = SORT_ORDERS.get(sort or DEFAULT_SORT, SORT_ORDERS[DEFAULT_SORT])
    items = q.order_by(order_by).offset(skip).limit(limit).all()
    return items, total


def create_product(db: Session, p: schemas.ProductCreate):
    obj = models.Product(**p.model_dump(), updated_at=models.utcnow())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info("Created product %s (%s)", obj.id, obj.sku)
    return obj


def update_product(db: Session, product_id: str, updates: dict):
    obj = get_product(db, product_id)
    if obj is None:
        return None
    for field, value in updates.items():
        setattr(obj, field, value)
    obj.updated_at = models.utcnow()
    db.commit()
    db.refresh(obj)
    logger.info("Updated product %s fields=%s", obj.id, sorted(updates))
    return obj


def delete_product(db: Session, product_id: str) -> bool:
    # order items keep their snapshot, nothing cascades
    n = db.query(models.Product).filter(models.Product.id == product_id).delete()
    db.commit()
    if n:
        logger.info("Deleted product %s", product_id)
    return bool(n)


# -------------------- ORDERS --------------------

def _with_items(db: Session, order: models.Order) -> schemas.OrderOut:
    rows = (
        db.query(models.OrderItem, models.Product)
        .outerjoin(models.Product, models.OrderItem.product_id == models.Product.id)
        .filter(models.OrderItem.order_id == order.id)
        .order_by(models.OrderItem.id.asc())
        .all()
    )
    items = []
    for item, product in rows:
        if product is not None:
            view = schemas.ProductOut.model_validate(product)
        else:
            view = schemas.ProductSnapshot(
                id=item.product_id, name=item.product_name, sku=item.product_sku
            )
        items.append(schemas.OrderItemOut.model_validate(item).model_copy(update={"product": view}))
    return schemas.OrderOut.model_validate(order).model_copy(update={"items": items})


def order_number_taken(db: Session, order_number: str) -> bool:
    return (
        db.query(models.Order.id).filter(models.Order.order_number == order_number).first()
        is not None
    )


def get_order(db: Session, order_id: str) -> Optional[schemas.OrderOut]:
    order = db.query(models.Order).filter(models.Order.id == order_id).first()
    if order is None:
        return None
    return _with_items(db, order)


def get_order_by_number(db: Session, order_number: str) -> Optional[schemas.OrderOut]:
    order = db.query(models.Order).filter(models.Order.order_number == order_number).first()
    if order is None:
        return None
    return _with_items(db, order)


def list_orders(
    db: Session, skip: int = 0, limit: int = 50, status: Optional[str] = None
) -> Tuple[List[schemas.OrderOut], int]:
    q = db.query(models.Order)
    if status:
        q = q.filter(models.Order.status == status)
    total = q.count()
    orders = q.order_by(models.Order.created_at.desc()).offset(skip).limit(limit).all()
    return [_with_items(db, o) for o in orders], total


def create_order(db: Session, order_data: dict, items: List[dict]) -> schemas.OrderOut:
    """
    Place an order: insert the order, its items, and take the ordered
    quantities off product stock.

    Everything happens in one transaction and is rolled back together if
    any statement fails. Stock is decremented without a sufficiency check,
    so it can go negative.
    """
    try:
        order = models.Order(**order_data)
        db.add(order)
        db.flush()

        rows = []
        for item in items:
            data = dict(item)
            if not data.get("product_name") or not data.get("product_sku"):
                product = get_product(db, data["product_id"])
                if product is not None:
                    data["product_name"] = data.get("product_name") or product.name
                    data["product_sku"] = data.get("product_sku") or product.sku
            if data.get("total") is None:
                data["total"] = utils.line_total(data["price"], data["quantity"])
            rows.append(models.OrderItem(order_id=order.id, **data))
        db.add_all(rows)
        db.flush()

        now = models.utcnow()
        for row in rows:
            db.query(models.Product).filter(models.Product.id == row.product_id).update(
                {
                    models.Product.stock: models.Product.stock - row.quantity,
                    models.Product.updated_at: now,
                },
                synchronize_session=False,
            )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Created order %s with %d item(s)", order.order_number, len(rows))
    return _with_items(db, order)


def update_order_status(db: Session, order_id: str, status: str):
    obj = db.query(models.Order).filter(models.Order.id == order_id).first()
    if obj is None:
        return None
    obj.status = status
    obj.updated_at = models.utcnow()
    db.commit()
    db.refresh(obj)
    logger.info("Order %s status -> %s", obj.order_number, status)
    return obj


# -------------------- STATS --------------------

def get_dashboard_stats(db: Session) -> dict:
    revenue, completed = (
        db.query(func.coalesce(func.sum(models.Order.total), 0), func.count(models.Order.id))
        .filter(models.Order.status == "completed")
        .one()
    )
    customers = db.query(func.count(func.distinct(models.Order.customer_email))).scalar()
    low_stock = (
        db.query(func.count(models.Product.id))
        .filter(models.Product.stock <= models.Product.min_stock)
        .scalar()
    )
    return {
        "revenue": float(revenue or 0),
        "orders": completed or 0,
        "customers": customers or 0,
        "low_stock": low_stock or 0,
    }
