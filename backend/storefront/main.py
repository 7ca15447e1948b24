import json
import logging
import time
from decimal import Decimal, InvalidOperation
from typing import List, Optional

import stripe
import uvicorn
from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import config, crud, models, payments, schemas, tasks, utils
from .database import engine, get_db

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - [%(levelname)-7s] - %(message)s",
)
logger = logging.getLogger(__name__)

models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="Storefront API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
)

PROGRESS_POLL_SECONDS = 0.5


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        if request.url.path.startswith("/api"):
            duration = round((time.perf_counter() - start) * 1000)
            logger.info(
                "%s %s %s in %dms", request.method, request.url.path, status_code, duration
            )


# -------------------- ERRORS --------------------
@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(IntegrityError)
async def integrity_error(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=409, content={"detail": "Conflicts with an existing record"}
    )


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# -------------------- CATEGORIES --------------------
@app.get("/api/categories", response_model=List[schemas.CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return crud.get_categories(db)


@app.post("/api/categories", response_model=schemas.CategoryOut, status_code=201)
def create_category(category: schemas.CategoryCreate, db: Session = Depends(get_db)):
    return crud.create_category(db, category)


# -------------------- PRODUCTS --------------------
@app.get("/api/products", response_model=schemas.ProductPage)
def list_products(
    search: Optional[str] = None,
    category: Optional[str] = None,
    status: Optional[str] = None,
    sort: Optional[str] = None,
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    filters = {"search": search, "category": category, "status": status}
    items, total = crud.list_products(db, skip=offset, limit=limit, filters=filters, sort=sort)
    return {"products": items, "total": total}


@app.get("/api/products/slug/{slug}", response_model=schemas.ProductOut)
def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    product = crud.get_product_by_slug(db, slug)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.get("/api/products/{product_id}", response_model=schemas.ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = crud.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.post("/api/products", response_model=schemas.ProductOut, status_code=201)
def create_product(product: schemas.ProductCreate, db: Session = Depends(get_db)):
    return crud.create_product(db, product)


@app.put("/api/products/{product_id}", response_model=schemas.ProductOut)
def update_product(
    product_id: str, updates: schemas.ProductUpdate, db: Session = Depends(get_db)
):
    product = crud.update_product(db, product_id, updates.model_dump(exclude_unset=True))
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.delete("/api/products/{product_id}", status_code=204)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    crud.delete_product(db, product_id)
    return Response(status_code=204)


# -------------------- ORDERS --------------------
@app.get("/api/orders", response_model=schemas.OrderPage)
def list_orders(
    status: Optional[str] = None,
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    orders, total = crud.list_orders(db, skip=offset, limit=limit, status=status)
    return {"orders": orders, "total": total}


@app.get("/api/orders/number/{order_number}", response_model=schemas.OrderOut)
def get_order_by_number(order_number: str, db: Session = Depends(get_db)):
    order = crud.get_order_by_number(db, order_number)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@app.get("/api/orders/{order_id}", response_model=schemas.OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    order = crud.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@app.put("/api/orders/{order_id}/status", response_model=schemas.OrderOut)
def update_order_status(order_id: str, payload: dict = Body(...), db: Session = Depends(get_db)):
    status = payload.get("status")
    if not status or not isinstance(status, str):
        raise HTTPException(status_code=400, detail="Status is required")
    if not crud.update_order_status(db, order_id, status):
        raise HTTPException(status_code=404, detail="Order not found")
    return crud.get_order(db, order_id)


@app.post("/api/orders", response_model=schemas.OrderOut, status_code=201)
def create_order(req: schemas.OrderCreateRequest, db: Session = Depends(get_db)):
    order_number = utils.generate_order_number(lambda n: crud.order_number_taken(db, n))
    order_data = {**req.order.model_dump(), "order_number": order_number}
    items = [item.model_dump() for item in req.items]
    return crud.create_order(db, order_data, items)


# -------------------- PAYMENTS --------------------
def _positive_amount(value) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


@app.post("/api/create-payment-intent")
def create_payment_intent(payload: dict = Body(...)):
    if not payments.is_configured():
        raise HTTPException(
            status_code=503,
            detail="Payment processing is not configured. Please add Stripe API keys to enable checkout.",
        )

    amount = _positive_amount(payload.get("amount"))
    if amount is None:
        raise HTTPException(status_code=400, detail="Invalid amount")

    try:
        client_secret = payments.create_payment_intent(amount, payload.get("orderData"))
    except stripe.StripeError as e:
        logger.error("Stripe rejected payment intent: %s", e)
        raise HTTPException(status_code=502, detail=f"Error creating payment intent: {e}")
    return {"clientSecret": client_secret}


# -------------------- STATS --------------------
@app.get("/api/stats", response_model=schemas.DashboardStats)
def dashboard_stats(db: Session = Depends(get_db)):
    return crud.get_dashboard_stats(db)


# -------------------- SEEDING + PROGRESS --------------------
@app.post("/api/seed", status_code=202)
def seed_catalog(reset: bool = True):
    task = tasks.seed_catalog_task.apply_async(kwargs={"reset": reset})
    return {"task_id": task.id}


@app.get("/sse/progress/{task_id}")
def sse_progress(task_id: str):
    def event_stream():
        last = None
        while True:
            progress = tasks.get_progress(task_id)
            if progress != last:
                last = progress
                yield f"data: {json.dumps(progress)}\n\n"
                if progress and progress.get("status") in ("done", "error"):
                    break
            time.sleep(PROGRESS_POLL_SECONDS)

    return StreamingResponse(event_stream(), media_type="text/event-stream")


def run():
    uvicorn.run("storefront.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
