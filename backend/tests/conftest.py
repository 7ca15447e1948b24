import os

# must be set before storefront.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("STRIPE_SECRET_KEY", None)

from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront import models, tasks
from storefront.database import Base, get_db
from storefront.main import app

engine = create_engine(
    "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def fake_redis(monkeypatch):
    r = fakeredis.FakeRedis(decode_responses=True)
    monkeypatch.setattr(tasks, "r", r)
    return r


@pytest.fixture
def make_product(db):
    def _make(id="prod-1", name="Cotton T-Shirt", stock=10, min_stock=0, **kw):
        fields = {
            "slug": kw.pop("slug", id),
            "sku": kw.pop("sku", f"SKU-{id}"),
            "price": kw.pop("price", Decimal("24.99")),
            "status": kw.pop("status", "active"),
        }
        product = models.Product(id=id, name=name, stock=stock, min_stock=min_stock, **fields, **kw)
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def make_category(db):
    def _make(id, name, slug=None):
        category = models.Category(id=id, name=name, slug=slug or id)
        db.add(category)
        db.commit()
        return category

    return _make
