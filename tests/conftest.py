import os

# must be set before storefront modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from storefront.api import create_app
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.seed import init_schema, seed_products
from storefront.data.models.product import ProductModel
from tests.helpers import auth_headers, signup


@pytest.fixture(autouse=True)
def setup_db():
    """Fresh schema for every test."""
    Base.metadata.drop_all(bind=engine)
    init_schema(engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = SessionLocal()
    yield db
    db.close()


@pytest.fixture
def test_client():
    with TestClient(create_app()) as client:
        yield client


@pytest.fixture
def products():
    """Demo catalog, as a list of dicts ordered by id."""
    with SessionLocal() as db:
        seed_products(db)
        rows = db.execute(select(ProductModel).order_by(ProductModel.id)).scalars().all()
        return [
            {"id": p.id, "name": p.name, "price_cents": p.price_cents}
            for p in rows
        ]


@pytest.fixture
def count_rows():
    def _count(model) -> int:
        with SessionLocal() as db:
            return db.execute(select(func.count()).select_from(model)).scalar_one()

    return _count


@pytest.fixture
def user(test_client):
    """Signed-up user: {"token", "user", "headers"}."""
    data = signup(test_client)
    data["headers"] = auth_headers(data["token"])
    return data
