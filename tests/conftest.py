"""
Pytest configuration for the entire test suite.

Runs the API against an in-memory SQLite database that is
recreated for every test. Rate limiting is switched off.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from tradedesk.main import app
from tradedesk.database import Base, SessionLocal, engine


@pytest.fixture(autouse=True)
def fresh_database():
    """Drop and recreate every table"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """Create API client"""
    return TestClient(app)


@pytest.fixture
def rice(client):
    response = client.post("/products", json={"name": "Rice", "capital_per_kilo": 50})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def beans(client):
    response = client.post("/products", json={"name": "Beans", "capital_per_kilo": 80})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def customer_a(client):
    response = client.post("/customers", json={"name": "Customer A", "email": "a@example.com"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def customer_b(client):
    response = client.post("/customers", json={"name": "Customer B", "email": "b@example.com"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def make_sale(client):
    """Post a sale from (product, kilos, price) tuples"""
    def _make_sale(customer, lines, created_at=None, **extra):
        payload = {
            "customer_id": customer["id"],
            "items": [
                {"product_id": product["id"], "quantity": kilos, "price": price}
                for product, kilos, price in lines
            ],
            **extra,
        }
        if created_at is not None:
            payload["created_at"] = created_at
        return client.post("/sales", json=payload)

    return _make_sale
