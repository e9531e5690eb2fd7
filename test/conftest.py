"""
Pytest configuration and fixtures.

Every test gets a fresh app on in-memory SQLite with roles and the admin
account seeded, and a clock frozen at ``TODAY``.
"""
from datetime import date

import pytest

from app import create_app
from config.db import SessionLocal
from config.settings import TestConfig
from logic.reservations.availability import AvailabilityEngine
from logic.reservations.booking import BookingService
from logic.reservations.ledger import ReservationLedger
from logic.tables.registry import TableRegistry
from models import User, ROLE_CUSTOMER, ROLE_IDS

TODAY = date(2025, 1, 15)
BOOKING_DAY = date(2025, 1, 20)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    app.extensions["db_engine"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    session = SessionLocal()
    yield session
    session.close()


def make_customer(db, name, email):
    user = User(name=name, email=email, password="not-a-real-hash", role_id=ROLE_IDS[ROLE_CUSTOMER])
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def customer(db):
    return make_customer(db, "Ana Torres", "ana@test.local")


@pytest.fixture
def other_customer(db):
    return make_customer(db, "Luis Pardo", "luis@test.local")


@pytest.fixture
def admin_user(db):
    return db.query(User).filter_by(email=TestConfig.ADMIN_EMAIL).one()


@pytest.fixture
def registry(db):
    return TableRegistry(db)


@pytest.fixture
def ledger(db):
    return ReservationLedger(db)


@pytest.fixture
def availability(db):
    return AvailabilityEngine(db)


@pytest.fixture
def booking(db):
    return BookingService(db, today=lambda: TODAY)


# ------------------------------------------------------------------ HTTP

def login(client, email, password):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.get_json()
    return {"Authorization": f"Bearer {response.get_json()['data']['token']}"}


def register(client, name, email, password="secret123"):
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.get_json()
    return {"Authorization": f"Bearer {response.get_json()['data']['token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, TestConfig.ADMIN_EMAIL, TestConfig.ADMIN_PASSWORD)


@pytest.fixture
def customer_headers(client):
    return register(client, "Ana Torres", "ana@test.local")


@pytest.fixture
def other_customer_headers(client):
    return register(client, "Luis Pardo", "luis@test.local")
