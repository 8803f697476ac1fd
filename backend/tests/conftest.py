import pytest
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from crm.database import Base, get_db
from crm.main import app
from crm.models.user import User
from crm.models.office import Office
from crm.models.complex_object import ComplexObject
from crm.models.contract import Contract

TEST_DB_URL = "sqlite:///./test_crm.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "root": User(email="root@crm.test", first_name="Root", last_name="User", role="SUPER_ADMIN"),
        "admin": User(email="admin@crm.test", first_name="Admin", last_name="User", role="ADMIN"),
        "manager": User(email="manager@crm.test", first_name="Manager", last_name="User", role="MANAGER"),
        "customer": User(email="customer@crm.test", first_name="Shop", last_name="Customer", role="CUSTOMER"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_offices(db):
    offices = [
        Office(name="Central", prefix="C", sort_order=1),
        Office(name="Garden", prefix="G", sort_order=2),
    ]
    db.add_all(offices)
    db.commit()
    for o in offices:
        db.refresh(o)
    return offices


@pytest.fixture
def seed_complex_object(db, seed_users):
    obj = ComplexObject(name="A", customer_phones=[])
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def seed_contract(db, seed_users):
    contract = Contract(
        contract_number="C-0001",
        contract_date=date(2026, 3, 1),
        status="DRAFT",
        customer_name="Customer One",
        total_amount=Decimal("5000.00"),
    )
    db.add(contract)
    db.commit()
    db.refresh(contract)
    return contract


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
