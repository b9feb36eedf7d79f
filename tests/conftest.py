# =============================================================================
# TEST CONFIGURATION
# =============================================================================
# In-memory SQLite database per test, FastAPI client bound to it, and small
# factories for the rows most tests need.
# =============================================================================

import os
import tempfile

# Test environment BEFORE importing the app
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["LOGS_PATH"] = tempfile.gettempdir()

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import Base, get_db
from app.models import (
    Customer, Measurement, Fabric, ShelfProduct, Price, Order,
    CheckoutStatus, OrderType, ProductionStage,
)
from main import app


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# FACTORIES
# =============================================================================

@pytest.fixture
def make_customer(db_session: Session):
    def _make(name="Ali", phone="+965 5555 0001", account_type="Primary", **kwargs) -> Customer:
        customer = Customer(name=name, phone=phone, account_type=account_type, **kwargs)
        db_session.add(customer)
        db_session.commit()
        db_session.refresh(customer)
        return customer
    return _make


@pytest.fixture
def make_measurement(db_session: Session):
    def _make(customer: Customer, **dims) -> Measurement:
        count = db_session.query(Measurement).filter(Measurement.customer_id == customer.id).count()
        measurement = Measurement(
            customer_id=customer.id,
            measurement_id=f"{customer.id}-{count + 1}",
            measurement_date=datetime.now(),
            type="Body",
            **dims
        )
        db_session.add(measurement)
        db_session.commit()
        db_session.refresh(measurement)
        return measurement
    return _make


@pytest.fixture
def make_fabric(db_session: Session):
    def _make(name="Cotton", real_stock="5.00", price_per_meter="2.500") -> Fabric:
        fabric = Fabric(name=name, real_stock=Decimal(real_stock), price_per_meter=Decimal(price_per_meter))
        db_session.add(fabric)
        db_session.commit()
        db_session.refresh(fabric)
        return fabric
    return _make


@pytest.fixture
def make_shelf(db_session: Session):
    def _make(type="Ghutra", stock=10, price="4.000") -> ShelfProduct:
        product = ShelfProduct(type=type, brand="Shop", stock=stock, price=Decimal(price))
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product
    return _make


@pytest.fixture
def seed_prices(db_session: Session):
    def _seed(**prices):
        values = {"STY_LINE": "1", "HOME_DELIVERY": "5", "EXPRESS_SURCHARGE": "2", "STY_DESIGN": "6"}
        values.update(prices)
        for key, value in values.items():
            db_session.add(Price(key=key, value=Decimal(value)))
        db_session.commit()
    return _seed


@pytest.fixture
def make_order(db_session: Session):
    def _make(customer: Customer, status=CheckoutStatus.CONFIRMED.value, order_type=OrderType.WORK.value,
              order_date=None, **kwargs) -> Order:
        order = Order(
            customer_id=customer.id,
            checkout_status=status,
            order_type=order_type,
            production_stage=kwargs.pop("production_stage", ProductionStage.ORDER_AT_SHOP.value),
            order_date=order_date or datetime.now(),
            **kwargs
        )
        db_session.add(order)
        db_session.commit()
        db_session.refresh(order)
        return order
    return _make


@pytest.fixture
def delivery_date() -> datetime:
    return (datetime.now() + timedelta(days=14)).replace(microsecond=0)


def garment_row(measurement: Measurement, fabric: Fabric = None, length="3.0", **kwargs) -> dict:
    """Plain dict for one garment input row"""
    row = {
        "measurement_id": measurement.id,
        "fabric_source": "IN" if fabric else "OUT",
        "fabric_id": fabric.id if fabric else None,
        "shop_name": None if fabric else "Al Mutawa",
        "fabric_length": Decimal(length),
        "delivery_date": datetime.now() + timedelta(days=10),
    }
    row.update(kwargs)
    return row


@pytest.fixture
def garment_factory():
    return garment_row
