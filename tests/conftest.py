"""Pytest configuration and shared fixtures for customer_data tests."""

import os

# Set environment BEFORE importing any package modules
os.environ["CUSTOMER_DATA_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

from collections.abc import Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from customer_data import db
from customer_data.config import reset_config
from customer_data.models import Customer
from customer_data.repositories import CustomerRepository


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """
    Provide a fresh in-memory database with the schema created.

    Every test gets its own database, so generated ids start at 1.
    """
    reset_config()
    db.reset_engine()
    engine = db.get_engine()
    db.create_tables()
    yield engine
    db.reset_engine()
    reset_config()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    """
    Provide a session bound to a connection whose transaction is rolled back.

    The repository only flushes, so nothing a test writes survives the test.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection, autoflush=False)

    yield session

    session.close()
    if transaction.is_active:
        transaction.rollback()
    connection.close()


@pytest.fixture
def customers(session: Session) -> CustomerRepository:
    """Provide a CustomerRepository bound to the test session."""
    return CustomerRepository(session)


@pytest.fixture
def sample_customer(customers: CustomerRepository) -> Customer:
    """Persist the canonical test customer ("ces518" / "pjy3859")."""
    return customers.save(Customer.builder().username("ces518").password("pjy3859").build())


@pytest.fixture
def voted_customers(customers: CustomerRepository) -> list[Customer]:
    """Persist customers on both sides of the good/bad vote threshold."""
    rows = [
        ("ces518", "pjy3859", 10),
        ("ces5182", "pjy3852", 0),
        ("kim", "secret", 25),
        ("lee", "hunter2", 9),
    ]
    return [
        customers.save(Customer.builder().username(u).password(p).up(up).build())
        for u, p, up in rows
    ]
