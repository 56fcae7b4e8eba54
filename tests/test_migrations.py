"""Tests that the Alembic migration builds the schema the models expect."""

from __future__ import annotations

import importlib.util
from collections.abc import Generator
from pathlib import Path
from types import ModuleType

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Connection
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from customer_data.models import Customer
from customer_data.repositories import CustomerRepository

VERSIONS_DIR = Path(__file__).resolve().parent.parent / "alembic" / "versions"


def _load_migration(name: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(name, VERSIONS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def migration() -> ModuleType:
    return _load_migration("001_customer_init")


@pytest.fixture
def connection() -> Generator[Connection, None, None]:
    """A standalone in-memory database, independent of the package engine."""
    engine = create_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    with engine.connect() as conn:
        yield conn
    engine.dispose()


def _run(conn: Connection, step) -> None:
    context = MigrationContext.configure(conn)
    with Operations.context(context):
        step()


class TestCustomerInitMigration:
    """Test revision 001_customer_init."""

    def test_revision_metadata(self, migration: ModuleType) -> None:
        assert migration.revision == "001_customer_init"
        assert migration.down_revision is None

    def test_upgrade_matches_model_columns(
        self, migration: ModuleType, connection: Connection
    ) -> None:
        _run(connection, migration.upgrade)

        inspector = inspect(connection)
        columns = [c["name"] for c in inspector.get_columns("customer")]
        indexes = {ix["name"] for ix in inspector.get_indexes("customer")}
        assert columns == [c.name for c in Customer.__table__.columns]
        assert {ix.name for ix in Customer.__table__.indexes} == indexes

    def test_repository_works_on_migrated_schema(
        self, migration: ModuleType, connection: Connection
    ) -> None:
        _run(connection, migration.upgrade)

        with Session(bind=connection) as session:
            customers = CustomerRepository(session)
            customer = customers.save(Customer(username="ces518", password="pjy3859"))

            assert customer.id == 1
            assert customers.find_by_username("ces518")[0].votes == 0

    def test_downgrade_drops_table(self, migration: ModuleType, connection: Connection) -> None:
        _run(connection, migration.upgrade)
        _run(connection, migration.downgrade)

        assert not inspect(connection).has_table("customer")
