"""
Standalone Database Initialization Script.

Creates the schema described by the SQLAlchemy models in `customer_data.models`
on the database configured through `DATABASE_URL` (or the PG* variables). It
is meant for local development and for ephemeral CI databases.

Usage:
    customer-data-init-db
    python -m customer_data.db_init

This script is not a migration tool: it only creates missing tables. Schema
changes on an existing database go through the Alembic migrations.
"""

from __future__ import annotations

from .config import get_config
from .db import init_db
from .logger import log_event


def main() -> None:
    """Initializes the schema and logs where it was created."""
    summary = get_config().log_summary()
    log_event("INFO", "db_init_started", database_url=summary["database_url"])
    init_db()
    log_event("INFO", "db_init_completed", database_url=summary["database_url"])


if __name__ == "__main__":
    main()
