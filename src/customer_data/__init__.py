"""
Customer Data-Access Package.

This package provides a small but complete persistence layer for `Customer`
records built on the SQLAlchemy ORM. It demonstrates the common data-access
conveniences that application code usually reaches for: entity lifecycle
(insert versus merge), derived queries on a repository, composable query
specifications, query-by-example and read-only projections.

Key modules include:
-   `config`: Centralized configuration management.
-   `db`: Database connection and session management.
-   `models`: SQLAlchemy data models for the database schema.
-   `projections`: Read-only summary views over the models.
-   `specifications`: Composable predicate trees and their SQL translation.
-   `query_by_example`: Probe-based queries with a matching policy.
-   `sorting`: Ordering descriptors, including raw SQL ordering expressions.
-   `repositories`: Data access layer for database operations.
"""

from importlib import metadata
from typing import Final

# Canonical service name used to tag every structured log line.
SERVICE_NAME: Final[str] = "customer-data"

try:
    __version__ = metadata.version("customer-data")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["SERVICE_NAME", "__version__"]
