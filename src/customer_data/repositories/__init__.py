"""
Data Access Layer: Repositories.

This package implements the Repository Pattern over the SQLAlchemy models.
Repositories provide a simple, object-oriented interface for loading and
storing domain objects; the rest of the application does not need to know
about sessions, statements or tables.
"""

from __future__ import annotations

from .customer_repository import CustomerRepository

__all__ = ["CustomerRepository"]
