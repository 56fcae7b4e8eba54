"""
SQLAlchemy Models Defining the Customer Database Schema.

This module is the code-first definition of the schema using the SQLAlchemy
Object-Relational Mapper (ORM). Each class maps to a database table and its
attributes map to the columns of that table.

A consistent naming convention for constraints is configured on
`metadata_obj`, so that the generated schema (and the Alembic migrations that
mirror it) carry predictable names.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Integer, MetaData, String, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

metadata_obj = MetaData(
    naming_convention={
        "ix": "idx_%(table_name)s__%(column_0_label)s",  # Index
        "uq": "uq_%(table_name)s__%(column_0_name)s",  # Unique Constraint
        "ck": "ck_%(table_name)s__%(constraint_name)s",  # Check Constraint
        "fk": "fk_%(table_name)s__%(referred_table_name)s",  # Foreign Key
        "pk": "pk_%(table_name)s",  # Primary Key
    }
)

# A customer is classified as "good" once its vote counter reaches this value.
GOOD_VOTE_THRESHOLD = 10


class Base(DeclarativeBase):
    """
    A common declarative base for all SQLAlchemy models in the package.

    All ORM models inherit from this class so that they share `metadata_obj`
    and its naming convention.
    """

    metadata = metadata_obj


class Customer(Base):
    """
    A customer account record.

    Instances start out transient (no `id`) and become persistent when the
    repository inserts them; the database generates the surrogate key on the
    first flush. The repository never reassigns an `id` once it is populated.

    Attributes:
        id: Surrogate primary key generated by the database.
        username: Login name of the customer.
        password: Stored password value.
        up: Vote counter. Drives the implicit good/bad classification used by
            `CustomerSpecs`.
    """

    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    up: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )

    __table_args__ = (
        CheckConstraint("length(username) > 0", name="username_not_empty"),
        {"comment": "Customer accounts with a vote counter"},
    )

    @classmethod
    def builder(cls) -> CustomerBuilder:
        """Starts a fluent builder for a transient `Customer`."""
        return CustomerBuilder()

    @property
    def is_good(self) -> bool:
        """Whether the vote counter has reached `GOOD_VOTE_THRESHOLD`."""
        return (self.up or 0) >= GOOD_VOTE_THRESHOLD

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, username={self.username}, up={self.up})>"


class CustomerBuilder:
    """
    Fluent construction of `Customer` instances.

    Every setter returns the builder, and `build()` produces a new transient
    entity. Only the attributes that were set are passed to the constructor,
    so unset columns stay `None` until the database fills in its defaults.

    Example:
        customer = Customer.builder().username("ces518").password("pjy3859").build()
    """

    def __init__(self) -> None:
        self._values: dict[str, object] = {}

    def id(self, value: int | None) -> CustomerBuilder:
        self._values["id"] = value
        return self

    def username(self, value: str) -> CustomerBuilder:
        self._values["username"] = value
        return self

    def password(self, value: str) -> CustomerBuilder:
        self._values["password"] = value
        return self

    def up(self, value: int) -> CustomerBuilder:
        self._values["up"] = value
        return self

    def build(self) -> Customer:
        return Customer(**self._values)
