"""Repository for Customer data access."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ..logger import log_event
from ..models import Customer
from ..projections import CustomerSummary
from ..query_by_example import Example
from ..sorting import Sort
from ..specifications import ClauseBuilder, Operator, Predicate, Specification


class CustomerRepository:
    """
    Repository for managing Customer database operations.

    Writes flush immediately but never commit; the caller owns the
    transaction (see `customer_data.db.get_db`).

    Entity lifecycle is explicit:
    - `create` inserts a transient customer and returns the *same* object,
      which is now tracked by the session.
    - `update` merges a customer that carries an id and returns a *new*
      tracked copy; the argument itself stays detached.
    - `save` picks one of the two based on whether an id is present.
    """

    def __init__(self, session: Session):
        """
        Initialize the repository with a SQLAlchemy session.

        Args:
            session: Active SQLAlchemy session for database operations
        """
        self.session = session
        self._clauses = ClauseBuilder(Customer)

    def save(self, customer: Customer) -> Customer:
        """
        Persist a customer, inserting or merging depending on its id.

        Args:
            customer: A transient customer (no id) or one carrying an id

        Returns:
            The persisted representation. This is `customer` itself for new
            entities and a distinct tracked copy for entities with an id.
        """
        if customer.id is None:
            return self.create(customer)
        return self.update(customer)

    def create(self, customer: Customer) -> Customer:
        """
        Insert a transient customer.

        Args:
            customer: The customer to persist

        Returns:
            The same `customer` instance, now persistent with a generated id

        Raises:
            sqlalchemy.exc.IntegrityError: If the row violates a constraint,
                e.g. an explicitly assigned id that already exists
        """
        self.session.add(customer)
        self.session.flush()
        log_event("INFO", "customer_created", customer_id=customer.id)
        return customer

    def update(self, customer: Customer) -> Customer:
        """
        Merge the state of `customer` into the session.

        The row is updated when the id is already stored and inserted
        otherwise.

        Args:
            customer: A customer carrying an id

        Returns:
            A tracked copy distinct from `customer`, which remains detached.
            When `customer` is already tracked by this session it is returned
            as is.

        Raises:
            ValueError: If `customer` has no id
        """
        if customer.id is None:
            raise ValueError("Cannot merge a customer without an id; use create()")
        merged = self.session.merge(customer)
        self.session.flush()
        log_event("INFO", "customer_merged", customer_id=merged.id)
        return merged

    def delete(self, customer: Customer) -> None:
        """Delete a tracked customer."""
        customer_id = customer.id
        self.session.delete(customer)
        self.session.flush()
        log_event("INFO", "customer_deleted", customer_id=customer_id)

    def find_by_id(self, customer_id: int) -> Customer | None:
        """
        Retrieve a customer by its ID.

        Returns:
            The Customer instance if found, None otherwise
        """
        return self.session.get(Customer, customer_id)

    def exists_by_id(self, customer_id: int) -> bool:
        stmt = select(func.count()).select_from(Customer).where(Customer.id == customer_id)
        return self.session.execute(stmt).scalar_one() > 0

    def find_all(
        self,
        spec: Specification | Example | None = None,
        *,
        sort: Sort | None = None,
    ) -> Sequence[Customer]:
        """
        Retrieve customers, optionally filtered and ordered.

        Args:
            spec: A specification tree or a query-by-example probe; `None`
                returns every customer
            sort: Optional ordering

        Returns:
            List of matching Customer instances
        """
        stmt = select(Customer).where(self._where(spec))
        if sort is not None:
            stmt = stmt.order_by(*sort.to_order_by(Customer))
        return self.session.execute(stmt).scalars().all()

    def count(self, spec: Specification | Example | None = None) -> int:
        stmt = select(func.count()).select_from(Customer).where(self._where(spec))
        return self.session.execute(stmt).scalar_one()

    def find_by_username_starts_with(self, prefix: str) -> Sequence[Customer]:
        """
        Retrieve customers whose username starts with `prefix`.

        LIKE wildcards in `prefix` are matched literally.
        """
        return self.find_all(Predicate("username", Operator.STARTS_WITH, prefix))

    def find_by_password(self, password: str, sort: Sort) -> Sequence[Customer]:
        """
        Retrieve customers with the given password in the requested order.

        Args:
            password: Exact password value to match
            sort: Ordering; may be a raw expression built with `Sort.unsafe`,
                e.g. ``Sort.unsafe("LENGTH(password)")``

        Returns:
            List of matching Customer instances
        """
        return self.find_all(Predicate("password", Operator.EQ, password), sort=sort)

    def update_customer(self, password: str, customer_id: int, *, synchronize: bool = True) -> int:
        """
        Set the password of one customer with a bulk UPDATE statement.

        The statement bypasses per-object change tracking. With
        `synchronize=True` the session evaluates the WHERE criteria against
        tracked instances and applies the new value, so a following
        `find_by_id` sees the new password. With `synchronize=False` tracked instances are left
        untouched and keep their pre-update state until expired or refreshed.

        Args:
            password: The new password
            customer_id: Id of the customer to update
            synchronize: Whether to reconcile tracked instances with the change

        Returns:
            Number of rows affected; 0 when no customer has that id
        """
        stmt = (
            update(Customer)
            .where(Customer.id == customer_id)
            .values(password=password)
            .execution_options(synchronize_session="evaluate" if synchronize else False)
        )
        rowcount = self.session.execute(stmt).rowcount
        log_event(
            "INFO",
            "customer_bulk_update",
            customer_id=customer_id,
            rows_affected=rowcount,
            synchronized=synchronize,
        )
        return rowcount

    def find_by_username(self, username: str) -> list[CustomerSummary]:
        """
        Retrieve summary projections of customers with the given username.

        Only the username and vote columns are selected.
        """
        stmt = (
            select(Customer.username, Customer.up.label("votes"))
            .where(Customer.username == username)
            .order_by(Customer.id)
        )
        return [
            CustomerSummary(username=row.username, votes=row.votes)
            for row in self.session.execute(stmt)
        ]

    def _where(self, spec: Specification | Example | None):
        if isinstance(spec, Example):
            if spec.entity is not Customer:
                raise ValueError(f"Example targets {spec.entity.__name__}, not Customer")
            spec = spec.to_specification()
        return self._clauses.visit(spec)
