"""Read-only projections over the customer table."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CustomerSummary(BaseModel):
    """
    A partial, read-only view of a `Customer`.

    Summaries are built from a column-only query, so the password column is
    never loaded. They are not tracked by any session and are never persisted.

    Attributes:
        username: The customer's login name.
        votes: The customer's vote counter (`Customer.up`).
    """

    model_config = ConfigDict(frozen=True)

    username: str
    votes: int
