"""customer_init

Creates the customer table: surrogate integer key, username, password and the
`up` vote counter, plus an index on username for prefix and equality lookups.

Revision ID: 001_customer_init
Revises:
Create Date: 2026-10-19 09:12:44.503118

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001_customer_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the customer table and its username index."""
    op.create_table(
        "customer",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("up", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.CheckConstraint(
            "length(username) > 0", name="ck_customer__username_not_empty"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_customer"),
        comment="Customer accounts with a vote counter",
    )
    op.create_index("idx_customer__customer_username", "customer", ["username"], unique=False)


def downgrade() -> None:
    """Drop the customer table and its index."""
    op.drop_index("idx_customer__customer_username", table_name="customer")
    op.drop_table("customer")
