"""transmission_log and supplier_state tables

Revision ID: 0001
Revises:
Create Date: 2024-03-04 09:12:41
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = "invrpt"


def upgrade() -> None:
    op.create_table(
        "transmission_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("transmission_timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("supplier_key_account_number", sa.String(length=20), nullable=False),
        sa.Column("inbound_channel", sa.String(length=10), nullable=False),
        sa.Column("inbound_method", sa.String(length=10), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("storage_path", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_transmission_log_supplier_key_account_number",
        "transmission_log",
        ["supplier_key_account_number"],
        schema=SCHEMA,
    )
    op.create_table(
        "supplier_state",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("supplier_number", sa.String(length=20), nullable=False),
        sa.Column("country", sa.String(length=2), nullable=False),
        sa.Column("inbound_channel", sa.String(length=10), nullable=False),
        sa.Column("state", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("supplier_number", "country", "inbound_channel"),
        schema=SCHEMA,
    )


def downgrade() -> None:
    op.drop_table("supplier_state", schema=SCHEMA)
    op.drop_index(
        "ix_transmission_log_supplier_key_account_number",
        table_name="transmission_log",
        schema=SCHEMA,
    )
    op.drop_table("transmission_log", schema=SCHEMA)
