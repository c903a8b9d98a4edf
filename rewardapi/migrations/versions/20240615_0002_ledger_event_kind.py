"""add event kind, idempotency key and ledger day to spin_events

Revision ID: 20240615_0002
Revises: 20240601_0001
Create Date: 2024-06-15
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20240615_0002"
down_revision: Union[str, None] = "20240601_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("spin_events", sa.Column("kind", sa.String(length=32), nullable=False, server_default="spin"))
    op.add_column("spin_events", sa.Column("ref_id", sa.String(length=128), nullable=True))
    op.add_column("spin_events", sa.Column("ledger_day", sa.Date(), nullable=True))

    # Before this revision debits were stored as negative "spins"
    op.execute("UPDATE spin_events SET kind='withdrawal' WHERE points < 0")

    if op.get_bind().dialect.name == "sqlite":
        op.execute("UPDATE spin_events SET ledger_day = date(created_at)")
    else:
        op.execute("UPDATE spin_events SET ledger_day = CAST(created_at AS DATE)")

    with op.batch_alter_table("spin_events") as batch_op:
        batch_op.alter_column("ledger_day", existing_type=sa.Date(), nullable=False)
        batch_op.alter_column("kind", existing_type=sa.String(length=32), server_default=None)
        batch_op.create_unique_constraint("uq_spin_events_ref_id", ["ref_id"])

    op.create_index(
        "ix_spin_events_user_kind_day", "spin_events", ["user_id", "kind", "ledger_day"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_spin_events_user_kind_day", table_name="spin_events")
    with op.batch_alter_table("spin_events") as batch_op:
        batch_op.drop_constraint("uq_spin_events_ref_id", type_="unique")
        batch_op.drop_column("ledger_day")
        batch_op.drop_column("ref_id")
        batch_op.drop_column("kind")
