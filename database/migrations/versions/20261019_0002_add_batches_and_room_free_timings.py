"""add batches and room free timings

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "batches",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("branch_id", sa.String(length=36), nullable=False),
        sa.Column("semester", sa.String(length=50), nullable=False),
        sa.Column("student_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_batches_branch_id", "batches", ["branch_id"])
    op.create_index("ix_batches_semester", "batches", ["semester"])

    op.add_column(
        "rooms",
        sa.Column("free_timings", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
    )


def downgrade() -> None:
    op.drop_column("rooms", "free_timings")
    op.drop_index("ix_batches_semester", table_name="batches")
    op.drop_index("ix_batches_branch_id", table_name="batches")
    op.drop_table("batches")
