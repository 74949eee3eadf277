"""create device table

Revision ID: 0001_create_device_table
Revises:
Create Date: 2026-10-19 00:00:00
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import sqlalchemy as sa
from alembic import op

from devicerecon.adapters.sqlalchemy.mappings import AuditLogType, UTCDateTime

if TYPE_CHECKING:
    from collections.abc import Sequence

revision: str = "0001_create_device_table"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "device",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("fingerprint", sa.String(length=255), nullable=True),
        sa.Column("user_id", sa.String(length=64), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column(
            "session_status",
            sa.Enum(
                "active",
                "logged_out",
                "archived",
                name="sessionstatus",
                native_enum=False,
            ),
            nullable=False,
        ),
        sa.Column("last_activity", UTCDateTime(), nullable=True),
        sa.Column("last_used", UTCDateTime(), nullable=True),
        sa.Column("created", UTCDateTime(), nullable=False),
        sa.Column("session_start", UTCDateTime(), nullable=True),
        sa.Column("notes", AuditLogType(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_device")),
    )
    op.create_index("ix_device_fingerprint_active", "device", ["fingerprint", "active"])
    op.create_index("ix_device_active_last_activity", "device", ["active", "last_activity"])


def downgrade() -> None:
    op.drop_index("ix_device_active_last_activity", table_name="device")
    op.drop_index("ix_device_fingerprint_active", table_name="device")
    op.drop_table("device")
