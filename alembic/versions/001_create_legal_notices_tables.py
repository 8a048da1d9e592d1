"""Create legal pages and settings tables.

Revision ID: 001_legal_notices_tables
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from legalnotices.config import get_settings

from alembic import op

revision: str = "001_legal_notices_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _table(name: str) -> str:
    return f"{get_settings().table_prefix}{name}"


def upgrade() -> None:
    pages = _table("pages")
    op.create_table(
        pages,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("lang", sa.String(20), nullable=False),
        sa.Column("label", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.Column("body", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("url", sa.String(255), nullable=False, server_default=sa.text("''")),
        sa.Column(
            "last_update",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint("name", "lang", name=f"uq_{pages}_name_lang"),
    )
    op.create_table(
        _table("settings"),
        sa.Column("name", sa.String(100), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False, server_default=sa.text("''")),
    )


def downgrade() -> None:
    op.drop_table(_table("settings"))
    op.drop_table(_table("pages"))
