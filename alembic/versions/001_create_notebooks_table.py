"""Create notebooks table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `notebooks` table: one row per notebook document, with
       the note sequence and the notebook-level Data payload as JSON
       (JSONB on PostgreSQL).

Rollback: downgrade() drops the table (all notebooks are lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DocumentJSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create the notebooks table and its title index; see notebook_api/models/notebook.py."""
    op.create_table(
        "notebooks",
        sa.Column(
            "id",
            sa.Uuid(),
            nullable=False,
            comment="Globally unique notebook identifier",
        ),
        sa.Column(
            "title",
            sa.String(255),
            nullable=False,
            server_default=sa.text("''"),
            comment="Notebook title; exact-match lookups use idx_notebooks_title",
        ),
        sa.Column(
            "notes",
            DocumentJSON,
            nullable=False,
            comment="Ordered note sub-documents",
        ),
        sa.Column(
            "created",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this notebook was created (UTC)",
        ),
        sa.Column(
            "last_access",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Refreshed on every mutating or specific read operation (UTC)",
        ),
        sa.Column(
            "data",
            DocumentJSON,
            nullable=False,
            comment="Notebook-level Data payload",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_notebooks_title", "notebooks", ["title"])


def downgrade() -> None:
    op.drop_index("idx_notebooks_title", table_name="notebooks")
    op.drop_table("notebooks")
