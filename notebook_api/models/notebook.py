"""
Notebook API - Notebook SQLAlchemy Model
========================================

What:  ORM model for the `notebooks` table. One row is one notebook document.
How:   Scalar attributes (id, title, timestamps) are columns; the nested note
       sequence and the notebook-level Data payload are JSON columns
       (JSONB on PostgreSQL).
Who:   NotebookService for every read and write; Alembic for migrations.

Document layout:
    notes: [
        {"id": "<hex>", "title": "...", "text": "...",
         "data": {"info": "...", "queries": [{"question": "...", "response": "..."}]},
         "lastAccess": "<iso8601>"},
        ...
    ]
    data:  {"info": "...", "queries": [...]}

    JSON values are stored exactly as the wire schemas dump them in JSON mode,
    with absent optional fields omitted.

Mutation rule:
    JSON columns are not mutation-tracked. Writers build a new list/dict and
    assign it to the attribute so the change is flushed.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import JSON, DateTime, Index, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from notebook_api.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
DocumentJSON = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notebook(Base):
    """
    A notebook document.

    Lifecycle:
        1. Created with server-assigned id, created == last_access == now,
           empty data, and zero or more initial notes
        2. Notes appended, edited in place, or pulled by id
        3. Data payloads replaced wholesale
        4. Deleted as a whole (notes go with it)
    """

    __tablename__ = "notebooks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Globally unique notebook identifier",
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        comment="Notebook title; exact-match lookups use idx_notebooks_title",
    )

    notes: Mapped[List[Dict[str, Any]]] = mapped_column(
        DocumentJSON,
        nullable=False,
        default=list,
        comment="Ordered note sub-documents",
    )

    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this notebook was created (UTC)",
    )

    last_access: Mapped[datetime] = mapped_column(
        "last_access",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="Refreshed on every mutating or specific read operation (UTC)",
    )

    data: Mapped[Dict[str, Any]] = mapped_column(
        DocumentJSON,
        nullable=False,
        default=dict,
        comment="Notebook-level Data payload",
    )

    __table_args__ = (
        Index("idx_notebooks_title", "title"),
    )

    def __repr__(self) -> str:
        return (
            f"<Notebook(id={self.id}, title='{self.title}', "
            f"notes={len(self.notes or [])})>"
        )
