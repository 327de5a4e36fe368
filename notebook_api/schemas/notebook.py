"""
Notebook API - Pydantic Request/Response Schemas
================================================

What:  Pydantic models defining the JSON wire contract.
How:   FastAPI validates request bodies against the request models and
       serializes responses through the response models. Routes set
       `response_model_exclude_none=True`, so an absent optional field is
       omitted from the JSON instead of being sent as null.
Who:   Routes (contract) and NotebookService (building responses and the
       JSON sub-documents stored in the notebooks table).

Naming:
    Python attributes are snake_case; the wire uses `lastAccess` through a
    field alias. Identifiers are emitted as 32-char lowercase hex.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Matches the notebooks.title column width.
TITLE_MAX_LENGTH = 255


def normalize_identifier(value: str) -> str:
    """Parses any form uuid.UUID accepts and returns the canonical hex form."""
    return uuid.UUID(str(value)).hex


# ══════════════════════════════════════════════════════════════════════════
# Document Models - shared by requests, responses, and stored JSON
# ══════════════════════════════════════════════════════════════════════════


class Query(BaseModel):
    """A question/response pair stored inside Data."""
    question: str = Field(description="Question text")
    response: str = Field(description="Response text")


class Data(BaseModel):
    """
    Auxiliary payload attached to a notebook or a note.

    The empty value is `{}`: both fields absent. Updates replace the whole
    object; queries from a previous payload are never merged in.
    """
    info: Optional[str] = Field(default=None, description="Informational text")
    queries: Optional[List[Query]] = Field(default=None, description="Question/response pairs")

    def to_document(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class Note(BaseModel):
    """A note as stored and as returned by the API."""
    id: str = Field(description="Note identifier, unique within its notebook")
    title: Optional[str] = Field(default=None, description="Note title")
    text: Optional[str] = Field(default=None, description="Free-text body")
    data: Optional[Data] = Field(default=None, description="Note-level Data payload")
    last_access: Optional[datetime] = Field(
        default=None,
        alias="lastAccess",
        description="Refreshed when the note's title or text changes",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class NoteDetail(BaseModel):
    """Single-note read: the note's Data is served by the .../data endpoints."""
    id: str
    title: Optional[str] = None
    text: Optional[str] = None
    last_access: Optional[datetime] = Field(default=None, alias="lastAccess")

    model_config = ConfigDict(populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models - what clients send
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /notebook/{id}/notes and the items of a notebook's `notes`.

    `id` is optional: a caller-supplied id is kept (after format checks),
    an absent one is assigned by the server.
    """
    id: Optional[str] = Field(default=None, description="Optional caller-supplied note ID")
    title: Optional[str] = None
    text: Optional[str] = None
    data: Optional[Data] = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            return normalize_identifier(v)
        except ValueError:
            raise ValueError(f"Invalid note ID format: '{v}'")


class NotebookCreate(BaseModel):
    """Body of POST /notebooks."""
    title: str = Field(default="", max_length=TITLE_MAX_LENGTH, description="Notebook title")
    notes: List[NoteCreate] = Field(default_factory=list, description="Initial notes")


class NotebookPatch(BaseModel):
    """
    Body of PATCH /notebooks/{id}/data.

    Presence-based sparse merge: a field is applied iff the client sent it,
    tracked through `model_fields_set`. Sending `""` or `[]` therefore
    clears a field; leaving it out keeps the stored value. `data: null`
    resets the notebook Data to `{}`.

    `lastAccess` is owned by the server: it is declared only so that its
    presence can be rejected instead of silently dropped.
    """
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    notes: Optional[List[NoteCreate]] = None
    created: Optional[datetime] = None
    data: Optional[Data] = None
    last_access: Optional[datetime] = Field(default=None, alias="lastAccess")

    model_config = ConfigDict(populate_by_name=True)


class NoteTitleUpdate(BaseModel):
    """Body of PATCH /notebooks/{id}/notes/{noteID}/title."""
    title: str


class NoteTextUpdate(BaseModel):
    """Body of PATCH /notebooks/{id}/notes/{noteID}/text."""
    text: str


# ══════════════════════════════════════════════════════════════════════════
# Response Models - what the API returns
# ══════════════════════════════════════════════════════════════════════════


class NotebookResponse(BaseModel):
    """Full notebook document."""
    id: str = Field(description="Notebook identifier (hex)")
    title: str = Field(description="Notebook title")
    notes: List[Note] = Field(default_factory=list, description="Ordered notes")
    created: datetime = Field(description="Creation time (UTC ISO 8601)")
    last_access: datetime = Field(alias="lastAccess", description="Last access time (UTC ISO 8601)")
    data: Data = Field(default_factory=Data, description="Notebook-level Data payload")

    model_config = ConfigDict(populate_by_name=True)


class NotebookSummary(BaseModel):
    """Returned by the title lookup: identifier, title, and last access only."""
    id: str
    title: str
    last_access: datetime = Field(alias="lastAccess")

    model_config = ConfigDict(populate_by_name=True)


class LastAccessResponse(BaseModel):
    last_access: datetime = Field(alias="lastAccess")

    model_config = ConfigDict(populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body shared by every failure response.

    Example:
        {
            "error": "not_found",
            "message": "note with ID '0f1e...' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float = Field(description="Seconds since the process started")
