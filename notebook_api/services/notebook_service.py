"""
Notebook API - Notebook Service (Document Mapper)
=================================================

What:  Translates each endpoint into one round-trip against the notebook
       store: validate identifiers, read or rewrite one notebook document,
       return the post-update state.
How:   Every notebook is one row. Operations that address a single note
       (notebook id + note id) load the row with SELECT ... FOR UPDATE,
       change the matched element of the `notes` JSON array, and flush.
       The session dependency commits once the handler returns, so each
       request is a single transaction scoped to a single document.
Who:   Called by the notebook and note route handlers.

Rules applied by every method:
    - Path identifiers are parsed before the store is touched; a malformed
      one raises ValidationError.
    - A compound-key update that matches no note raises NotFoundError.
    - Mutations refresh the notebook's lastAccess; the refreshed value is
      always strictly later than the stored one.
    - SQLAlchemy errors surface as DatabaseError carrying the driver text.

The service is stateless: the session is passed into each call.
"""

import copy
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notebook_api.exceptions import DatabaseError, NotFoundError, ValidationError
from notebook_api.models.notebook import Notebook, utcnow
from notebook_api.schemas.notebook import (
    Data,
    LastAccessResponse,
    Note,
    NoteCreate,
    NoteDetail,
    NotebookCreate,
    NotebookPatch,
    NotebookResponse,
    NotebookSummary,
)

logger = logging.getLogger(__name__)

EMPTY_DATA: Dict[str, Any] = {}


# ── Helpers ───────────────────────────────────────────────────────────────


def parse_identifier(value: str, label: str = "notebook") -> uuid.UUID:
    """
    Parses a path identifier, raising ValidationError when it is malformed.

    Accepts the 32-char hex form the API emits as well as the dashed form.
    """
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(
            message=f"Invalid {label} ID format",
            field=f"{label}ID",
            context={"value": value},
        )


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def advance(previous: Optional[datetime]) -> datetime:
    """Returns now, or one microsecond past `previous` if the clock has not moved."""
    now = utcnow()
    if previous is None:
        return now
    floor = as_utc(previous) + timedelta(microseconds=1)
    return now if now >= floor else floor


def _parse_stored_time(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def touch(notebook: Notebook) -> datetime:
    notebook.last_access = advance(notebook.last_access)
    return notebook.last_access


def build_note_documents(
    notes: Iterable[NoteCreate],
    existing_ids: Iterable[str] = (),
    stamp: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Turns request notes into stored sub-documents.

    Notes without an id get a fresh one. A supplied id that collides with
    `existing_ids` or with another note in the same batch is rejected.
    """
    seen = set(existing_ids)
    documents = []
    for item in notes:
        note_id = item.id or uuid.uuid4().hex
        if note_id in seen:
            raise ValidationError(
                message=f"Note ID '{note_id}' already exists in this notebook",
                field="id",
            )
        seen.add(note_id)
        note = Note(
            id=note_id,
            title=item.title,
            text=item.text,
            data=item.data,
            last_access=stamp,
        )
        documents.append(note.to_document())
    return documents


def to_response(notebook: Notebook) -> NotebookResponse:
    return NotebookResponse(
        id=notebook.id.hex,
        title=notebook.title,
        notes=[Note.model_validate(doc) for doc in notebook.notes or []],
        created=as_utc(notebook.created),
        last_access=as_utc(notebook.last_access),
        data=Data.model_validate(notebook.data or {}),
    )


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Wraps SQLAlchemy failures into DatabaseError with the driver's message."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Store error during %s: %s", operation, str(e))
        raise DatabaseError(message=str(e), context={"operation": operation}) from e


# ── Service ───────────────────────────────────────────────────────────────


class NotebookService:
    """
    Document mapper for notebooks, notes, and their Data payloads.

    Responsibilities:
        - Notebook CRUD: list, fetch (refreshing lastAccess), title lookup,
          create, sparse patch, delete one, delete all
        - Note operations addressed by (notebook id, note id): append, list,
          fetch, title/text update, remove
        - Data operations: replace, clear (one note / one notebook / all),
          read (one note / every note in a notebook)
        - lastAccess: touch and read
    """

    # ── Store access ──────────────────────────────────────────────────────

    async def _load(
        self,
        db: AsyncSession,
        notebook_id: uuid.UUID,
        for_update: bool = False,
    ) -> Optional[Notebook]:
        stmt = select(Notebook).where(Notebook.id == notebook_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def _require(
        self,
        db: AsyncSession,
        notebook_id: uuid.UUID,
        for_update: bool = False,
    ) -> Notebook:
        notebook = await self._load(db, notebook_id, for_update=for_update)
        if notebook is None:
            raise NotFoundError(resource="notebook", resource_id=notebook_id.hex)
        return notebook

    async def _require_note(
        self,
        db: AsyncSession,
        notebook_id: uuid.UUID,
        note_id: uuid.UUID,
        for_update: bool = False,
    ):
        """
        Resolves a compound key to (notebook, copied notes list, index).

        The notes list is a deep copy: callers mutate it and assign it back
        so the JSON column is flushed.
        """
        notebook = await self._load(db, notebook_id, for_update=for_update)
        if notebook is not None:
            notes = copy.deepcopy(notebook.notes or [])
            for index, doc in enumerate(notes):
                if doc.get("id") == note_id.hex:
                    return notebook, notes, index
        raise NotFoundError(
            resource="note",
            resource_id=note_id.hex,
            context={"notebook_id": notebook_id.hex},
        )

    # ── Notebooks ─────────────────────────────────────────────────────────

    async def list_notebooks(self, db: AsyncSession) -> List[NotebookResponse]:
        """All notebooks in the store's natural order, no pagination."""
        with store_errors("list_notebooks"):
            result = await db.execute(select(Notebook))
            return [to_response(nb) for nb in result.scalars().all()]

    async def get_notebook(self, db: AsyncSession, notebook_id: str) -> NotebookResponse:
        """
        Fetch one notebook and refresh its lastAccess in the same transaction.

        Raises:
            ValidationError: malformed id (→ 400)
            NotFoundError: no such notebook (→ 404)
        """
        oid = parse_identifier(notebook_id)
        with store_errors("get_notebook"):
            notebook = await self._require(db, oid, for_update=True)
            touch(notebook)
            await db.flush()
            return to_response(notebook)

    async def get_notebook_summary(self, db: AsyncSession, title: str) -> NotebookSummary:
        """Exact-match title lookup returning only id, title, lastAccess."""
        with store_errors("get_notebook_summary"):
            result = await db.execute(
                select(Notebook).where(Notebook.title == title).limit(1)
            )
            notebook = result.scalars().first()
        if notebook is None:
            raise NotFoundError(resource="notebook", context={"title": title})
        return NotebookSummary(
            id=notebook.id.hex,
            title=notebook.title,
            last_access=as_utc(notebook.last_access),
        )

    async def create_notebook(self, db: AsyncSession, payload: NotebookCreate) -> NotebookResponse:
        """
        Persist a new notebook.

        The server assigns the id and sets created and lastAccess to the
        same instant; Data starts empty.
        """
        now = utcnow()
        notebook = Notebook(
            id=uuid.uuid4(),
            title=payload.title,
            notes=build_note_documents(payload.notes),
            created=now,
            last_access=now,
            data=dict(EMPTY_DATA),
        )
        with store_errors("create_notebook"):
            db.add(notebook)
            await db.flush()
        logger.info("Notebook %s created with %d notes", notebook.id.hex, len(notebook.notes))
        return to_response(notebook)

    async def delete_notebook(self, db: AsyncSession, notebook_id: str) -> None:
        """Unconditional delete; succeeds when nothing matched."""
        oid = parse_identifier(notebook_id)
        with store_errors("delete_notebook"):
            await db.execute(delete(Notebook).where(Notebook.id == oid))

    async def delete_all_notebooks(self, db: AsyncSession) -> None:
        with store_errors("delete_all_notebooks"):
            result = await db.execute(delete(Notebook))
        logger.info("Removed all notebooks (%s rows)", result.rowcount)

    async def patch_notebook(
        self,
        db: AsyncSession,
        notebook_id: str,
        patch: NotebookPatch,
    ) -> NotebookResponse:
        """
        Sparse merge of the fields present in the request body.

        Presence comes from `patch.model_fields_set`, so an explicitly empty
        value is applied and an absent field is left alone. `notes` is
        replaced as a whole and `data` is replaced wholesale (null → `{}`).
        Any `lastAccess` in the body is rejected; touch() owns that field.
        """
        oid = parse_identifier(notebook_id)
        present = patch.model_fields_set
        if "last_access" in present:
            raise ValidationError(
                message="'lastAccess' is maintained by the server and cannot be patched",
                field="lastAccess",
            )
        for name in ("title", "notes", "created"):
            if name in present and getattr(patch, name) is None:
                raise ValidationError(message=f"'{name}' cannot be null", field=name)

        with store_errors("patch_notebook"):
            notebook = await self._require(db, oid, for_update=True)
            if "title" in present:
                notebook.title = patch.title
            if "notes" in present:
                notebook.notes = build_note_documents(patch.notes)
            if "created" in present:
                notebook.created = as_utc(patch.created)
            if "data" in present:
                notebook.data = patch.data.to_document() if patch.data else dict(EMPTY_DATA)
            touch(notebook)
            await db.flush()
            return to_response(notebook)

    # ── lastAccess ────────────────────────────────────────────────────────

    async def touch_notebook(self, db: AsyncSession, notebook_id: str) -> LastAccessResponse:
        oid = parse_identifier(notebook_id)
        with store_errors("touch_notebook"):
            notebook = await self._require(db, oid, for_update=True)
            stamp = touch(notebook)
            await db.flush()
        return LastAccessResponse(last_access=as_utc(stamp))

    async def get_last_access(self, db: AsyncSession, notebook_id: str) -> LastAccessResponse:
        """Reads lastAccess without refreshing it."""
        oid = parse_identifier(notebook_id)
        with store_errors("get_last_access"):
            notebook = await self._require(db, oid)
        return LastAccessResponse(last_access=as_utc(notebook.last_access))

    # ── Notes ─────────────────────────────────────────────────────────────

    async def add_note(self, db: AsyncSession, notebook_id: str, payload: NoteCreate) -> Note:
        """
        Append a note to the notebook's sequence.

        A caller-supplied id is kept; otherwise one is assigned. Prior notes
        are left exactly as stored.
        """
        oid = parse_identifier(notebook_id)
        with store_errors("add_note"):
            notebook = await self._require(db, oid, for_update=True)
            notes = list(notebook.notes or [])
            stamp = advance(notebook.last_access)
            (document,) = build_note_documents(
                [payload],
                existing_ids=[doc.get("id") for doc in notes],
                stamp=stamp,
            )
            notebook.notes = notes + [document]
            notebook.last_access = stamp
            await db.flush()
        return Note.model_validate(document)

    async def list_notes(self, db: AsyncSession, notebook_id: str) -> List[Note]:
        oid = parse_identifier(notebook_id)
        with store_errors("list_notes"):
            notebook = await self._require(db, oid)
        return [Note.model_validate(doc) for doc in notebook.notes or []]

    async def get_note(self, db: AsyncSession, notebook_id: str, note_id: str) -> NoteDetail:
        oid = parse_identifier(notebook_id)
        nid = parse_identifier(note_id, "note")
        with store_errors("get_note"):
            _, notes, index = await self._require_note(db, oid, nid)
        return NoteDetail.model_validate(notes[index])

    async def remove_note(self, db: AsyncSession, notebook_id: str, note_id: str) -> None:
        """Pull the note with this id; success even when nothing matches."""
        oid = parse_identifier(notebook_id)
        nid = parse_identifier(note_id, "note")
        with store_errors("remove_note"):
            notebook = await self._load(db, oid, for_update=True)
            if notebook is None:
                return
            notebook.notes = [
                doc for doc in notebook.notes or [] if doc.get("id") != nid.hex
            ]
            touch(notebook)
            await db.flush()

    async def _update_note_field(
        self,
        db: AsyncSession,
        notebook_id: str,
        note_id: str,
        field: str,
        value: str,
    ) -> Note:
        oid = parse_identifier(notebook_id)
        nid = parse_identifier(note_id, "note")
        with store_errors(f"update_note_{field}"):
            notebook, notes, index = await self._require_note(db, oid, nid, for_update=True)
            doc = notes[index]
            doc[field] = value
            doc["lastAccess"] = advance(_parse_stored_time(doc.get("lastAccess"))).isoformat()
            notebook.notes = notes
            touch(notebook)
            await db.flush()
        return Note.model_validate(doc)

    async def update_note_title(
        self, db: AsyncSession, notebook_id: str, note_id: str, title: str
    ) -> Note:
        return await self._update_note_field(db, notebook_id, note_id, "title", title)

    async def update_note_text(
        self, db: AsyncSession, notebook_id: str, note_id: str, text: str
    ) -> Note:
        return await self._update_note_field(db, notebook_id, note_id, "text", text)

    # ── Data ──────────────────────────────────────────────────────────────

    async def replace_note_data(
        self, db: AsyncSession, notebook_id: str, note_id: str, data: Data
    ) -> Data:
        """Wholesale replacement: the previous queries are discarded, not merged."""
        oid = parse_identifier(notebook_id)
        nid = parse_identifier(note_id, "note")
        with store_errors("replace_note_data"):
            notebook, notes, index = await self._require_note(db, oid, nid, for_update=True)
            notes[index]["data"] = data.to_document()
            notebook.notes = notes
            touch(notebook)
            await db.flush()
        return Data.model_validate(notes[index]["data"])

    async def clear_note_data(self, db: AsyncSession, notebook_id: str, note_id: str) -> None:
        oid = parse_identifier(notebook_id)
        nid = parse_identifier(note_id, "note")
        with store_errors("clear_note_data"):
            notebook, notes, index = await self._require_note(db, oid, nid, for_update=True)
            notes[index]["data"] = dict(EMPTY_DATA)
            notebook.notes = notes
            touch(notebook)
            await db.flush()

    async def clear_notebook_data(self, db: AsyncSession, notebook_id: str) -> None:
        """Reset Data on every note of one notebook; no-op when it is absent."""
        oid = parse_identifier(notebook_id)
        with store_errors("clear_notebook_data"):
            notebook = await self._load(db, oid, for_update=True)
            if notebook is None:
                return
            self._clear_notes_data(notebook)
            await db.flush()

    async def clear_all_data(self, db: AsyncSession) -> None:
        """Reset Data on every note of every notebook."""
        with store_errors("clear_all_data"):
            result = await db.execute(select(Notebook).with_for_update())
            notebooks = result.scalars().all()
            for notebook in notebooks:
                self._clear_notes_data(notebook)
            await db.flush()
        logger.info("Cleared note data in %d notebooks", len(notebooks))

    @staticmethod
    def _clear_notes_data(notebook: Notebook) -> None:
        notes = copy.deepcopy(notebook.notes or [])
        for doc in notes:
            doc["data"] = dict(EMPTY_DATA)
        notebook.notes = notes
        touch(notebook)

    async def get_notebook_data(self, db: AsyncSession, notebook_id: str) -> List[Data]:
        """One Data per note, in note order."""
        oid = parse_identifier(notebook_id)
        with store_errors("get_notebook_data"):
            notebook = await self._require(db, oid)
        return [Data.model_validate(doc.get("data") or {}) for doc in notebook.notes or []]

    async def get_note_data(self, db: AsyncSession, notebook_id: str, note_id: str) -> Data:
        oid = parse_identifier(notebook_id)
        nid = parse_identifier(note_id, "note")
        with store_errors("get_note_data"):
            _, notes, index = await self._require_note(db, oid, nid)
        return Data.model_validate(notes[index].get("data") or {})


notebook_service = NotebookService()
