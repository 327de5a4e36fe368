"""
Notebook API - Note Route Handlers
==================================

What:  Endpoints addressing notes inside a notebook, and each note's Data.
How:   Every note is addressed by the compound key (notebook_id, note_id).
       A well-formed key that matches nothing is a 404.

Endpoints:
    POST   /notebook/{id}/notes                 append a note
    POST   /notebooks/{id}/notes                same, plural form
    GET    /notebooks/{id}/notes                list notes
    GET    /notebooks/{id}/notes/{nid}          one note
    DELETE /notebooks/{id}/notes/{nid}          remove a note
    PATCH  /notebooks/{id}/notes/{nid}/title    rename
    PATCH  /notebooks/{id}/notes/{nid}/text     rewrite body
    GET    /notebooks/{id}/notes/{nid}/data     note Data (also .../alldata)
    POST   /notebooks/{id}/notes/{nid}/data     replace note Data (also PATCH)
    DELETE /notebooks/{id}/notes/{nid}/data     clear note Data
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notebook_api.database import get_db_session
from notebook_api.schemas.notebook import (
    Data,
    ErrorResponse,
    Note,
    NoteCreate,
    NoteDetail,
    NoteTextUpdate,
    NoteTitleUpdate,
)
from notebook_api.services.notebook_service import notebook_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

NOTE_ERRORS = {
    400: {"description": "Malformed identifier or body", "model": ErrorResponse},
    404: {"description": "Notebook or note not found", "model": ErrorResponse},
    500: {"description": "Store failure", "model": ErrorResponse},
}


@router.post(
    "/notebook/{notebook_id}/notes",
    response_model=Note,
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    summary="Append a note to a notebook",
)
@router.post(
    "/notebooks/{notebook_id}/notes",
    response_model=Note,
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    include_in_schema=False,
)
async def add_note(
    notebook_id: str,
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> Note:
    return await notebook_service.add_note(db, notebook_id, payload)


@router.get(
    "/notebooks/{notebook_id}/notes",
    response_model=List[Note],
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    summary="List a notebook's notes",
)
async def list_notes(
    notebook_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[Note]:
    return await notebook_service.list_notes(db, notebook_id)


@router.get(
    "/notebooks/{notebook_id}/notes/{note_id}",
    response_model=NoteDetail,
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    summary="Fetch one note",
)
async def get_note(
    notebook_id: str,
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NoteDetail:
    return await notebook_service.get_note(db, notebook_id, note_id)


@router.delete(
    "/notebooks/{notebook_id}/notes/{note_id}",
    responses={400: NOTE_ERRORS[400]},
    summary="Remove a note (no-op when absent)",
)
async def remove_note(
    notebook_id: str,
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await notebook_service.remove_note(db, notebook_id, note_id)
    return Response(status_code=200)


@router.patch(
    "/notebooks/{notebook_id}/notes/{note_id}/title",
    response_model=Note,
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    summary="Change a note's title",
)
async def patch_note_title(
    notebook_id: str,
    note_id: str,
    payload: NoteTitleUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> Note:
    return await notebook_service.update_note_title(db, notebook_id, note_id, payload.title)


@router.patch(
    "/notebooks/{notebook_id}/notes/{note_id}/text",
    response_model=Note,
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    summary="Change a note's text",
)
async def patch_note_text(
    notebook_id: str,
    note_id: str,
    payload: NoteTextUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> Note:
    return await notebook_service.update_note_text(db, notebook_id, note_id, payload.text)


@router.get(
    "/notebooks/{notebook_id}/notes/{note_id}/data",
    response_model=Data,
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    summary="Read a note's Data",
)
@router.get(
    "/notebooks/{notebook_id}/notes/{note_id}/alldata",
    response_model=Data,
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    summary="Read a note's Data",
)
async def get_note_data(
    notebook_id: str,
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Data:
    return await notebook_service.get_note_data(db, notebook_id, note_id)


@router.post(
    "/notebooks/{notebook_id}/notes/{note_id}/data",
    response_model=Data,
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    summary="Replace a note's Data",
)
@router.patch(
    "/notebooks/{notebook_id}/notes/{note_id}/data",
    response_model=Data,
    response_model_exclude_none=True,
    responses=NOTE_ERRORS,
    summary="Replace a note's Data",
)
async def replace_note_data(
    notebook_id: str,
    note_id: str,
    payload: Data,
    db: AsyncSession = Depends(get_db_session),
) -> Data:
    return await notebook_service.replace_note_data(db, notebook_id, note_id, payload)


@router.delete(
    "/notebooks/{notebook_id}/notes/{note_id}/data",
    responses=NOTE_ERRORS,
    summary="Clear a note's Data",
)
async def remove_note_data(
    notebook_id: str,
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await notebook_service.clear_note_data(db, notebook_id, note_id)
    return Response(status_code=200)
