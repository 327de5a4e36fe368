"""
Notebook API - Notebook Route Handlers
======================================

What:  Notebook-level endpoints: list, create, fetch, title lookup, sparse
       patch, delete, lastAccess, and notebook-wide Data operations.
How:   Extract path params and bodies, delegate to NotebookService, return
       JSON. Errors are raised as application exceptions and formatted by
       the global handlers in main.py.

Route order:
    Literal paths (/notebooks/removeAll, /notebooks/removeAllData,
    /notebooks/by-title/...) are declared before /notebooks/{notebook_id},
    otherwise the parametric route would capture them.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notebook_api.database import get_db_session
from notebook_api.schemas.notebook import (
    Data,
    ErrorResponse,
    LastAccessResponse,
    NotebookCreate,
    NotebookPatch,
    NotebookResponse,
    NotebookSummary,
)
from notebook_api.services.notebook_service import notebook_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notebooks"])

ID_ERRORS = {
    400: {"description": "Malformed identifier or body", "model": ErrorResponse},
    404: {"description": "Notebook not found", "model": ErrorResponse},
    500: {"description": "Store failure", "model": ErrorResponse},
}


@router.get(
    "/notebooks",
    response_model=List[NotebookResponse],
    response_model_exclude_none=True,
    summary="List all notebooks",
)
async def list_notebooks(db: AsyncSession = Depends(get_db_session)) -> List[NotebookResponse]:
    return await notebook_service.list_notebooks(db)


@router.post(
    "/notebooks",
    response_model=NotebookResponse,
    response_model_exclude_none=True,
    responses={400: ID_ERRORS[400], 500: ID_ERRORS[500]},
    summary="Create a notebook",
    description=(
        "Creates a notebook from `{title, notes}`. The server assigns the id, "
        "sets `created` and `lastAccess` to now, and starts with empty `data`."
    ),
)
async def create_notebook(
    payload: NotebookCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NotebookResponse:
    return await notebook_service.create_notebook(db, payload)


@router.delete("/notebooks/removeAll", summary="Delete every notebook")
async def remove_all_notebooks(db: AsyncSession = Depends(get_db_session)) -> Response:
    await notebook_service.delete_all_notebooks(db)
    return Response(status_code=200)


@router.delete("/notebooks/removeAllData", summary="Clear Data on every note of every notebook")
async def remove_all_data(db: AsyncSession = Depends(get_db_session)) -> Response:
    await notebook_service.clear_all_data(db)
    return Response(status_code=200)


@router.get(
    "/notebooks/by-title/{title}",
    response_model=NotebookSummary,
    responses={404: ID_ERRORS[404]},
    summary="Look up a notebook by exact title",
)
async def get_notebook_by_title(
    title: str,
    db: AsyncSession = Depends(get_db_session),
) -> NotebookSummary:
    return await notebook_service.get_notebook_summary(db, title)


@router.get(
    "/notebooks/{notebook_id}",
    response_model=NotebookResponse,
    response_model_exclude_none=True,
    responses=ID_ERRORS,
    summary="Fetch a notebook (refreshes lastAccess)",
)
async def get_notebook(
    notebook_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NotebookResponse:
    return await notebook_service.get_notebook(db, notebook_id)


@router.delete(
    "/notebooks/{notebook_id}",
    responses={400: ID_ERRORS[400]},
    summary="Delete a notebook and its notes",
)
async def remove_notebook(
    notebook_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await notebook_service.delete_notebook(db, notebook_id)
    return Response(status_code=200)


@router.patch(
    "/notebooks/{notebook_id}/data",
    response_model=NotebookResponse,
    response_model_exclude_none=True,
    responses=ID_ERRORS,
    summary="Sparse update of notebook fields",
    description=(
        "Applies only the fields present in the body (`title`, `notes`, "
        "`created`, `data`). Absent fields keep their stored value; `data` "
        "is replaced wholesale."
    ),
)
async def patch_notebook(
    notebook_id: str,
    patch: NotebookPatch,
    db: AsyncSession = Depends(get_db_session),
) -> NotebookResponse:
    return await notebook_service.patch_notebook(db, notebook_id, patch)


@router.get(
    "/notebooks/{notebook_id}/data",
    response_model=List[Data],
    response_model_exclude_none=True,
    responses=ID_ERRORS,
    summary="Data payload of every note in a notebook",
)
async def get_notebook_data(
    notebook_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[Data]:
    return await notebook_service.get_notebook_data(db, notebook_id)


@router.delete(
    "/notebooks/{notebook_id}/data",
    responses={400: ID_ERRORS[400]},
    summary="Clear Data on every note of a notebook",
)
async def remove_notebook_data(
    notebook_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await notebook_service.clear_notebook_data(db, notebook_id)
    return Response(status_code=200)


@router.post(
    "/notebooks/{notebook_id}/lastaccess",
    response_model=LastAccessResponse,
    responses=ID_ERRORS,
    summary="Refresh a notebook's lastAccess",
)
async def update_last_access(
    notebook_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> LastAccessResponse:
    return await notebook_service.touch_notebook(db, notebook_id)


@router.get(
    "/notebooks/{notebook_id}/lastaccessdate",
    response_model=LastAccessResponse,
    responses=ID_ERRORS,
    summary="Read a notebook's lastAccess",
)
async def get_last_access_date(
    notebook_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> LastAccessResponse:
    return await notebook_service.get_last_access(db, notebook_id)
