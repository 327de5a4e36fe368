"""
Notebook API - Application Package
==================================

What: Marks the `notebook_api` directory as a Python package.
Who:  Used by uvicorn, Alembic, pytest, and `python -m notebook_api`.

Architecture Note:
    The backend keeps the same layered split for every request:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← path params, bodies, status codes
    ├─────────────────────────────────────┤
    │     NotebookService (Mapper)        │  ← ID validation, one store round-trip
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy row + Pydantic wire models
    ├─────────────────────────────────────┤
    │     Database (injected handle)      │  ← Async SQLAlchemy engine and sessions
    └─────────────────────────────────────┘

    A notebook is a single document: one row whose notes and data live in
    JSON columns. Every mutation reads and rewrites that one row inside one
    transaction.
"""

__version__ = "1.0.0"
