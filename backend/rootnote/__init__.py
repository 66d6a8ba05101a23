"""
RootNote Backend — Application Package Initializer
==================================================

What: Marks the `rootnote` directory as a Python package.
Who:  Imported by uvicorn (`rootnote.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is a thin layered API over a single `plants` table:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Services (Plant Store)       │  ← validation, CRUD, outcomes
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async SQLAlchemy over SQLite
    └─────────────────────────────────────┘

    Routes never touch SQL; the store never touches HTTP.
"""

__version__ = "1.0.0"
