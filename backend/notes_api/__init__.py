"""
Notes API: Application Package Initializer
============================================

What: Marks the `notes_api` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The service is a thin layered CRUD backend:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (one SQL per call)    │  ← Statement building, error mapping
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async engine + bounded pool
    └─────────────────────────────────────┘

    Routes never touch SQL, services never build HTTP responses.
"""

__version__ = "1.0.0"
