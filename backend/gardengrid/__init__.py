"""
GardenGrid Backend — Application Package Initializer
====================================================

What: Marks the `gardengrid` directory as a Python package.
Why:  Enables module imports like `from gardengrid.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership, transactions, activation
    ├──────────────────┬──────────────────┤
    │   Layout core    │ Models & Schemas │  ← Pure placement + ORM/Pydantic
    ├──────────────────┴──────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The layout core (`gardengrid.layout`) has no I/O at all: it decides
    whether a rectangle fits on a grid and keeps an occupancy grid in sync
    with a list of occupants. Services feed it rows loaded from the database.
"""

__version__ = "1.0.0"
