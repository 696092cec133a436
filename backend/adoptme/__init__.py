"""
AdoptMe Backend — Application Package
======================================

What: Pet adoption REST API plus the two browser pages that consume it.
Who:  Imported by uvicorn (`adoptme.main:app`), Alembic, the seed command and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │     Routes (API + UI pages)         │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (PetService)           │  ← CRUD operations, error typing
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Database (connection manager)   │  ← Lazily connected async engine
    └─────────────────────────────────────┘

    The Database instance is created by the application factory and handed
    down explicitly; no layer reaches for a module-level connection.
"""

__version__ = "1.0.0"
