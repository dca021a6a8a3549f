"""
Todo Labels Backend — Application Package Initializer
=====================================================

What: Marks the `app` directory as a Python package.
Why:  Enables module imports like `from app.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is a layered CRUD service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP translation only
    ├─────────────────────────────────────┤
    │     Services (Data-access Layer)    │  ← Todos, labels, associations
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async sessions, transactions
    └─────────────────────────────────────┘

    The `client` subpackage sits on the other side of HTTP: it is the
    client-side state container that talks to the routes above.
"""

__version__ = "1.0.0"
