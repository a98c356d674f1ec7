"""
SQLAlchemy declarative base and shared utilities for all models.

Convention:
    - Each table lives in its own file under `stock_collector/db/models/`
    - Every model file imports `Base` from here
    - The `__init__.py` re-exports all models so Alembic sees them
    - All tables live in the `invrpt` schema shared with the inventory reporting services
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase

INVRPT_SCHEMA = "invrpt"


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


# ─── Shared helpers ───────────────────────────
def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)
