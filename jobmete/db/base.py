"""
SQLAlchemy declarative base.

All models inherit from this Base class so Alembic can discover them
through a single metadata object.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass
