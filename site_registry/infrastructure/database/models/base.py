"""
SQLAlchemy base model and common column types.
"""
from sqlalchemy import JSON, Column, DateTime
from sqlalchemy.dialects.postgresql import JSONB

from ..connection import Base

# JSONB on PostgreSQL, generic JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), 'postgresql')


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)


__all__ = ['Base', 'JSONDocument', 'TimestampMixin']
