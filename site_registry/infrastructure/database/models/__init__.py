"""
SQLAlchemy ORM models.
"""
from .base import Base, JSONDocument, TimestampMixin
from .site_model import SiteModel
from .user_model import UserModel

__all__ = [
    'Base',
    'JSONDocument',
    'TimestampMixin',
    'SiteModel',
    'UserModel',
]
