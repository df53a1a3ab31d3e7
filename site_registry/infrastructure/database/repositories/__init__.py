"""
SQLAlchemy repository implementations.
"""
from .site_repository import SQLAlchemySiteRepository
from .user_repository import SQLAlchemyUserRepository

__all__ = [
    'SQLAlchemySiteRepository',
    'SQLAlchemyUserRepository',
]
