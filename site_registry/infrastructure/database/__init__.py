"""
Database infrastructure - ORM models, repositories, and connection management.
"""
from .connection import (
    Base,
    DatabaseManager,
    get_unit_of_work,
    health_check,
    init_db,
)
from .unit_of_work import SQLAlchemyUnitOfWork

__all__ = [
    'Base',
    'DatabaseManager',
    'get_unit_of_work',
    'health_check',
    'init_db',
    'SQLAlchemyUnitOfWork',
]
