"""
Database module for Aosha

Provides database connection management, session handling,
and base models for SQLAlchemy ORM.
"""

from .base import Base, BaseModel
from .connection import DatabaseManager, db_manager

__all__ = [
    'Base',
    'BaseModel',
    'DatabaseManager',
    'db_manager',
]
