"""
Core business logic for the lesson planner.

Platform-agnostic: used by web_api/ and importable by any other interface.
"""

from .database import get_connection, get_transaction, init_db, close_engine
from .enums import Section, ScalarFieldName, MetadataKey, ListSection

__all__ = [
    "get_connection",
    "get_transaction",
    "init_db",
    "close_engine",
    "Section",
    "ScalarFieldName",
    "MetadataKey",
    "ListSection",
]
