"""Database management for the news desk."""

from .connection import close_connection_pool, get_connection, get_connection_pool
from .init import init_database, validate_connection
from .store import PostgresStore

__all__ = [
    "PostgresStore",
    "close_connection_pool",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
