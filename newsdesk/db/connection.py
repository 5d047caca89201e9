"""Database connection management."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 5
POOL_MAX_SIZE = 5

# One pool per distinct connection string.
_pools: Dict[str, ConnectionPool] = {}


def build_conninfo(config: Dict[str, Any]) -> str:
    """
    Build a libpq connection string from ``Config.get_db_config()``.

    The password is expected to be resolved already; ``password_env`` is
    ignored here.
    """
    params = {
        "host": config.get("host") or "localhost",
        "port": config.get("port") or 5432,
        "dbname": config.get("database") or "newsdesk",
        "user": config.get("user") or "newsdesk",
    }
    if config.get("password"):
        params["password"] = config["password"]
    return make_conninfo(**params)


def connect(config: Dict[str, Any]) -> psycopg.Connection:
    """Open a single connection outside the pool."""
    return psycopg.connect(
        build_conninfo(config),
        connect_timeout=CONNECT_TIMEOUT,
        row_factory=dict_row,
    )


def get_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Get or create the pool for this configuration."""
    conninfo = build_conninfo(config)
    pool = _pools.get(conninfo)
    if pool is None:
        pool = ConnectionPool(
            conninfo,
            min_size=1,
            max_size=POOL_MAX_SIZE,
            kwargs={"row_factory": dict_row, "connect_timeout": CONNECT_TIMEOUT},
            open=True,
        )
        _pools[conninfo] = pool
    return pool


def close_connection_pool() -> None:
    """Close every open pool."""
    while _pools:
        _, pool = _pools.popitem()
        pool.close()
    logger.debug("Connection pools closed")


@contextmanager
def get_connection(config: Dict[str, Any]) -> Generator[psycopg.Connection, None, None]:
    """Get a database connection from the pool."""
    pool = get_connection_pool(config)
    with pool.connection() as conn:
        yield conn
