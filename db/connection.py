"""
db/connection.py
----------------
PostgreSQL connection pool shared by every repository.

Repositories borrow a connection per call (``get_connection`` /
``release_connection``) and own the transaction on it. Statements that
change employees call ``set_actor`` first so the audit triggers know who
made the change.
"""

from typing import Optional

import psycopg2
from psycopg2 import pool
from psycopg2.extensions import parse_dsn

from config import DATABASE_URL
from utils.logger import get_logger

logger = get_logger(__name__)

# EXECUTE FUNCTION in CREATE TRIGGER needs PostgreSQL 11
MIN_SERVER_VERSION = 110000

_pool: pool.SimpleConnectionPool | None = None


def _describe(dsn: str) -> str:
    """user@host:port/dbname, without the password."""
    try:
        parts = parse_dsn(dsn)
    except psycopg2.ProgrammingError:
        return "<unparseable dsn>"
    return (
        f"{parts.get('user', '?')}@{parts.get('host', 'localhost')}:"
        f"{parts.get('port', '5432')}/{parts.get('dbname', '?')}"
    )


def init_pool(min_conn: int = 1, max_conn: int = 5, dsn: Optional[str] = None) -> None:
    """
    Open the pool; calling it again while a pool exists does nothing.

    Args:
        min_conn: Connections opened up front.
        max_conn: Upper bound on concurrent connections.
        dsn: Connection string; defaults to ``config.DATABASE_URL``.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
        RuntimeError: If the server is older than PostgreSQL 11.
    """
    global _pool
    if _pool is not None:
        return

    dsn = dsn or DATABASE_URL
    target = _describe(dsn)
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, dsn)
    except psycopg2.OperationalError as e:
        logger.error(f"Cannot reach HR database {target}: {e}")
        raise

    conn = _pool.getconn()
    try:
        version = conn.server_version
    finally:
        _pool.putconn(conn)

    if version < MIN_SERVER_VERSION:
        close_pool()
        raise RuntimeError(f"PostgreSQL 11 or newer is required, {target} runs {version}")
    logger.info(f"Connected to HR database {target} (server {version}, pool {min_conn}-{max_conn}).")


def get_connection():
    """
    Borrow a connection; the caller must hand it back with release_connection.

    Raises:
        RuntimeError: If init_pool has not been called.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    if _pool is not None:
        _pool.putconn(conn)


def close_pool() -> None:
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("HR database pool closed.")


def set_actor(cur, actor: Optional[str]) -> None:
    """
    Tag the current transaction with the operator performing it.

    The audit columns default to ``hr_current_actor()``, which reads this
    transaction-local setting and falls back to the database role.

    Args:
        cur: An open cursor inside the transaction to tag.
        actor: Operator identity, e.g. ``"tg:123456"``. None keeps the role.
    """
    cur.execute("SELECT set_config('hr.actor', %s, true);", (actor or "",))
