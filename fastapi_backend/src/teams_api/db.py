import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import psycopg2
import psycopg2.extras
from psycopg2.pool import ThreadedConnectionPool

from src.teams_api.config import Settings

logger = logging.getLogger(__name__)

_POOL: Optional[ThreadedConnectionPool] = None
# Gates getconn() so callers queue for a free connection instead of hitting PoolError.
_SLOTS: Optional[threading.BoundedSemaphore] = None
_POOL_LOCK = threading.Lock()


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'user',
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE UNIQUE INDEX IF NOT EXISTS users_email_key ON users (email);

CREATE TABLE IF NOT EXISTS coaches (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    age INTEGER NOT NULL,
    experience INTEGER NOT NULL,
    associated_with INTEGER NOT NULL,
    username TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE UNIQUE INDEX IF NOT EXISTS coaches_username_key ON coaches (username);
CREATE INDEX IF NOT EXISTS coaches_name_idx ON coaches (name);

CREATE TABLE IF NOT EXISTS teams (
    id SERIAL PRIMARY KEY,
    team_name TEXT NOT NULL,
    game_type TEXT NOT NULL,
    location TEXT NOT NULL,
    coach_id INTEGER NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS players (
    id SERIAL PRIMARY KEY,
    player_name TEXT NOT NULL,
    position TEXT NOT NULL,
    age INTEGER NOT NULL,
    team TEXT NOT NULL,
    email TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE UNIQUE INDEX IF NOT EXISTS players_email_key ON players (email);
CREATE INDEX IF NOT EXISTS players_player_name_idx ON players (player_name);
"""


# PUBLIC_INTERFACE
def init_db_pool(settings: Settings) -> None:
    """Initialize the global PostgreSQL connection pool."""
    global _POOL, _SLOTS
    with _POOL_LOCK:
        if _POOL is not None:
            return
        _POOL = ThreadedConnectionPool(
            minconn=settings.pool_min,
            maxconn=settings.pool_max,
            dsn=settings.database_dsn,
        )
        _SLOTS = threading.BoundedSemaphore(settings.pool_max)
        logger.info("Database pool ready (max %d connections)", settings.pool_max)


# PUBLIC_INTERFACE
def close_db_pool() -> None:
    """Close every pooled connection."""
    global _POOL, _SLOTS
    with _POOL_LOCK:
        if _POOL is None:
            return
        _POOL.closeall()
        _POOL = None
        _SLOTS = None


@contextmanager
def _get_conn():
    if _POOL is None or _SLOTS is None:
        raise RuntimeError("Database pool is not initialized; call init_db_pool() first.")
    pool, slots = _POOL, _SLOTS
    slots.acquire()
    try:
        conn = pool.getconn()
        try:
            yield conn
        except Exception:
            if not conn.closed:
                conn.rollback()
            raise
        finally:
            pool.putconn(conn, close=bool(conn.closed))
    finally:
        slots.release()


def _dict_cursor(conn):
    return conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)


# PUBLIC_INTERFACE
def fetch_one(query: str, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
    """Fetch a single row as a dict, or None."""
    with _get_conn() as conn:
        with _dict_cursor(conn) as cur:
            cur.execute(query, params or [])
            row = cur.fetchone()
            conn.commit()
            return dict(row) if row else None


# PUBLIC_INTERFACE
def fetch_all(query: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
    """Fetch all rows as dicts."""
    with _get_conn() as conn:
        with _dict_cursor(conn) as cur:
            cur.execute(query, params or [])
            rows = cur.fetchall()
            conn.commit()
            return [dict(r) for r in rows]


# PUBLIC_INTERFACE
def execute_returning_one(query: str, params: Optional[Sequence[Any]] = None) -> Dict[str, Any]:
    """Execute a statement with RETURNING and return the first row as dict."""
    with _get_conn() as conn:
        with _dict_cursor(conn) as cur:
            cur.execute(query, params or [])
            row = cur.fetchone()
            if not row:
                conn.rollback()
                raise RuntimeError("Expected one row returned, got none.")
            conn.commit()
            return dict(row)


# PUBLIC_INTERFACE
def init_schema() -> None:
    """Create the roster tables and their unique indexes if they are missing."""
    with _get_conn() as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
    logger.info("Database schema verified")


# PUBLIC_INTERFACE
def ping() -> int:
    """Round-trip a trivial query; returns 2 when the store is reachable."""
    row = fetch_one("SELECT 1 + 1 AS solution")
    return int(row["solution"]) if row else 0
