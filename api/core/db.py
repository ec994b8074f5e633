"""
Async database wiring using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`). Feature code never creates
connections itself; it receives the pool as a handle and runs raw SQL on it.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
import os
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _strip_sslmode(url: str) -> str:
    """
    Drop a libpq-style `sslmode` query parameter from the posts database DSN;
    every other query parameter is passed through to asyncpg unchanged.
    """
    parts = urlsplit(url)
    pairs = parse_qsl(parts.query, keep_blank_values=True)
    kept = [(key, value) for key, value in pairs if key != "sslmode"]
    if len(kept) == len(pairs):
        return url
    return urlunsplit(parts._replace(query=urlencode(kept)))


def database_url() -> str:
    raw = os.environ.get("DATABASE_URL", "").strip()
    if not raw:
        raise RuntimeError("DATABASE_URL must point at the posts database.")
    return _strip_sslmode(raw)


def database_auth_token() -> str | None:
    # Empty means "use whatever credentials the DSN carries".
    return os.environ.get("DATABASE_AUTH_TOKEN", "").strip() or None


def pool_min_size() -> int:
    return max(1, _env_int("DB_POOL_MIN_SIZE", 1))


def pool_max_size() -> int:
    return max(pool_min_size(), _env_int("DB_POOL_MAX_SIZE", 5))


def command_timeout_s() -> int:
    return _env_int("DB_COMMAND_TIMEOUT", 30)


async def init_pool() -> asyncpg.Pool:
    global _pool
    if _pool is not None:
        return _pool
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        password=database_auth_token(),
        min_size=pool_min_size(),
        max_size=pool_max_size(),
        command_timeout=command_timeout_s(),
    )
    logger.info("db_pool_ready min_size=%s max_size=%s", pool_min_size(), pool_max_size())
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    open_connections = _pool.get_size()
    await _pool.close()
    _pool = None
    logger.info("db_pool_closed connections=%s", open_connections)


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Posts database pool is not open; the app lifespan opens it.")
    return _pool


async def get_connection() -> asyncpg.Pool:
    """
    FastAPI dependency returning the shared database handle.

    The pool exposes the same `fetch` / `fetchrow` / `execute` API as a single
    connection, so repositories accept either.
    """
    return pool()
