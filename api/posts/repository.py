"""
Post persistence (raw SQL) and the read-through / write-invalidate logic
around `SnapshotCache`.

Every function takes the database handle (pool or connection) as its first
argument. `list_posts` is the only reader that uses the cache; point lookups
always hit the database. Mutations invalidate the cache after the statement
is acknowledged and before returning.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Any

import asyncpg
from pydantic import ValidationError

from .cache import SnapshotCache
from .errors import (
    DatabaseConnectionError,
    PostNotFoundError,
    QueryError,
    SerializationError,
)
from .schemas import Post

logger = logging.getLogger(__name__)

Executor = asyncpg.Pool | asyncpg.Connection

# Column order is part of the row mapping below; keep them in sync.
POST_COLUMNS = "id, title, content, author_id, created_at"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS posts (
    id         SERIAL PRIMARY KEY,
    title      VARCHAR(256)  NOT NULL,
    content    VARCHAR(1000) NOT NULL,
    author_id  TEXT          NOT NULL,
    created_at TIMESTAMPTZ   NOT NULL DEFAULT now()
)
"""

LIST_POSTS_SQL = f"SELECT {POST_COLUMNS} FROM posts ORDER BY title, author_id"

# `id` is SERIAL (int4); ids outside its range cannot name a row.
MAX_POST_ID = 2**31 - 1


@contextmanager
def _translate_db_errors(action: str) -> Iterator[None]:
    try:
        yield
    except (
        OSError,
        asyncpg.exceptions.InterfaceError,
        asyncpg.exceptions.PostgresConnectionError,
    ) as exc:
        raise DatabaseConnectionError(f"Database unavailable during {action}: {exc}") from exc
    except asyncpg.PostgresError as exc:
        raise QueryError(f"Query failed during {action}: {exc}") from exc


def _check_post_id(post_id: int) -> None:
    if not -MAX_POST_ID - 1 <= post_id <= MAX_POST_ID:
        raise PostNotFoundError(post_id)


def _row_to_post(row: Sequence[Any]) -> Post:
    try:
        created_at = row[4]
        if isinstance(created_at, datetime):
            created_at = created_at.isoformat()
        return Post(
            id=row[0],
            title=row[1],
            content=row[2],
            author_id=row[3],
            created_at=created_at,
        )
    except (IndexError, ValidationError) as exc:
        raise SerializationError(f"Row does not match the posts schema: {exc}") from exc


async def ensure_schema(conn: Executor) -> None:
    with _translate_db_errors("ensure_schema"):
        await conn.execute(SCHEMA_SQL)


async def list_posts(conn: Executor, *, cache: SnapshotCache) -> list[Post]:
    """
    Return every post ordered by title, then author.

    Served from `cache` when populated; otherwise read from the database and
    used to refresh the cache. A failed read leaves the cache empty.
    """
    cached = await cache.get()
    if cached is not None:
        logger.debug("posts_cache_hit rows=%s", len(cached))
        return cached

    generation = cache.generation
    with _translate_db_errors("list_posts"):
        rows = await conn.fetch(LIST_POSTS_SQL)

    posts = [_row_to_post(row) for row in rows]
    await cache.refresh(posts, generation=generation)
    logger.debug("posts_cache_miss rows=%s", len(posts))
    return posts


async def get_post_by_id(conn: Executor, post_id: int) -> Post:
    _check_post_id(post_id)
    # LIMIT 2 is enough to detect a broken primary key without a full scan.
    with _translate_db_errors("get_post_by_id"):
        rows = await conn.fetch(
            f"""
            SELECT {POST_COLUMNS}
            FROM posts
            WHERE id = $1
            LIMIT 2
            """,
            post_id,
        )

    if not rows:
        raise PostNotFoundError(post_id)
    if len(rows) > 1:
        logger.error("posts_duplicate_id post_id=%s", post_id)
        raise QueryError(f"More than one row has id {post_id}.")
    return _row_to_post(rows[0])


async def create_post(conn: Executor, post: Post, *, cache: SnapshotCache) -> Post:
    with _translate_db_errors("create_post"):
        row = await conn.fetchrow(
            f"""
            INSERT INTO posts (title, content, author_id)
            VALUES ($1, $2, $3)
            RETURNING {POST_COLUMNS}
            """,
            post.title,
            post.content,
            post.author_id,
        )
    if row is None:
        raise QueryError("Insert returned no row.")

    created = _row_to_post(row)
    await cache.invalidate()
    logger.info("post_created post_id=%s author_id=%s", created.id, created.author_id)
    return created


async def update_post(conn: Executor, post: Post, *, cache: SnapshotCache) -> None:
    if post.id is None:
        raise ValueError("Cannot update a post that has no id.")
    _check_post_id(post.id)

    with _translate_db_errors("update_post"):
        row = await conn.fetchrow(
            """
            UPDATE posts
            SET title = $1,
                content = $2,
                author_id = $3
            WHERE id = $4
            RETURNING id
            """,
            post.title,
            post.content,
            post.author_id,
            post.id,
        )
    if row is None:
        raise PostNotFoundError(post.id)

    await cache.invalidate()
    logger.info("post_updated post_id=%s", post.id)


async def delete_post(conn: Executor, post_id: int, *, cache: SnapshotCache) -> None:
    _check_post_id(post_id)
    with _translate_db_errors("delete_post"):
        row = await conn.fetchrow(
            """
            DELETE FROM posts
            WHERE id = $1
            RETURNING id
            """,
            post_id,
        )
    if row is None:
        raise PostNotFoundError(post_id)

    await cache.invalidate()
    logger.info("post_deleted post_id=%s", post_id)
