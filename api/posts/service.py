"""
Posts business logic.

Thin layer over the repository that turns typed data errors into HTTP
errors: not-found becomes 404, any other data failure becomes 500.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository
from .cache import SnapshotCache
from .errors import DataError, PostNotFoundError
from .schemas import Post, PostCreate, PostUpdate

logger = logging.getLogger(__name__)


def _to_http_error(exc: DataError, *, action: str) -> HTTPException:
    if isinstance(exc, PostNotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found.",
        )
    logger.exception("posts_%s_failed error=%s", action, type(exc).__name__)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action.replace('_', ' ')}.",
    )


async def list_posts(conn: repository.Executor, *, cache: SnapshotCache) -> list[Post]:
    try:
        return await repository.list_posts(conn, cache=cache)
    except DataError as exc:
        raise _to_http_error(exc, action="list_posts") from exc


async def get_post(conn: repository.Executor, post_id: int) -> Post:
    try:
        return await repository.get_post_by_id(conn, post_id)
    except DataError as exc:
        raise _to_http_error(exc, action="get_post") from exc


async def create_post(
    conn: repository.Executor,
    payload: PostCreate,
    *,
    cache: SnapshotCache,
) -> Post:
    try:
        return await repository.create_post(conn, payload.to_post(), cache=cache)
    except DataError as exc:
        raise _to_http_error(exc, action="create_post") from exc


async def update_post(
    conn: repository.Executor,
    post_id: int,
    payload: PostUpdate,
    *,
    cache: SnapshotCache,
) -> Post:
    try:
        await repository.update_post(conn, payload.to_post(post_id=post_id), cache=cache)
        # Point lookup for created_at; the cache is empty at this point anyway.
        return await repository.get_post_by_id(conn, post_id)
    except DataError as exc:
        raise _to_http_error(exc, action="update_post") from exc


async def delete_post(conn: repository.Executor, post_id: int, *, cache: SnapshotCache) -> None:
    try:
        await repository.delete_post(conn, post_id, cache=cache)
    except DataError as exc:
        raise _to_http_error(exc, action="delete_post") from exc
