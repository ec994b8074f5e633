"""
Posts API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from core import db

from . import repository, schemas, service
from .cache import SnapshotCache

router = APIRouter(prefix="/posts")


def get_post_cache(request: Request) -> SnapshotCache:
    return request.app.state.post_cache


@router.get("", response_model=list[schemas.Post])
async def list_posts(
    conn: repository.Executor = Depends(db.get_connection),
    cache: SnapshotCache = Depends(get_post_cache),
) -> list[schemas.Post]:
    return await service.list_posts(conn, cache=cache)


@router.get("/{post_id}", response_model=schemas.Post)
async def get_post(
    post_id: int,
    conn: repository.Executor = Depends(db.get_connection),
) -> schemas.Post:
    return await service.get_post(conn, post_id)


@router.post("", response_model=schemas.Post, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: schemas.PostCreate,
    conn: repository.Executor = Depends(db.get_connection),
    cache: SnapshotCache = Depends(get_post_cache),
) -> schemas.Post:
    return await service.create_post(conn, payload, cache=cache)


@router.put("/{post_id}", response_model=schemas.Post)
async def update_post(
    post_id: int,
    payload: schemas.PostUpdate,
    conn: repository.Executor = Depends(db.get_connection),
    cache: SnapshotCache = Depends(get_post_cache),
) -> schemas.Post:
    return await service.update_post(conn, post_id, payload, cache=cache)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    conn: repository.Executor = Depends(db.get_connection),
    cache: SnapshotCache = Depends(get_post_cache),
) -> Response:
    await service.delete_post(conn, post_id, cache=cache)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
