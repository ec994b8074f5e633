"""
Shared fixtures: an in-memory stand-in for the asyncpg handle.

`FakePostsConnection` understands exactly the statements issued by
`posts.repository` and records every call, so tests can tell a cache hit
(no query) from a miss (one `fetch`).
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from posts.cache import SnapshotCache


class FakePostsConnection:
    def __init__(self) -> None:
        self.rows: dict[int, tuple[Any, ...]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_with: BaseException | None = None
        self.gate: asyncio.Event | None = None
        self._next_id = 1
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    # -- helpers for tests -------------------------------------------------

    def seed(self, title: str, author_id: str, content: str = "body") -> int:
        post_id = self._next_id
        self._next_id += 1
        self._clock += timedelta(seconds=1)
        self.rows[post_id] = (post_id, title, content, author_id, self._clock)
        return post_id

    def count(self, method: str) -> int:
        return sum(1 for m, _ in self.calls if m == method)

    async def _enter(self, method: str, sql: str) -> None:
        self.calls.append((method, " ".join(sql.split())))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

    # -- asyncpg surface ---------------------------------------------------

    async def execute(self, sql: str, *args: Any) -> str:
        await self._enter("execute", sql)
        return "CREATE TABLE"

    async def fetch(self, sql: str, *args: Any) -> list[tuple[Any, ...]]:
        await self._enter("fetch", sql)
        if "WHERE id = $1" in sql:
            return [row for row in self.rows.values() if row[0] == args[0]]
        if "ORDER BY title, author_id" in sql:
            return sorted(self.rows.values(), key=lambda row: (row[1], row[3]))
        raise AssertionError(f"Unexpected fetch: {sql}")

    async def fetchrow(self, sql: str, *args: Any) -> tuple[Any, ...] | None:
        await self._enter("fetchrow", sql)
        statement = sql.strip().split(None, 1)[0].upper()
        if statement == "INSERT":
            title, content, author_id = args
            post_id = self.seed(title, author_id, content)
            return self.rows[post_id]
        if statement == "UPDATE":
            title, content, author_id, post_id = args
            row = self.rows.get(post_id)
            if row is None:
                return None
            self.rows[post_id] = (post_id, title, content, author_id, row[4])
            return (post_id,)
        if statement == "DELETE":
            (post_id,) = args
            if self.rows.pop(post_id, None) is None:
                return None
            return (post_id,)
        raise AssertionError(f"Unexpected fetchrow: {sql}")


@pytest.fixture
def conn() -> FakePostsConnection:
    return FakePostsConnection()


@pytest.fixture
def cache() -> SnapshotCache:
    return SnapshotCache()
