"""
Typed data-access errors.

Repositories raise only these; the service layer maps `PostNotFoundError`
to 404 and every other `DataError` to 500.
"""

from __future__ import annotations


class DataError(RuntimeError):
    pass


class DatabaseConnectionError(DataError):
    """Database unreachable or the connection dropped mid-statement."""


class QueryError(DataError):
    """Statement rejected or failed inside the driver."""


class SerializationError(DataError):
    """A row did not fit the `Post` shape (schema drift)."""


class PostNotFoundError(DataError):
    def __init__(self, post_id: int) -> None:
        super().__init__(f"Post {post_id} not found.")
        self.post_id = post_id
