"""
Post schemas (domain model + request bodies).

Python code uses snake_case attributes; the wire format is camelCase
(`authorId`, `createdAt`).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Post(_CamelModel):
    """
    One row of the `posts` table.

    `id` and `created_at` are assigned by the database; a post with
    `id=None` has never been persisted.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    title: str
    content: str
    author_id: str
    created_at: str | None = None


class PostCreate(_CamelModel):
    title: str = Field(..., min_length=1, max_length=256)
    content: str = Field(..., min_length=1, max_length=1000)
    author_id: str = Field(..., min_length=1, max_length=256)

    def to_post(self, *, post_id: int | None = None) -> Post:
        return Post(
            id=post_id,
            title=self.title,
            content=self.content,
            author_id=self.author_id,
        )


class PostUpdate(PostCreate):
    """
    Full replacement of the editable fields; `id` comes from the path.
    """
