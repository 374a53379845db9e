"""
PostRepository — Posts and the per-author listing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from usergraph.db.repositories.base import WritableRepository

log = logging.getLogger("usergraph.db.repositories.post")


@dataclass
class PostRecord:
    """Typed representation of a post."""

    id: str
    title: str
    content: str
    author_id: str

    @classmethod
    def from_row(cls, row: tuple) -> "PostRecord":
        """Build from a DB row tuple (id, title, content, author_id)."""
        if not row or len(row) < 4:
            raise ValueError(f"Invalid post row: {row}")
        return cls(
            id=str(row[0]),
            title=str(row[1]),
            content=str(row[2]),
            author_id=str(row[3]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a dictionary representation."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "author_id": self.author_id,
        }


class PostRepository(WritableRepository):
    """Post CRUD."""

    table = "tbl_post"
    entity = "Post"
    columns = ("id", "title", "content", "author_id")
    required_fields = ("title", "content", "author_id")
    record_type = PostRecord

    def find_many(self, author_id: Any = None) -> list[PostRecord]:
        """List all posts, or only those written by *author_id*."""
        if author_id is None:
            return super().find_many()
        return self._find_by("author_id", author_id)
