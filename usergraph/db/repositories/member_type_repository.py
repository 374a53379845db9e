"""
MemberTypeRepository — Read-only access to the membership tiers.

Member types are reference data seeded when the schema is created;
nothing in the API creates, changes or deletes them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from usergraph.db.repositories.base import AbstractRepository

log = logging.getLogger("usergraph.db.repositories.member_type")


@dataclass
class MemberTypeRecord:
    """Typed representation of a member type."""

    id: str
    discount: float
    posts_limit_per_month: int

    @classmethod
    def from_row(cls, row: tuple) -> "MemberTypeRecord":
        """Build from a DB row tuple (id, discount, posts_limit_per_month)."""
        if not row or len(row) < 3:
            raise ValueError(f"Invalid member type row: {row}")
        return cls(
            id=str(row[0]),
            discount=float(row[1]),
            posts_limit_per_month=int(row[2]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a dictionary representation."""
        return {
            "id": self.id,
            "discount": self.discount,
            "posts_limit_per_month": self.posts_limit_per_month,
        }


class MemberTypeRepository(AbstractRepository):
    """Member type lookups."""

    table = "tbl_member_type"
    entity = "MemberType"
    columns = ("id", "discount", "posts_limit_per_month")
    record_type = MemberTypeRecord
