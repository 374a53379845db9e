"""
ProfileRepository — Profiles, each owned by exactly one user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from usergraph.db.repositories.base import WritableRepository

log = logging.getLogger("usergraph.db.repositories.profile")


@dataclass
class ProfileRecord:
    """Typed representation of a profile."""

    id: str
    is_male: bool
    year_of_birth: int
    user_id: str
    member_type_id: str

    @classmethod
    def from_row(cls, row: tuple) -> "ProfileRecord":
        """Build from a DB row tuple (id, is_male, year_of_birth, user_id, member_type_id)."""
        if not row or len(row) < 5:
            raise ValueError(f"Invalid profile row: {row}")
        return cls(
            id=str(row[0]),
            is_male=bool(row[1]),
            year_of_birth=int(row[2]),
            user_id=str(row[3]),
            member_type_id=str(row[4]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a dictionary representation."""
        return {
            "id": self.id,
            "is_male": self.is_male,
            "year_of_birth": self.year_of_birth,
            "user_id": self.user_id,
            "member_type_id": self.member_type_id,
        }


class ProfileRepository(WritableRepository):
    """Profile CRUD plus the reverse lookup by owning user."""

    table = "tbl_profile"
    entity = "Profile"
    columns = ("id", "is_male", "year_of_birth", "user_id", "member_type_id")
    required_fields = ("is_male", "year_of_birth", "member_type_id", "user_id")
    record_type = ProfileRecord

    def find_by_user(self, user_id: Any) -> ProfileRecord | None:
        """The profile owned by *user_id*, or None if the user has none."""
        records = self._find_by("user_id", user_id)
        return records[0] if records else None
