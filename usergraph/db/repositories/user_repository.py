"""
UserRepository — Users and both directions of the subscription relation.

``find_subscribed_to`` and ``find_subscribers_of`` are inverse views over
``tbl_subscribers_on_authors``: a row (subscriber, author) lists the author
in the subscriber's ``find_subscribed_to`` and the subscriber in the
author's ``find_subscribers_of``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from usergraph.db.repositories.base import WritableRepository

log = logging.getLogger("usergraph.db.repositories.user")


@dataclass
class UserRecord:
    """Typed representation of a user."""

    id: str
    name: str
    balance: float

    @classmethod
    def from_row(cls, row: tuple) -> "UserRecord":
        """Build from a DB row tuple (id, name, balance)."""
        if not row or len(row) < 3:
            raise ValueError(f"Invalid user row: {row}")
        return cls(
            id=str(row[0]),
            name=str(row[1]),
            balance=float(row[2]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "balance": self.balance,
        }


class UserRepository(WritableRepository):
    """User CRUD plus subscription traversal."""

    table = "tbl_user"
    entity = "User"
    columns = ("id", "name", "balance")
    required_fields = ("name", "balance")
    record_type = UserRecord

    def find_subscribed_to(self, subscriber_id: Any) -> list[UserRecord]:
        """Users that *subscriber_id* subscribes to."""
        rows = self.dbh.fetch_all(
            f"{self._select('u')} "
            "JOIN tbl_subscribers_on_authors s ON s.author_id = u.id "
            f"WHERE s.subscriber_id = {self._ph}",
            (self._param(subscriber_id),),
            entity=self.entity,
        )
        return self._to_records(rows)

    def find_subscribers_of(self, author_id: Any) -> list[UserRecord]:
        """Users that subscribe to *author_id*."""
        rows = self.dbh.fetch_all(
            f"{self._select('u')} "
            "JOIN tbl_subscribers_on_authors s ON s.subscriber_id = u.id "
            f"WHERE s.author_id = {self._ph}",
            (self._param(author_id),),
            entity=self.entity,
        )
        return self._to_records(rows)
