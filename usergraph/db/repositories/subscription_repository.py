"""
SubscriptionRepository — The (subscriber, author) join relation.

Rows have no identity of their own; the composite primary key
(subscriber_id, author_id) rejects duplicate pairs.  Self-subscription
is not prevented.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from usergraph.db.repositories.base import AbstractRepository
from usergraph.errors import RecordNotFoundError

log = logging.getLogger("usergraph.db.repositories.subscription")


@dataclass
class SubscriptionRecord:
    """Typed representation of one subscription pair."""

    subscriber_id: str
    author_id: str

    @classmethod
    def from_row(cls, row: tuple) -> "SubscriptionRecord":
        """Build from a DB row tuple (subscriber_id, author_id)."""
        if not row or len(row) < 2:
            raise ValueError(f"Invalid subscription row: {row}")
        return cls(subscriber_id=str(row[0]), author_id=str(row[1]))

    def to_dict(self) -> dict[str, Any]:
        """Return a dictionary representation."""
        return {"subscriber_id": self.subscriber_id, "author_id": self.author_id}


class SubscriptionRepository(AbstractRepository):
    """Subscribe / unsubscribe operations."""

    table = "tbl_subscribers_on_authors"
    entity = "Subscription"
    columns = ("subscriber_id", "author_id")
    record_type = SubscriptionRecord

    def find_unique(self, subscriber_id: Any, author_id: Any) -> SubscriptionRecord | None:
        """Get the pair if it exists."""
        row = self.dbh.fetch_one(
            f"{self._select()} WHERE subscriber_id = {self._ph} AND author_id = {self._ph}",
            (self._param(subscriber_id), self._param(author_id)),
            entity=self.entity,
        )
        return SubscriptionRecord.from_row(row) if row else None

    def exists(self, subscriber_id: Any, author_id: Any) -> bool:
        """Whether *subscriber_id* currently subscribes to *author_id*."""
        return self.find_unique(subscriber_id, author_id) is not None

    def create(self, subscriber_id: Any, author_id: Any) -> SubscriptionRecord:
        """Insert the pair.

        Raises:
            UniqueConstraintError: the pair already exists
            ForeignKeyError: either user does not exist
        """
        record = SubscriptionRecord(self._param(subscriber_id), self._param(author_id))
        self.dbh.execute(
            f"INSERT INTO {self.table} (subscriber_id, author_id) VALUES ({self._ph}, {self._ph})",
            (record.subscriber_id, record.author_id),
            entity=self.entity,
        )
        log.debug("User %s subscribed to %s", record.subscriber_id, record.author_id)
        return record

    def delete(self, subscriber_id: Any, author_id: Any) -> None:
        """Delete the pair.

        Raises:
            RecordNotFoundError: the pair does not exist
        """
        subscriber_id = self._param(subscriber_id)
        author_id = self._param(author_id)
        count = self.dbh.execute(
            f"DELETE FROM {self.table} WHERE subscriber_id = {self._ph} AND author_id = {self._ph}",
            (subscriber_id, author_id),
            entity=self.entity,
        )
        if count == 0:
            raise RecordNotFoundError(self.entity, f"{subscriber_id} -> {author_id}")
        log.debug("User %s unsubscribed from %s", subscriber_id, author_id)
