"""Centralized constants for usergraph.

Default values shared by the data-access layer, the GraphQL gateway and
the configuration defaults. Import from here instead of hardcoding values.
"""

from enum import Enum

# ---------------------------------------------------------------------------
# GraphQL
# ---------------------------------------------------------------------------
MAX_QUERY_DEPTH: int = 5
"""Maximum nesting depth of field selections accepted by the gateway."""

DELETED: str = "Deleted"
SUBSCRIBED: str = "Subscribed"
UNSUBSCRIBED: str = "Unsubscribed"

# ---------------------------------------------------------------------------
# Retry / backoff
# ---------------------------------------------------------------------------
DEFAULT_MAX_RETRIES: int = 3
"""Default maximum number of attempts for a database statement."""

DB_RETRY_BACKOFF_BASE: float = 0.2
"""Base multiplier for database retry backoff: sleep(BASE * (attempt + 1))."""


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

class MemberTypeId(str, Enum):
    """Identifiers of the membership tiers."""
    BASIC = "basic"
    BUSINESS = "business"


# (id, discount, posts_limit_per_month)
MEMBER_TYPE_SEED: tuple = (
    (MemberTypeId.BASIC.value, 2.3, 20),
    (MemberTypeId.BUSINESS.value, 7.7, 100),
)
