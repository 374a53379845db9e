"""Database repository package — clean abstraction over DbCore."""

from __future__ import annotations

from usergraph.db.repositories.base import AbstractRepository, WritableRepository
from usergraph.db.repositories.member_type_repository import MemberTypeRecord, MemberTypeRepository
from usergraph.db.repositories.post_repository import PostRecord, PostRepository
from usergraph.db.repositories.profile_repository import ProfileRecord, ProfileRepository
from usergraph.db.repositories.subscription_repository import SubscriptionRecord, SubscriptionRepository
from usergraph.db.repositories.user_repository import UserRecord, UserRepository

__all__ = [
    "AbstractRepository",
    "WritableRepository",
    "MemberTypeRecord",
    "MemberTypeRepository",
    "PostRecord",
    "PostRepository",
    "ProfileRecord",
    "ProfileRepository",
    "SubscriptionRecord",
    "SubscriptionRepository",
    "UserRecord",
    "UserRepository",
]
