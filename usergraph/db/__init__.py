# -*- coding: utf-8 -*-
"""Common functions for working with the usergraph database back-end."""

from usergraph.db.db_core import DbCore
from usergraph.db.repositories import (
    MemberTypeRepository,
    PostRepository,
    ProfileRepository,
    SubscriptionRepository,
    UserRepository,
)


class UserGraphDb:
    """usergraph database.

    Attributes:
        dbc (DbCore): connection, lock and statement execution
        member_types (MemberTypeRepository): membership tiers (read-only)
        users (UserRepository): users and subscription traversal
        profiles (ProfileRepository): user profiles
        posts (PostRepository): posts
        subscriptions (SubscriptionRepository): subscriber/author pairs
    """

    def __init__(self, db_config, init: bool = True) -> None:
        """Initialize database and create handle to the database.

        Args:
            db_config (DatabaseConfig): database section of the app config
            init (bool): initialise the schema and reference data if missing

        Raises:
            DataStoreError: database could not be opened
        """
        self.dbc = DbCore(db_config, init=init)
        self.member_types = MemberTypeRepository(self.dbc)
        self.users = UserRepository(self.dbc)
        self.profiles = ProfileRepository(self.dbc)
        self.posts = PostRepository(self.dbc)
        self.subscriptions = SubscriptionRepository(self.dbc)

    @property
    def db_type(self) -> str:
        return self.dbc.db_type

    def close(self) -> None:
        """Close the database connection."""
        self.dbc.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


__all__ = ["UserGraphDb", "DbCore"]
