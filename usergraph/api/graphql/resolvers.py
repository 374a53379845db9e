"""
GraphQL resolvers: Query & Mutation root types.

Resolvers map GraphQL operations onto the usergraph repositories reached
through ``info.context.db``.  Lookups of a single missing entity return
null; failed writes raise the repository's domain errors, which the
execution gateway turns into field errors.
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional

import strawberry
from strawberry.types import Info

from usergraph.constants import DELETED, SUBSCRIBED, UNSUBSCRIBED, MemberTypeId
from .types import (
    ChangePostInput,
    ChangeProfileInput,
    ChangeUserInput,
    CreatePostInput,
    CreateProfileInput,
    CreateUserInput,
    MemberTypeType,
    PostType,
    ProfileType,
    UserType,
    input_to_data,
    to_member_type_type,
    to_post_type,
    to_profile_type,
    to_user_type,
)

_log = logging.getLogger("usergraph.api.graphql")


def _db(info: Info):
    return info.context.db


# ── Query ───────────────────────────────────────────────────────────


@strawberry.type
class Query:
    """Root query type for the usergraph GraphQL API."""

    @strawberry.field(description="List all member types")
    def member_types(self, info: Info) -> list[MemberTypeType]:
        return [to_member_type_type(r) for r in _db(info).member_types.find_many()]

    @strawberry.field(description="Get a member type by id")
    def member_type(self, info: Info, id: MemberTypeId) -> Optional[MemberTypeType]:
        return to_member_type_type(_db(info).member_types.find_unique(id))

    @strawberry.field(description="List all users")
    def users(self, info: Info) -> list[UserType]:
        return [to_user_type(r) for r in _db(info).users.find_many()]

    @strawberry.field(description="Get a user by id")
    def user(self, info: Info, id: uuid.UUID) -> Optional[UserType]:
        return to_user_type(_db(info).users.find_unique(id))

    @strawberry.field(description="List all posts")
    def posts(self, info: Info) -> list[PostType]:
        return [to_post_type(r) for r in _db(info).posts.find_many()]

    @strawberry.field(description="Get a post by id")
    def post(self, info: Info, id: uuid.UUID) -> Optional[PostType]:
        return to_post_type(_db(info).posts.find_unique(id))

    @strawberry.field(description="List all profiles")
    def profiles(self, info: Info) -> list[ProfileType]:
        return [to_profile_type(r) for r in _db(info).profiles.find_many()]

    @strawberry.field(description="Get a profile by id")
    def profile(self, info: Info, id: uuid.UUID) -> Optional[ProfileType]:
        return to_profile_type(_db(info).profiles.find_unique(id))


# ── Mutation ────────────────────────────────────────────────────────


@strawberry.type
class Mutation:
    """Root mutation type for the usergraph GraphQL API."""

    @strawberry.mutation(description="Create a user")
    def create_user(self, info: Info, dto: CreateUserInput) -> UserType:
        record = _db(info).users.create(input_to_data(dto))
        _log.info("GraphQL createUser: %s", record.id)
        return to_user_type(record)

    @strawberry.mutation(description="Change fields of a user")
    def change_user(self, info: Info, id: uuid.UUID, dto: ChangeUserInput) -> UserType:
        record = _db(info).users.update(id, input_to_data(dto))
        _log.info("GraphQL changeUser: %s", id)
        return to_user_type(record)

    @strawberry.mutation(description="Delete a user with its profile, posts and subscriptions")
    def delete_user(self, info: Info, id: uuid.UUID) -> str:
        _db(info).users.delete(id)
        _log.info("GraphQL deleteUser: %s", id)
        return DELETED

    @strawberry.mutation(description="Create a profile for a user")
    def create_profile(self, info: Info, dto: CreateProfileInput) -> ProfileType:
        record = _db(info).profiles.create(input_to_data(dto))
        _log.info("GraphQL createProfile: %s user=%s", record.id, record.user_id)
        return to_profile_type(record)

    @strawberry.mutation(description="Change fields of a profile")
    def change_profile(self, info: Info, id: uuid.UUID, dto: ChangeProfileInput) -> ProfileType:
        record = _db(info).profiles.update(id, input_to_data(dto))
        _log.info("GraphQL changeProfile: %s", id)
        return to_profile_type(record)

    @strawberry.mutation(description="Delete a profile")
    def delete_profile(self, info: Info, id: uuid.UUID) -> Optional[str]:
        _db(info).profiles.delete(id)
        _log.info("GraphQL deleteProfile: %s", id)
        return DELETED

    @strawberry.mutation(description="Create a post")
    def create_post(self, info: Info, dto: CreatePostInput) -> PostType:
        record = _db(info).posts.create(input_to_data(dto))
        _log.info("GraphQL createPost: %s author=%s", record.id, record.author_id)
        return to_post_type(record)

    @strawberry.mutation(description="Change fields of a post")
    def change_post(self, info: Info, id: uuid.UUID, dto: ChangePostInput) -> PostType:
        record = _db(info).posts.update(id, input_to_data(dto))
        _log.info("GraphQL changePost: %s", id)
        return to_post_type(record)

    @strawberry.mutation(description="Delete a post")
    def delete_post(self, info: Info, id: uuid.UUID) -> Optional[str]:
        _db(info).posts.delete(id)
        _log.info("GraphQL deletePost: %s", id)
        return DELETED

    @strawberry.mutation(description="Subscribe a user to an author")
    def subscribe_to(self, info: Info, user_id: uuid.UUID, author_id: uuid.UUID) -> Optional[str]:
        _db(info).subscriptions.create(user_id, author_id)
        _log.info("GraphQL subscribeTo: %s -> %s", user_id, author_id)
        return SUBSCRIBED

    @strawberry.mutation(description="Unsubscribe a user from an author")
    def unsubscribe_from(self, info: Info, user_id: uuid.UUID, author_id: uuid.UUID) -> Optional[str]:
        _db(info).subscriptions.delete(user_id, author_id)
        _log.info("GraphQL unsubscribeFrom: %s -> %s", user_id, author_id)
        return UNSUBSCRIBED


# ── Build Schema ────────────────────────────────────────────────────


class UserGraphSchema(strawberry.Schema):
    """Schema whose execution errors are reported by the gateway.

    The gateway decides which errors are exposed and logs the rest with
    their traceback, so the engine's own error logging is turned off.
    """

    def process_errors(self, errors, execution_context=None) -> None:
        return None


schema = UserGraphSchema(query=Query, mutation=Mutation)
