"""
GraphQL type definitions for usergraph domain objects.

Each Strawberry output type mirrors a repository record; relation fields
(``User.profile``, ``User.posts``, ``Profile.memberType`` ...) are
resolvers that perform one lookup through ``info.context.db`` when the
field is selected, and never load anything deeper.
"""
from __future__ import annotations

import dataclasses
import uuid
from typing import Any, Optional

import strawberry
from strawberry.types import Info

from usergraph.constants import MemberTypeId

MemberTypeIdEnum = strawberry.enum(
    MemberTypeId,
    name="MemberTypeId",
    description="Identifier of a membership tier",
)


# ── Entity Types ────────────────────────────────────────────────────


@strawberry.type(name="MemberType", description="A membership tier")
class MemberTypeType:
    id: MemberTypeId
    discount: float
    posts_limit_per_month: int


@strawberry.type(name="Post", description="A post written by a user")
class PostType:
    id: uuid.UUID
    title: str
    content: str
    author_id: uuid.UUID


@strawberry.type(name="Profile", description="Personal details of a user")
class ProfileType:
    id: uuid.UUID
    is_male: bool
    year_of_birth: int
    user_id: uuid.UUID
    member_type_id: MemberTypeId

    @strawberry.field(description="Membership tier of this profile")
    def member_type(self, info: Info) -> MemberTypeType:
        record = info.context.db.member_types.find_unique(self.member_type_id)
        return to_member_type_type(record)


@strawberry.type(name="User", description="A user of the platform")
class UserType:
    id: uuid.UUID
    name: str
    balance: float

    @strawberry.field(description="The user's profile, if one was created")
    def profile(self, info: Info) -> Optional[ProfileType]:
        return to_profile_type(info.context.db.profiles.find_by_user(self.id))

    @strawberry.field(description="Posts written by the user")
    def posts(self, info: Info) -> list[PostType]:
        return [to_post_type(r) for r in info.context.db.posts.find_many(author_id=self.id)]

    @strawberry.field(description="Users this user is subscribed to")
    def user_subscribed_to(self, info: Info) -> list[UserType]:
        return [to_user_type(r) for r in info.context.db.users.find_subscribed_to(self.id)]

    @strawberry.field(description="Users subscribed to this user")
    def subscribed_to_user(self, info: Info) -> list[UserType]:
        return [to_user_type(r) for r in info.context.db.users.find_subscribers_of(self.id)]


# ── Input Types ─────────────────────────────────────────────────────


@strawberry.input(description="Fields of a new user")
class CreateUserInput:
    name: str
    balance: float


@strawberry.input(description="Fields of a user to change; omitted fields are kept")
class ChangeUserInput:
    name: Optional[str] = strawberry.UNSET
    balance: Optional[float] = strawberry.UNSET


@strawberry.input(description="Fields of a new profile")
class CreateProfileInput:
    is_male: bool
    year_of_birth: int
    member_type_id: MemberTypeId
    user_id: uuid.UUID


@strawberry.input(description="Fields of a profile to change; omitted fields are kept")
class ChangeProfileInput:
    is_male: Optional[bool] = strawberry.UNSET
    year_of_birth: Optional[int] = strawberry.UNSET
    member_type_id: Optional[MemberTypeId] = strawberry.UNSET
    user_id: Optional[uuid.UUID] = strawberry.UNSET


@strawberry.input(description="Fields of a new post")
class CreatePostInput:
    title: str
    content: str
    author_id: uuid.UUID


@strawberry.input(description="Fields of a post to change; omitted fields are kept")
class ChangePostInput:
    title: Optional[str] = strawberry.UNSET
    content: Optional[str] = strawberry.UNSET
    author_id: Optional[uuid.UUID] = strawberry.UNSET


def input_to_data(dto: Any) -> dict[str, Any]:
    """Collect the fields set on an input object, keyed by column name.

    Omitted fields (``UNSET``) are left out; an explicit ``null`` is kept
    so the repository can reject it.
    """
    return {
        f.name: getattr(dto, f.name)
        for f in dataclasses.fields(dto)
        if getattr(dto, f.name) is not strawberry.UNSET
    }


# ── Record → Type converters ────────────────────────────────────────


def to_member_type_type(record) -> Optional[MemberTypeType]:
    if record is None:
        return None
    return MemberTypeType(
        id=MemberTypeId(record.id),
        discount=record.discount,
        posts_limit_per_month=record.posts_limit_per_month,
    )


def to_post_type(record) -> Optional[PostType]:
    if record is None:
        return None
    return PostType(
        id=uuid.UUID(record.id),
        title=record.title,
        content=record.content,
        author_id=uuid.UUID(record.author_id),
    )


def to_profile_type(record) -> Optional[ProfileType]:
    if record is None:
        return None
    return ProfileType(
        id=uuid.UUID(record.id),
        is_male=record.is_male,
        year_of_birth=record.year_of_birth,
        user_id=uuid.UUID(record.user_id),
        member_type_id=MemberTypeId(record.member_type_id),
    )


def to_user_type(record) -> Optional[UserType]:
    if record is None:
        return None
    return UserType(
        id=uuid.UUID(record.id),
        name=record.name,
        balance=record.balance,
    )
