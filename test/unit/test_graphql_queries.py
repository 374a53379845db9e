"""
Tests for the GraphQL Query root and entity relation resolvers.

Covers: list and single-entity lookups, missing entities resolving to
null, relation fields (profile, posts, subscriptions, memberType), and
nested ``user`` selections matching direct lookups.
"""
from __future__ import annotations

import uuid
from unittest.mock import MagicMock

from usergraph.db.repositories import UserRecord


class TestMemberTypes:

    def test_list_seeded(self, gql):
        body = gql("{ memberTypes { id discount postsLimitPerMonth } }")
        assert "errors" not in body
        assert {(m["id"], m["discount"], m["postsLimitPerMonth"]) for m in body["data"]["memberTypes"]} == {
            ("BASIC", 2.3, 20),
            ("BUSINESS", 7.7, 100),
        }

    def test_single(self, gql):
        body = gql("{ memberType(id: BUSINESS) { id postsLimitPerMonth } }")
        assert body == {"data": {"memberType": {"id": "BUSINESS", "postsLimitPerMonth": 100}}}

    def test_unknown_enum_value_rejected(self, gql):
        body = gql("{ memberType(id: PREMIUM) { id } }")
        assert "data" not in body
        assert body["errors"][0]["extensions"]["code"] == "GRAPHQL_VALIDATION_FAILED"


class TestSingleEntityLookups:

    def test_missing_entities_are_null_without_errors(self, gql):
        missing = str(uuid.uuid4())
        body = gql(
            "query($id: UUID!) { user(id: $id) { id } post(id: $id) { id } profile(id: $id) { id } }",
            {"id": missing},
        )
        assert body == {"data": {"user": None, "post": None, "profile": None}}

    def test_user_by_id(self, gql, make_user):
        user = make_user("Bob", 42.5)
        body = gql("query($id: UUID!) { user(id: $id) { id name balance } }", {"id": user.id})
        assert body == {"data": {"user": {"id": user.id, "name": "Bob", "balance": 42.5}}}

    def test_post_by_id(self, gql, db, make_user):
        author = make_user()
        post = db.posts.create({"title": "Hello", "content": "World", "author_id": author.id})
        body = gql("query($id: UUID!) { post(id: $id) { title content authorId } }", {"id": post.id})
        assert body["data"]["post"] == {"title": "Hello", "content": "World", "authorId": author.id}

    def test_profile_by_id_with_member_type(self, gql, db, make_user):
        user = make_user()
        profile = db.profiles.create({
            "is_male": False, "year_of_birth": 1990, "member_type_id": "business", "user_id": user.id,
        })
        body = gql(
            "query($id: UUID!) { profile(id: $id) { isMale yearOfBirth userId memberTypeId memberType { id discount } } }",
            {"id": profile.id},
        )
        assert body["data"]["profile"] == {
            "isMale": False,
            "yearOfBirth": 1990,
            "userId": user.id,
            "memberTypeId": "BUSINESS",
            "memberType": {"id": "BUSINESS", "discount": 7.7},
        }


class TestLists:

    def test_empty_lists(self, gql):
        body = gql("{ users { id } posts { id } profiles { id } }")
        assert body == {"data": {"users": [], "posts": [], "profiles": []}}

    def test_users(self, gql, make_user):
        a = make_user("A")
        b = make_user("B")
        body = gql("{ users { id name } }")
        assert {(u["id"], u["name"]) for u in body["data"]["users"]} == {(a.id, "A"), (b.id, "B")}


class TestUserRelations:

    def test_user_without_profile_or_posts(self, gql, make_user):
        user = make_user()
        body = gql(
            "query($id: UUID!) { user(id: $id) { profile { id } posts { id } userSubscribedTo { id } subscribedToUser { id } } }",
            {"id": user.id},
        )
        assert body == {"data": {"user": {
            "profile": None, "posts": [], "userSubscribedTo": [], "subscribedToUser": [],
        }}}

    def test_subscription_views_are_inverse(self, gql, db, make_user):
        alice = make_user("Alice")
        bob = make_user("Bob")
        carol = make_user("Carol")
        db.subscriptions.create(alice.id, bob.id)
        db.subscriptions.create(carol.id, bob.id)
        db.subscriptions.create(bob.id, alice.id)

        body = gql("""
            query($a: UUID!, $b: UUID!) {
              alice: user(id: $a) { userSubscribedTo { id } subscribedToUser { id } }
              bob: user(id: $b) { userSubscribedTo { id } subscribedToUser { id } }
            }
        """, {"a": alice.id, "b": bob.id})

        data = body["data"]
        assert [u["id"] for u in data["alice"]["userSubscribedTo"]] == [bob.id]
        assert [u["id"] for u in data["alice"]["subscribedToUser"]] == [bob.id]
        assert [u["id"] for u in data["bob"]["userSubscribedTo"]] == [alice.id]
        assert {u["id"] for u in data["bob"]["subscribedToUser"]} == {alice.id, carol.id}

    def test_self_subscription_allowed(self, gql, db, make_user):
        user = make_user()
        db.subscriptions.create(user.id, user.id)
        body = gql("query($id: UUID!) { user(id: $id) { userSubscribedTo { id } subscribedToUser { id } } }", {"id": user.id})
        assert body["data"]["user"] == {
            "userSubscribedTo": [{"id": user.id}],
            "subscribedToUser": [{"id": user.id}],
        }

    def test_nested_user_matches_direct_lookups(self, gql, db, make_user):
        user = make_user("Dana", 10.0)
        other = make_user("Eve")
        profile = db.profiles.create({
            "is_male": True, "year_of_birth": 1985, "member_type_id": "basic", "user_id": user.id,
        })
        db.posts.create({"title": "One", "content": "1", "author_id": user.id})
        db.posts.create({"title": "Two", "content": "2", "author_id": user.id})
        db.posts.create({"title": "Other", "content": "x", "author_id": other.id})

        nested = gql("""
            query($id: UUID!) {
              user(id: $id) {
                id
                profile { id isMale yearOfBirth memberType { id discount postsLimitPerMonth } }
                posts { id title content authorId }
              }
            }
        """, {"id": user.id})["data"]["user"]

        direct = gql("""
            query($pid: UUID!) {
              profile(id: $pid) { id isMale yearOfBirth memberType { id discount postsLimitPerMonth } }
              memberType(id: BASIC) { id discount postsLimitPerMonth }
              posts { id title content authorId }
            }
        """, {"pid": profile.id})["data"]

        assert nested["id"] == user.id
        assert nested["profile"] == direct["profile"]
        assert nested["profile"]["memberType"] == direct["memberType"]
        own_posts = [p for p in direct["posts"] if p["authorId"] == user.id]
        assert sorted(nested["posts"], key=lambda p: p["id"]) == sorted(own_posts, key=lambda p: p["id"])

    def test_relations_resolve_lazily(self, gql):
        user_id = str(uuid.uuid4())
        db = MagicMock()
        db.users.find_unique.return_value = UserRecord(id=user_id, name="Lazy", balance=0.0)

        body = gql("query($id: UUID!) { user(id: $id) { name } }", {"id": user_id}, target_db=db)

        assert body == {"data": {"user": {"name": "Lazy"}}}
        db.users.find_unique.assert_called_once()
        db.profiles.find_by_user.assert_not_called()
        db.posts.find_many.assert_not_called()
        db.users.find_subscribed_to.assert_not_called()

    def test_one_lookup_per_relation(self, gql):
        user_id = str(uuid.uuid4())
        db = MagicMock()
        db.users.find_unique.return_value = UserRecord(id=user_id, name="N", balance=1.0)
        db.profiles.find_by_user.return_value = None
        db.posts.find_many.return_value = []

        gql("query($id: UUID!) { user(id: $id) { profile { id } posts { id } } }", {"id": user_id}, target_db=db)

        db.profiles.find_by_user.assert_called_once_with(uuid.UUID(user_id))
        db.posts.find_many.assert_called_once_with(author_id=uuid.UUID(user_id))
