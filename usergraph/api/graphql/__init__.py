"""
GraphQL API for users, profiles, posts and member types.

Uses Strawberry GraphQL for a type-safe, code-first schema, with a
gateway that parses, validates (including the depth limit) and executes
each request before handing the result to the FastAPI router.

Mount point:   /graphql (POST)
"""
from .context import GraphQLContext
from .depth import QueryDepthLimiter, depth_limit_rule
from .executor import GraphQLExecutor, GraphQLRequest, GraphQLResponse
from .resolvers import Mutation, Query, schema

__all__ = [
    "GraphQLContext",
    "GraphQLExecutor",
    "GraphQLRequest",
    "GraphQLResponse",
    "Mutation",
    "Query",
    "QueryDepthLimiter",
    "depth_limit_rule",
    "schema",
]
