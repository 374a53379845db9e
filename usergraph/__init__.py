"""usergraph - GraphQL API over users, profiles, posts and member types.

This package contains:
- The relational data-access layer (``usergraph.db``)
- The GraphQL schema, depth guard and execution gateway
  (``usergraph.api.graphql``)
- The FastAPI application exposing ``POST /graphql`` (``usergraph.api``)
"""

from .__version__ import __version__

__license__ = "MIT"

__all__ = ["__version__"]
