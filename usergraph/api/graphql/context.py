"""Per-request context handed to every resolver as ``info.context``."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class GraphQLContext:
    """Execution context for one GraphQL request.

    Attributes:
        db: the ``UserGraphDb`` (or compatible) data-access collaborator
        request_id: tracing ID of the HTTP request, or one generated for a direct call
    """

    db: Any
    request_id: Optional[str] = None
