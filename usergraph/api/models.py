"""
Request/response models for the HTTP surface.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class GraphQLRequestBody(BaseModel):
    """JSON body of ``POST /graphql``."""
    model_config = ConfigDict(populate_by_name=True)

    query: str
    variables: Optional[dict[str, Any]] = None
    operation_name: Optional[str] = Field(default=None, alias="operationName")


class HealthResponse(BaseModel):
    """Body of ``GET /health``."""
    status: str = "ok"
    version: str


class ErrorDetail(BaseModel):
    """HTTP-level error payload."""
    code: str
    message: str
    status: int
    request_id: Optional[str] = None
    timestamp: float = 0.0
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
