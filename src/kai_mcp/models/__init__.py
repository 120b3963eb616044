"""Pydantic models for kai-mcp."""

from kai_mcp.models.common import (
    Condition,
    ContainerSummary,
    ListResult,
    OperationResult,
    ResourceMetadata,
    ResourceSpec,
)

__all__ = [
    "Condition",
    "ContainerSummary",
    "ListResult",
    "OperationResult",
    "ResourceMetadata",
    "ResourceSpec",
]
