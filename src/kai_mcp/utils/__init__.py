"""Utility functions and helpers for kai-mcp."""

from kai_mcp.utils.coercion import (
    AttrType,
    classify,
    to_base64_map,
    to_env_pairs,
    to_port,
    to_reference_list,
    to_string,
    to_string_list,
    to_string_map,
)
from kai_mcp.utils.deadline import Deadline
from kai_mcp.utils.errors import (
    AuthorizationError,
    ConflictError,
    DeadlineExceededError,
    KaiError,
    NotConfiguredError,
    NotFoundError,
    OperationNotAllowedError,
    ResourceExistsError,
    TransientError,
    ValidationError,
)
from kai_mcp.utils.response import PaginatedResponse, error_response, paginate
from kai_mcp.utils.retry import Backoff, RetryResult, is_retryable, retry_on_error

__all__ = [
    # Errors
    "KaiError",
    "ValidationError",
    "NotFoundError",
    "TransientError",
    "DeadlineExceededError",
    "ConflictError",
    "ResourceExistsError",
    "AuthorizationError",
    "NotConfiguredError",
    "OperationNotAllowedError",
    # Coercion
    "AttrType",
    "classify",
    "to_string",
    "to_string_map",
    "to_string_list",
    "to_env_pairs",
    "to_base64_map",
    "to_reference_list",
    "to_port",
    # Retry and deadlines
    "Backoff",
    "Deadline",
    "RetryResult",
    "is_retryable",
    "retry_on_error",
    # Response formatting
    "PaginatedResponse",
    "error_response",
    "paginate",
]
