"""Error types for kai-mcp operations.

Every error carries the resource kind, name and namespace it concerns so a
failed tool call can always be traced back to the object involved.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import urllib3.exceptions
from kubernetes.client import ApiException  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)


class KaiError(Exception):
    """Base exception for kai-mcp errors."""

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        name: str | None = None,
        namespace: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.name = name
        self.namespace = namespace

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable description of the error."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "kind": self.kind,
            "name": self.name,
            "namespace": self.namespace,
        }


class ValidationError(KaiError):
    """A required field is missing or a field value is invalid.

    Raised before any call reaches the cluster.
    """

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        name: str | None = None,
        namespace: str | None = None,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        super().__init__(message, kind, name, namespace)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        return result


class NotFoundError(KaiError):
    """Resource or its namespace does not exist."""

    def __init__(
        self,
        kind: str,
        name: str,
        namespace: str | None = None,
        message: str | None = None,
    ) -> None:
        if message is None:
            if namespace:
                message = f"{kind} '{name}' not found in namespace '{namespace}'"
            else:
                message = f"{kind} '{name}' not found"
        super().__init__(message, kind, name, namespace)


class TransientError(KaiError):
    """Failure that may succeed if the same call is repeated."""

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        name: str | None = None,
        namespace: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, kind, name, namespace)
        self.cause = cause


class DeadlineExceededError(TransientError):
    """The caller's deadline expired or was cancelled."""


class ConflictError(KaiError):
    """Fields are valid individually but inconsistent together."""


class ResourceExistsError(KaiError):
    """Resource already exists."""

    def __init__(self, kind: str, name: str, namespace: str | None = None) -> None:
        if namespace:
            message = f"{kind} '{name}' already exists in namespace '{namespace}'"
        else:
            message = f"{kind} '{name}' already exists"
        super().__init__(message, kind, name, namespace)


class AuthorizationError(KaiError):
    """The cluster rejected the credentials or the request."""


class NotConfiguredError(KaiError):
    """No usable cluster context is selected."""


class OperationNotAllowedError(KaiError):
    """Operation is disabled by the server's safety settings."""


def is_not_found(exc: BaseException) -> bool:
    """Check whether an error signals an absent resource.

    Decided by content: a 404 status or a message containing "not found".
    """
    if isinstance(exc, NotFoundError):
        return True
    if isinstance(exc, ApiException) and exc.status == 404:
        return True
    return "not found" in str(exc).lower()


def translate_api_error(
    exc: BaseException,
    kind: str,
    name: str | None = None,
    namespace: str | None = None,
) -> KaiError:
    """Map a kubernetes client failure onto the kai-mcp error types.

    Args:
        exc: Exception raised by the kubernetes client.
        kind: Resource kind of the failed call.
        name: Resource name, if the call targeted a single object.
        namespace: Namespace of the call.

    Returns:
        The classified error. Errors already classified are returned as is.
    """
    if isinstance(exc, KaiError):
        return exc

    if isinstance(exc, ApiException):
        status = exc.status
        reason = exc.reason or ""
        if status == 404:
            return NotFoundError(kind, name or "", namespace)
        if status == 409:
            return ResourceExistsError(kind, name or "", namespace)
        if status in (401, 403):
            return AuthorizationError(
                f"Not authorized to access {kind} '{name}': {reason}", kind, name, namespace
            )
        if status in (400, 422):
            return ValidationError(
                f"{kind} '{name}' rejected by the cluster: {_api_message(exc)}",
                kind,
                name,
                namespace,
            )
        return TransientError(
            f"{kind} '{name}' request failed ({status} {reason})",
            kind,
            name,
            namespace,
            cause=exc,
        )

    if isinstance(exc, urllib3.exceptions.HTTPError | OSError):
        return TransientError(
            f"Could not reach the cluster for {kind} '{name}': {exc}",
            kind,
            name,
            namespace,
            cause=exc,
        )

    if is_not_found(exc):
        return NotFoundError(kind, name or "", namespace)

    logger.debug(f"Unclassified error for {kind} '{name}': {exc!r}")
    return TransientError(
        f"{kind} '{name}' request failed: {exc}", kind, name, namespace, cause=exc
    )


def _api_message(exc: ApiException) -> str:
    """Extract the status message from an ApiException body."""
    body = exc.body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str) and body:
        try:
            return str(json.loads(body).get("message", body))
        except (ValueError, AttributeError):
            return body
    return exc.reason or str(exc.status)
