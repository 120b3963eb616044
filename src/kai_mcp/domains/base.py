"""Generic create/get/list/update/delete template shared by every resource kind.

Each kind subclasses ResourceController and supplies its validation, the
construction of the typed Kubernetes object, and the update rules. The
template owns the sequence common to all of them:

    validate -> resolve client -> (check namespace) -> build -> call API

Every API call runs under a deadline derived from the caller's. Reads use
the shorter per-attempt read timeout and go through the retry policy;
writes are attempted once under the write timeout.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

import urllib3.exceptions
from kubernetes import client as k8s_client  # type: ignore[import-untyped]
from kubernetes.client import ApiException  # type: ignore[import-untyped]
from pydantic import BaseModel

from kai_mcp.config import KaiConfig, get_config
from kai_mcp.models.common import ListResult, OperationResult, ResourceSpec
from kai_mcp.utils.coercion import to_string_map
from kai_mcp.utils.deadline import Deadline
from kai_mcp.utils.errors import (
    DeadlineExceededError,
    KaiError,
    NotFoundError,
    TransientError,
    ValidationError,
    is_not_found,
    translate_api_error,
)
from kai_mcp.utils.retry import is_retryable, retry_on_error

if TYPE_CHECKING:
    from kai_mcp.clients.base import K8sClient
    from kai_mcp.clients.registry import ClusterRegistry

logger = logging.getLogger(__name__)

PROPAGATION_POLICY = "Background"

API_ERRORS = (ApiException, urllib3.exceptions.HTTPError, OSError)


def merge_string_map(
    existing: Mapping[str, str] | None, changes: Mapping[str, Any] | None
) -> dict[str, str] | None:
    """Merge an attribute bag into an existing map key by key.

    Keys missing from ``changes`` keep their current value.
    """
    coerced = to_string_map(changes)
    if coerced is None:
        return dict(existing) if existing is not None else None
    merged = dict(existing or {})
    merged.update(coerced)
    return merged


def check_choice(
    value: Any, choices: tuple[str, ...], field: str, kind: str | None = None
) -> str:
    """Validate an enumerated field, returning the matching token."""
    if isinstance(value, str) and value in choices:
        return value
    raise ValidationError(
        f"Invalid {field} {value!r}: must be one of {', '.join(choices)}",
        kind=kind,
        field=field,
        value=value,
    )


class ResourceController:
    """CRUD operations for one resource kind.

    Subclasses set the class attributes naming the kind and its API
    methods, and override the hooks below. The kubernetes client methods
    are resolved by name, e.g. ``resource = "config_map"`` on ``core_v1``
    gives ``create_namespaced_config_map`` and
    ``list_config_map_for_all_namespaces``.
    """

    kind: ClassVar[str] = ""
    plural: ClassVar[str] = ""
    api_version: ClassVar[str] = "v1"
    api_group: ClassVar[str] = "core_v1"
    resource: ClassVar[str] = ""
    namespaced: ClassVar[bool] = True
    required_fields: ClassVar[tuple[str, ...]] = ()
    supports_selector_delete: ClassVar[bool] = False
    view: ClassVar[type[BaseModel] | None] = None

    def __init__(self, registry: ClusterRegistry, config: KaiConfig | None = None) -> None:
        self._registry = registry
        self._config = config or get_config()

    # Hooks for subclasses

    def validate(self, spec: ResourceSpec) -> None:
        """Check kind-specific fields of a create request without I/O."""

    def build(self, spec: ResourceSpec) -> Any:
        """Build the typed Kubernetes object for a validated spec."""
        raise NotImplementedError

    def validate_update(self, spec: ResourceSpec) -> None:
        """Check the fields of a partial update without I/O."""

    def update_spec(self, existing: Any, spec: ResourceSpec) -> None:
        """Apply kind-specific partial changes to ``existing`` in place."""

    def check_conflicts(self, obj: Any) -> None:
        """Reject field combinations that are invalid together."""

    def describe(self, obj: Any) -> dict[str, Any]:
        """Summarize a typed object for tool responses."""
        if self.view is not None:
            return self.view.from_k8s(obj).model_dump(mode="json")  # type: ignore[attr-defined]
        metadata = obj.metadata
        return {"name": metadata.name, "namespace": getattr(metadata, "namespace", None)}

    def created_message(self, obj: Any, namespace: str | None) -> str:
        if self.namespaced:
            return (
                f"{self.kind} '{obj.metadata.name}' created successfully in namespace "
                f"'{namespace}'"
            )
        return f"{self.kind} '{obj.metadata.name}' created successfully"

    # Helpers for subclasses

    def build_metadata(
        self,
        spec: ResourceSpec,
        default_labels: Mapping[str, str] | None = None,
    ) -> Any:
        """Build V1ObjectMeta from the name, namespace, labels and annotations."""
        labels = to_string_map(spec.get("labels"))
        if labels is None and default_labels is not None:
            labels = dict(default_labels)
        return k8s_client.V1ObjectMeta(
            name=spec.name,
            namespace=spec.namespace if self.namespaced else None,
            labels=labels,
            annotations=to_string_map(spec.get("annotations")),
        )

    def invalid(
        self, message: str, spec: ResourceSpec, field: str, value: Any = None
    ) -> ValidationError:
        """Create a ValidationError for this kind and spec."""
        return ValidationError(
            message,
            kind=self.kind,
            name=spec.name,
            namespace=spec.namespace,
            field=field,
            value=value,
        )

    # Operations

    def create(self, spec: ResourceSpec, deadline: Deadline | None = None) -> OperationResult:
        """Create a resource from a loosely-typed spec.

        Args:
            spec: Kind, name, namespace and attribute bag.
            deadline: Caller deadline; each call is bounded further by the
                configured timeouts.

        Returns:
            OperationResult describing the created resource.

        Raises:
            ValidationError: Missing or invalid fields; nothing was sent.
            ConflictError: Fields that are invalid together; nothing was sent.
            NotFoundError: The target namespace does not exist.
        """
        spec = self._with_kind(spec)
        self._validate_identity(spec)
        self._validate_required(spec)
        self._with_context(spec, self.validate, spec)

        client = self._registry.get_current_client()
        deadline = deadline or Deadline()

        if self.namespaced:
            self.ensure_namespace(client, spec.namespace or "", deadline)

        body = self._with_context(spec, self.build, spec)
        self._with_context(spec, self.check_conflicts, body)

        created = self._invoke(
            client,
            "create",
            deadline.child(self._config.write_timeout),
            name=spec.name,
            namespace=spec.namespace,
            body=body,
        )
        logger.info(f"Created {self.kind} '{spec.name}'" + self._in_namespace(spec.namespace))
        return OperationResult(
            kind=self.kind,
            name=spec.name,
            namespace=spec.namespace if self.namespaced else None,
            message=self.created_message(created, spec.namespace),
            details=self.describe(created),
        )

    def get(
        self,
        name: str,
        namespace: str | None = None,
        deadline: Deadline | None = None,
    ) -> Any:
        """Read a resource, retrying failures other than not-found.

        Returns:
            The typed Kubernetes object.

        Raises:
            NotFoundError: The resource does not exist (never retried).
            TransientError: Every attempt failed.
        """
        if not name:
            raise ValidationError(f"{self.kind} name is required", kind=self.kind, field="name")
        namespace = self._resolve_namespace(namespace)
        client = self._registry.get_current_client()
        deadline = deadline or Deadline()

        def attempt() -> Any:
            return self._invoke(
                client,
                "read",
                deadline.child(self._config.read_timeout),
                name=name,
                namespace=namespace,
            )

        result = retry_on_error(
            attempt,
            should_retry=is_retryable,
            backoff=self._config.retry_backoff(),
            deadline=deadline,
        )
        error = result.error
        if error is None:
            return result.value

        if is_not_found(error):
            raise NotFoundError(self.kind, name, namespace)
        if isinstance(error, DeadlineExceededError):
            raise DeadlineExceededError(
                error.message, self.kind, name, namespace, cause=error.cause
            ) from error
        classified = translate_api_error(error, self.kind, name, namespace)
        if isinstance(classified, TransientError):
            raise TransientError(
                f"Failed to get {self.kind} '{name}' after {result.attempts} attempts: "
                f"{classified.message}",
                self.kind,
                name,
                namespace,
                cause=classified.cause or error,
            ) from error
        raise classified from error

    def list(
        self,
        namespace: str | None = None,
        label_selector: str | None = None,
        all_namespaces: bool = False,
        field_selector: str | None = None,
        deadline: Deadline | None = None,
    ) -> ListResult:
        """List resources in a namespace or across the cluster.

        Label and field selectors are passed to the API unmodified. An empty
        result carries a message telling apart a selector with no matches, an
        empty cluster and an empty namespace.
        """
        client = self._registry.get_current_client()
        deadline = deadline or Deadline()
        cluster_wide = all_namespaces or not self.namespaced
        scope = None if cluster_wide else self._resolve_namespace(namespace)

        kwargs: dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector
        if field_selector:
            kwargs["field_selector"] = field_selector
        response = self._invoke(
            client,
            "list",
            deadline.child(self._config.read_timeout),
            namespace=scope,
            cluster_wide=cluster_wide,
            **kwargs,
        )
        items = list(response.items or [])
        message = None
        if not items:
            message = self.empty_message(scope, label_selector, field_selector)
        logger.debug(f"Listed {len(items)} {self.plural}" + self._in_namespace(scope))
        return ListResult(
            kind=self.kind,
            items=items,
            namespace=scope,
            label_selector=label_selector,
            field_selector=field_selector,
            all_namespaces=cluster_wide,
            message=message,
        )

    def empty_message(
        self,
        namespace: str | None,
        label_selector: str | None,
        field_selector: str | None = None,
    ) -> str:
        """Explain an empty list result."""
        selectors = []
        if label_selector:
            selectors.append(f"label selector '{label_selector}'")
        if field_selector:
            selectors.append(f"field selector '{field_selector}'")
        if selectors:
            where = f" in namespace '{namespace}'" if namespace else ""
            return f"No {self.plural} found matching {' and '.join(selectors)}{where}"
        if not self.namespaced:
            return f"No {self.plural} found"
        if namespace is None:
            return f"No {self.plural} found across all namespaces"
        return f"No {self.plural} found in namespace '{namespace}'"

    def update(
        self,
        name: str,
        namespace: str | None,
        changes: Mapping[str, Any],
        deadline: Deadline | None = None,
    ) -> OperationResult:
        """Apply a partial update to an existing resource.

        Map fields such as labels, annotations and selectors are merged key
        by key. List fields such as ports, rules and TLS entries replace the
        existing list entirely.
        """
        spec = ResourceSpec(
            kind=self.kind, name=name, namespace=namespace, attributes=dict(changes)
        )
        self._validate_identity(spec)
        self._with_context(spec, self.validate_update, spec)

        updated = self.modify(
            name, namespace, lambda existing: self.apply_update(existing, spec), deadline
        )
        details = self.describe(updated)
        details["updated_fields"] = sorted(key for key in changes if changes[key] is not None)
        return OperationResult(
            kind=self.kind,
            name=name,
            namespace=namespace if self.namespaced else None,
            message=f"{self.kind} '{name}' updated successfully",
            details=details,
        )

    def modify(
        self,
        name: str,
        namespace: str | None,
        mutate: Callable[[Any], Any],
        deadline: Deadline | None = None,
    ) -> Any:
        """Read the current object, change it in place and replace it.

        Returns:
            The object as stored by the cluster after the replace.
        """
        client = self._registry.get_current_client()
        deadline = deadline or Deadline()
        spec = ResourceSpec(kind=self.kind, name=name, namespace=namespace)

        existing = self._invoke(
            client,
            "read",
            deadline.child(self._config.read_timeout),
            name=name,
            namespace=namespace,
        )
        self._with_context(spec, mutate, existing)
        self._with_context(spec, self.check_conflicts, existing)

        updated = self._invoke(
            client,
            "replace",
            deadline.child(self._config.write_timeout),
            name=name,
            namespace=namespace,
            body=existing,
        )
        logger.info(f"Updated {self.kind} '{name}'" + self._in_namespace(namespace))
        return updated

    def apply_update(self, existing: Any, spec: ResourceSpec) -> Any:
        """Merge labels and annotations, then apply kind-specific changes."""
        metadata = existing.metadata
        metadata.labels = merge_string_map(metadata.labels, spec.get("labels"))
        metadata.annotations = merge_string_map(metadata.annotations, spec.get("annotations"))
        self._with_context(spec, self.update_spec, existing, spec)
        return existing

    def delete(
        self,
        name: str,
        namespace: str | None,
        force: bool = False,
        deadline: Deadline | None = None,
    ) -> OperationResult:
        """Delete a resource after confirming it exists.

        Dependents are removed in the background. ``force`` sets a zero
        grace period.

        Raises:
            NotFoundError: The resource does not exist; no delete is sent.
        """
        spec = ResourceSpec(kind=self.kind, name=name, namespace=namespace)
        self._validate_identity(spec)
        client = self._registry.get_current_client()
        deadline = deadline or Deadline()

        self._invoke(
            client,
            "read",
            deadline.child(self._config.read_timeout),
            name=name,
            namespace=namespace,
        )
        self._invoke(
            client,
            "delete",
            deadline.child(self._config.write_timeout),
            name=name,
            namespace=namespace,
            body=self._delete_options(force),
        )
        logger.info(f"Deleted {self.kind} '{name}'" + self._in_namespace(namespace))
        where = f" from namespace '{namespace}'" if self.namespaced else ""
        return OperationResult(
            kind=self.kind,
            name=name,
            namespace=namespace if self.namespaced else None,
            message=f"{self.kind} '{name}' deleted successfully{where}",
            details={
                "deleted": True,
                "propagation_policy": PROPAGATION_POLICY,
                "force": force,
            },
        )

    def delete_by_selector(
        self,
        namespace: str | None,
        label_selector: str,
        force: bool = False,
        deadline: Deadline | None = None,
    ) -> OperationResult:
        """Delete every resource matching a label selector.

        Each match is deleted independently; failures are collected and the
        remaining deletions still run.

        Raises:
            NotFoundError: Nothing matches the selector.
            KaiError: Every matching resource failed to delete.
        """
        if not self.supports_selector_delete:
            raise ValidationError(
                f"Deleting {self.plural} by label selector is not supported",
                kind=self.kind,
                field="label_selector",
            )
        if not label_selector:
            raise ValidationError(
                "label_selector is required", kind=self.kind, field="label_selector"
            )
        if self.namespaced and not namespace:
            raise ValidationError(
                "namespace is required", kind=self.kind, field="namespace"
            )

        deadline = deadline or Deadline()
        listed = self.list(namespace=namespace, label_selector=label_selector, deadline=deadline)
        if listed.empty:
            raise NotFoundError(
                self.kind, label_selector, namespace, message=listed.message
            )

        client = self._registry.get_current_client()
        deleted: list[str] = []
        failed: dict[str, str] = {}
        for item in listed.items:
            item_name = item.metadata.name
            try:
                self._invoke(
                    client,
                    "delete",
                    deadline.child(self._config.write_timeout),
                    name=item_name,
                    namespace=namespace,
                    body=self._delete_options(force),
                )
            except KaiError as e:
                logger.warning(f"Failed to delete {self.kind} '{item_name}': {e}")
                failed[item_name] = e.message
                continue
            deleted.append(item_name)

        if not deleted:
            raise KaiError(
                f"Failed to delete any of the {len(listed.items)} {self.plural} matching "
                f"'{label_selector}': "
                + "; ".join(f"{n}: {msg}" for n, msg in failed.items()),
                kind=self.kind,
                name=label_selector,
                namespace=namespace,
            )

        message = (
            f"Deleted {len(deleted)} of {len(listed.items)} {self.plural} "
            f"matching '{label_selector}'"
        )
        if failed:
            message += f" ({len(failed)} failed)"
        logger.info(message + self._in_namespace(namespace))
        return OperationResult(
            kind=self.kind,
            name=label_selector,
            namespace=namespace if self.namespaced else None,
            message=message,
            details={
                "label_selector": label_selector,
                "matched": len(listed.items),
                "deleted_count": len(deleted),
                "deleted": deleted,
                "failed": failed,
                "propagation_policy": PROPAGATION_POLICY,
                "force": force,
            },
        )

    def ensure_namespace(self, client: K8sClient, namespace: str, deadline: Deadline) -> None:
        """Raise NotFoundError unless the namespace exists."""
        call_deadline = deadline.child(self._config.read_timeout)
        call_deadline.check("Namespace", namespace)
        try:
            client.core_v1.read_namespace(
                name=namespace, _request_timeout=call_deadline.request_timeout()
            )
        except API_ERRORS as e:
            error = translate_api_error(e, "Namespace", namespace)
            if isinstance(error, NotFoundError):
                raise NotFoundError(
                    "Namespace",
                    namespace,
                    message=(
                        f"Namespace '{namespace}' not found; "
                        f"create it before adding {self.plural}"
                    ),
                ) from e
            raise error from e

    # Internals

    def _invoke(
        self,
        client: K8sClient,
        verb: str,
        deadline: Deadline,
        name: str | None = None,
        namespace: str | None = None,
        body: Any = None,
        cluster_wide: bool = False,
        **kwargs: Any,
    ) -> Any:
        """Call one kubernetes client method and classify its failures."""
        method = getattr(getattr(client, self.api_group), self._method_name(verb, cluster_wide))
        call_kwargs: dict[str, Any] = {}
        if name is not None and verb != "create" and verb != "list":
            call_kwargs["name"] = name
        if self.namespaced and not cluster_wide:
            call_kwargs["namespace"] = namespace
        if body is not None:
            call_kwargs["body"] = body
        call_kwargs.update(kwargs)

        deadline.check(self.kind, name, namespace)
        try:
            return method(_request_timeout=deadline.request_timeout(), **call_kwargs)
        except API_ERRORS as e:
            raise translate_api_error(e, self.kind, name, namespace) from e

    def _method_name(self, verb: str, cluster_wide: bool) -> str:
        if not self.namespaced:
            return f"{verb}_{self.resource}"
        if verb == "list" and cluster_wide:
            return f"list_{self.resource}_for_all_namespaces"
        return f"{verb}_namespaced_{self.resource}"

    def _delete_options(self, force: bool) -> Any:
        return k8s_client.V1DeleteOptions(
            propagation_policy=PROPAGATION_POLICY,
            grace_period_seconds=0 if force else None,
        )

    def _resolve_namespace(self, namespace: str | None) -> str | None:
        if not self.namespaced:
            return None
        return namespace or self._registry.get_current_namespace()

    def _validate_identity(self, spec: ResourceSpec) -> None:
        if not spec.name:
            raise self.invalid(f"{self.kind} name is required", spec, "name")
        if self.namespaced and not spec.namespace:
            raise self.invalid(f"namespace is required for {self.kind}", spec, "namespace")

    def _validate_required(self, spec: ResourceSpec) -> None:
        for field in self.required_fields:
            value = spec.get(field)
            if value is None or value == "" or value == [] or value == {}:
                raise self.invalid(f"{field} is required to create a {self.kind}", spec, field)

    def _with_kind(self, spec: ResourceSpec) -> ResourceSpec:
        if spec.kind != self.kind:
            return spec.model_copy(update={"kind": self.kind})
        return spec

    def _with_context(self, spec: ResourceSpec, hook: Any, *args: Any) -> Any:
        """Run a hook, filling in kind, name and namespace on raised errors."""
        try:
            return hook(*args)
        except KaiError as e:
            e.kind = e.kind or self.kind
            e.name = e.name or spec.name
            e.namespace = e.namespace or spec.namespace
            raise

    def _in_namespace(self, namespace: str | None) -> str:
        return f" in namespace '{namespace}'" if namespace and self.namespaced else ""
