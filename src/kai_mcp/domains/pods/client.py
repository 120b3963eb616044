"""Pod operations."""

from __future__ import annotations

import logging
from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import API_ERRORS, ResourceController, check_choice
from kai_mcp.domains.pods.models import Pod, PodLogs, PodPhase
from kai_mcp.domains.workloads import build_pod_spec, first_container, validate_container
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.coercion import to_int
from kai_mcp.utils.deadline import Deadline
from kai_mcp.utils.errors import KaiError, NotFoundError, ValidationError, translate_api_error

logger = logging.getLogger(__name__)

RESTART_POLICIES = ("Always", "OnFailure", "Never")

# Log output is capped to keep tool responses manageable
MAX_LOG_BYTES = 100 * 1024
TRUNCATION_NOTICE = (
    "\n\n[Output truncated due to size limits. Use the 'tail' or 'since' "
    "parameters to view specific sections of logs.]"
)

_LOGGABLE_PHASES = (PodPhase.RUNNING.value, PodPhase.SUCCEEDED.value)


class PodController(ResourceController):
    """Pods run a single container directly, without a controller."""

    kind = "Pod"
    plural = "pods"
    resource = "pod"
    required_fields = ("image",)
    supports_selector_delete = True
    view = Pod

    def validate(self, spec: ResourceSpec) -> None:
        validate_container(spec)
        if spec.has("restart_policy"):
            check_choice(spec.get("restart_policy"), RESTART_POLICIES, "restart_policy")

    def build(self, spec: ResourceSpec) -> Any:
        return k8s_client.V1Pod(
            api_version="v1",
            kind="Pod",
            metadata=self.build_metadata(spec),
            spec=build_pod_spec(spec, restart_policy=spec.get("restart_policy", "Always")),
        )

    def validate_update(self, spec: ResourceSpec) -> None:
        image = spec.get("image")
        if image is not None and (not isinstance(image, str) or not image):
            raise ValidationError(f"Invalid image {image!r}", field="image", value=image)

    def update_spec(self, existing: Any, spec: ResourceSpec) -> None:
        # Only the image of a running pod's containers may change
        if spec.has("image"):
            first_container(existing.spec).image = spec.get("image")

    def logs(
        self,
        name: str,
        namespace: str,
        container: str | None = None,
        tail_lines: Any = None,
        previous: bool = False,
        since_seconds: Any = None,
        deadline: Deadline | None = None,
    ) -> PodLogs:
        """Fetch the logs of one container in a pod.

        Args:
            name: Pod name.
            namespace: Pod namespace.
            container: Container name; required when the pod has several.
            tail_lines: Only return this many lines from the end.
            previous: Read the previous, terminated instance of the container.
            since_seconds: Only return lines newer than this many seconds.
            deadline: Caller deadline.

        Returns:
            PodLogs, truncated to MAX_LOG_BYTES with a notice appended.

        Raises:
            NotFoundError: The pod or the container does not exist.
            ValidationError: Bad options, or the pod is not in a phase with logs.
            KaiError: The container produced no output.
        """
        spec = ResourceSpec(kind=self.kind, name=name, namespace=namespace)
        self._validate_identity(spec)
        tail = to_int(tail_lines, "tail_lines", minimum=1) if tail_lines is not None else None
        since = (
            to_int(since_seconds, "since_seconds", minimum=1) if since_seconds is not None else None
        )
        deadline = deadline or Deadline()

        pod = self.get(name, namespace, deadline)
        phase = pod.status.phase if pod.status else None
        if not previous and phase not in _LOGGABLE_PHASES:
            raise self.invalid(
                f"Pod '{name}' is in phase '{phase}'; logs are only available for "
                "Running or Succeeded pods (set previous=True for a terminated container)",
                spec,
                "phase",
                phase,
            )

        names = [c.name for c in (pod.spec.containers or [])]
        if container is None:
            if len(names) != 1:
                raise self.invalid(
                    f"Pod '{name}' has {len(names)} containers; specify one of: "
                    + ", ".join(names),
                    spec,
                    "container",
                )
            container = names[0]
        elif container not in names:
            raise NotFoundError(
                "Container",
                container,
                namespace,
                message=(
                    f"Container '{container}' not found in pod '{namespace}/{name}'. "
                    f"Available containers: {', '.join(names)}"
                ),
            )

        kwargs: dict[str, Any] = {"container": container, "previous": previous}
        if tail is not None:
            kwargs["tail_lines"] = tail
        if since is not None:
            kwargs["since_seconds"] = since
        # One byte over the cap tells a truncated stream from an exact fit
        kwargs["limit_bytes"] = MAX_LOG_BYTES + 1

        client = self._registry.get_current_client()
        text = self._read_log(
            client, name, namespace, deadline.child(self._config.read_timeout), kwargs
        )

        if not text:
            raise KaiError(
                f"No logs found for container '{container}' in pod '{namespace}/{name}'",
                kind=self.kind,
                name=name,
                namespace=namespace,
            )

        truncated = len(text.encode("utf-8")) > MAX_LOG_BYTES
        if truncated:
            text = text.encode("utf-8")[:MAX_LOG_BYTES].decode("utf-8", errors="ignore")
            text += TRUNCATION_NOTICE
            logger.debug(f"Truncated logs of {namespace}/{name}/{container}")

        return PodLogs(
            pod=name,
            namespace=namespace,
            container=container,
            logs=text,
            previous=previous,
            tail_lines=tail,
            since_seconds=since,
            truncated=truncated,
        )

    def _read_log(
        self, client: Any, name: str, namespace: str, deadline: Deadline, kwargs: dict[str, Any]
    ) -> str:
        deadline.check(self.kind, name, namespace)
        try:
            return client.core_v1.read_namespaced_pod_log(
                name=name,
                namespace=namespace,
                _request_timeout=deadline.request_timeout(),
                **kwargs,
            )
        except API_ERRORS as e:
            raise translate_api_error(e, self.kind, name, namespace) from e
