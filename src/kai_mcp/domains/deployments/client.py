"""Deployment operations."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import ResourceController, check_choice, merge_string_map
from kai_mcp.domains.deployments.models import Deployment
from kai_mcp.domains.workloads import (
    IMAGE_PULL_POLICIES,
    build_pod_spec,
    first_container,
    merge_env,
    parse_container_ports,
    pull_secrets,
    template_labels,
    validate_container,
)
from kai_mcp.models.common import OperationResult, ResourceSpec
from kai_mcp.utils.coercion import to_int
from kai_mcp.utils.deadline import Deadline

DEFAULT_CONTAINER_PORT = "8080/TCP"
RESTARTED_AT_ANNOTATION = "kubectl.kubernetes.io/restartedAt"


class DeploymentController(ResourceController):
    """Deployments run a replicated set of identical pods."""

    kind = "Deployment"
    plural = "deployments"
    api_version = "apps/v1"
    api_group = "apps_v1"
    resource = "deployment"
    required_fields = ("image",)
    view = Deployment

    def validate(self, spec: ResourceSpec) -> None:
        validate_container(spec)
        if spec.has("replicas"):
            to_int(spec.get("replicas"), "replicas")

    def build(self, spec: ResourceSpec) -> Any:
        labels = template_labels(spec)
        return k8s_client.V1Deployment(
            api_version="apps/v1",
            kind="Deployment",
            metadata=self.build_metadata(spec, default_labels=labels),
            spec=k8s_client.V1DeploymentSpec(
                replicas=to_int(spec.get("replicas", 1), "replicas"),
                selector=k8s_client.V1LabelSelector(match_labels=labels),
                template=k8s_client.V1PodTemplateSpec(
                    metadata=k8s_client.V1ObjectMeta(labels=labels),
                    spec=build_pod_spec(spec, default_port=DEFAULT_CONTAINER_PORT),
                ),
            ),
        )

    def created_message(self, obj: Any, namespace: str | None) -> str:
        replicas = obj.spec.replicas if obj.spec and obj.spec.replicas is not None else 1
        return (
            f"Deployment '{obj.metadata.name}' created successfully in namespace "
            f"'{namespace}' with {replicas} replica(s)"
        )

    def validate_update(self, spec: ResourceSpec) -> None:
        validate_container(spec)
        if spec.has("replicas"):
            to_int(spec.get("replicas"), "replicas")

    def update_spec(self, existing: Any, spec: ResourceSpec) -> None:
        deploy_spec = existing.spec
        template = deploy_spec.template
        container = first_container(template.spec)

        if spec.has("replicas"):
            deploy_spec.replicas = to_int(spec.get("replicas"), "replicas")
        if spec.has("labels"):
            # The selector is immutable, so only the pod template follows the labels
            template.metadata.labels = merge_string_map(
                template.metadata.labels, spec.get("labels")
            )
        if spec.has("image"):
            container.image = spec.get("image")
        if spec.has("image_pull_policy"):
            container.image_pull_policy = check_choice(
                spec.get("image_pull_policy"), IMAGE_PULL_POLICIES, "image_pull_policy"
            )
        if spec.has("env"):
            container.env = merge_env(container.env, spec.get("env"))
        if spec.has("container_port"):
            container.ports = parse_container_ports(spec.get("container_port"))
        if spec.has("image_pull_secrets"):
            template.spec.image_pull_secrets = pull_secrets(spec.get("image_pull_secrets"))

    def scale(
        self,
        name: str,
        namespace: str,
        replicas: Any,
        deadline: Deadline | None = None,
    ) -> OperationResult:
        """Set the desired replica count."""
        result = self.update(name, namespace, {"replicas": replicas}, deadline)
        result.message = (
            f"Deployment '{name}' scaled to {result.details['replicas']} replica(s) "
            f"in namespace '{namespace}'"
        )
        return result

    def restart(
        self, name: str, namespace: str, deadline: Deadline | None = None
    ) -> OperationResult:
        """Trigger a rolling restart by stamping the pod template."""
        self._validate_identity(ResourceSpec(kind=self.kind, name=name, namespace=namespace))
        restarted_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

        def stamp(existing: Any) -> None:
            template_meta = existing.spec.template.metadata
            if template_meta is None:
                template_meta = existing.spec.template.metadata = k8s_client.V1ObjectMeta()
            template_meta.annotations = dict(template_meta.annotations or {})
            template_meta.annotations[RESTARTED_AT_ANNOTATION] = restarted_at

        updated = self.modify(name, namespace, stamp, deadline)
        return OperationResult(
            kind=self.kind,
            name=name,
            namespace=namespace,
            message=f"Deployment '{name}' restart triggered in namespace '{namespace}'",
            details={**self.describe(updated), "restarted_at": restarted_at},
        )

    def set_paused(
        self,
        name: str,
        namespace: str,
        paused: bool,
        deadline: Deadline | None = None,
    ) -> OperationResult:
        """Pause or resume rollouts of a deployment."""
        self._validate_identity(ResourceSpec(kind=self.kind, name=name, namespace=namespace))

        def toggle(existing: Any) -> None:
            existing.spec.paused = paused

        updated = self.modify(name, namespace, toggle, deadline)
        state = "paused" if paused else "resumed"
        return OperationResult(
            kind=self.kind,
            name=name,
            namespace=namespace,
            message=f"Deployment '{name}' rollout {state} in namespace '{namespace}'",
            details=self.describe(updated),
        )

    def rollout_status(
        self, name: str, namespace: str, deadline: Deadline | None = None
    ) -> dict[str, Any]:
        """Report replica progress of the current rollout."""
        view = Deployment.from_k8s(self.get(name, namespace, deadline))
        return {
            "name": name,
            "namespace": namespace,
            "replicas": view.replicas,
            "updated_replicas": view.updated_replicas,
            "ready_replicas": view.ready_replicas,
            "available_replicas": view.available_replicas,
            "paused": view.paused,
            "complete": view.rollout_complete,
            "conditions": [c.model_dump(mode="json") for c in view.conditions],
        }
