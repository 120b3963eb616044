"""Tests for DeploymentController."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from kubernetes import client as k8s_client

from kai_mcp.clients.registry import ClusterRegistry
from kai_mcp.config import KaiConfig
from kai_mcp.domains.deployments.client import RESTARTED_AT_ANNOTATION, DeploymentController
from kai_mcp.domains.deployments.tools import register_tools
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.errors import ValidationError


@pytest.fixture
def controller(registry: ClusterRegistry, config: KaiConfig) -> DeploymentController:
    return DeploymentController(registry, config)


@pytest.fixture
def apps(mock_client: MagicMock) -> MagicMock:
    api = mock_client.apps_v1
    api.create_namespaced_deployment.side_effect = lambda **kw: kw["body"]
    api.replace_namespaced_deployment.side_effect = lambda **kw: kw["body"]
    return api


def _spec(**attributes: Any) -> ResourceSpec:
    attrs: dict[str, Any] = {"image": "nginx:1.27"}
    attrs.update(attributes)
    return ResourceSpec(kind="Deployment", name="web", namespace="default", attributes=attrs)


def _existing(controller: DeploymentController, **attributes: Any) -> Any:
    deployment = controller.build(_spec(**attributes))
    deployment.metadata.namespace = "default"
    return deployment


class TestCreateDeployment:
    """Tests for deployment creation."""

    def test_defaults(self, controller: DeploymentController, apps: MagicMock) -> None:
        result = controller.create(_spec())

        body = apps.create_namespaced_deployment.call_args.kwargs["body"]
        assert body.spec.replicas == 1
        assert body.spec.selector.match_labels == {"app": "web"}
        assert body.spec.template.metadata.labels == {"app": "web"}
        assert body.metadata.labels == {"app": "web"}
        container = body.spec.template.spec.containers[0]
        assert container.name == "web"
        assert container.image == "nginx:1.27"
        assert container.ports[0].container_port == 8080
        assert result.message == (
            "Deployment 'web' created successfully in namespace 'default' with 1 replica(s)"
        )

    def test_loose_attribute_values(
        self, controller: DeploymentController, apps: MagicMock
    ) -> None:
        """Numbers and booleans given as other types are coerced."""
        controller.create(
            _spec(
                replicas="3",
                labels={"app": "web", "version": 2},
                env={"DEBUG": True, "WORKERS": 4},
                container_port="9090/udp",
                image_pull_secrets=["regcred", ""],
            )
        )

        body = apps.create_namespaced_deployment.call_args.kwargs["body"]
        assert body.spec.replicas == 3
        assert body.spec.selector.match_labels == {"app": "web", "version": "2"}
        container = body.spec.template.spec.containers[0]
        assert [(e.name, e.value) for e in container.env] == [("DEBUG", "true"), ("WORKERS", "4")]
        assert container.ports[0].container_port == 9090
        assert container.ports[0].protocol == "UDP"
        assert [s.name for s in body.spec.template.spec.image_pull_secrets] == ["regcred"]

    def test_negative_replicas(
        self, controller: DeploymentController, mock_client: MagicMock
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            controller.create(_spec(replicas=-1))

        assert exc_info.value.field == "replicas"
        assert mock_client.mock_calls == []

    def test_image_required(self, controller: DeploymentController) -> None:
        spec = ResourceSpec(kind="Deployment", name="web", namespace="default")

        with pytest.raises(ValidationError, match="image is required"):
            controller.create(spec)

    def test_pull_policy_checked(self, controller: DeploymentController) -> None:
        with pytest.raises(ValidationError) as exc_info:
            controller.create(_spec(image_pull_policy="Sometimes"))

        assert exc_info.value.field == "image_pull_policy"


class TestUpdateDeployment:
    """Tests for deployment updates."""

    def test_labels_follow_template_not_selector(
        self, controller: DeploymentController, apps: MagicMock
    ) -> None:
        apps.read_namespaced_deployment.return_value = _existing(controller)

        controller.update("web", "default", {"labels": {"tier": "frontend"}})

        body = apps.replace_namespaced_deployment.call_args.kwargs["body"]
        assert body.spec.selector.match_labels == {"app": "web"}
        assert body.spec.template.metadata.labels == {"app": "web", "tier": "frontend"}
        assert body.metadata.labels == {"app": "web", "tier": "frontend"}

    def test_env_merged_by_name(self, controller: DeploymentController, apps: MagicMock) -> None:
        apps.read_namespaced_deployment.return_value = _existing(
            controller, env={"A": "1", "B": "2"}
        )

        result = controller.update(
            "web", "default", {"env": {"B": "3", "C": "4"}, "image": "nginx:1.28"}
        )

        container = apps.replace_namespaced_deployment.call_args.kwargs[
            "body"
        ].spec.template.spec.containers[0]
        assert [(e.name, e.value) for e in container.env] == [("A", "1"), ("B", "3"), ("C", "4")]
        assert container.image == "nginx:1.28"
        assert result.details["updated_fields"] == ["env", "image"]

    def test_container_ports_replaced(
        self, controller: DeploymentController, apps: MagicMock
    ) -> None:
        apps.read_namespaced_deployment.return_value = _existing(controller)

        controller.update("web", "default", {"container_port": ["80", "443/TCP"]})

        container = apps.replace_namespaced_deployment.call_args.kwargs[
            "body"
        ].spec.template.spec.containers[0]
        assert [p.container_port for p in container.ports] == [80, 443]


class TestDeploymentOperations:
    """Tests for scale, restart, pause and rollout status."""

    def test_scale(self, controller: DeploymentController, apps: MagicMock) -> None:
        apps.read_namespaced_deployment.return_value = _existing(controller)

        result = controller.scale("web", "default", "5")

        assert result.details["replicas"] == 5
        assert result.message == "Deployment 'web' scaled to 5 replica(s) in namespace 'default'"

    def test_restart_stamps_template(
        self, controller: DeploymentController, apps: MagicMock
    ) -> None:
        apps.read_namespaced_deployment.return_value = _existing(controller)

        result = controller.restart("web", "default")

        body = apps.replace_namespaced_deployment.call_args.kwargs["body"]
        stamp = body.spec.template.metadata.annotations[RESTARTED_AT_ANNOTATION]
        assert stamp == result.details["restarted_at"]
        assert "restart triggered" in result.message

    def test_pause_and_resume(self, controller: DeploymentController, apps: MagicMock) -> None:
        apps.read_namespaced_deployment.return_value = _existing(controller)

        paused = controller.set_paused("web", "default", True)
        assert paused.details["paused"] is True
        assert "rollout paused" in paused.message

        resumed = controller.set_paused("web", "default", False)
        assert resumed.details["paused"] is False

    def test_rollout_status(self, controller: DeploymentController, apps: MagicMock) -> None:
        deployment = _existing(controller, replicas=3)
        deployment.status = k8s_client.V1DeploymentStatus(
            replicas=3, ready_replicas=2, updated_replicas=3, available_replicas=2
        )
        apps.read_namespaced_deployment.return_value = deployment

        status = controller.rollout_status("web", "default")

        assert status["replicas"] == 3
        assert status["ready_replicas"] == 2
        assert status["complete"] is False


class TestDeploymentTools:
    """Tests for deployment tool functions."""

    def test_scale_tool(
        self, mock_mcp: MagicMock, mock_server: MagicMock, apps: MagicMock
    ) -> None:
        register_tools(mock_mcp, mock_server)
        apps.read_namespaced_deployment.return_value = _existing(
            DeploymentController(mock_server.registry, mock_server.config)
        )

        result = mock_mcp._registered_tools["scale_deployment"](name="web", replicas=2)

        assert result["replicas"] == 2
        assert result["namespace"] == "default"

    def test_create_tool_reports_validation_error(
        self, mock_mcp: MagicMock, mock_server: MagicMock
    ) -> None:
        register_tools(mock_mcp, mock_server)

        result = mock_mcp._registered_tools["create_deployment"](
            name="web", image="nginx", container_port="http"
        )

        assert result["error"] == "Invalid request"
        assert result["field"] == "container_port"
