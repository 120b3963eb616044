"""Tests for the shared create/get/list/update/delete template."""

from unittest.mock import MagicMock

import pytest
from kubernetes import client as k8s_client
from kubernetes.client import ApiException

from kai_mcp.clients.registry import ClusterRegistry
from kai_mcp.config import KaiConfig
from kai_mcp.domains.configmaps.client import ConfigMapController
from kai_mcp.domains.pods.client import PodController
from kai_mcp.domains.services.client import ServiceController
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.deadline import Deadline
from kai_mcp.utils.errors import (
    ConflictError,
    DeadlineExceededError,
    KaiError,
    NotFoundError,
    ResourceExistsError,
    TransientError,
    ValidationError,
)


def _service(name: str = "web", namespace: str = "default") -> k8s_client.V1Service:
    return k8s_client.V1Service(
        metadata=k8s_client.V1ObjectMeta(
            name=name,
            namespace=namespace,
            labels={"app": name},
            annotations={"owner": "team-a"},
        ),
        spec=k8s_client.V1ServiceSpec(
            type="ClusterIP",
            selector={"app": name},
            ports=[
                k8s_client.V1ServicePort(port=80, target_port=8080),
                k8s_client.V1ServicePort(port=443, target_port=8443),
            ],
        ),
    )


def _pod(name: str) -> k8s_client.V1Pod:
    return k8s_client.V1Pod(metadata=k8s_client.V1ObjectMeta(name=name, namespace="default"))


def _service_spec(**attributes: object) -> ResourceSpec:
    attrs: dict = {"ports": [{"port": 80}]}
    attrs.update(attributes)
    return ResourceSpec(kind="Service", name="web", namespace="default", attributes=attrs)


@pytest.fixture
def services(registry: ClusterRegistry, config: KaiConfig) -> ServiceController:
    return ServiceController(registry, config)


@pytest.fixture
def pods(registry: ClusterRegistry, config: KaiConfig) -> PodController:
    return PodController(registry, config)


class TestValidationBeforeApi:
    """Invalid requests fail before any call reaches the cluster."""

    def test_missing_name(self, services: ServiceController, mock_client: MagicMock) -> None:
        spec = ResourceSpec(kind="Service", name="", namespace="default")

        with pytest.raises(ValidationError) as exc_info:
            services.create(spec)

        assert exc_info.value.field == "name"
        assert mock_client.mock_calls == []

    def test_missing_namespace(self, services: ServiceController, mock_client: MagicMock) -> None:
        spec = ResourceSpec(kind="Service", name="web", attributes={"ports": [{"port": 80}]})

        with pytest.raises(ValidationError) as exc_info:
            services.create(spec)

        assert exc_info.value.field == "namespace"
        assert mock_client.mock_calls == []

    def test_missing_required_field(self, pods: PodController, mock_client: MagicMock) -> None:
        spec = ResourceSpec(kind="Pod", name="p", namespace="default")

        with pytest.raises(ValidationError, match="image is required to create a Pod"):
            pods.create(spec)

        assert mock_client.mock_calls == []

    def test_invalid_enum_carries_identity(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            services.create(_service_spec(type="Internal"))

        error = exc_info.value
        assert error.field == "type"
        assert error.kind == "Service"
        assert error.name == "web"
        assert error.namespace == "default"
        assert "ClusterIP, NodePort, LoadBalancer, ExternalName" in error.message
        assert mock_client.mock_calls == []

    def test_conflict_before_api(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        spec = _service_spec(ports=[{"port": 80, "node_port": 30080}])

        with pytest.raises(ConflictError):
            services.create(spec)

        assert mock_client.mock_calls == []


class TestCreate:
    """Tests for create."""

    def test_missing_namespace_in_cluster(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        mock_client.core_v1.read_namespace.side_effect = ApiException(status=404)

        with pytest.raises(NotFoundError, match="Namespace 'default' not found"):
            services.create(_service_spec())

        mock_client.core_v1.create_namespaced_service.assert_not_called()

    def test_create_uses_write_timeout(
        self, services: ServiceController, mock_client: MagicMock, config: KaiConfig
    ) -> None:
        mock_client.core_v1.create_namespaced_service.side_effect = lambda **kw: kw["body"]

        result = services.create(_service_spec())

        kwargs = mock_client.core_v1.create_namespaced_service.call_args.kwargs
        assert kwargs["namespace"] == "default"
        assert 0 < kwargs["_request_timeout"] <= config.write_timeout
        assert result.kind == "Service"
        assert result.namespace == "default"
        assert result.details["metadata"]["name"] == "web"

    def test_create_is_not_retried(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        mock_client.core_v1.create_namespaced_service.side_effect = ApiException(status=409)

        with pytest.raises(ResourceExistsError):
            services.create(_service_spec())

        assert mock_client.core_v1.create_namespaced_service.call_count == 1


class TestGet:
    """Tests for get and its retry policy."""

    def test_not_found_after_one_attempt(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        """Not-found is never retried."""
        mock_client.core_v1.read_namespaced_service.side_effect = ApiException(status=404)

        with pytest.raises(NotFoundError) as exc_info:
            services.get("web", "default")

        assert exc_info.value.message == "Service 'web' not found in namespace 'default'"
        assert mock_client.core_v1.read_namespaced_service.call_count == 1

    def test_transient_failure_retried(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        svc = _service()
        mock_client.core_v1.read_namespaced_service.side_effect = [
            ApiException(status=503),
            svc,
        ]

        assert services.get("web", "default") is svc
        assert mock_client.core_v1.read_namespaced_service.call_count == 2

    def test_retries_exhausted(
        self, services: ServiceController, mock_client: MagicMock, config: KaiConfig
    ) -> None:
        mock_client.core_v1.read_namespaced_service.side_effect = ApiException(
            status=500, reason="Internal Server Error"
        )

        with pytest.raises(TransientError, match="after 5 attempts"):
            services.get("web", "default")

        assert mock_client.core_v1.read_namespaced_service.call_count == config.retry_steps

    def test_cancelled_deadline_names_the_resource(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        deadline = Deadline()
        deadline.cancel()

        with pytest.raises(DeadlineExceededError) as exc_info:
            services.get("web", "default", deadline=deadline)

        assert exc_info.value.kind == "Service"
        assert exc_info.value.name == "web"
        assert exc_info.value.namespace == "default"
        mock_client.core_v1.read_namespaced_service.assert_not_called()

    def test_read_uses_read_timeout(
        self, services: ServiceController, mock_client: MagicMock, config: KaiConfig
    ) -> None:
        mock_client.core_v1.read_namespaced_service.return_value = _service()

        services.get("web")

        kwargs = mock_client.core_v1.read_namespaced_service.call_args.kwargs
        assert kwargs["namespace"] == "default"
        assert 0 < kwargs["_request_timeout"] <= config.read_timeout

    def test_name_required(self, services: ServiceController) -> None:
        with pytest.raises(ValidationError):
            services.get("", "default")


class TestList:
    """Tests for list and its empty-result messages."""

    def test_empty_namespace(self, services: ServiceController, mock_client: MagicMock) -> None:
        mock_client.core_v1.list_namespaced_service.return_value = MagicMock(items=[])

        result = services.list("default")

        assert result.empty
        assert result.message == "No services found in namespace 'default'"

    def test_empty_selector(self, services: ServiceController, mock_client: MagicMock) -> None:
        mock_client.core_v1.list_namespaced_service.return_value = MagicMock(items=[])

        result = services.list("default", label_selector="app=web,tier!=db")

        assert result.message == (
            "No services found matching label selector 'app=web,tier!=db' in namespace 'default'"
        )
        kwargs = mock_client.core_v1.list_namespaced_service.call_args.kwargs
        assert kwargs["label_selector"] == "app=web,tier!=db"

    def test_empty_label_and_field_selector(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        mock_client.core_v1.list_namespaced_service.return_value = MagicMock(items=[])

        result = services.list(
            "default", label_selector="app=web", field_selector="metadata.name=web"
        )

        assert result.message == (
            "No services found matching label selector 'app=web' and field selector "
            "'metadata.name=web' in namespace 'default'"
        )
        assert result.field_selector == "metadata.name=web"
        kwargs = mock_client.core_v1.list_namespaced_service.call_args.kwargs
        assert kwargs["field_selector"] == "metadata.name=web"

    def test_empty_cluster(self, services: ServiceController, mock_client: MagicMock) -> None:
        mock_client.core_v1.list_service_for_all_namespaces.return_value = MagicMock(items=[])

        result = services.list(all_namespaces=True)

        assert result.message == "No services found across all namespaces"
        assert result.namespace is None
        mock_client.core_v1.list_namespaced_service.assert_not_called()

    def test_items_have_no_message(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        mock_client.core_v1.list_namespaced_service.return_value = MagicMock(
            items=[_service("a"), _service("b")]
        )

        result = services.list()

        assert [item.metadata.name for item in result.items] == ["a", "b"]
        assert result.message is None
        assert mock_client.core_v1.list_namespaced_service.call_args.kwargs["namespace"] == (
            "default"
        )


class TestUpdate:
    """Tests for partial updates."""

    def test_maps_merge_and_lists_replace(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        mock_client.core_v1.read_namespaced_service.return_value = _service()
        mock_client.core_v1.replace_namespaced_service.side_effect = lambda **kw: kw["body"]

        result = services.update(
            "web",
            "default",
            {"labels": {"tier": "frontend"}, "ports": [{"port": 9090}], "annotations": None},
        )

        body = mock_client.core_v1.replace_namespaced_service.call_args.kwargs["body"]
        assert body.metadata.labels == {"app": "web", "tier": "frontend"}
        assert body.metadata.annotations == {"owner": "team-a"}
        assert [p.port for p in body.spec.ports] == [9090]
        assert result.details["updated_fields"] == ["labels", "ports"]
        assert result.message == "Service 'web' updated successfully"

    def test_update_missing_resource(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        mock_client.core_v1.read_namespaced_service.side_effect = ApiException(status=404)

        with pytest.raises(NotFoundError):
            services.update("web", "default", {"labels": {"a": "b"}})

        mock_client.core_v1.replace_namespaced_service.assert_not_called()

    def test_invalid_update_sends_nothing(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        with pytest.raises(ValidationError):
            services.update("web", "default", {"ports": [{"port": "not-a-port!"}, 5]})

        assert mock_client.mock_calls == []


class TestDelete:
    """Tests for delete."""

    def test_background_propagation(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        mock_client.core_v1.read_namespaced_service.return_value = _service()

        result = services.delete("web", "default")

        body = mock_client.core_v1.delete_namespaced_service.call_args.kwargs["body"]
        assert body.propagation_policy == "Background"
        assert body.grace_period_seconds is None
        assert result.message == "Service 'web' deleted successfully from namespace 'default'"
        assert result.details["deleted"] is True

    def test_force_sets_zero_grace_period(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        mock_client.core_v1.read_namespaced_service.return_value = _service()

        services.delete("web", "default", force=True)

        body = mock_client.core_v1.delete_namespaced_service.call_args.kwargs["body"]
        assert body.grace_period_seconds == 0

    def test_repeated_delete_reports_not_found(
        self, services: ServiceController, mock_client: MagicMock
    ) -> None:
        mock_client.core_v1.read_namespaced_service.side_effect = [
            _service(),
            ApiException(status=404),
        ]

        services.delete("web", "default")
        with pytest.raises(NotFoundError):
            services.delete("web", "default")

        assert mock_client.core_v1.delete_namespaced_service.call_count == 1


class TestDeleteBySelector:
    """Tests for delete_by_selector."""

    def test_partial_failure_collected(self, pods: PodController, mock_client: MagicMock) -> None:
        mock_client.core_v1.list_namespaced_pod.return_value = MagicMock(
            items=[_pod("a"), _pod("b"), _pod("c")]
        )
        mock_client.core_v1.delete_namespaced_pod.side_effect = [
            None,
            ApiException(status=500, reason="Internal Server Error"),
            None,
        ]

        result = pods.delete_by_selector("default", "app=web", force=True)

        assert result.details["deleted"] == ["a", "c"]
        assert list(result.details["failed"]) == ["b"]
        assert result.details["matched"] == 3
        assert result.details["deleted_count"] == 2
        assert result.message == "Deleted 2 of 3 pods matching 'app=web' (1 failed)"
        body = mock_client.core_v1.delete_namespaced_pod.call_args.kwargs["body"]
        assert body.grace_period_seconds == 0

    def test_all_failed(self, pods: PodController, mock_client: MagicMock) -> None:
        mock_client.core_v1.list_namespaced_pod.return_value = MagicMock(items=[_pod("a")])
        mock_client.core_v1.delete_namespaced_pod.side_effect = ApiException(status=403)

        with pytest.raises(KaiError, match="Failed to delete any of the 1 pods"):
            pods.delete_by_selector("default", "app=web")

    def test_nothing_matches(self, pods: PodController, mock_client: MagicMock) -> None:
        mock_client.core_v1.list_namespaced_pod.return_value = MagicMock(items=[])

        with pytest.raises(NotFoundError, match="No pods found matching label selector"):
            pods.delete_by_selector("default", "app=web")

        mock_client.core_v1.delete_namespaced_pod.assert_not_called()

    def test_selector_required(self, pods: PodController, mock_client: MagicMock) -> None:
        with pytest.raises(ValidationError):
            pods.delete_by_selector("default", "")

        assert mock_client.mock_calls == []

    def test_unsupported_kind(self, registry: ClusterRegistry, config: KaiConfig) -> None:
        with pytest.raises(ValidationError, match="not supported"):
            ConfigMapController(registry, config).delete_by_selector("default", "app=web")
