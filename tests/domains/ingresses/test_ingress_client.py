"""Tests for IngressController."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from kai_mcp.clients.registry import ClusterRegistry
from kai_mcp.config import KaiConfig
from kai_mcp.domains.ingresses.client import IngressController, build_rules
from kai_mcp.domains.ingresses.models import Ingress
from kai_mcp.domains.ingresses.tools import register_tools
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.errors import ValidationError

RULES = [
    {
        "host": "shop.example.com",
        "paths": [
            {"path": "/api", "path_type": "Exact", "service_name": "api", "service_port": 8080},
            {"service_name": "web", "service_port": "http"},
        ],
    }
]


@pytest.fixture
def controller(registry: ClusterRegistry, config: KaiConfig) -> IngressController:
    return IngressController(registry, config)


@pytest.fixture
def networking(mock_client: MagicMock) -> MagicMock:
    api = mock_client.networking_v1
    api.create_namespaced_ingress.side_effect = lambda **kw: kw["body"]
    api.replace_namespaced_ingress.side_effect = lambda **kw: kw["body"]
    return api


def _spec(**attributes: Any) -> ResourceSpec:
    return ResourceSpec(kind="Ingress", name="shop", namespace="default", attributes=attributes)


class TestBuildRules:
    """Tests for rule construction."""

    def test_defaults_and_ports(self) -> None:
        rules = build_rules(RULES)

        paths = rules[0].http.paths
        assert rules[0].host == "shop.example.com"
        assert paths[0].path_type == "Exact"
        assert paths[0].backend.service.port.number == 8080
        assert paths[1].path == "/"
        assert paths[1].path_type == "Prefix"
        assert paths[1].backend.service.port.name == "http"

    def test_digit_string_port_is_a_number(self) -> None:
        rules = build_rules([{"paths": [{"serviceName": "web", "servicePort": "80"}]}])

        assert rules[0].http.paths[0].backend.service.port.number == 80

    def test_invalid_path_type(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            build_rules(
                [{"paths": [{"path_type": "Regex", "service_name": "w", "service_port": 80}]}]
            )

        assert exc_info.value.field == "rules[0].paths[0].path_type"

    def test_backend_fields_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            build_rules([{"paths": [{"service_name": "web"}]}])

        assert exc_info.value.field == "rules[0].paths[0].service_port"

    def test_rule_without_paths(self) -> None:
        with pytest.raises(ValidationError, match="at least one path"):
            build_rules([{"host": "a.example.com"}])


class TestIngressController:
    """Tests for ingress create and update."""

    def test_create_with_class_and_tls(
        self, controller: IngressController, networking: MagicMock
    ) -> None:
        result = controller.create(
            _spec(
                ingress_class_name="nginx",
                rules=RULES,
                tls=[{"hosts": ["shop.example.com"], "secret_name": "shop-tls"}],
            )
        )

        body = networking.create_namespaced_ingress.call_args.kwargs["body"]
        assert body.spec.ingress_class_name == "nginx"
        assert body.spec.tls[0].secret_name == "shop-tls"
        assert result.message == (
            "Ingress 'shop' created successfully in namespace 'default' (Class: nginx)"
        )
        assert result.details["rules"][0]["paths"][0]["service_port"] == "8080"

    def test_tls_hosts_of_wrong_shape_ignored(
        self, controller: IngressController, networking: MagicMock
    ) -> None:
        controller.create(_spec(rules=RULES, tls=[{"hosts": 5, "secret_name": "shop-tls"}]))

        body = networking.create_namespaced_ingress.call_args.kwargs["body"]
        assert body.spec.tls[0].hosts is None
        assert body.spec.tls[0].secret_name == "shop-tls"

    def test_default_backend_only(
        self, controller: IngressController, networking: MagicMock
    ) -> None:
        controller.create(_spec(default_backend={"service_name": "web", "service_port": 80}))

        body = networking.create_namespaced_ingress.call_args.kwargs["body"]
        assert body.spec.rules is None
        assert body.spec.default_backend.service.name == "web"

    def test_rules_or_backend_required(
        self, controller: IngressController, mock_client: MagicMock
    ) -> None:
        with pytest.raises(ValidationError, match="At least one rule or a default_backend"):
            controller.create(_spec())

        assert mock_client.mock_calls == []

    def test_update_replaces_rules(
        self, controller: IngressController, networking: MagicMock
    ) -> None:
        networking.read_namespaced_ingress.return_value = controller.build(_spec(rules=RULES))

        controller.update(
            "shop",
            "default",
            {"rules": [{"paths": [{"path": "/v2", "service_name": "api", "service_port": 9090}]}]},
        )

        body = networking.replace_namespaced_ingress.call_args.kwargs["body"]
        assert len(body.spec.rules) == 1
        assert [p.path for p in body.spec.rules[0].http.paths] == ["/v2"]


class TestIngressView:
    """Tests for the Ingress model."""

    def test_path_summary(self, controller: IngressController) -> None:
        view = Ingress.from_k8s(controller.build(_spec(rules=RULES)))

        summaries = [p.summary for p in view.rules[0].paths]
        assert summaries == ["/api (Exact) → api:8080", "/ (Prefix) → web:http"]

    def test_create_tool(
        self, mock_mcp: MagicMock, mock_server: MagicMock, networking: MagicMock
    ) -> None:
        register_tools(mock_mcp, mock_server)

        result = mock_mcp._registered_tools["create_ingress"](
            name="shop", ingress_class="traefik", rules=RULES
        )

        assert "(Class: traefik)" in result["message"]
        networking.create_namespaced_ingress.assert_called_once()
