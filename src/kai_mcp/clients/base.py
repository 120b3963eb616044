"""Kubernetes client handle for a single cluster context."""

from __future__ import annotations

import logging
from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]
from kubernetes import config as k8s_config  # type: ignore[import-untyped]
from kubernetes.client import ApiException  # type: ignore[import-untyped]

from kai_mcp.utils.errors import AuthorizationError, TransientError

logger = logging.getLogger(__name__)


class K8sClient:
    """Typed API accessors sharing one ``ApiClient`` connection pool.

    A handle is created per cluster context and shared read-only by every
    controller call that resolves that context.
    """

    def __init__(self, api_client: Any, context_name: str | None = None) -> None:
        self._api_client = api_client
        self._context_name = context_name
        self._core_v1: Any = None
        self._apps_v1: Any = None
        self._batch_v1: Any = None
        self._networking_v1: Any = None
        self._server_version: str | None = None

    @classmethod
    def from_kubeconfig(cls, config_file: str | None, context: str | None) -> K8sClient:
        """Build a handle for one context of a kubeconfig file."""
        api_client = k8s_config.new_client_from_config(
            config_file=config_file,
            context=context,
        )
        return cls(api_client, context_name=context)

    @classmethod
    def in_cluster(cls) -> K8sClient:
        """Build a handle from the pod's service account."""
        configuration = k8s_client.Configuration()
        k8s_config.load_incluster_config(client_configuration=configuration)
        return cls(k8s_client.ApiClient(configuration), context_name="in-cluster")

    @property
    def api_client(self) -> Any:
        return self._api_client

    @property
    def context_name(self) -> str | None:
        return self._context_name

    @property
    def host(self) -> str | None:
        """API server URL of this handle."""
        configuration = getattr(self._api_client, "configuration", None)
        return getattr(configuration, "host", None)

    @property
    def core_v1(self) -> Any:
        """CoreV1Api (pods, services, config maps, secrets, namespaces)."""
        if self._core_v1 is None:
            self._core_v1 = k8s_client.CoreV1Api(self._api_client)
        return self._core_v1

    @property
    def apps_v1(self) -> Any:
        """AppsV1Api (deployments)."""
        if self._apps_v1 is None:
            self._apps_v1 = k8s_client.AppsV1Api(self._api_client)
        return self._apps_v1

    @property
    def batch_v1(self) -> Any:
        """BatchV1Api (jobs, cron jobs)."""
        if self._batch_v1 is None:
            self._batch_v1 = k8s_client.BatchV1Api(self._api_client)
        return self._batch_v1

    @property
    def networking_v1(self) -> Any:
        """NetworkingV1Api (ingresses)."""
        if self._networking_v1 is None:
            self._networking_v1 = k8s_client.NetworkingV1Api(self._api_client)
        return self._networking_v1

    @property
    def is_connected(self) -> bool:
        return self._server_version is not None

    @property
    def server_version(self) -> str | None:
        return self._server_version

    def connect(self, timeout: float | None = None) -> str:
        """Verify the API server is reachable.

        Returns:
            The server's git version, e.g. "v1.29.2".

        Raises:
            AuthorizationError: If the credentials are rejected.
            TransientError: If the server cannot be reached.
        """
        try:
            info = k8s_client.VersionApi(self._api_client).get_code(_request_timeout=timeout)
        except ApiException as e:
            if e.status in (401, 403):
                raise AuthorizationError(
                    f"Credentials rejected by {self.host}: {e.reason}"
                ) from e
            raise TransientError(f"Cannot reach {self.host}: {e.reason}", cause=e) from e
        except Exception as e:
            raise TransientError(f"Cannot reach {self.host}: {e}", cause=e) from e

        self._server_version = info.git_version
        logger.info(f"Connected to {self.host} ({self._server_version})")
        return self._server_version

    def disconnect(self) -> None:
        """Release the connection pool."""
        close = getattr(self._api_client, "close", None)
        if close is not None:
            close()
        self._server_version = None
