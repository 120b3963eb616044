"""Registry of cluster contexts and the current context/namespace pointer."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from kai_mcp.utils.errors import NotConfiguredError, ValidationError

if TYPE_CHECKING:
    from kai_mcp.clients.base import K8sClient

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"


class ReadWriteLock:
    """Lock allowing many readers or one writer.

    Waiting writers block new readers so a context switch is not starved
    by a steady stream of reads.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass(frozen=True)
class ClusterContext:
    """A named cluster connection and its working namespace."""

    name: str
    client: K8sClient
    namespace: str = DEFAULT_NAMESPACE
    cluster: str | None = None
    user: str | None = None
    server_url: str | None = None
    config_path: str | None = None

    def describe(self, active: bool = False) -> dict[str, Any]:
        """Return the context's details without the client handle."""
        return {
            "name": self.name,
            "cluster": self.cluster,
            "user": self.user,
            "namespace": self.namespace,
            "server_url": self.server_url,
            "config_path": self.config_path,
            "is_active": active,
        }


class ClusterRegistry:
    """Owns every cluster context and tracks which one is current.

    One registry is created per server and handed to each controller; all
    access goes through a read/write lock, so controllers running in
    parallel can resolve the client while a context switch waits for them.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._contexts: dict[str, ClusterContext] = {}
        self._current: str | None = None

    def register(
        self,
        name: str,
        client: K8sClient,
        namespace: str | None = None,
        **info: Any,
    ) -> ClusterContext:
        """Add a context, replacing any existing context with the same name.

        Args:
            name: Context name.
            client: Client handle for the context's cluster.
            namespace: Working namespace; "default" when not given.
            **info: Descriptive fields (cluster, user, server_url, config_path).
        """
        if not name:
            raise ValidationError("Context name is required", field="name")
        context = ClusterContext(
            name=name,
            client=client,
            namespace=namespace or DEFAULT_NAMESPACE,
            **info,
        )
        with self._lock.write():
            replaced = name in self._contexts
            self._contexts[name] = context
        logger.info(f"{'Replaced' if replaced else 'Registered'} cluster context '{name}'")
        return context

    def set_current(self, name: str) -> ClusterContext:
        """Make a registered context current.

        Raises:
            NotConfiguredError: If no context has that name.
        """
        with self._lock.write():
            context = self._contexts.get(name)
            if context is None:
                raise NotConfiguredError(f"Cluster context '{name}' is not registered", name=name)
            self._current = name
        logger.info(f"Switched to context '{name}' (namespace '{context.namespace}')")
        return context

    def get_current_client(self) -> K8sClient:
        """Return the current context's client handle.

        Raises:
            NotConfiguredError: If no context is current.
        """
        return self.get_current().client

    def get_current(self) -> ClusterContext:
        with self._lock.read():
            return self._current_locked()

    def get_current_namespace(self) -> str:
        """Return the current context's namespace, or "default" without one."""
        with self._lock.read():
            if self._current is None:
                return DEFAULT_NAMESPACE
            return self._contexts[self._current].namespace

    def set_current_namespace(self, namespace: str) -> str:
        """Change the current context's namespace; empty means "default"."""
        namespace = namespace or DEFAULT_NAMESPACE
        with self._lock.write():
            context = self._current_locked()
            self._contexts[context.name] = replace(context, namespace=namespace)
        logger.info(f"Context '{context.name}' now uses namespace '{namespace}'")
        return namespace

    def current_context_name(self) -> str | None:
        with self._lock.read():
            return self._current

    def get(self, name: str) -> ClusterContext:
        """Look up a context by name."""
        with self._lock.read():
            context = self._contexts.get(name)
        if context is None:
            raise NotConfiguredError(f"Cluster context '{name}' is not registered", name=name)
        return context

    def list_contexts(self) -> list[dict[str, Any]]:
        """Describe all contexts, sorted by name."""
        with self._lock.read():
            return [
                self._contexts[name].describe(active=name == self._current)
                for name in sorted(self._contexts)
            ]

    def remove(self, name: str) -> ClusterContext:
        """Remove a context. Removing the current one leaves none current."""
        with self._lock.write():
            context = self._contexts.pop(name, None)
            if context is None:
                raise NotConfiguredError(f"Cluster context '{name}' is not registered", name=name)
            if self._current == name:
                self._current = None
        logger.info(f"Removed cluster context '{name}'")
        return context

    def rename(self, old_name: str, new_name: str) -> ClusterContext:
        """Rename a context, keeping it current if it was."""
        if not new_name:
            raise ValidationError("New context name is required", field="new_name")
        with self._lock.write():
            context = self._contexts.get(old_name)
            if context is None:
                raise NotConfiguredError(
                    f"Cluster context '{old_name}' is not registered", name=old_name
                )
            if new_name in self._contexts:
                raise ValidationError(
                    f"Cluster context '{new_name}' already exists", field="new_name", value=new_name
                )
            renamed = replace(context, name=new_name)
            del self._contexts[old_name]
            self._contexts[new_name] = renamed
            if self._current == old_name:
                self._current = new_name
        logger.info(f"Renamed cluster context '{old_name}' to '{new_name}'")
        return renamed

    def clients(self) -> list[K8sClient]:
        """Return every registered client handle."""
        with self._lock.read():
            return [context.client for context in self._contexts.values()]

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._contexts)

    def _current_locked(self) -> ClusterContext:
        if self._current is None:
            raise NotConfiguredError(
                "No cluster context selected; load a kubeconfig or switch to a context"
            )
        return self._contexts[self._current]
