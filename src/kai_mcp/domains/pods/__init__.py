"""Pods domain - standalone pods and container logs."""

from kai_mcp.domains.pods.client import PodController
from kai_mcp.domains.pods.models import Pod, PodLogs, PodPhase

__all__ = ["Pod", "PodController", "PodLogs", "PodPhase"]
