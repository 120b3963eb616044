"""ConfigMaps domain - key/value configuration."""

from kai_mcp.domains.configmaps.client import ConfigMapController
from kai_mcp.domains.configmaps.models import ConfigMap

__all__ = ["ConfigMap", "ConfigMapController"]
