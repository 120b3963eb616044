"""Deployments domain - replicated workloads."""

from kai_mcp.domains.deployments.client import DeploymentController
from kai_mcp.domains.deployments.models import Deployment

__all__ = ["Deployment", "DeploymentController"]
