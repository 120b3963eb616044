"""Secrets domain - confidential data."""

from kai_mcp.domains.secrets.client import SecretController
from kai_mcp.domains.secrets.models import Secret

__all__ = ["Secret", "SecretController"]
