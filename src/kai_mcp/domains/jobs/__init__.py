"""Jobs domain - run-to-completion workloads."""

from kai_mcp.domains.jobs.client import JobController
from kai_mcp.domains.jobs.models import Job

__all__ = ["Job", "JobController"]
