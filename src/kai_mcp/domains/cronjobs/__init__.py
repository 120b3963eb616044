"""CronJobs domain - scheduled jobs."""

from kai_mcp.domains.cronjobs.client import CronJobController
from kai_mcp.domains.cronjobs.models import ConcurrencyPolicy, CronJob

__all__ = ["ConcurrencyPolicy", "CronJob", "CronJobController"]
