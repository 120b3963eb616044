"""Tests for JobController and CronJobController."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from kubernetes import client as k8s_client

from kai_mcp.clients.registry import ClusterRegistry
from kai_mcp.config import KaiConfig
from kai_mcp.domains.cronjobs.client import CronJobController
from kai_mcp.domains.cronjobs.tools import register_tools as register_cronjob_tools
from kai_mcp.domains.jobs.client import JobController
from kai_mcp.domains.jobs.models import Job
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.errors import ValidationError


@pytest.fixture
def batch(mock_client: MagicMock) -> MagicMock:
    api = mock_client.batch_v1
    for method in (
        "create_namespaced_job",
        "replace_namespaced_job",
        "create_namespaced_cron_job",
        "replace_namespaced_cron_job",
    ):
        getattr(api, method).side_effect = lambda **kw: kw["body"]
    return api


def _spec(kind: str, **attributes: Any) -> ResourceSpec:
    attrs: dict[str, Any] = {"image": "busybox"}
    attrs.update(attributes)
    return ResourceSpec(kind=kind, name="report", namespace="default", attributes=attrs)


def _condition(type_: str) -> k8s_client.V1JobCondition:
    return k8s_client.V1JobCondition(type=type_, status="True")


class TestJobs:
    """Tests for JobController."""

    def test_create_defaults(
        self, registry: ClusterRegistry, config: KaiConfig, batch: MagicMock
    ) -> None:
        result = JobController(registry, config).create(
            _spec("Job", command=["sh", "-c", "echo done"], completions="2")
        )

        body = batch.create_namespaced_job.call_args.kwargs["body"]
        assert body.spec.template.spec.restart_policy == "Never"
        assert body.spec.completions == 2
        assert body.spec.backoff_limit is None
        assert result.message == "Job 'report' created successfully in namespace 'default'"
        assert result.details["status"] == "Pending"

    def test_always_restart_policy_rejected(
        self, registry: ClusterRegistry, config: KaiConfig, mock_client: MagicMock
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            JobController(registry, config).create(_spec("Job", restart_policy="Always"))

        assert exc_info.value.field == "restart_policy"
        assert mock_client.mock_calls == []

    def test_negative_count_rejected(self, registry: ClusterRegistry, config: KaiConfig) -> None:
        with pytest.raises(ValidationError) as exc_info:
            JobController(registry, config).create(_spec("Job", backoff_limit=-1))

        assert exc_info.value.field == "backoff_limit"

    def test_update_changes_parallelism_only(
        self, registry: ClusterRegistry, config: KaiConfig, batch: MagicMock
    ) -> None:
        controller = JobController(registry, config)
        batch.read_namespaced_job.return_value = controller.build(_spec("Job", parallelism=1))

        result = controller.update(
            "report", "default", {"parallelism": 4, "image": "busybox:latest"}
        )

        body = batch.replace_namespaced_job.call_args.kwargs["body"]
        assert body.spec.parallelism == 4
        assert body.spec.template.spec.containers[0].image == "busybox"
        assert result.details["parallelism"] == 4

    @pytest.mark.parametrize(
        "conditions,active,expected",
        [
            ([_condition("Complete")], 0, "Complete"),
            ([_condition("Failed")], 0, "Failed"),
            ([], 2, "Running"),
            ([], 0, "Pending"),
        ],
    )
    def test_status(
        self,
        registry: ClusterRegistry,
        config: KaiConfig,
        conditions: list,
        active: int,
        expected: str,
    ) -> None:
        job = JobController(registry, config).build(_spec("Job"))
        job.status = k8s_client.V1JobStatus(active=active, conditions=conditions)

        assert Job.from_k8s(job).status == expected


class TestCronJobs:
    """Tests for CronJobController."""

    def test_create(
        self, registry: ClusterRegistry, config: KaiConfig, batch: MagicMock
    ) -> None:
        result = CronJobController(registry, config).create(
            _spec("CronJob", schedule=" */5 * * * * ", concurrency_policy="Forbid")
        )

        body = batch.create_namespaced_cron_job.call_args.kwargs["body"]
        assert body.spec.schedule == "*/5 * * * *"
        assert body.spec.concurrency_policy == "Forbid"
        job_pod = body.spec.job_template.spec.template.spec
        assert job_pod.restart_policy == "OnFailure"
        assert result.message == (
            "CronJob 'report' created successfully in namespace 'default' "
            "with schedule '*/5 * * * *'"
        )

    def test_macro_schedule(
        self, registry: ClusterRegistry, config: KaiConfig, batch: MagicMock
    ) -> None:
        CronJobController(registry, config).create(_spec("CronJob", schedule="@hourly"))

        body = batch.create_namespaced_cron_job.call_args.kwargs["body"]
        assert body.spec.schedule == "@hourly"

    @pytest.mark.parametrize("schedule", ["* * * *", "", "every minute please"])
    def test_invalid_schedule(
        self,
        registry: ClusterRegistry,
        config: KaiConfig,
        mock_client: MagicMock,
        schedule: str,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            CronJobController(registry, config).create(_spec("CronJob", schedule=schedule))

        assert exc_info.value.field == "schedule"
        assert mock_client.mock_calls == []

    def test_invalid_concurrency_policy(
        self, registry: ClusterRegistry, config: KaiConfig
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            CronJobController(registry, config).create(
                _spec("CronJob", schedule="0 * * * *", concurrency_policy="Queue")
            )

        assert exc_info.value.field == "concurrency_policy"

    def test_set_suspended(
        self, registry: ClusterRegistry, config: KaiConfig, batch: MagicMock
    ) -> None:
        controller = CronJobController(registry, config)
        batch.read_namespaced_cron_job.return_value = controller.build(
            _spec("CronJob", schedule="0 * * * *")
        )

        result = controller.set_suspended("report", "default", True)

        body = batch.replace_namespaced_cron_job.call_args.kwargs["body"]
        assert body.spec.suspend is True
        assert result.message == "CronJob 'report' suspended in namespace 'default'"

    def test_suspend_tool(
        self, mock_mcp: MagicMock, mock_server: MagicMock, batch: MagicMock
    ) -> None:
        register_cronjob_tools(mock_mcp, mock_server)
        controller = CronJobController(mock_server.registry, mock_server.config)
        batch.read_namespaced_cron_job.return_value = controller.build(
            _spec("CronJob", schedule="0 * * * *")
        )

        result = mock_mcp._registered_tools["suspend_cronjob"](name="report", suspend=False)

        assert result["message"] == "CronJob 'report' resumed in namespace 'default'"
        assert result["suspend"] is False
