"""Temporal implementation of the MirrorScheduler port.

This is the infrastructure layer implementation that knows about Temporal.
The application layer only depends on the MirrorScheduler port.
"""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import structlog
from temporalio.client import (
    Client,
    Schedule,
    ScheduleActionStartWorkflow,
    ScheduleAlreadyRunningError,
    ScheduleIntervalSpec,
    ScheduleOverlapPolicy,
    SchedulePolicy,
    ScheduleSpec,
)

from application.ports.mirror_scheduler import MirrorScheduler
from infrastructure.config import Settings
from infrastructure.temporal.workflows.mirror_refresh_workflow import RefreshMirrorWorkflow

logger = structlog.get_logger()


class TemporalMirrorScheduler(MirrorScheduler):
    """Runs mirror refreshes on a Temporal Schedule.

    Overlapping runs are allowed: cycles that outlive the interval race at
    the storage layer and the last write wins.
    """

    def __init__(self, settings: Settings, client: Client | None = None) -> None:
        """Initialize the scheduler.

        Args:
            settings: Process settings carrying the Temporal address, task
                queue, schedule id and refresh interval
            client: Temporal client. If None, will be initialized on first use.

        """
        self.settings = settings
        self._client = client

    async def _get_client(self) -> Client:
        """Get or create Temporal client connection."""
        if self._client is None:
            logger.info("connecting_to_temporal", host=self.settings.temporal_address)
            self._client = await Client.connect(self.settings.temporal_address)
            logger.info("temporal_client_connected")
        return self._client

    def build_schedule(self) -> Schedule:
        return Schedule(
            action=ScheduleActionStartWorkflow(
                RefreshMirrorWorkflow.run,
                id=f"{self.settings.refresh_schedule_id}-run",
                task_queue=self.settings.temporal_task_queue,
            ),
            spec=ScheduleSpec(
                intervals=[
                    ScheduleIntervalSpec(
                        every=timedelta(minutes=self.settings.refresh_interval_minutes),
                    ),
                ],
            ),
            policy=SchedulePolicy(overlap=ScheduleOverlapPolicy.ALLOW_ALL),
        )

    async def ensure_refresh_schedule(self) -> str:
        client = await self._get_client()
        schedule_id = self.settings.refresh_schedule_id

        try:
            await client.create_schedule(schedule_id, self.build_schedule())
            logger.info(
                "refresh_schedule_created",
                schedule_id=schedule_id,
                interval_minutes=self.settings.refresh_interval_minutes,
            )
        except ScheduleAlreadyRunningError:
            logger.info("refresh_schedule_exists", schedule_id=schedule_id)

        return schedule_id

    async def trigger_refresh(self) -> str:
        client = await self._get_client()
        workflow_id = f"{self.settings.refresh_schedule_id}-manual-{uuid4()}"

        try:
            handle = await client.start_workflow(
                RefreshMirrorWorkflow.run,
                id=workflow_id,
                task_queue=self.settings.temporal_task_queue,
            )
        except Exception as e:
            logger.exception("refresh_workflow_start_failed", workflow_id=workflow_id, error=str(e))
            raise

        logger.info("refresh_workflow_started", workflow_id=workflow_id, run_id=handle.result_run_id)
        return workflow_id
