"""Temporal worker process.

Runs the worker that executes the mirror refresh workflow and activity, and
registers the periodic refresh schedule on startup.

Start with: python -m infrastructure.temporal.worker
"""

from __future__ import annotations

import asyncio

import structlog
from temporalio.client import Client
from temporalio.worker import Worker

from application.use_cases.mirror_use_cases import RefreshMirrorUseCase
from infrastructure.config import get_settings
from infrastructure.di.container import create_container
from infrastructure.logging import setup_logging
from infrastructure.temporal.activities.mirror_activities import create_refresh_mirror_activity
from infrastructure.temporal.orchestrator import TemporalMirrorScheduler
from infrastructure.temporal.workflows.mirror_refresh_workflow import RefreshMirrorWorkflow

logger = structlog.get_logger()


async def run() -> None:
    """Run the Temporal worker.

    This worker:
    1. Connects to Temporal server
    2. Makes sure the refresh schedule exists
    3. Polls the mirror task queue and executes refresh runs
    """
    settings = get_settings()
    setup_logging(settings)

    logger.info(
        "temporal_worker_starting",
        address=settings.temporal_address,
        task_queue=settings.temporal_task_queue,
    )

    container = create_container(settings)
    refresh_mirror_activity = create_refresh_mirror_activity(
        use_case=container[RefreshMirrorUseCase],
    )

    client = await Client.connect(settings.temporal_address)
    await TemporalMirrorScheduler(settings=settings, client=client).ensure_refresh_schedule()

    worker = Worker(
        client,
        task_queue=settings.temporal_task_queue,
        workflows=[RefreshMirrorWorkflow],
        activities=[refresh_mirror_activity],
    )

    logger.info("temporal_worker_started")

    try:
        await worker.run()
    except KeyboardInterrupt:
        logger.info("temporal_worker_interrupted")
    except Exception:
        logger.exception("temporal_worker_error")
        raise
    finally:
        logger.info("temporal_worker_stopped")


if __name__ == "__main__":
    asyncio.run(run())
