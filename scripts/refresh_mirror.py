#!/usr/bin/env python
"""Run one mirror refresh cycle.

By default the cycle runs in this process against the configured blob
store. With ``--temporal`` a run of the refresh workflow is started on the
worker instead, exactly as the schedule would.

Usage:
    python scripts/refresh_mirror.py
    python scripts/refresh_mirror.py --temporal
"""

import argparse
import asyncio
import sys

import structlog
from returns.result import Success

from application.ports.mirror_scheduler import MirrorScheduler
from application.use_cases.mirror_use_cases import RefreshMirrorUseCase
from infrastructure.config import get_settings
from infrastructure.di.container import create_container
from infrastructure.logging import setup_logging

logger = structlog.get_logger()


async def refresh(*, via_temporal: bool) -> int:
    settings = get_settings()
    setup_logging(settings)
    container = create_container(settings)

    if via_temporal:
        workflow_id = await container[MirrorScheduler].trigger_refresh()
        logger.info("refresh_triggered", workflow_id=workflow_id)
        return 0

    result = await container[RefreshMirrorUseCase].execute()
    if isinstance(result, Success):
        report = result.unwrap()
        logger.info("refresh_done", written=len(report.written_keys))
        return 0

    logger.error("refresh_failed", error=str(result.failure()))
    return 1


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--temporal",
        action="store_true",
        help="start the refresh workflow on the Temporal worker instead of running in-process",
    )
    args = parser.parse_args()
    sys.exit(asyncio.run(refresh(via_temporal=args.temporal)))


if __name__ == "__main__":
    main()
