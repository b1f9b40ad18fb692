from collections.abc import Awaitable, Callable

import structlog
from returns.result import Success
from temporalio import activity

from application.use_cases.mirror_use_cases import RefreshMirrorUseCase
from domain.exceptions import RefreshFailedError

logger = structlog.get_logger()


def create_refresh_mirror_activity(
    use_case: RefreshMirrorUseCase,
) -> Callable[[], Awaitable[dict]]:
    """Factory that injects the use case into the Temporal activity closure."""

    @activity.defn(name="refresh_mirror")
    async def refresh_mirror_activity() -> dict:
        logger.info("refresh_mirror_activity_start")

        result = await use_case.execute()

        if isinstance(result, Success):
            report = result.unwrap()
            logger.info(
                "refresh_mirror_activity_success",
                archive_url=report.archive_url,
                written=len(report.written_keys),
            )
            return {
                "status": "success",
                "archive_url": report.archive_url,
                "entries_extracted": report.entries_extracted,
                "written": len(report.written_keys),
            }

        error = result.failure()
        logger.error(
            "refresh_mirror_activity_failed",
            error_code=error.category,
            error_message=error.message,
        )
        # Fail the run so the scheduler records it; the next tick rewrites everything.
        raise RefreshFailedError(f"Error processing ZIP file: {error.message}")

    return refresh_mirror_activity
