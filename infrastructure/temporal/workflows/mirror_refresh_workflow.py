from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy


@workflow.defn(name="RefreshMirrorWorkflow")
class RefreshMirrorWorkflow:
    """Temporal workflow running one mirror refresh cycle.

    Fired by the refresh schedule. A failed cycle is not retried within the
    run; the next scheduled run re-fetches and rewrites every entry.
    """

    @workflow.run
    async def run(self) -> dict:
        retry_policy = RetryPolicy(
            maximum_attempts=1,
            non_retryable_error_types=["RefreshFailedError"],
        )

        result = await workflow.execute_activity(
            "refresh_mirror",
            start_to_close_timeout=timedelta(minutes=10),
            retry_policy=retry_policy,
        )

        workflow.logger.info(f"Mirror refresh workflow completed, result={result}")

        return result
