"""RefreshIndicesWorkflow - Daily WPI cache refresh.

Replaces a nightly cron trigger: the workflow computes the trailing window
(previous year + current year to date), runs the refresh activity, then
sleeps until the next run. Retry-by-recurrence: a failed run is logged and
the next day's run tries again.
"""

from datetime import timedelta

from temporalio import workflow

with workflow.unsafe.imports_passed_through():
    from whenever import TimeDelta

    from price_escalation.activities import IndexRefreshActivities
    from price_escalation.formulas.periods import trailing_periods
    from price_escalation.models import RefreshIndicesInput, RefreshWorkflowInput


@workflow.defn
class RefreshIndicesWorkflow:
    """Periodic refresh of remote-sourced indices.

    The workflow runs continuously until cancelled.
    """

    @workflow.run
    async def run(self, input: RefreshWorkflowInput) -> None:
        workflow.logger.info("RefreshIndicesWorkflow started")

        while True:
            periods = trailing_periods(workflow.now(), input.years_back)
            try:
                summary = await workflow.execute_activity_method(
                    IndexRefreshActivities.refresh_indices,
                    RefreshIndicesInput(
                        periods=[(p.year, p.month) for p in periods],
                        freshness_hours=input.freshness_hours,
                        delay_sec=input.delay_sec,
                    ),
                    start_to_close_timeout=timedelta(seconds=input.activity_timeout_sec),
                )
                workflow.logger.info(
                    f"Refresh run: {summary.updated} updated, {summary.skipped} skipped, "
                    f"{summary.errors} errors"
                )
            except Exception as e:
                workflow.logger.error(f"Error in refresh run: {e}")
                # Next run retries

            await workflow.sleep(TimeDelta(hours=input.interval_hours).to_stdlib())
