from enum import StrEnum

from loguru import logger

from jenkins_trigger.clock import Clock, default_clock
from jenkins_trigger.core.status_reader import StatusReader
from jenkins_trigger.exceptions.core import JobCancelledError, RemoteOutcomeError
from jenkins_trigger.models import (
    FAILED_BUILD_RESULTS,
    Outcome,
    Snapshot,
    StatusSnapshot,
)

DEFAULT_POLL_INTERVAL_SECONDS = 5


class WaitState(StrEnum):
    AWAITING_QUEUE = "awaiting_queue"
    AWAITING_EXECUTION = "awaiting_execution"


class JobWaiter:
    """
    Follows a queued build until Jenkins reports a result for it.

    The queue item is polled until it is either cancelled or assigned a build,
    after which the build is polled until it has a `result`. The loop itself
    never gives up, the run's watchdog bounds it.
    """

    def __init__(
        self,
        status_reader: StatusReader,
        clock: Clock = default_clock,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.status_reader = status_reader
        self.clock = clock
        self.poll_interval = poll_interval
        self.state = WaitState.AWAITING_QUEUE
        self.queue_url: str | None = None
        self.build_url: str | None = None

    @property
    def target(self) -> str | None:
        if self.state == WaitState.AWAITING_EXECUTION:
            return self.build_url
        return self.queue_url

    def _start_executing(self, job_name: str, build_url: str) -> None:
        # the build url is set once and never goes back to the queue item
        self.build_url = build_url
        self.state = WaitState.AWAITING_EXECUTION
        logger.info(f">>> Job '{job_name}' started executing. BuildUrl={build_url}")

    async def _poll_queue(self, job_name: str, queue_url: str) -> bool:
        """Returns True once the queue item has been assigned a build."""
        snapshot = await self.status_reader.read(queue_url)
        if isinstance(snapshot, StatusSnapshot):
            if snapshot.cancelled:
                raise JobCancelledError(job_name)
            if build_url := snapshot.build_url:
                self._start_executing(job_name, build_url)
                return True
            reason = snapshot.why
        else:
            reason = None

        logger.info(
            f">>> Job '{job_name}' is queued (Reason: '{reason}'). "
            f"Sleeping for {self.poll_interval}s..."
        )
        return False

    def _check_build(self, snapshot: Snapshot) -> Outcome | None:
        if not isinstance(snapshot, StatusSnapshot):
            logger.info(
                f">>> Could not read the status of {self.build_url}, "
                f"retrying in {self.poll_interval}s..."
            )
            return None

        outcome = snapshot.outcome
        if outcome is Outcome.SUCCESS:
            logger.info(
                f">>> Job '{snapshot.full_display_name}' completed successfully "
                f"with status {outcome.value}!"
            )
            return outcome
        if outcome is not None and outcome in FAILED_BUILD_RESULTS:
            raise RemoteOutcomeError(snapshot.full_display_name, outcome)

        logger.info(
            f">>> Job '{snapshot.full_display_name}' is executing "
            f"(Duration: {_format_ms(snapshot.duration)}, "
            f"Expected: {_format_ms(snapshot.estimated_duration)}), "
            f"Build still running. Sleeping for {self.poll_interval}s..."
        )
        return None

    async def wait(self, job_name: str, queue_url: str) -> Outcome:
        """
        Poll `queue_url` and then the build it starts until the build ends.

        Returns `Outcome.SUCCESS`, raises `JobCancelledError` when the queue
        item is cancelled and `RemoteOutcomeError` when the build fails, aborts
        or is unstable. Transport errors are not retried.
        """
        self.queue_url = queue_url
        logger.info(f">>> Waiting for '{job_name}' ...")

        while True:
            if self.state == WaitState.AWAITING_QUEUE:
                started = await self._poll_queue(job_name, queue_url)
                if not started:
                    await self.clock.sleep(self.poll_interval)
                    continue

            if self.build_url is None:
                raise RuntimeError(f"No build url recorded for '{job_name}'")
            snapshot = await self.status_reader.read(self.build_url)
            if outcome := self._check_build(snapshot):
                return outcome

            await self.clock.sleep(self.poll_interval)


def _format_ms(value: float | None) -> str:
    return "unknown" if value is None else f"{value:g}ms"
