import asyncio
from types import TracebackType
from typing import Type

from loguru import logger

from jenkins_trigger.exceptions.core import JobTimeoutError


class Watchdog:
    """
    Fails the whole run once `timeout` seconds have passed.

    Used as an async context manager around the main flow: entering arms a
    timer that cancels the current task when it fires, leaving always disarms
    it. A cancellation caused by the timer is re-raised as `JobTimeoutError`,
    other exceptions pass through untouched.
    """

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        self.fired = False
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Task[object] | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self) -> None:
        if self._handle is not None or self.fired:
            raise RuntimeError("Watchdog can only be armed once")
        task = asyncio.current_task()
        if task is None:
            raise RuntimeError("Watchdog must be armed from within a task")
        self._task = task
        self._handle = asyncio.get_running_loop().call_later(self.timeout, self._fire)

    def disarm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self.fired = True
        logger.error("Exception Error: Timed out")
        if self._task is not None:
            self._task.cancel()

    async def __aenter__(self) -> "Watchdog":
        self.arm()
        return self

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.disarm()
        if self.fired and exc_type is asyncio.CancelledError:
            if self._task is None:
                raise RuntimeError("Watchdog fired without an armed task")
            # swallow our own cancellation so the task can keep running
            if self._task.uncancel() == 0:
                raise JobTimeoutError(self.timeout) from exc_value
