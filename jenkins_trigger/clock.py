import asyncio
from typing import Protocol


class Clock(Protocol):
    async def sleep(self, seconds: float) -> None: ...


class AsyncioClock:
    """Cooperative `asyncio.sleep`, the run's deadline is the event loop timer."""

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


default_clock = AsyncioClock()
