import asyncio
from typing import Any, Callable

import httpx
import pytest

from jenkins_trigger.config.settings import TriggerSettings

JENKINS_URL = "http://jenkins.example.com"
JOB_NAME = "deploy"
QUEUE_URL = f"{JENKINS_URL}/queue/item/42/"
BUILD_URL = f"{JENKINS_URL}/job/{JOB_NAME}/7/"


class FakeClock:
    """Records requested sleeps instead of waiting them out."""

    def __init__(self) -> None:
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        # still yield to the loop like a real sleep would
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_settings() -> Callable[..., TriggerSettings]:
    def _make_settings(**overrides: Any) -> TriggerSettings:
        values: dict[str, Any] = {
            "url": JENKINS_URL,
            "job_name": JOB_NAME,
            "user_name": "user",
            "api_token": "11aa22bb33cc44dd55ee66ff77889900ab",
            "wait": True,
            "timeout": 30,
            "poll_interval": 5,
        }
        values.update(overrides)
        return TriggerSettings(_env_file=None, **values)

    return _make_settings


@pytest.fixture
def settings(make_settings: Callable[..., TriggerSettings]) -> TriggerSettings:
    return make_settings()


@pytest.fixture
def http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=JENKINS_URL)
