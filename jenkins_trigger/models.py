from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Outcome(StrEnum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    ABORTED = "ABORTED"
    UNSTABLE = "UNSTABLE"
    CANCELLED = "CANCELLED"
    TIMEOUT = "TIMEOUT"


# Build results reported by Jenkins that end the wait with a failure
FAILED_BUILD_RESULTS = frozenset([Outcome.FAILURE, Outcome.ABORTED, Outcome.UNSTABLE])


class Executable(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str | None = None
    number: int | None = None


class StatusSnapshot(BaseModel):
    """
    Parsed `api/json` payload of either a queue item or a build.

    Queue items fill `cancelled`, `why` and `executable`, builds fill `result`,
    `duration`, `estimatedDuration` and `fullDisplayName`. Every field is
    optional so the same model decodes both.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    cancelled: bool = False
    executable: Executable | None = None
    why: str | None = None
    result: str | None = None
    duration: float | None = None
    estimated_duration: float | None = Field(default=None, alias="estimatedDuration")
    full_display_name: str | None = Field(default=None, alias="fullDisplayName")
    timestamp: int | None = None

    @property
    def build_url(self) -> str | None:
        if self.executable is None:
            return None
        return self.executable.url or None

    @property
    def outcome(self) -> Outcome | None:
        if self.result is None:
            return None
        try:
            return Outcome(self.result)
        except ValueError:
            return None


class UnknownSnapshot(BaseModel):
    """Stand-in for a status body that could not be decoded, the next poll retries."""

    timestamp: Literal[0] = 0


Snapshot = StatusSnapshot | UnknownSnapshot


@dataclass(frozen=True)
class JobIdentity:
    name: str
    base_url: str

    @property
    def job_path(self) -> str:
        return f"/job/{self.name}"


@dataclass
class RunResult:
    succeeded: bool
    message: str
    outcome: Outcome | None = None
    queue_url: str | None = None
    build_url: str | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1
