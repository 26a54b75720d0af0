from jenkins_trigger.exceptions.base import BaseJenkinsTriggerException
from jenkins_trigger.models import Outcome


class JobOutcomeError(BaseJenkinsTriggerException):
    outcome: Outcome

    def __init__(self, message: str, outcome: Outcome | None = None):
        if outcome is not None:
            self.outcome = outcome
        super().__init__(message)


class RemoteOutcomeError(JobOutcomeError):
    def __init__(self, display_name: str | None, outcome: Outcome):
        super().__init__(
            f"Job '{display_name}' failed with status {outcome.value}.", outcome
        )


class JobCancelledError(JobOutcomeError):
    outcome = Outcome.CANCELLED

    def __init__(self, job_name: str):
        super().__init__(f"Job '{job_name}' was cancelled.")


class JobTimeoutError(JobOutcomeError):
    outcome = Outcome.TIMEOUT

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__("Job Timeout")
