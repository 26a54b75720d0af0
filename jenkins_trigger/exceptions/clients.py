from jenkins_trigger.exceptions.base import BaseJenkinsTriggerException


class JenkinsClientError(BaseJenkinsTriggerException):
    pass


class TransportError(JenkinsClientError):
    """Connection failure or a non-2xx response from Jenkins."""


class ProtocolError(JenkinsClientError):
    """Jenkins answered, but not with what the API guarantees."""


class SnapshotDecodeError(JenkinsClientError):
    def __init__(self, body: str, reason: str):
        self.body = body
        self.reason = reason
        super().__init__(f"Failed to parse body err: {reason}, body: {body}")


class TriggerError(BaseJenkinsTriggerException):
    def __init__(self, cause: JenkinsClientError):
        self.cause = cause
        super().__init__(str(cause))
