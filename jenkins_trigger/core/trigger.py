from typing import Any, Mapping
from urllib.parse import urljoin

import httpx
from loguru import logger

from jenkins_trigger.exceptions.clients import (
    JenkinsClientError,
    ProtocolError,
    TransportError,
    TriggerError,
)
from jenkins_trigger.models import JobIdentity

PARAMETERS_DEFINITION_MARKER = "ParametersDefinitionProperty"


class JobTrigger:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def _send_request(
        self, method: str, endpoint: str, data: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        logger.debug(f"Making {method} request to {endpoint}")
        try:
            # only reads follow redirects, a redirected POST would be replayed as a GET
            response = await self.client.request(
                method, endpoint, data=data, follow_redirects=method == "GET"
            )
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.error(
                f"HTTP error with status code: {e.response.status_code} and response text: {e.response.text}"
            )
            raise TransportError(
                f"{method} {endpoint} failed with status code {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP error for {method} request to {endpoint}: {e!r}")
            raise TransportError(f"{method} {endpoint} failed: {e!r}") from e

    async def is_parameterized(self, job: JobIdentity) -> bool:
        response = await self._send_request("GET", f"{job.job_path}/api/json")
        return PARAMETERS_DEFINITION_MARKER in response.text

    async def submit(
        self,
        job: JobIdentity,
        parameters: Mapping[str, Any] | None = None,
    ) -> str:
        """
        Queue a build of `job` and return the URL of its queue item.

        Parameterized jobs are submitted to `buildWithParameters` with the
        parameters form-encoded, other jobs to `build` with no body.
        """
        parameterized = await self.is_parameterized(job)
        if parameterized:
            endpoint = f"{job.job_path}/buildWithParameters"
            data: Mapping[str, Any] | None = dict(parameters or {})
        else:
            if parameters:
                logger.warning(
                    f"Job '{job.name}' is not parameterized, ignoring the given parameters"
                )
            endpoint = f"{job.job_path}/build"
            data = None

        response = await self._send_request("POST", endpoint, data=data)

        location = response.headers.get("location")
        if not location:
            raise ProtocolError("Failed to find location header in response!")

        return urljoin(f"{job.base_url}/", location)

    async def trigger(
        self,
        job: JobIdentity,
        parameters: Mapping[str, Any] | None = None,
    ) -> str:
        logger.info(f">>> Triggering job '{job.name}' on {job.base_url}")
        try:
            queue_url = await self.submit(job, parameters)
        except JenkinsClientError as e:
            logger.error(f"Failed to trigger job '{job.name}': {e}")
            raise TriggerError(e) from e

        logger.info(f">>> Job '{job.name}' queued. QueueUrl={queue_url}")
        return queue_url
