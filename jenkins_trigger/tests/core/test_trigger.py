from urllib.parse import parse_qs

import httpx
import pytest
from pytest_httpx import HTTPXMock

from jenkins_trigger.core.trigger import JobTrigger
from jenkins_trigger.exceptions.clients import ProtocolError, TransportError, TriggerError
from jenkins_trigger.models import JobIdentity
from jenkins_trigger.tests.conftest import JENKINS_URL, JOB_NAME, QUEUE_URL

JOB = JobIdentity(name=JOB_NAME, base_url=JENKINS_URL)
JOB_API_URL = f"{JENKINS_URL}/job/{JOB_NAME}/api/json"

PARAMETERIZED_JOB_BODY = {
    "_class": "hudson.model.FreeStyleProject",
    "property": [
        {
            "_class": "hudson.model.ParametersDefinitionProperty",
            "parameterDefinitions": [{"name": "ENV"}],
        }
    ],
}
PLAIN_JOB_BODY = {"_class": "hudson.model.FreeStyleProject", "property": []}


@pytest.mark.asyncio
async def test_trigger_parameterized_job(
    httpx_mock: HTTPXMock, http_client: httpx.AsyncClient
) -> None:
    httpx_mock.add_response(method="GET", url=JOB_API_URL, json=PARAMETERIZED_JOB_BODY)
    httpx_mock.add_response(
        method="POST",
        url=f"{JENKINS_URL}/job/{JOB_NAME}/buildWithParameters",
        status_code=201,
        headers={"Location": QUEUE_URL},
    )

    async with http_client:
        queue_url = await JobTrigger(http_client).trigger(
            JOB, {"ENV": "staging", "VERSION": "1.2.3"}
        )

    assert queue_url == QUEUE_URL
    submission = httpx_mock.get_requests(method="POST")[0]
    assert submission.headers["content-type"] == "application/x-www-form-urlencoded"
    assert parse_qs(submission.content.decode()) == {
        "ENV": ["staging"],
        "VERSION": ["1.2.3"],
    }


@pytest.mark.asyncio
async def test_trigger_plain_job_sends_no_body(
    httpx_mock: HTTPXMock, http_client: httpx.AsyncClient
) -> None:
    httpx_mock.add_response(method="GET", url=JOB_API_URL, json=PLAIN_JOB_BODY)
    httpx_mock.add_response(
        method="POST",
        url=f"{JENKINS_URL}/job/{JOB_NAME}/build",
        status_code=201,
        headers={"Location": QUEUE_URL},
    )

    async with http_client:
        queue_url = await JobTrigger(http_client).trigger(JOB, {"ENV": "staging"})

    assert queue_url == QUEUE_URL
    submission = httpx_mock.get_requests(method="POST")[0]
    assert submission.content == b""


@pytest.mark.asyncio
async def test_trigger_resolves_relative_location(
    httpx_mock: HTTPXMock, http_client: httpx.AsyncClient
) -> None:
    httpx_mock.add_response(method="GET", url=JOB_API_URL, json=PLAIN_JOB_BODY)
    httpx_mock.add_response(
        method="POST",
        url=f"{JENKINS_URL}/job/{JOB_NAME}/build",
        status_code=201,
        headers={"Location": "/queue/item/42/"},
    )

    async with http_client:
        queue_url = await JobTrigger(http_client).trigger(JOB)

    assert queue_url == QUEUE_URL


@pytest.mark.asyncio
async def test_trigger_without_location_header_is_protocol_error(
    httpx_mock: HTTPXMock, http_client: httpx.AsyncClient
) -> None:
    httpx_mock.add_response(method="GET", url=JOB_API_URL, json=PLAIN_JOB_BODY)
    httpx_mock.add_response(
        method="POST", url=f"{JENKINS_URL}/job/{JOB_NAME}/build", status_code=201
    )

    async with http_client:
        with pytest.raises(TriggerError) as exc_info:
            await JobTrigger(http_client).trigger(JOB)

    assert isinstance(exc_info.value.cause, ProtocolError)
    assert str(exc_info.value) == "Failed to find location header in response!"


@pytest.mark.asyncio
async def test_trigger_metadata_failure_is_not_retried(
    httpx_mock: HTTPXMock, http_client: httpx.AsyncClient
) -> None:
    httpx_mock.add_exception(httpx.ConnectError("Connection refused"), url=JOB_API_URL)

    async with http_client:
        with pytest.raises(TriggerError) as exc_info:
            await JobTrigger(http_client).trigger(JOB)

    assert isinstance(exc_info.value.cause, TransportError)
    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
async def test_trigger_unknown_job_is_transport_error(
    httpx_mock: HTTPXMock, http_client: httpx.AsyncClient
) -> None:
    httpx_mock.add_response(method="GET", url=JOB_API_URL, status_code=404)

    async with http_client:
        with pytest.raises(TriggerError) as exc_info:
            await JobTrigger(http_client).trigger(JOB)

    assert isinstance(exc_info.value.cause, TransportError)
    assert not httpx_mock.get_requests(method="POST")


@pytest.mark.asyncio
async def test_trigger_job_inside_folder(
    httpx_mock: HTTPXMock, http_client: httpx.AsyncClient
) -> None:
    job = JobIdentity(name="team/job/deploy", base_url=JENKINS_URL)
    httpx_mock.add_response(
        method="GET", url=f"{JENKINS_URL}/job/team/job/deploy/api/json", json=PLAIN_JOB_BODY
    )
    httpx_mock.add_response(
        method="POST",
        url=f"{JENKINS_URL}/job/team/job/deploy/build",
        status_code=201,
        headers={"Location": QUEUE_URL},
    )

    async with http_client:
        assert await JobTrigger(http_client).trigger(job) == QUEUE_URL


@pytest.mark.asyncio
async def test_trigger_follows_redirect_of_job_metadata(
    httpx_mock: HTTPXMock, http_client: httpx.AsyncClient
) -> None:
    httpx_mock.add_response(
        method="GET",
        url=JOB_API_URL,
        status_code=302,
        headers={"Location": f"{JENKINS_URL}/job/renamed/api/json"},
    )
    httpx_mock.add_response(
        method="GET",
        url=f"{JENKINS_URL}/job/renamed/api/json",
        json=PARAMETERIZED_JOB_BODY,
    )
    httpx_mock.add_response(
        method="POST",
        url=f"{JENKINS_URL}/job/{JOB_NAME}/buildWithParameters",
        status_code=201,
        headers={"Location": QUEUE_URL},
    )

    async with http_client:
        queue_url = await JobTrigger(http_client).trigger(JOB, {"ENV": "staging"})

    assert queue_url == QUEUE_URL
    assert len(httpx_mock.get_requests(method="GET")) == 2


@pytest.mark.asyncio
async def test_trigger_does_not_follow_redirect_of_submission(
    httpx_mock: HTTPXMock, http_client: httpx.AsyncClient
) -> None:
    httpx_mock.add_response(method="GET", url=JOB_API_URL, json=PLAIN_JOB_BODY)
    httpx_mock.add_response(
        method="POST",
        url=f"{JENKINS_URL}/job/{JOB_NAME}/build",
        status_code=302,
        headers={"Location": f"{JENKINS_URL}/login"},
    )

    async with http_client:
        with pytest.raises(TriggerError) as exc_info:
            await JobTrigger(http_client).trigger(JOB)

    assert isinstance(exc_info.value.cause, TransportError)
    assert len(httpx_mock.get_requests()) == 2
