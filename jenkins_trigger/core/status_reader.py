import json

import httpx
from loguru import logger
from pydantic import ValidationError

from jenkins_trigger.exceptions.clients import SnapshotDecodeError, TransportError
from jenkins_trigger.models import Snapshot, StatusSnapshot, UnknownSnapshot


def status_endpoint(status_url: str) -> str:
    if not status_url.endswith("/"):
        status_url += "/"
    return f"{status_url}api/json"


def decode_snapshot(body: str) -> StatusSnapshot:
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise SnapshotDecodeError(body, str(e)) from e

    if not isinstance(payload, dict):
        raise SnapshotDecodeError(body, "expected a JSON object")

    try:
        return StatusSnapshot.model_validate(payload)
    except ValidationError as e:
        raise SnapshotDecodeError(body, str(e)) from e


class StatusReader:
    """Reads the `api/json` status of a queue item or a build."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def read(self, status_url: str) -> Snapshot:
        url = status_endpoint(status_url)
        logger.debug(f"Reading status from {url}")

        try:
            response = await self.client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"HTTP error with status code: {e.response.status_code} while reading {url}"
            )
            raise TransportError(
                f"Status request to {url} failed with status code {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP error while reading {url}: {e!r}")
            raise TransportError(f"Status request to {url} failed: {e!r}") from e

        try:
            return decode_snapshot(response.text)
        except SnapshotDecodeError as e:
            logger.info(str(e))
            return UnknownSnapshot()
