from typing import Any, Mapping

import httpx

from jenkins_trigger.config.settings import TriggerSettings
from jenkins_trigger.exceptions.base import InvalidConfigurationError
from jenkins_trigger.helpers.ssl import get_ssl_context


def create_http_client(
    settings: TriggerSettings, headers: Mapping[str, str], **kwargs: Any
) -> httpx.AsyncClient:
    """
    Client used for every request of a run.

    Redirects are followed for reads (a renamed job, an http to https proxy).
    The build submission opts out per request, see `JobTrigger`.
    """
    try:
        return httpx.AsyncClient(
            base_url=settings.url,
            headers=dict(headers),
            verify=get_ssl_context(settings.verify_ssl, settings.no_strict_verify_ssl),
            timeout=settings.client_timeout,
            follow_redirects=True,
            **kwargs,
        )
    except httpx.InvalidURL as e:
        raise InvalidConfigurationError(f"Invalid Jenkins url '{settings.url}': {e}") from e
