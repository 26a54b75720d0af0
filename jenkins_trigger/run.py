import asyncio

import httpx
from loguru import logger

from jenkins_trigger.auth import build_auth_headers, encode_basic_credentials
from jenkins_trigger.clock import Clock, default_clock
from jenkins_trigger.config.settings import TriggerSettings
from jenkins_trigger.core.status_reader import StatusReader
from jenkins_trigger.core.trigger import JobTrigger
from jenkins_trigger.core.waiter import JobWaiter
from jenkins_trigger.core.watchdog import Watchdog
from jenkins_trigger.exceptions.base import BaseJenkinsTriggerException
from jenkins_trigger.exceptions.core import JobOutcomeError
from jenkins_trigger.helpers.async_client import create_http_client
from jenkins_trigger.log.logger_setup import setup_logger
from jenkins_trigger.models import JobIdentity, RunResult


def _build_url(waiter: JobWaiter | None) -> str | None:
    return waiter.build_url if waiter is not None else None


def _log_failure(result: RunResult) -> RunResult:
    logger.error(result.message)
    return result


async def run_job(
    settings: TriggerSettings,
    clock: Clock = default_clock,
    client: httpx.AsyncClient | None = None,
) -> RunResult:
    """
    Trigger the configured job and, when `settings.wait` is set, wait for it.

    Never raises for run failures: every error, including the watchdog
    timing out, is logged and returned as a failed `RunResult`.
    """
    job = JobIdentity(name=settings.job_name, base_url=settings.url)
    if settings.parameter:
        logger.info(f">>> Parameter {settings.parameter}")

    queue_url: str | None = None
    waiter: JobWaiter | None = None
    try:
        headers = build_auth_headers(
            settings.user_name, settings.api_token, settings.headers
        )
        if client is None:
            http_client = create_http_client(settings, headers)
        else:
            http_client = client
            http_client.headers.update(headers)
        waiter = JobWaiter(
            StatusReader(http_client), clock=clock, poll_interval=settings.poll_interval
        )
        async with http_client, Watchdog(settings.timeout):
            queue_url = await JobTrigger(http_client).trigger(job, settings.parameter)
            if not settings.wait:
                return RunResult(
                    succeeded=True,
                    message=f"Job '{job.name}' triggered",
                    queue_url=queue_url,
                )
            outcome = await waiter.wait(job.name, queue_url)
            return RunResult(
                succeeded=True,
                message=f"Job '{job.name}' completed with status {outcome.value}",
                outcome=outcome,
                queue_url=queue_url,
                build_url=waiter.build_url,
            )
    except JobOutcomeError as e:
        return _log_failure(
            RunResult(
                succeeded=False,
                message=str(e),
                outcome=e.outcome,
                queue_url=queue_url,
                build_url=_build_url(waiter),
            )
        )
    except BaseJenkinsTriggerException as e:
        return _log_failure(
            RunResult(
                succeeded=False,
                message=str(e),
                queue_url=queue_url,
                build_url=_build_url(waiter),
            )
        )


def run(settings: TriggerSettings) -> RunResult:
    setup_logger(
        settings.log_level,
        settings.api_token,
        encode_basic_credentials(settings.user_name, settings.api_token),
    )
    return asyncio.run(run_job(settings))

