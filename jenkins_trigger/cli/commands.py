# -*- coding: utf-8 -*-
import os

import click
from rich.console import Console

from jenkins_trigger import __version__
from jenkins_trigger.config.settings import load_settings
from jenkins_trigger.exceptions.base import InvalidConfigurationError
from jenkins_trigger.run import run

console = Console()


def report_failure(message: str) -> None:
    """Surface a failure to the invoking pipeline."""
    if os.getenv("GITHUB_ACTIONS") == "true":
        # workflow command, marks the step as failed with this message
        click.echo(f"::error::{message}")
    else:
        click.echo(f"Error: {message}", err=True)


@click.group
def cli_start() -> None:
    # jenkins-trigger root command
    pass


@cli_start.command()
@click.option(
    "-s",
    "--short",
    "short",
    default=False,
    is_flag=True,
    required=False,
    help="Display only the short version number.",
)
def version(short: bool) -> None:
    """
    Displays the version of the jenkins-trigger package.
    """
    if short:
        console.print(__version__)
    else:
        console.print(f"jenkins-trigger version: {__version__}")


@cli_start.command()
@click.option("--url", "url", help="Jenkins base URL. Defaults to INPUT_URL.")
@click.option("-j", "--job-name", "job_name", help="Job to trigger. Defaults to INPUT_JOB_NAME.")
@click.option("-u", "--user-name", "user_name", help="Jenkins user. Defaults to INPUT_USER_NAME.")
@click.option(
    "--api-token",
    "api_token",
    help="Jenkins API token of the user. Defaults to INPUT_API_TOKEN.",
)
@click.option(
    "-p",
    "--parameter",
    "parameter",
    help="JSON object with the build parameters. Defaults to INPUT_PARAMETER.",
)
@click.option(
    "-H",
    "--headers",
    "headers",
    help="JSON object with extra request headers. Defaults to INPUT_HEADERS.",
)
@click.option(
    "--wait/--no-wait",
    "wait",
    default=None,
    help="Wait for the build to finish. Defaults to INPUT_WAIT.",
)
@click.option(
    "-t",
    "--timeout",
    "timeout",
    type=float,
    help="Seconds before the run fails with a timeout. Defaults to INPUT_TIMEOUT.",
)
@click.option(
    "--poll-interval",
    "poll_interval",
    type=float,
    help="Seconds between two status reads. Defaults to INPUT_POLL_INTERVAL.",
)
@click.option(
    "--verify-ssl/--no-verify-ssl",
    "verify_ssl",
    default=None,
    help="Verify the Jenkins TLS certificate. Defaults to INPUT_VERIFY_SSL.",
)
@click.option(
    "--strict-verify-ssl/--no-strict-verify-ssl",
    "strict_verify_ssl",
    default=None,
    help="Apply the strict X.509 checks of Python 3.13+ to the Jenkins certificate. "
    "Defaults to the inverse of INPUT_NO_STRICT_VERIFY_SSL.",
)
@click.option(
    "--client-timeout",
    "client_timeout",
    type=float,
    help="Seconds before a single HTTP request fails. Defaults to INPUT_CLIENT_TIMEOUT.",
)
@click.option(
    "-l",
    "--log-level",
    "log_level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="""Set the logging level.
            Supported levels are DEBUG, INFO, WARNING, ERROR,
            and CRITICAL. If not specified, INPUT_LOG_LEVEL
            is used, and INFO if that is unset.""",
)
def trigger(
    url: str | None,
    job_name: str | None,
    user_name: str | None,
    api_token: str | None,
    parameter: str | None,
    headers: str | None,
    wait: bool | None,
    timeout: float | None,
    poll_interval: float | None,
    verify_ssl: bool | None,
    strict_verify_ssl: bool | None,
    client_timeout: float | None,
    log_level: str | None,
) -> None:
    """
    Triggers a Jenkins job and, if requested, waits until its build ends.

    Options that are not given are read from the INPUT_* environment variables.
    """
    try:
        settings = load_settings(
            url=url,
            job_name=job_name,
            user_name=user_name,
            api_token=api_token,
            parameter=parameter,
            headers=headers,
            wait=wait,
            timeout=timeout,
            poll_interval=poll_interval,
            verify_ssl=verify_ssl,
            no_strict_verify_ssl=(
                None if strict_verify_ssl is None else not strict_verify_ssl
            ),
            client_timeout=client_timeout,
            log_level=log_level,
        )
    except InvalidConfigurationError as e:
        report_failure(str(e))
        raise SystemExit(1)

    result = run(settings)
    if not result.succeeded:
        report_failure(result.message)
    raise SystemExit(result.exit_code)
