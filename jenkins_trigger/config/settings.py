import json
from typing import Annotated, Any, Literal

from pydantic import AnyHttpUrl, Field, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError

from jenkins_trigger.exceptions.base import InvalidConfigurationError

LogLevelType = Literal["ERROR", "WARNING", "INFO", "DEBUG", "CRITICAL"]

_http_url_adapter: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


def _parse_json_object(value: Any, input_name: str) -> dict[str, Any] | None:
    if value is None or isinstance(value, dict):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"'{input_name}' is not valid JSON: {e}") from e
        if not isinstance(parsed, dict):
            raise ValueError(f"'{input_name}' must be a JSON object")
        return parsed
    raise ValueError(f"'{input_name}' must be a JSON object")


class TriggerSettings(BaseSettings):
    """
    Inputs of a single trigger run.

    Values are read from `INPUT_*` environment variables, which is how GitHub
    Actions hands action inputs to a step, and can be overridden by keyword
    arguments (the CLI does that for its options).
    """

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    url: str
    job_name: str
    user_name: str
    api_token: str = Field(..., repr=False)
    parameter: Annotated[dict[str, Any] | None, NoDecode] = None
    headers: Annotated[dict[str, str] | None, NoDecode] = None
    wait: bool = False
    timeout: float = Field(default=600, gt=0)
    poll_interval: float = Field(default=5, gt=0)
    verify_ssl: bool = True
    no_strict_verify_ssl: bool = False
    client_timeout: float = Field(default=60, gt=0)
    log_level: LogLevelType = "INFO"

    @field_validator("url")
    @classmethod
    def validate_url(cls, url: str) -> str:
        url = url.strip()
        if not url:
            raise ValueError("'url' must not be empty")
        try:
            _http_url_adapter.validate_python(url)
        except ValidationError as e:
            raise ValueError(
                f"'url' must be an absolute http(s) URL, got '{url}'"
            ) from e
        return url.rstrip("/")

    @field_validator("job_name")
    @classmethod
    def validate_job_name(cls, job_name: str) -> str:
        if not job_name.strip():
            raise ValueError("'job_name' must not be empty")
        return job_name.strip().strip("/")

    @field_validator("parameter", mode="before")
    @classmethod
    def parse_parameter(cls, value: Any) -> dict[str, Any] | None:
        return _parse_json_object(value, "parameter")

    @field_validator("headers", mode="before")
    @classmethod
    def parse_headers(cls, value: Any) -> dict[str, str] | None:
        headers = _parse_json_object(value, "headers")
        if headers is None:
            return None
        return {str(key): str(header) for key, header in headers.items()}

    @field_validator("wait", mode="before")
    @classmethod
    def parse_wait(cls, value: Any) -> bool:
        # only the literal string "true" enables waiting, the CLI flag passes a bool
        if isinstance(value, bool):
            return value
        return value == "true"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def load_settings(**overrides: Any) -> TriggerSettings:
    """Build the settings, dropping unset overrides so the environment fills them."""
    init_values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return TriggerSettings(**init_values)
    except (ValidationError, SettingsError) as e:
        raise InvalidConfigurationError(f"Invalid configuration: {e}") from e
