import base64
from typing import Mapping


def encode_basic_credentials(user_name: str, api_token: str) -> str:
    return base64.b64encode(f"{user_name}:{api_token}".encode("utf-8")).decode("ascii")


def build_auth_headers(
    user_name: str, api_token: str, extra_headers: Mapping[str, str] | None = None
) -> dict[str, str]:
    """
    Headers sent with every Jenkins request.

    Caller supplied headers are applied on top of the Basic `Authorization`
    header, so they can replace it but are never dropped.
    """
    headers = {
        "Authorization": f"Basic {encode_basic_credentials(user_name, api_token)}"
    }
    if extra_headers:
        headers.update(extra_headers)
    return headers
