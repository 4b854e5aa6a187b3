"""
Low-level authentication logic for the SkyWalker server.

Responsible for:
- Obtaining a bearer token via the authentication endpoint
- Building the standard authorization headers used by all API calls
"""
from __future__ import annotations

import logging

from ..const import AUTHENTICATION_PATH
from ..errors import SkyWalkerError, classify_exception
from ..models import Token
from ..requests import build_url, make_request
from ..result import Result

_LOGGER = logging.getLogger(__name__)


async def authenticate(
    endpoint: str,
    username: str | None,
    password: str | None,
    request_options: dict | None = None,
) -> Result[Token]:
    """
    Obtain a token from the server at *endpoint*.

    The whole body of a 200 response is the token. Missing credentials are
    sent as empty strings and rejected by the server like wrong ones.

    Corresponding CURL command:
    curl -X 'POST' '<endpoint>/api/authentication' \\
      -H 'Content-Type: application/json' \\
      -d '{"login": "USERNAME", "password": "PASSWORD"}'
    """
    url = build_url(endpoint, AUTHENTICATION_PATH)
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    payload = {
        "login": username or "",
        "password": password or "",
    }
    try:
        body = await make_request("POST", url, headers, payload=payload, **(request_options or {}))
    except SkyWalkerError as e:
        error = classify_exception(e)
        _LOGGER.error("Error while authenticating against %s: %s", endpoint, error.value)
        return Result.failure(error)

    token = Token(endpoint=endpoint, value=body)
    _LOGGER.debug("Authenticated, got %s", token)
    return Result.success(token)


def get_standard_headers(token: Token) -> dict:
    """
    Build the standard HTTP headers used by all authenticated requests.

    :param token: Token obtained from :func:`authenticate`.
    :return: Dictionary of HTTP headers.
    """
    return {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Authorization": f"Bearer {token.value}",
    }
