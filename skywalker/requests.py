"""
Low-level HTTP request library for SkyWalker server communication.
This module handles all HTTP requests with retry of idempotent calls and
converts every transport problem into the package's exception hierarchy.
"""
from __future__ import annotations

import asyncio
import json
import logging

import aiohttp

from .const import AVAILABILITY_TIMEOUT, REQUEST_ATTEMPTS, REQUEST_TIMEOUT
from .errors import (
    HttpStatusError,
    ResponseFormatError,
    TransportError,
    TransportFailure,
    transport_failure_for,
)

_LOGGER = logging.getLogger(__name__)


def build_url(endpoint: str, path: str) -> str:
    """Join an endpoint base URL and an API path."""
    return endpoint.rstrip("/") + path


async def check_server_availability(endpoint: str, timeout: int = AVAILABILITY_TIMEOUT) -> bool:
    """
    Check if the server is reachable by sending a HEAD request.

    Any HTTP answer below 500 counts as reachable; the API root does not
    have to serve anything.
    """
    try:
        timeout_config = aiohttp.ClientTimeout(total=timeout)
        async with aiohttp.ClientSession(timeout=timeout_config) as session:
            async with session.head(endpoint) as response:
                if response.status >= 500:
                    _LOGGER.warning("Server %s is not healthy (status %s)", endpoint, response.status)
                    return False
                return True
    except (asyncio.TimeoutError, TimeoutError):
        _LOGGER.warning("Timeout while checking %s", endpoint)
        return False
    except (aiohttp.ClientError, ValueError) as e:
        _LOGGER.warning("Error while checking availability of %s: %s", endpoint, e)
        return False


async def make_request(
    method: str,
    url: str,
    headers: dict,
    payload: dict | None = None,
    timeout: int = REQUEST_TIMEOUT,
    max_attempts: int = REQUEST_ATTEMPTS,
) -> str:
    """
    Make an HTTP request and return the body of a 200 response as text.

    Args:
        method: HTTP method (GET or POST)
        url: Target URL for the request
        headers: HTTP headers dictionary
        payload: JSON payload for POST requests (optional)
        timeout: Base timeout in seconds (multiplied by attempt number for each retry)
        max_attempts: Maximum number of attempts for GET requests; POST is sent once

    Raises:
        TransportError: If no response was received
        HttpStatusError: If the response status is not 200
    """
    method = method.upper()
    if method not in ("GET", "POST"):
        raise ValueError(f"Unsupported HTTP method: {method}")
    # Registration is not idempotent, never send it twice
    attempts = max(1, max_attempts) if method == "GET" else 1

    for attempt in range(attempts):
        # Timeout grows with each attempt
        timeout_config = aiohttp.ClientTimeout(total=timeout * (attempt + 1))
        try:
            async with aiohttp.ClientSession(timeout=timeout_config) as session:
                async with session.request(method, url, headers=headers, json=payload) as response:
                    return await _process_response(response, url)

        except (asyncio.TimeoutError, TimeoutError) as e:
            if attempt < attempts - 1:
                _LOGGER.debug("Timeout on %s %s, retrying (attempt %s)", method, url, attempt + 1)
                continue
            _LOGGER.warning("Timeout on %s request to %s after %s attempts", method, url, attempts)
            raise TransportError(TransportFailure.TIMED_OUT, e) from e

        except (aiohttp.ClientError, ConnectionError, ValueError) as e:
            # ValueError covers endpoints that are not valid URLs
            failure = transport_failure_for(e)
            _LOGGER.warning("%s request to %s failed (%s): %s", method, url, failure.value, e)
            raise TransportError(failure, e) from e

    # Only reachable with zero attempts, which the guard above prevents
    raise TransportError(TransportFailure.OTHER)


async def _process_response(response, url: str) -> str:
    """
    Check the HTTP status and extract the response body.

    Raises:
        HttpStatusError: For any status other than 200
    """
    if response.status == 200:
        try:
            return await response.text()
        except UnicodeDecodeError as e:
            raise ResponseFormatError(f"Response from {url} is not text: {e}") from e

    text = await response.text(errors="replace")
    _LOGGER.warning(
        "Received HTTP %s from %s, body preview: %s",
        response.status, url, text[:200],
    )
    raise HttpStatusError(response.status, url)


def decode_json(text: str, expected: type):
    """
    Decode a response body and check the type of its top-level value.

    Raises:
        ResponseFormatError: If the body is not JSON or not of the expected type
    """
    try:
        decoded = json.loads(text)
    except (TypeError, ValueError, RecursionError) as e:
        raise ResponseFormatError(f"Response is not valid JSON: {e}") from e
    if not isinstance(decoded, expected):
        raise ResponseFormatError(
            f"Expected JSON {expected.__name__} but got {type(decoded).__name__}"
        )
    return decoded
