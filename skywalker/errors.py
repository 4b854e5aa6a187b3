"""
Error taxonomy and classification for the SkyWalker client.

Responsible for:
- The closed set of domain errors every caller handles (ErrorType)
- Mapping transport failures and HTTP status codes onto that set
- The exception hierarchy used internally between the transport and the API layer

No presentation text lives here; callers translate ErrorType for display.
"""
from __future__ import annotations

import asyncio
import enum
import logging

import aiohttp

_LOGGER = logging.getLogger(__name__)


class ErrorType(enum.Enum):
    """Domain errors delivered to callers of the transport operations."""

    CONNECTIVITY_ERROR = "connectivity_error"
    INVALID_CREDENTIALS = "invalid_credentials"
    SERVER_ERROR = "server_error"
    UNKNOWN_ERROR = "unknown_error"
    NO_TOKEN_SET = "no_token_set"
    INVALID_RESPONSE_FORMAT = "invalid_response_format"

    @property
    def retryable(self) -> bool:
        """Whether repeating the same call later may succeed without user action."""
        return self is ErrorType.CONNECTIVITY_ERROR


class TransportFailure(enum.Enum):
    """Why a request never produced an HTTP response."""

    NO_CONNECTIVITY = "no_connectivity"
    TIMED_OUT = "timed_out"
    OTHER = "other"


class SkyWalkerError(Exception):
    """Base class for all SkyWalker client exceptions."""


class TransportError(SkyWalkerError):
    """Raised when a request fails before a response is received."""

    def __init__(self, failure: TransportFailure, cause: BaseException | None = None) -> None:
        self.failure = failure
        self.cause = cause
        super().__init__(f"Transport failure: {failure.value} ({cause!r})")


class HttpStatusError(SkyWalkerError):
    """Raised when the server answers with anything but HTTP 200."""

    def __init__(self, status: int, url: str = "") -> None:
        self.status = status
        self.url = url
        super().__init__(f"HTTP {status} from {url}")


class ResponseFormatError(SkyWalkerError):
    """Raised when a successful response body cannot be decoded into the expected shape."""


class NoSiteSelectedError(SkyWalkerError):
    """Raised when a site-scoped call is attempted before a site was selected."""


class InvalidOnboardingPayload(SkyWalkerError):
    """Raised when an onboarding envelope is not a valid connection payload."""


class ConfigError(SkyWalkerError):
    """Raised when the client configuration is invalid."""


def classify(outcome: TransportFailure | int) -> ErrorType:
    """
    Map a transport failure or an HTTP status code onto an ErrorType.

    Pure and total: every input yields exactly one ErrorType.
    """
    if isinstance(outcome, TransportFailure):
        if outcome in (TransportFailure.NO_CONNECTIVITY, TransportFailure.TIMED_OUT):
            return ErrorType.CONNECTIVITY_ERROR
        return ErrorType.UNKNOWN_ERROR

    if outcome == 401:
        return ErrorType.INVALID_CREDENTIALS
    if outcome == 500:
        return ErrorType.SERVER_ERROR
    return ErrorType.UNKNOWN_ERROR


def classify_exception(exc: BaseException) -> ErrorType:
    """Map an exception raised below the API layer onto an ErrorType."""
    if isinstance(exc, TransportError):
        return classify(exc.failure)
    if isinstance(exc, HttpStatusError):
        return classify(exc.status)
    if isinstance(exc, ResponseFormatError):
        return ErrorType.INVALID_RESPONSE_FORMAT
    _LOGGER.debug("Unclassified exception %s: %s", type(exc).__name__, exc)
    return ErrorType.UNKNOWN_ERROR


def transport_failure_for(exc: BaseException) -> TransportFailure:
    """Map an aiohttp / asyncio exception onto a TransportFailure."""
    # aiohttp's ServerTimeoutError is both a ClientError and a TimeoutError
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return TransportFailure.TIMED_OUT
    if isinstance(exc, (aiohttp.ClientConnectorError, aiohttp.ServerDisconnectedError, ConnectionError)):
        return TransportFailure.NO_CONNECTIVITY
    return TransportFailure.OTHER
