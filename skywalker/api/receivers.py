"""
Low-level receiver topology fetching from the SkyWalker server.

Responsible for:
- Fetching the receiver (rdhub) list of a site
- Mapping the JSON response onto Receiver records
"""
from __future__ import annotations

import logging

from ..const import RECEIVERS_PATH
from ..errors import ErrorType, SkyWalkerError, classify_exception
from ..models import Receiver
from ..requests import build_url, decode_json, make_request
from ..result import Result
from ..session import Session
from . import require_int, require_number, require_object
from .auth import get_standard_headers

_LOGGER = logging.getLogger(__name__)


def _parse_receiver(raw) -> Receiver:
    """Map a single raw receiver dict onto a Receiver; raises ResponseFormatError."""
    receiver = require_object(raw)
    return Receiver(
        id=require_int(receiver, "id"),
        x=require_number(receiver, "x"),
        y=require_number(receiver, "y"),
        z=require_int(receiver, "z"),
    )


async def list_receivers(
    session: Session,
    site_id: int,
    request_options: dict | None = None,
) -> Result[tuple[Receiver, ...]]:
    """
    Fetch all receivers of a site, in server order.

    A single malformed entry fails the whole call.

    Corresponding CURL command:
    curl -X 'GET' '<endpoint>/api/centers/<siteId>/rdhubs' -H 'Authorization: Bearer TOKEN'
    """
    token = session.token
    if token is None:
        _LOGGER.debug("Not listing receivers of site %s: no token set", site_id)
        return Result.failure(ErrorType.NO_TOKEN_SET)

    url = build_url(token.endpoint, RECEIVERS_PATH.format(site_id=site_id))
    try:
        body = await make_request("GET", url, get_standard_headers(token), **(request_options or {}))
        receivers = tuple(_parse_receiver(raw) for raw in decode_json(body, list))
    except SkyWalkerError as e:
        error = classify_exception(e)
        _LOGGER.error("Error while getting receivers of site %s: %s (%s)", site_id, error.value, e)
        return Result.failure(error)

    _LOGGER.debug("Got %s receivers for site %s", len(receivers), site_id)
    return Result.success(receivers)
