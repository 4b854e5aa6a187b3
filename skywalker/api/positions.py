"""
Low-level last position fetching from the SkyWalker server.

The server reports a tag's position as the id of the receiver that heard it
best; turning that id into coordinates is done by skywalker.resolver.
"""
from __future__ import annotations

import logging

from ..const import TAG_PATH
from ..errors import ErrorType, SkyWalkerError, classify_exception
from ..requests import build_url, decode_json, make_request
from ..result import Result
from ..session import Session
from . import is_int
from .auth import get_standard_headers

_LOGGER = logging.getLogger(__name__)


async def fetch_nearest_receiver(
    session: Session,
    site_id: int,
    tag_id: int,
    request_options: dict | None = None,
) -> Result[int]:
    """
    Fetch the id of the receiver a tag was last seen nearest to.

    Returns Result.no_update() when the server has no position for the tag yet.

    Corresponding CURL command:
    curl -X 'GET' '<endpoint>/api/centers/<siteId>/tags/<tagId>' -H 'Authorization: Bearer TOKEN'
    """
    token = session.token
    if token is None:
        _LOGGER.debug("Not fetching position of tag %s: no token set", tag_id)
        return Result.failure(ErrorType.NO_TOKEN_SET)

    url = build_url(token.endpoint, TAG_PATH.format(site_id=site_id, tag_id=tag_id))
    try:
        body = await make_request("GET", url, get_standard_headers(token), **(request_options or {}))
        raw_json = decode_json(body, dict)
    except SkyWalkerError as e:
        error = classify_exception(e)
        _LOGGER.error("Error while getting last position of tag %s: %s (%s)", tag_id, error.value, e)
        return Result.failure(error)

    nearest = raw_json.get("nearest_rdhub")
    if not is_int(nearest):
        _LOGGER.debug("No position for tag %s yet", tag_id)
        return Result.no_update()
    return Result.success(nearest)
