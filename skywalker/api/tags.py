"""
Low-level tag fetching and beacon registration for the SkyWalker server.

Responsible for:
- Fetching the tags available at a site
- Registering this device as a tag and obtaining its beacon identity
"""
from __future__ import annotations

import logging
import uuid

from ..const import DEFAULT_BEACON_NAMESPACE, TAGS_PATH, UNKNOWN_TAG_NAME
from ..errors import ErrorType, SkyWalkerError, classify_exception
from ..models import BeaconIdentity, Tag
from ..requests import build_url, decode_json, make_request
from ..result import Result
from ..session import Session
from . import require_int, require_object
from .auth import get_standard_headers

_LOGGER = logging.getLogger(__name__)

_DEFAULT_NAMESPACE = uuid.UUID(DEFAULT_BEACON_NAMESPACE)


def _parse_tag(raw) -> Tag:
    """Map a single raw tag dict onto a Tag; a missing or non-string name becomes "Unknown"."""
    tag = require_object(raw)
    name = tag.get("name")
    if not isinstance(name, str):
        name = UNKNOWN_TAG_NAME
    return Tag(id=require_int(tag, "id"), name=name)


async def list_tags(
    session: Session,
    site_id: int,
    request_options: dict | None = None,
) -> Result[tuple[Tag, ...]]:
    """
    Fetch all tags available at a site.

    Corresponding CURL command:
    curl -X 'GET' '<endpoint>/api/centers/<siteId>/tags' -H 'Authorization: Bearer TOKEN'
    """
    token = session.token
    if token is None:
        _LOGGER.debug("Not listing tags of site %s: no token set", site_id)
        return Result.failure(ErrorType.NO_TOKEN_SET)

    url = build_url(token.endpoint, TAGS_PATH.format(site_id=site_id))
    try:
        body = await make_request("GET", url, get_standard_headers(token), **(request_options or {}))
        tags = tuple(_parse_tag(raw) for raw in decode_json(body, list))
    except SkyWalkerError as e:
        error = classify_exception(e)
        _LOGGER.error("Error while getting tags of site %s: %s (%s)", site_id, error.value, e)
        return Result.failure(error)

    return Result.success(tags)


async def register_beacon(
    session: Session,
    site_id: int,
    display_name: str,
    namespace: uuid.UUID = _DEFAULT_NAMESPACE,
    request_options: dict | None = None,
) -> Result[BeaconIdentity]:
    """
    Register this device as a tag of the site and return the beacon frame it must broadcast.

    The server assigns major/minor; the namespace UUID is configuration.
    Registration posts to the tag collection of the site, the same resource
    the tag list is read from.

    Corresponding CURL command:
    curl -X 'POST' '<endpoint>/api/centers/<siteId>/tags' \\
      -H 'Authorization: Bearer TOKEN' -d '{"name": "DISPLAY NAME"}'
    """
    token = session.token
    if token is None:
        _LOGGER.debug("Not registering %s at site %s: no token set", display_name, site_id)
        return Result.failure(ErrorType.NO_TOKEN_SET)

    url = build_url(token.endpoint, TAGS_PATH.format(site_id=site_id))
    payload = {"name": display_name}
    try:
        body = await make_request(
            "POST", url, get_standard_headers(token), payload=payload, **(request_options or {})
        )
        frame = decode_json(body, dict)
        identity = BeaconIdentity(
            namespace=namespace,
            major=require_int(frame, "major"),
            minor=require_int(frame, "minor"),
        )
    except SkyWalkerError as e:
        error = classify_exception(e)
        _LOGGER.error("Error while registering %s at site %s: %s (%s)", display_name, site_id, error.value, e)
        return Result.failure(error)

    _LOGGER.debug("Registered %s as beacon %s/%s", display_name, identity.major, identity.minor)
    return Result.success(identity)
