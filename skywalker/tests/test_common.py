"""
Shared helpers and factory functions for SkyWalker tests.
Import from this module in each test file to avoid duplication.
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

from skywalker.client import SkyWalkerClient
from skywalker.config import ClientConfig
from skywalker.models import Receiver, Tag, Token
from skywalker.session import Session
from skywalker.site import Site

ENDPOINT = "https://loc.example.com"

RECEIVERS_JSON = [
    {"id": 1, "x": 2.5, "y": 3.0, "z": 0},
    {"id": 2, "x": 5.0, "y": 5.0, "z": 1},
]


def make_token(value: str = "abc123", endpoint: str = ENDPOINT) -> Token:
    return Token(endpoint=endpoint, value=value)


def make_session(value: str | None = "abc123", endpoint: str = ENDPOINT) -> Session:
    """Session with a token, or without one when value is None."""
    return Session(make_token(value, endpoint) if value is not None else None)


def make_receiver(receiver_id: int = 1, x: float = 0.0, y: float = 0.0, z: int = 0) -> Receiver:
    return Receiver(id=receiver_id, x=x, y=y, z=z)


def make_tag(tag_id: int = 1, name: str | None = None) -> Tag:
    return Tag(id=tag_id, name=name or f"Tag {tag_id}")


def make_site(site_id: int = 3, receivers: list[Receiver] | None = None, tags: list[Tag] | None = None,
              own_name: str | None = None) -> Site:
    site = Site(site_id, own_name=own_name)
    if receivers is not None:
        site.replace_receivers(tuple(receivers))
    if tags is not None:
        site.replace_tags(tuple(tags))
    return site


def make_config(**kwargs) -> ClientConfig:
    defaults = dict(
        url=ENDPOINT,
        username="alice",
        password="secret",
        site_id=3,
        display_name="Alice's phone",
    )
    defaults.update(kwargs)
    return ClientConfig.from_dict(defaults)


def make_client(logged_in: bool = True, site_id: int | None = 3, **config_kwargs) -> SkyWalkerClient:
    """Client with an optional token and selected site; no network is touched."""
    client = SkyWalkerClient(make_config(**config_kwargs), session=make_session() if logged_in else Session())
    if site_id is not None:
        client.select_site(site_id)
    return client


def json_request(payload) -> AsyncMock:
    """AsyncMock standing in for make_request that answers with *payload* as JSON text."""
    return AsyncMock(return_value=json.dumps(payload))


def mock_response(status: int = 200, text: str = "") -> MagicMock:
    """aiohttp response stand-in."""
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text)
    return response


def mock_client_session(response: MagicMock | None = None, side_effect=None) -> MagicMock:
    """
    Build an aiohttp.ClientSession replacement.

    The returned factory creates a session whose request() yields *response*
    as an async context manager, or raises *side_effect*.
    """
    response_cm = MagicMock()
    response_cm.__aenter__ = AsyncMock(return_value=response)
    response_cm.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    session.request = MagicMock(return_value=response_cm, side_effect=side_effect)
    session.head = MagicMock(return_value=response_cm, side_effect=side_effect)

    factory = MagicMock(return_value=session)
    factory.session = session
    return factory
