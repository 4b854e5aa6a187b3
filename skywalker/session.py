"""
Session: the authenticated identity every transport operation runs under.

A Session is constructed explicitly by its owner and passed to each call;
there is no process-wide instance.
"""
from __future__ import annotations

import asyncio
import logging

from .models import Token

_LOGGER = logging.getLogger(__name__)


class Session:
    """Holds at most one Token; writes are serialised, reads see a whole Token."""

    def __init__(self, token: Token | None = None) -> None:
        self._token = token
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Token | None:
        return self._token

    @property
    def has_token(self) -> bool:
        return self._token is not None

    @property
    def endpoint(self) -> str | None:
        token = self._token
        return token.endpoint if token is not None else None

    @property
    def lock(self) -> asyncio.Lock:
        """Lock held by writers; callers may hold it across authenticate + install."""
        return self._lock

    def set_token(self, token: Token | None) -> None:
        """Replace the token wholesale. Callers must hold ``lock``."""
        self._token = token

    async def install(self, token: Token) -> None:
        """Replace the current token with a freshly issued one."""
        async with self._lock:
            self.set_token(token)
        _LOGGER.debug("Session installed %s", token)

    async def clear(self) -> None:
        """Forget the current token (logout)."""
        async with self._lock:
            self.set_token(None)
        _LOGGER.debug("Session cleared")
