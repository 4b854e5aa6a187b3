"""
SkyWalkerClient: the facade UI code talks to.

Owns one Session and the selected Site, and chains the transport operations
into the flows the app needs (log in, load a site, register, locate a tag).
"""
from __future__ import annotations

import logging
import uuid

from .api.auth import authenticate
from .api.positions import fetch_nearest_receiver
from .api.tags import register_beacon
from .config import ClientConfig
from .const import DEFAULT_BEACON_NAMESPACE
from .errors import NoSiteSelectedError
from .models import BeaconIdentity, ResolvedPosition, Token
from .onboarding import OnboardingEnvelope
from .requests import check_server_availability
from .resolver import resolve
from .result import Result
from .session import Session
from .site import Site

_LOGGER = logging.getLogger(__name__)


class SkyWalkerClient:
    """Session-scoped access to one SkyWalker server."""

    def __init__(self, config: ClientConfig | None = None, session: Session | None = None) -> None:
        self.config = config
        self.session = session if session is not None else Session()
        self.site: Site | None = None
        namespace = config.beacon_namespace if config is not None else DEFAULT_BEACON_NAMESPACE
        self.beacon_namespace = uuid.UUID(namespace)
        self._request_options = config.request_options if config is not None else {}

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def login(self, url: str, username: str | None, password: str | None) -> Result[Token]:
        """Authenticate and, on success, replace the session token."""
        async with self.session.lock:
            result = await authenticate(url, username, password, self._request_options)
            if result.is_success:
                self.session.set_token(result.value)
                _LOGGER.info("Logged in to %s", url)
        return result

    async def login_from_config(self) -> Result[Token]:
        if self.config is None:
            raise ValueError("Client has no configuration")
        return await self.login(self.config.url, self.config.username, self.config.password)

    async def connect(self, envelope: OnboardingEnvelope) -> Result[Token]:
        """Log in with the server URL and credentials of an onboarding payload."""
        return await self.login(envelope.url, envelope.username, envelope.password)

    async def logout(self) -> None:
        await self.session.clear()
        self.site = None

    async def is_reachable(self, url: str | None = None) -> bool:
        """Probe the given URL, or the session's endpoint, for reachability."""
        target = url or self.session.endpoint or (self.config.url if self.config else None)
        if target is None:
            return False
        return await check_server_availability(target)

    # ------------------------------------------------------------------
    # Site
    # ------------------------------------------------------------------

    def select_site(self, site_id: int, own_name: str | None = None) -> Site:
        """Make *site_id* the active site; its receivers and tags start unloaded."""
        if own_name is None and self.config is not None:
            own_name = self.config.display_name
        self.site = Site(site_id, own_name=own_name)
        _LOGGER.debug("Selected site %s", site_id)
        return self.site

    def _require_site(self) -> Site:
        if self.site is None:
            raise NoSiteSelectedError("No site selected")
        return self.site

    async def load_receivers(self) -> Result:
        return await self._require_site().load_receivers(self.session, self._request_options)

    async def load_tags(self) -> Result:
        return await self._require_site().load_tags(self.session, self._request_options)

    # ------------------------------------------------------------------
    # Positioning
    # ------------------------------------------------------------------

    async def register_beacon(self, display_name: str) -> Result[BeaconIdentity]:
        """Register this device at the active site; its name is hidden from available tags."""
        site = self._require_site()
        result = await register_beacon(
            self.session, site.id, display_name, self.beacon_namespace, self._request_options
        )
        if result.is_success:
            site.own_name = display_name
        return result

    async def locate(self, tag_id: int) -> Result[ResolvedPosition]:
        """
        Resolve the last known position of a tag at the active site.

        If the reported receiver is not in the loaded topology, the topology
        is reloaded once before giving up with Result.not_found().
        """
        site = self._require_site()
        nearest = await fetch_nearest_receiver(self.session, site.id, tag_id, self._request_options)
        if not nearest.is_success:
            return nearest

        position = resolve(site, nearest.value)
        if position is None:
            reloaded = await site.load_receivers(self.session, self._request_options)
            if reloaded.is_error:
                return Result.failure(reloaded.error)
            position = resolve(site, nearest.value)
        if position is None:
            _LOGGER.warning(
                "Tag %s is near receiver %s, which site %s does not list",
                tag_id, nearest.value, site.id,
            )
            return Result.not_found()
        return Result.success(position)
