"""
Site: one physical center with its receiver topology and tag catalogue.

Receivers and tags live in a frozen SiteData snapshot that is replaced as a
whole, so readers never see a half-applied reload.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging

from .api.receivers import list_receivers
from .api.tags import list_tags
from .const import DEFAULT_SCALE, LOADED_SCALE
from .models import Receiver, Tag
from .result import Result
from .session import Session

_LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SiteData:
    """
    Copy-on-write snapshot of a site's server data.

    Always replace via dataclasses.replace(), never mutate in place.
    None means "not loaded yet", which differs from an empty site.
    """

    receivers: tuple[Receiver, ...] | None = None
    tags: tuple[Tag, ...] | None = None


class Site:
    """A selected center; owns its receivers and tags once loaded."""

    def __init__(self, site_id: int, own_name: str | None = None) -> None:
        self.id = site_id
        # Name this device registered under, hidden from available_tags
        self.own_name = own_name
        self.display_scale: float = DEFAULT_SCALE
        self.data = SiteData()
        self._load_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"Site(id={self.id})"

    @property
    def receivers(self) -> tuple[Receiver, ...] | None:
        return self.data.receivers

    @property
    def tags(self) -> tuple[Tag, ...] | None:
        return self.data.tags

    @property
    def available_tags(self) -> tuple[Tag, ...]:
        """Tags the user can follow: every loaded tag except this device's own."""
        tags = self.data.tags or ()
        return tuple(tag for tag in tags if self.own_name is None or tag.name != self.own_name)

    def receiver(self, receiver_id: int) -> Receiver | None:
        """Return the first loaded receiver with the given id."""
        for receiver in self.data.receivers or ():
            if receiver.id == receiver_id:
                return receiver
        return None

    def replace_receivers(self, receivers: tuple[Receiver, ...]) -> None:
        self.data = dataclasses.replace(self.data, receivers=tuple(receivers))
        self.display_scale = LOADED_SCALE

    def replace_tags(self, tags: tuple[Tag, ...]) -> None:
        self.data = dataclasses.replace(self.data, tags=tuple(tags))

    async def load_receivers(self, session: Session, request_options: dict | None = None) -> Result:
        """Fetch the receiver topology and replace the loaded one on success."""
        async with self._load_lock:
            result = await list_receivers(session, self.id, request_options)
            if result.is_success:
                self.replace_receivers(result.value)
                _LOGGER.debug("Site %s now has %s receivers", self.id, len(result.value))
            else:
                _LOGGER.warning("Keeping previous receivers of site %s: %s", self.id, result)
        return result

    async def load_tags(self, session: Session, request_options: dict | None = None) -> Result:
        """Fetch the tag catalogue and replace the loaded one on success."""
        async with self._load_lock:
            result = await list_tags(session, self.id, request_options)
            if result.is_success:
                self.replace_tags(result.value)
            else:
                _LOGGER.warning("Keeping previous tags of site %s: %s", self.id, result)
        return result
