"""Turn a server-reported nearest receiver id into map coordinates."""
from __future__ import annotations

import logging

from .models import ResolvedPosition
from .site import Site

_LOGGER = logging.getLogger(__name__)


def resolve(site: Site, nearest_receiver_id: int) -> ResolvedPosition | None:
    """
    Look up a receiver in the site's loaded topology.

    Returns the first receiver with a matching id as a ResolvedPosition, or
    None (not found) when the topology is not loaded or lacks the id. Not
    found means the local topology is stale; reload receivers and retry.
    """
    receiver = site.receiver(nearest_receiver_id)
    if receiver is None:
        _LOGGER.debug(
            "Receiver %s not in topology of site %s (loaded: %s)",
            nearest_receiver_id, site.id, site.receivers is not None,
        )
        return None
    return ResolvedPosition.at(receiver)
