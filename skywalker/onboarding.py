"""
Onboarding payloads: JSON envelopes handed over out of band (e.g. a scanned
code) that carry the server URL and optionally the credentials.
"""
from __future__ import annotations

import dataclasses
import json
import logging

import voluptuous as vol

from .errors import InvalidOnboardingPayload

_LOGGER = logging.getLogger(__name__)

ONBOARDING_SCHEMA = vol.Schema(
    {
        # Presence of "scheme" marks the payload as ours; its value is not used
        vol.Required("scheme"): object,
        vol.Required("url"): vol.All(str, vol.Length(min=1)),
        vol.Optional("username", default=None): vol.Any(None, str),
        vol.Optional("password", default=None): vol.Any(None, str),
    },
    extra=vol.ALLOW_EXTRA,
)


@dataclasses.dataclass(frozen=True)
class OnboardingEnvelope:
    url: str
    username: str | None = None
    password: str | None = None


def _load_object(text: str) -> dict | None:
    try:
        decoded = json.loads(text)
    except (TypeError, ValueError):
        return None
    return decoded if isinstance(decoded, dict) else None


def is_onboarding_payload(text: str) -> bool:
    """True if *text* is a JSON object carrying a "scheme" key."""
    decoded = _load_object(text)
    return decoded is not None and "scheme" in decoded


def parse_onboarding_payload(text: str) -> OnboardingEnvelope:
    """
    Parse and validate an onboarding envelope.

    :raises InvalidOnboardingPayload: if the payload is not ours or is malformed.
    """
    decoded = _load_object(text)
    if decoded is None or "scheme" not in decoded:
        raise InvalidOnboardingPayload("Not an onboarding payload")
    try:
        validated = ONBOARDING_SCHEMA(decoded)
    except vol.Invalid as e:
        _LOGGER.warning("Rejected onboarding payload: %s", e)
        raise InvalidOnboardingPayload(str(e)) from e
    return OnboardingEnvelope(
        url=validated["url"],
        username=validated["username"],
        password=validated["password"],
    )
