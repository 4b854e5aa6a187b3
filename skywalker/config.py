"""Client configuration, validated with voluptuous and loadable from the environment."""
from __future__ import annotations

import dataclasses
import logging
import os
import uuid

import voluptuous as vol
from dotenv import load_dotenv

from .const import (
    DEFAULT_BEACON_NAMESPACE,
    ENV_PREFIX,
    POSITIONS_INTERVAL,
    REQUEST_ATTEMPTS,
    REQUEST_TIMEOUT,
)
from .errors import ConfigError

_LOGGER = logging.getLogger(__name__)


def beacon_namespace(value) -> str:
    """Validate an iBeacon proximity UUID and normalise it to upper case."""
    try:
        return str(uuid.UUID(str(value))).upper()
    except ValueError as e:
        raise vol.Invalid(f"invalid beacon namespace UUID: {value}") from e


positive_int = vol.All(vol.Coerce(int), vol.Range(min=1))
positive_float = vol.All(vol.Coerce(float), vol.Range(min=0.1))

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required("url"): vol.All(str, vol.Length(min=1), vol.Url()),
        vol.Optional("username", default=None): vol.Any(None, str),
        vol.Optional("password", default=None): vol.Any(None, str),
        vol.Optional("site_id", default=None): vol.Any(None, vol.Coerce(int)),
        vol.Optional("display_name", default=None): vol.Any(None, str),
        vol.Optional("beacon_namespace", default=DEFAULT_BEACON_NAMESPACE): beacon_namespace,
        vol.Optional("request_timeout", default=REQUEST_TIMEOUT): positive_float,
        vol.Optional("max_attempts", default=REQUEST_ATTEMPTS): positive_int,
        vol.Optional("positions_interval", default=POSITIONS_INTERVAL): positive_float,
    }
)


@dataclasses.dataclass(frozen=True)
class ClientConfig:
    """Validated settings for a SkyWalkerClient."""

    url: str
    username: str | None = None
    password: str | None = None
    site_id: int | None = None
    display_name: str | None = None
    beacon_namespace: str = DEFAULT_BEACON_NAMESPACE
    request_timeout: float = REQUEST_TIMEOUT
    max_attempts: int = REQUEST_ATTEMPTS
    positions_interval: float = POSITIONS_INTERVAL

    @classmethod
    def from_dict(cls, data: dict) -> ClientConfig:
        """Validate a plain dict against CONFIG_SCHEMA; raises ConfigError."""
        try:
            validated = CONFIG_SCHEMA(dict(data))
        except vol.Invalid as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
        return cls(**validated)

    @property
    def request_options(self) -> dict:
        """Keyword arguments forwarded to make_request."""
        return {"timeout": self.request_timeout, "max_attempts": self.max_attempts}


def load_config(env_file: str | None = None) -> ClientConfig:
    """
    Build a ClientConfig from SKYWALKER_* environment variables.

    Variables from *env_file* (or a .env found upward from the working
    directory) are loaded first without overriding the real environment.
    """
    load_dotenv(env_file)
    data = {}
    for field in dataclasses.fields(ClientConfig):
        value = os.getenv(ENV_PREFIX + field.name.upper())
        if value is not None and value != "":
            data[field.name] = value
    _LOGGER.debug("Loaded configuration keys from environment: %s", sorted(data))
    return ClientConfig.from_dict(data)
