"""SkyWalker indoor positioning client: session, site data and tag location."""

from .client import SkyWalkerClient
from .const import VERSION as __version__
from .config import ClientConfig, load_config
from .errors import ErrorType, classify
from .models import BeaconIdentity, Receiver, ResolvedPosition, Tag, Token
from .onboarding import OnboardingEnvelope, is_onboarding_payload, parse_onboarding_payload
from .resolver import resolve
from .result import Outcome, Result
from .session import Session
from .site import Site
from .tracker import PositionTracker


__all__ = [
    "__version__",
    "BeaconIdentity",
    "ClientConfig",
    "ErrorType",
    "OnboardingEnvelope",
    "Outcome",
    "PositionTracker",
    "Receiver",
    "ResolvedPosition",
    "Result",
    "Session",
    "Site",
    "SkyWalkerClient",
    "Tag",
    "Token",
    "classify",
    "is_onboarding_payload",
    "load_config",
    "parse_onboarding_payload",
    "resolve",
]
