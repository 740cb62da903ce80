"""Model capability detection."""

from chatwire.core.capabilities.capabilities import CapabilityProfile, CapabilityRegistry
from chatwire.core.capabilities.registry_data import KNOWN_MODELS, build_default_registry

__all__ = [
    "KNOWN_MODELS",
    "CapabilityProfile",
    "CapabilityRegistry",
    "build_default_registry",
]
