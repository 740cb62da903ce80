"""Static model registry data.

Contains known model families and a helper to build a pre-loaded
``CapabilityRegistry``.
"""

from chatwire.core.capabilities.capabilities import CapabilityProfile, CapabilityRegistry
from chatwire.core.interface.config import ProviderMode

# ---------------------------------------------------------------------------
# Known model profiles
# ---------------------------------------------------------------------------

_TOOLS_AND_VISION = CapabilityProfile(
    supports_native_tools=True,
    supports_vision=True,
)

_TOOLS_VISION_THINKING = CapabilityProfile(
    supports_native_tools=True,
    supports_vision=True,
    supports_thinking=True,
)

_LEGACY = CapabilityProfile(
    supports_native_tools=False,
    supports_vision=True,
)

KNOWN_MODELS: dict[ProviderMode, dict[str, CapabilityProfile]] = {
    # Direct API model ids, e.g. ``claude-3-5-sonnet-20241022``
    ProviderMode.ANTHROPIC: {
        "claude-3-5-*": _TOOLS_AND_VISION,
        "claude-3.5-*": _TOOLS_AND_VISION,
        "claude-3-7-*": _TOOLS_VISION_THINKING,
        "claude-3.7-*": _TOOLS_VISION_THINKING,
        "claude-sonnet-4*": _TOOLS_VISION_THINKING,
        "claude-4-sonnet*": _TOOLS_VISION_THINKING,
        "claude-opus-4*": _TOOLS_VISION_THINKING,
        "claude-4-opus*": _TOOLS_VISION_THINKING,
        "claude-3-opus*": _LEGACY,
        "claude-3-haiku*": _LEGACY,
        "claude-2*": CapabilityProfile(context_window=100_000),
    },
    # Bedrock ids, e.g. ``us.anthropic.claude-3-7-sonnet-20250219-v1:0``
    ProviderMode.BEDROCK: {
        "*anthropic.claude-3-5-*": _TOOLS_AND_VISION,
        "*anthropic.claude-3-7-*": _TOOLS_VISION_THINKING,
        "*anthropic.claude-sonnet-4*": _TOOLS_VISION_THINKING,
        "*anthropic.claude-opus-4*": _TOOLS_VISION_THINKING,
        "*anthropic.claude-3-opus*": _LEGACY,
        "*anthropic.claude-3-haiku*": _LEGACY,
    },
}


def build_default_registry() -> CapabilityRegistry:
    """Return a ``CapabilityRegistry`` pre-loaded with known models."""
    registry = CapabilityRegistry()
    for provider, models in KNOWN_MODELS.items():
        for pattern, profile in models.items():
            registry.register(provider, pattern, profile)
    return registry
