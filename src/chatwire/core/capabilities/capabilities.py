"""Capability detection for Anthropic models.

Provides a structured profile of model capabilities and a registry that
maps model identifiers (exact ids or glob patterns, per transport) to
their profiles. The encoder asks it whether tool definitions may be
attached to a request.
"""

from fnmatch import fnmatch
from typing import Any

from pydantic import BaseModel

from chatwire.core.interface.config import ProviderMode


class CapabilityProfile(BaseModel):
    """Structured representation of a model's capabilities."""

    supports_native_tools: bool = False
    supports_vision: bool = False
    supports_thinking: bool = False
    context_window: int = 200_000

    @classmethod
    def from_capabilities_dict(cls, caps: dict[str, bool], **defaults: Any) -> "CapabilityProfile":
        """Build a profile from a flat capabilities dict.

        Keys recognised: ``native_tool_calling``, ``vision``, ``thinking``.
        Unknown keys are silently ignored.
        """
        mapping: dict[str, str] = {
            "native_tool_calling": "supports_native_tools",
            "vision": "supports_vision",
            "thinking": "supports_thinking",
        }
        kwargs: dict[str, Any] = dict(defaults)
        for src_key, dst_key in mapping.items():
            if src_key in caps:
                kwargs[dst_key] = caps[src_key]
        return cls(**kwargs)


class CapabilityRegistry:
    """Maps model identifiers to their capability profiles."""

    def __init__(self) -> None:
        self._models: dict[tuple[ProviderMode, str], CapabilityProfile] = {}

    def register(self, provider: ProviderMode, pattern: str, profile: CapabilityProfile) -> None:
        """Register a profile for model ids matching *pattern* on *provider*."""
        self._models[(provider, pattern.lower())] = profile

    def resolve(
        self,
        provider: ProviderMode,
        model: str,
        overrides: dict[str, bool] | None = None,
    ) -> CapabilityProfile:
        """Resolve the capability profile for *model* on *provider*.

        Lookup order:
        1. Exact model id
        2. Glob patterns, in registration order
        3. Default profile (no native tools)

        Non-empty *overrides* replace the resolved profile fields.
        """
        name = model.lower()
        profile = self._models.get((provider, name))
        if profile is None:
            profile = next(
                (
                    p
                    for (mode, pattern), p in self._models.items()
                    if mode is provider and fnmatch(name, pattern)
                ),
                CapabilityProfile(),
            )

        if overrides:
            profile = CapabilityProfile.from_capabilities_dict(overrides, **profile.model_dump())

        return profile

    def supports_tools(
        self,
        provider: ProviderMode,
        model: str,
        overrides: dict[str, bool] | None = None,
    ) -> bool:
        """Whether tool definitions may be sent for *model* on *provider*."""
        return self.resolve(provider, model, overrides).supports_native_tools
