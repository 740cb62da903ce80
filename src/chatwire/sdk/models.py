"""Pydantic models for the settings YAML consumed by the ``chatwire`` CLI."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from chatwire.core.interface.config import (
    DEFAULT_CONTEXT_LENGTH,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_PROFILE,
    DEFAULT_REGION,
    CacheBehavior,
    ProviderMode,
    ProviderSettings,
    RequestOptions,
)
from chatwire.core.interface.models import CompletionOptions


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class SettingsFile(BaseModel):
    """Top-level settings file parsed from YAML."""

    version: str = "1"
    provider: ProviderMode = ProviderMode.ANTHROPIC
    model: str = DEFAULT_MODEL
    api_key: str | None = None
    api_base: str | None = None
    region: str = DEFAULT_REGION
    profile: str = DEFAULT_PROFILE
    context_length: int = DEFAULT_CONTEXT_LENGTH
    system_message: str | None = None
    cache: CacheBehavior = Field(default_factory=CacheBehavior)
    completion_options: dict[str, Any] = Field(default_factory=dict)
    request_options: RequestOptions = Field(default_factory=RequestOptions)
    capabilities: dict[str, bool] = Field(default_factory=dict)
    detect_image_media_type: bool = False
    test_mode: bool = False
    telemetry: TelemetrySettings | None = None

    def to_provider_settings(self) -> ProviderSettings:
        """Build the runtime :class:`ProviderSettings` for a chat client."""
        options: dict[str, Any] = {"max_tokens": DEFAULT_MAX_TOKENS, **self.completion_options}
        return ProviderSettings(
            provider=self.provider,
            model=self.model,
            api_key=self.api_key,
            api_base=self.api_base,
            region=self.region,
            profile=self.profile,
            context_length=self.context_length,
            system_message=self.system_message,
            cache_behavior=self.cache,
            completion_options=CompletionOptions.model_validate(options),
            request_options=self.request_options,
            capabilities=self.capabilities,
            detect_image_media_type=self.detect_image_media_type,
            test_mode=self.test_mode,
        )
