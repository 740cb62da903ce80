"""Provider configuration — transport mode, credentials, caching, defaults."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from chatwire.core.interface.models import CompletionOptions

DEFAULT_MODEL = "anthropic.claude-3-5-sonnet-20240229-v1:0"
DEFAULT_REGION = "us-east-1"
DEFAULT_PROFILE = "bedrock"
DEFAULT_CONTEXT_LENGTH = 200_000
DEFAULT_MAX_TOKENS = 8192


class ProviderMode(str, Enum):
    """Which physical transport serves the requests."""

    ANTHROPIC = "anthropic"
    BEDROCK = "bedrock"


class CacheBehavior(BaseModel):
    """Prompt-caching policy, owned by the caller."""

    cache_conversation: bool = False
    cache_system_message: bool = False


class RequestOptions(BaseModel):
    """Transport-level request tweaks."""

    extra_body_properties: dict[str, Any] = Field(default_factory=lambda: dict[str, Any]())
    timeout: float | None = None


class ProviderSettings(BaseModel):
    """Configuration for one chat client.

    ``api_key`` and ``api_base`` apply to the direct transport only;
    ``region`` and ``profile`` apply to the Bedrock transport only.
    """

    provider: ProviderMode = ProviderMode.ANTHROPIC
    model: str = DEFAULT_MODEL
    api_key: str | None = None
    api_base: str | None = None
    region: str = DEFAULT_REGION
    profile: str = DEFAULT_PROFILE
    context_length: int = DEFAULT_CONTEXT_LENGTH
    system_message: str | None = None
    cache_behavior: CacheBehavior = Field(default_factory=CacheBehavior)
    completion_options: CompletionOptions = Field(
        default_factory=lambda: CompletionOptions(max_tokens=DEFAULT_MAX_TOKENS)
    )
    request_options: RequestOptions = Field(default_factory=RequestOptions)
    capabilities: dict[str, bool] = Field(default_factory=lambda: dict[str, bool]())
    detect_image_media_type: bool = False
    test_mode: bool = False

    @property
    def provider_label(self) -> str:
        return "Anthropic" if self.provider is ProviderMode.ANTHROPIC else "Bedrock Anthropic"
