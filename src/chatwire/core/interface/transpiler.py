"""Encoder protocol — converts abstract chat messages to a provider request.

Each provider has a concrete encoder producing its request schema from a
conversation, completion options and the caller's cache policy.
"""

from collections.abc import Sequence
from typing import Protocol

from chatwire.core.interface.config import CacheBehavior
from chatwire.core.interface.models import ChatMessage, CompletionOptions
from chatwire.core.interface.wire import ProviderRequest


class RequestEncoder(Protocol):
    """Protocol for provider-specific request encoders."""

    def encode(
        self,
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
        cache_behavior: CacheBehavior | None = None,
    ) -> ProviderRequest:
        """Convert a conversation plus options into a provider request."""
        ...
