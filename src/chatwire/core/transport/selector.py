"""TransportSelector — one memoized network client per chat client.

Two physically distinct clients serve the same ``messages.create``
contract: ``anthropic.AsyncAnthropic`` talks to the Anthropic API
directly, ``anthropic.AsyncAnthropicBedrock`` goes through AWS Bedrock
and needs AWS credentials. The selector builds the configured one on
first use and hands out the same instance afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

import anthropic
import httpx

from chatwire.core.interface.config import ProviderMode, ProviderSettings
from chatwire.core.transport.credentials import AwsCredentials, resolve_credentials

logger = logging.getLogger(__name__)


class MessagesResource(Protocol):
    async def create(self, **params: Any) -> Any:
        """Submit a request; return a response object or an event stream."""
        ...


class MessagesClient(Protocol):
    """The single logical operation both transports expose."""

    @property
    def messages(self) -> MessagesResource: ...


def _timeout_kwargs(settings: ProviderSettings) -> dict[str, Any]:
    timeout = settings.request_options.timeout
    if timeout is None:
        return {}
    return {"timeout": httpx.Timeout(timeout)}


def build_direct_client(settings: ProviderSettings) -> MessagesClient:
    """Create an ``AsyncAnthropic`` client for the direct API."""
    kwargs: dict[str, Any] = _timeout_kwargs(settings)
    if settings.api_key:
        kwargs["api_key"] = settings.api_key
    if settings.api_base:
        kwargs["base_url"] = settings.api_base
    return anthropic.AsyncAnthropic(**kwargs)


def build_bedrock_client(settings: ProviderSettings, credentials: AwsCredentials) -> MessagesClient:
    """Create an ``AsyncAnthropicBedrock`` client with resolved credentials."""
    return anthropic.AsyncAnthropicBedrock(
        aws_region=settings.region,
        aws_access_key=credentials.access_key_id,
        aws_secret_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
        **_timeout_kwargs(settings),
    )


class TransportSelector:
    """Lazily constructs and memoizes the client for the configured mode.

    Construction happens at most once; concurrent first calls wait on a
    lock and receive the same instance.
    """

    def __init__(
        self,
        settings: ProviderSettings,
        *,
        credential_resolver: Callable[[str | None], AwsCredentials] = resolve_credentials,
        direct_factory: Callable[[ProviderSettings], MessagesClient] = build_direct_client,
        bedrock_factory: Callable[
            [ProviderSettings, AwsCredentials], MessagesClient
        ] = build_bedrock_client,
    ) -> None:
        self._settings = settings
        self._resolve_credentials = credential_resolver
        self._direct_factory = direct_factory
        self._bedrock_factory = bedrock_factory
        self._client: MessagesClient | None = None
        self._lock = asyncio.Lock()

    @property
    def provider(self) -> ProviderMode:
        return self._settings.provider

    async def get_client(self) -> MessagesClient:
        """Return the memoized client, creating it on first use."""
        if self._client is not None:
            logger.debug("Reusing %s client", self._settings.provider_label)
            return self._client
        async with self._lock:
            if self._client is None:
                self._client = await self._create_client()
        return self._client

    async def _create_client(self) -> MessagesClient:
        if self._settings.provider is ProviderMode.ANTHROPIC:
            client = self._direct_factory(self._settings)
        else:
            credentials = await asyncio.to_thread(
                self._resolve_credentials, self._settings.profile
            )
            client = self._bedrock_factory(self._settings, credentials)
        logger.info("Created %s client", self._settings.provider_label)
        return client
