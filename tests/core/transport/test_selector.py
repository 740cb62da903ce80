"""Tests for TransportSelector and the client factories."""

import asyncio
from unittest.mock import MagicMock, patch

import httpx

from chatwire.core.interface.config import ProviderMode, ProviderSettings, RequestOptions
from chatwire.core.transport.credentials import AwsCredentials
from chatwire.core.transport.selector import (
    TransportSelector,
    build_bedrock_client,
    build_direct_client,
)

_CREDS = AwsCredentials(access_key_id="AKIA", secret_access_key="secret", session_token="tok")


class TestTransportSelector:
    async def test_direct_client_memoized(self) -> None:
        direct = MagicMock(return_value=MagicMock())
        resolver = MagicMock()
        selector = TransportSelector(
            ProviderSettings(), credential_resolver=resolver, direct_factory=direct
        )

        first = await selector.get_client()
        second = await selector.get_client()

        assert first is second
        direct.assert_called_once()
        resolver.assert_not_called()
        assert selector.provider is ProviderMode.ANTHROPIC

    async def test_bedrock_uses_resolved_credentials(self) -> None:
        resolver = MagicMock(return_value=_CREDS)
        bedrock = MagicMock(return_value=MagicMock())
        settings = ProviderSettings(provider="bedrock", profile="work")
        selector = TransportSelector(
            settings, credential_resolver=resolver, bedrock_factory=bedrock
        )

        client = await selector.get_client()

        resolver.assert_called_once_with("work")
        bedrock.assert_called_once_with(settings, _CREDS)
        assert client is bedrock.return_value

    async def test_concurrent_first_use_builds_once(self) -> None:
        direct = MagicMock(side_effect=lambda _settings: MagicMock())
        selector = TransportSelector(ProviderSettings(), direct_factory=direct)

        clients = await asyncio.gather(*(selector.get_client() for _ in range(5)))

        assert direct.call_count == 1
        assert all(c is clients[0] for c in clients)

    async def test_concurrent_bedrock_resolves_once(self) -> None:
        resolver = MagicMock(return_value=_CREDS)
        bedrock = MagicMock(side_effect=lambda _settings, _creds: MagicMock())
        selector = TransportSelector(
            ProviderSettings(provider="bedrock"),
            credential_resolver=resolver,
            bedrock_factory=bedrock,
        )

        clients = await asyncio.gather(*(selector.get_client() for _ in range(3)))

        resolver.assert_called_once()
        assert len({id(c) for c in clients}) == 1


class TestFactories:
    def test_direct_client_kwargs(self) -> None:
        settings = ProviderSettings(
            api_key="sk-test",
            api_base="https://proxy.example.com",
            request_options=RequestOptions(timeout=30),
        )
        with patch("chatwire.core.transport.selector.anthropic.AsyncAnthropic") as mock_cls:
            client = build_direct_client(settings)

        assert client is mock_cls.return_value
        kwargs = mock_cls.call_args.kwargs
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["base_url"] == "https://proxy.example.com"
        assert isinstance(kwargs["timeout"], httpx.Timeout)

    def test_direct_client_minimal(self) -> None:
        with patch("chatwire.core.transport.selector.anthropic.AsyncAnthropic") as mock_cls:
            build_direct_client(ProviderSettings())
        assert mock_cls.call_args.kwargs == {}

    def test_bedrock_client_kwargs(self) -> None:
        settings = ProviderSettings(provider="bedrock", region="eu-west-1")
        with patch("chatwire.core.transport.selector.anthropic.AsyncAnthropicBedrock") as mock_cls:
            build_bedrock_client(settings, _CREDS)

        mock_cls.assert_called_once_with(
            aws_region="eu-west-1",
            aws_access_key="AKIA",
            aws_secret_key="secret",
            aws_session_token="tok",
        )
