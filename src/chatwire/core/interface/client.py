"""ChatClient — streaming chat over the Anthropic messages API.

Wires the request encoder, the transport selector and the response
decoder together behind an abstract-message interface, so callers only
ever work with :class:`ChatMessage` and :class:`CompletionOptions`.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Sequence
from typing import TYPE_CHECKING, Any

from chatwire.core.interface.config import ProviderSettings
from chatwire.core.interface.decoder import decode_response, decode_stream
from chatwire.core.interface.models import ChatMessage, CompletionOptions
from chatwire.core.interface.rendering import render_chat_message
from chatwire.core.interface.transpiler import RequestEncoder
from chatwire.core.interface.transpilers.anthropic import AnthropicTranspiler
from chatwire.core.interface.wire import ProviderRequest
from chatwire.errors import ChatwireError, TransportError
from chatwire.utils.telemetry import (
    ATTR_CANCELLED,
    ATTR_DELTA_COUNT,
    ATTR_MESSAGE_COUNT,
    ATTR_MODEL,
    ATTR_PROVIDER,
    ATTR_STREAM,
    ATTR_TOOLS_ATTACHED,
    get_tracer,
)

if TYPE_CHECKING:
    from chatwire.core.capabilities.capabilities import CapabilityRegistry
    from chatwire.core.transport.selector import MessagesClient, TransportSelector

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)

_default_registry: CapabilityRegistry | None = None

_END = object()

TEST_MODE_DELTAS = ("Hello", " world")


def _get_default_registry() -> CapabilityRegistry:
    """Return (and cache) the default capability registry."""
    global _default_registry
    if _default_registry is None:
        from chatwire.core.capabilities.registry_data import build_default_registry

        _default_registry = build_default_registry()
    return _default_registry


class ChatClient:
    """Async chat client for one provider configuration.

    Usage::

        settings = ProviderSettings(model="claude-3-5-sonnet-20241022")
        client = ChatClient(settings)
        async for delta in client.stream_chat([ChatMessage.user("Hi")]):
            print(delta.text, end="")
    """

    def __init__(
        self,
        settings: ProviderSettings,
        registry: CapabilityRegistry | None = None,
        transport: TransportSelector | None = None,
    ) -> None:
        self.settings = settings
        self.registry = registry or _get_default_registry()
        if transport is None:
            from chatwire.core.transport.selector import TransportSelector

            transport = TransportSelector(settings)
        self.transport = transport
        logger.info("ChatClient instantiated with %s provider", settings.provider.value)

    def resolve_options(self, options: CompletionOptions | None = None) -> CompletionOptions:
        """Overlay per-call *options* on the configured defaults.

        ``max_tokens`` never exceeds the configured context length.
        """
        resolved = self.settings.completion_options.merged(options)
        if resolved.model is None:
            resolved.model = self.settings.model
        limit = self.settings.context_length
        if resolved.max_tokens is not None and resolved.max_tokens > limit:
            logger.warning(
                "max_tokens %d exceeds context length %d; clamping", resolved.max_tokens, limit
            )
            resolved.max_tokens = limit
        return resolved

    def supports_tools(self, model: str) -> bool:
        return self.registry.supports_tools(
            self.settings.provider, model, self.settings.capabilities
        )

    def encode(
        self,
        messages: Sequence[ChatMessage],
        options: CompletionOptions | None = None,
    ) -> ProviderRequest:
        """Build the provider request for *messages* without sending it."""
        return self._encode(messages, self.resolve_options(options))

    def _encode(self, messages: Sequence[ChatMessage], options: CompletionOptions) -> ProviderRequest:
        assert options.model is not None
        transpiler: RequestEncoder = AnthropicTranspiler(
            supports_tools=self.supports_tools(options.model),
            system_message=self.settings.system_message,
            extra_body=self.settings.request_options.extra_body_properties,
            detect_image_media_type=self.settings.detect_image_media_type,
        )
        return transpiler.encode(messages, options, self.settings.cache_behavior)

    async def stream_chat(
        self,
        messages: Sequence[ChatMessage],
        signal: asyncio.Event | None = None,
        options: CompletionOptions | None = None,
    ) -> AsyncIterator[ChatMessage]:
        """Stream the reply to *messages* as abstract message deltas.

        Args:
            messages: The conversation, oldest first.
            signal: Optional cancellation signal; once set, the in-flight
                request is aborted and the sequence ends.
            options: Per-call overrides of the configured completion options.

        Raises:
            EncodingError: A tool call carries malformed JSON arguments.
            ProtocolError: The event stream is out of order.
            CredentialResolutionError: No AWS credentials could be found.
            TransportError: The network client failed.
        """
        resolved = self.resolve_options(options)
        logger.debug("%s called with model %s", self.settings.provider_label, resolved.model)

        span = _tracer.start_span("chat.stream")
        span.set_attribute(ATTR_MODEL, resolved.model or "")
        span.set_attribute(ATTR_PROVIDER, self.settings.provider.value)
        span.set_attribute(ATTR_MESSAGE_COUNT, len(messages))
        deltas = 0
        try:
            if self.settings.test_mode:
                for text in TEST_MODE_DELTAS:
                    deltas += 1
                    yield ChatMessage.assistant(text)
                return

            request = self._encode(messages, resolved)
            span.set_attribute(ATTR_STREAM, request.stream)
            span.set_attribute(ATTR_TOOLS_ATTACHED, bool(request.tools))

            try:
                client = await self.transport.get_client()
                async for delta in self._dispatch(client, request, signal):
                    deltas += 1
                    yield delta
            except ChatwireError:
                raise
            except Exception as exc:
                raise TransportError(self.settings.provider.value, str(exc)) from exc
        finally:
            span.set_attribute(ATTR_DELTA_COUNT, deltas)
            span.set_attribute(ATTR_CANCELLED, bool(signal is not None and signal.is_set()))
            span.end()

    async def stream_complete(
        self,
        prompt: str,
        signal: asyncio.Event | None = None,
        options: CompletionOptions | None = None,
    ) -> AsyncIterator[str]:
        """Stream the reply to a single user *prompt* as plain text."""
        async for delta in self.stream_chat([ChatMessage.user(prompt)], signal, options):
            yield render_chat_message(delta)

    async def _dispatch(
        self,
        client: MessagesClient,
        request: ProviderRequest,
        signal: asyncio.Event | None,
    ) -> AsyncIterator[ChatMessage]:
        if signal is not None and signal.is_set():
            return

        params = request.to_payload()
        if request.extra_body:
            params["extra_body"] = request.extra_body
        cancelled, response = await _until_cancelled(client.messages.create(**params), signal)
        if cancelled:
            logger.debug("Request cancelled before the response arrived")
            return

        if not request.stream:
            for message in decode_response(response):
                yield message
            return

        try:
            async for message in decode_stream(_events_until_cancelled(response, signal), signal):
                yield message
        finally:
            if signal is not None and signal.is_set():
                await _close_stream(response)


async def _until_cancelled(
    awaitable: Awaitable[Any],
    signal: asyncio.Event | None,
) -> tuple[bool, Any]:
    """Await *awaitable* unless *signal* fires first; returns ``(cancelled, result)``."""
    if signal is None:
        return False, await awaitable

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(signal.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if task.done():
        return False, task.result()
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    return True, None


async def _events_until_cancelled(
    stream: AsyncIterable[Any],
    signal: asyncio.Event | None,
) -> AsyncIterator[Any]:
    iterator = aiter(stream)
    while True:
        cancelled, event = await _until_cancelled(anext(iterator, _END), signal)
        if cancelled or event is _END:
            return
        yield event


async def _close_stream(stream: Any) -> None:
    close = getattr(stream, "close", None)
    if not callable(close):
        return
    result = close()
    if inspect.isawaitable(result):
        await result
