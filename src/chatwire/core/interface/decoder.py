"""Response decoder — turns provider events into abstract message deltas.

A streamed response is a sequence of typed events. :class:`StreamDecoder`
consumes them one at a time and emits at most one :class:`ChatMessage`
delta per event. Deltas are never merged; a caller that wants whole turns
concatenates ``content`` (and tool-call ``arguments``) itself.

Tool-call argument fragments (``input_json_delta``) carry no tool id, so
the decoder remembers the id/name announced by the enclosing
``content_block_start`` and forgets it at ``content_block_stop``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, TypeAdapter

from chatwire.core.interface.models import ChatMessage, ToolCall
from chatwire.core.interface.wire import (
    DELTA_TYPES,
    EVENT_TYPES,
    START_BLOCK_TYPES,
    ContentBlockDelta,
    ContentBlockStart,
    ContentBlockStop,
    InputJsonDelta,
    RedactedThinkingStartBlock,
    SignatureDelta,
    StreamEvent,
    TextDelta,
    ThinkingDelta,
    ToolUseStartBlock,
)
from chatwire.errors import ProtocolError

if TYPE_CHECKING:
    import asyncio

logger = logging.getLogger(__name__)

_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)


class ToolUseAccumulator(BaseModel):
    """The tool call currently receiving streamed argument fragments."""

    id: str | None = None
    name: str | None = None

    @property
    def is_open(self) -> bool:
        return bool(self.id) and bool(self.name)

    def open(self, id: str, name: str) -> None:
        self.id = id
        self.name = name

    def clear(self) -> None:
        self.id = None
        self.name = None


def _as_mapping(raw: Any) -> Mapping[str, Any] | None:
    if isinstance(raw, Mapping):
        return raw
    dump = getattr(raw, "model_dump", None)
    if callable(dump):
        result = dump()
        if isinstance(result, Mapping):
            return result
    return None


def parse_event(raw: Any) -> StreamEvent | None:
    """Normalize a wire event into the closed event union.

    Accepts typed events, plain mappings and SDK objects exposing
    ``model_dump()``. Returns ``None`` for event, block or delta types this
    decoder does not know.
    """
    data = _as_mapping(raw)
    if data is None:
        return None

    event_type = data.get("type")
    if event_type not in EVENT_TYPES:
        return None
    if event_type == "content_block_start":
        block = _as_mapping(data.get("content_block")) or {}
        if block.get("type") not in START_BLOCK_TYPES:
            return None
    if event_type == "content_block_delta":
        delta = _as_mapping(data.get("delta")) or {}
        if delta.get("type") not in DELTA_TYPES:
            return None

    return _event_adapter.validate_python(data)


class StreamDecoder:
    """State machine for one streamed response.

    Create one decoder per stream; the tool-use accumulator must not be
    shared between concurrent streams.
    """

    def __init__(self) -> None:
        self.accumulator = ToolUseAccumulator()

    def step(self, raw_event: Any) -> ChatMessage | None:
        """Consume one event and return the delta it produces, if any."""
        event = parse_event(raw_event)
        if event is None:
            return None

        if isinstance(event, ContentBlockStart):
            return self._on_block_start(event)
        if isinstance(event, ContentBlockDelta):
            return self._on_block_delta(event)
        if isinstance(event, ContentBlockStop):
            self.accumulator.clear()
        return None

    def _on_block_start(self, event: ContentBlockStart) -> ChatMessage | None:
        block = event.content_block
        if isinstance(block, ToolUseStartBlock):
            self.accumulator.open(block.id, block.name)
            return None
        if isinstance(block, RedactedThinkingStartBlock):
            logger.debug("Received redacted thinking block")
            return ChatMessage.thinking("", redacted_thinking=block.data)
        return None

    def _on_block_delta(self, event: ContentBlockDelta) -> ChatMessage:
        delta = event.delta
        if isinstance(delta, TextDelta):
            return ChatMessage.assistant(delta.text)
        if isinstance(delta, InputJsonDelta):
            acc = self.accumulator
            if not acc.is_open:
                msg = "No tool use in progress for input_json_delta"
                raise ProtocolError(msg)
            assert acc.id is not None and acc.name is not None
            call = ToolCall.create(acc.id, acc.name, delta.partial_json)
            return ChatMessage.assistant("", tool_calls=[call])
        if isinstance(delta, ThinkingDelta):
            return ChatMessage.thinking(delta.thinking)
        assert isinstance(delta, SignatureDelta)
        return ChatMessage.thinking("", signature=delta.signature)


def decode_response(response: Any) -> Iterator[ChatMessage]:
    """Decode a non-streaming response.

    Yields a single assistant message when the first content block carries
    text, and nothing otherwise.
    """
    data = _as_mapping(response)
    if data is None:
        return
    content = data.get("content")
    if not content:
        return
    first = _as_mapping(content[0])
    if first is not None and "text" in first:
        yield ChatMessage.assistant(first["text"])


async def decode_stream(
    events: AsyncIterable[Any],
    signal: asyncio.Event | None = None,
) -> AsyncIterator[ChatMessage]:
    """Decode a live event stream, one delta per meaningful event.

    The sequence ends early, without a sentinel, once *signal* is set.
    """
    decoder = StreamDecoder()
    async for event in events:
        if signal is not None and signal.is_set():
            logger.debug("Stream cancelled; stopping decode")
            return
        message = decoder.step(event)
        if message is not None:
            yield message
