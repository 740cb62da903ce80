"""Anthropic request encoder — message conversion and prompt-caching policy.

Key differences from the abstract chat schema:
- System messages are a separate top-level ``system`` parameter.
- Tool results travel as user messages holding a ``tool_result`` block.
- Assistant tool calls become ``tool_use`` blocks with parsed JSON input.
- Thinking turns are replayed as assistant ``thinking`` /
  ``redacted_thinking`` blocks.
- The last two user turns get an ephemeral cache annotation when
  conversation caching is on: the older one reads the cached prefix, the
  newer one is written so the next request can hit it.
"""

import json
from collections.abc import Sequence
from typing import Any

from chatwire.core.interface.config import CacheBehavior
from chatwire.core.interface.models import (
    ChatMessage,
    CompletionOptions,
    ImagePart,
    TextPart,
)
from chatwire.core.interface.rendering import render_chat_message, strip_images
from chatwire.core.interface.wire import (
    Base64ImageSource,
    CacheControl,
    ContentBlock,
    ImageBlock,
    ProviderCompletionParams,
    ProviderMessage,
    ProviderRequest,
    ProviderTool,
    ProviderToolChoice,
    RedactedThinkingBlock,
    TextBlock,
    ThinkingBlock,
    ThinkingConfig,
    ToolResultBlock,
    ToolUseBlock,
)
from chatwire.errors import EncodingError

DEFAULT_MAX_TOKENS = 2048
FALLBACK_IMAGE_MEDIA_TYPE = "image/jpeg"


class AnthropicTranspiler:
    """Converts abstract chat messages into Anthropic's messages API format."""

    def __init__(
        self,
        *,
        supports_tools: bool = True,
        system_message: str | None = None,
        extra_body: dict[str, Any] | None = None,
        detect_image_media_type: bool = False,
    ) -> None:
        self.supports_tools = supports_tools
        self.system_message = system_message
        self.extra_body = dict(extra_body or {})
        self.detect_image_media_type = detect_image_media_type

    def encode(
        self,
        messages: Sequence[ChatMessage],
        options: CompletionOptions,
        cache_behavior: CacheBehavior | None = None,
    ) -> ProviderRequest:
        """Build the full request for *messages*.

        Tools and tool choice are only attached when the model supports
        native tool calling.
        """
        cache = cache_behavior or CacheBehavior()
        params = self.convert_args(options)
        if not self.supports_tools:
            params.tools = None
            params.tool_choice = None

        return ProviderRequest(
            **dict(params),
            messages=self.convert_messages(messages, cache),
            system=self._system_prompt(messages, cache),
            extra_body=self.extra_body,
        )

    def convert_args(self, options: CompletionOptions) -> ProviderCompletionParams:
        """Map abstract completion options to wire parameter names."""
        tools: list[ProviderTool] | None = None
        if options.tools is not None:
            tools = [
                ProviderTool(
                    name=tool.function.name,
                    description=tool.function.description,
                    input_schema=tool.function.parameters,
                )
                for tool in options.tools
            ]

        stop_sequences: list[str] | None = None
        if options.stop is not None:
            stop_sequences = [s for s in options.stop if s.strip() != ""]

        return ProviderCompletionParams(
            model=options.model,
            top_k=options.top_k,
            top_p=options.top_p,
            temperature=options.temperature,
            max_tokens=options.max_tokens if options.max_tokens is not None else DEFAULT_MAX_TOKENS,
            stop_sequences=stop_sequences,
            stream=options.stream if options.stream is not None else True,
            tools=tools,
            thinking=(
                ThinkingConfig(budget_tokens=options.reasoning_budget_tokens)
                if options.reasoning
                else None
            ),
            tool_choice=(
                ProviderToolChoice(name=options.tool_choice.function.name)
                if options.tool_choice
                else None
            ),
        )

    def convert_messages(
        self,
        messages: Sequence[ChatMessage],
        cache_behavior: CacheBehavior | None = None,
    ) -> list[ProviderMessage]:
        """Convert the non-system, non-empty messages of a conversation."""
        filtered = [m for m in messages if m.role != "system" and m.content]
        user_indices = [i for i, m in enumerate(filtered) if m.role == "user"]
        cached_indices = set(user_indices[-2:])
        cache_conversation = bool(cache_behavior and cache_behavior.cache_conversation)

        return [
            self.convert_message(message, cache_conversation and idx in cached_indices)
            for idx, message in enumerate(filtered)
        ]

    def convert_message(self, message: ChatMessage, add_caching: bool) -> ProviderMessage:
        """Convert a single message, dispatching on its role and shape."""
        if message.role == "tool":
            assert message.tool_call_id is not None
            rendered = render_chat_message(message)
            return ProviderMessage(
                role="user",
                content=[
                    ToolResultBlock(tool_use_id=message.tool_call_id, content=rendered or None)
                ],
            )

        if message.role == "assistant" and message.tool_calls:
            return ProviderMessage(
                role="assistant",
                content=[
                    ToolUseBlock(
                        id=call.id,
                        name=call.function.name,
                        input=_parse_arguments(call.function.arguments, call.function.name),
                    )
                    for call in message.tool_calls
                ],
            )

        if message.role == "thinking":
            if message.redacted_thinking:
                return ProviderMessage(
                    role="assistant",
                    content=[RedactedThinkingBlock(data=message.redacted_thinking)],
                )
            return ProviderMessage(
                role="assistant",
                content=[ThinkingBlock(thinking=message.text, signature=message.signature)],
            )

        role = "assistant" if message.role == "assistant" else "user"
        cache_control = CacheControl() if add_caching else None

        if isinstance(message.content, str):
            return ProviderMessage(
                role=role,
                content=[TextBlock(text=message.content, cache_control=cache_control)],
            )

        last = len(message.content) - 1
        blocks: list[ContentBlock] = []
        for idx, part in enumerate(message.content):
            if isinstance(part, TextPart):
                # Only the final part of the message is annotated.
                blocks.append(
                    TextBlock(text=part.text, cache_control=cache_control if idx == last else None)
                )
            else:
                blocks.append(self._convert_image(part))
        return ProviderMessage(role=role, content=blocks)

    def _convert_image(self, part: ImagePart) -> ImageBlock:
        header, sep, data = part.image_url.url.partition(",")
        if not sep:
            msg = "image content must be a data URL"
            raise EncodingError(msg)

        media_type = FALLBACK_IMAGE_MEDIA_TYPE
        if self.detect_image_media_type and header.startswith("data:"):
            declared = header[len("data:") :].split(";", 1)[0]
            media_type = declared or FALLBACK_IMAGE_MEDIA_TYPE

        return ImageBlock(source=Base64ImageSource(media_type=media_type, data=data))

    def _system_prompt(
        self,
        messages: Sequence[ChatMessage],
        cache_behavior: CacheBehavior,
    ) -> str | list[TextBlock] | None:
        system_text = self.system_message
        if not system_text:
            first = next((m for m in messages if m.role == "system"), None)
            system_text = strip_images(first.content) if first is not None else ""

        if not system_text:
            return None
        if cache_behavior.cache_system_message:
            return [TextBlock(text=system_text, cache_control=CacheControl())]
        return system_text


def _parse_arguments(raw: str, tool_name: str) -> Any:
    """Parse a tool call's JSON arguments; empty means no arguments."""
    try:
        return json.loads(raw or "{}")
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON arguments for tool call {tool_name!r}: {exc}"
        raise EncodingError(msg) from exc
