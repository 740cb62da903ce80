"""Tests for the Anthropic request encoder."""

import pytest

from chatwire.core.interface.config import CacheBehavior
from chatwire.core.interface.models import (
    ChatMessage,
    CompletionOptions,
    ImagePart,
    MessagePart,
    TextPart,
    ToolCall,
    ToolChoice,
    ToolDescriptor,
)
from chatwire.core.interface.transpilers.anthropic import AnthropicTranspiler
from chatwire.errors import EncodingError

_PNG_URL = "data:image/png;base64,iVBORw0KGgo="

# ---------------------------------------------------------------------------
# Fixtures: sample conversations
# ---------------------------------------------------------------------------


def _five_turns() -> list[ChatMessage]:
    return [
        ChatMessage.system("You are helpful."),
        ChatMessage.user("one"),
        ChatMessage.assistant("reply one"),
        ChatMessage.user("two"),
        ChatMessage.assistant("reply two"),
        ChatMessage.user("three"),
        ChatMessage.assistant("reply three"),
        ChatMessage.user("four"),
        ChatMessage.assistant("reply four"),
        ChatMessage.user("five"),
    ]


def _cached_indices(payload_messages: list[dict]) -> list[int]:
    return [
        i
        for i, msg in enumerate(payload_messages)
        if any("cache_control" in block for block in msg["content"])
    ]


def _dump(messages: list) -> list[dict]:
    return [m.model_dump(exclude_none=True) for m in messages]


# ---------------------------------------------------------------------------
# convert_messages
# ---------------------------------------------------------------------------


class TestConvertMessages:
    def setup_method(self) -> None:
        self.transpiler = AnthropicTranspiler()

    def test_drops_system_and_empty_messages(self) -> None:
        messages = [
            ChatMessage.system("sys"),
            ChatMessage.user("hello"),
            ChatMessage.assistant(""),
            ChatMessage.user([]),
            ChatMessage.assistant("hi"),
        ]
        converted = self.transpiler.convert_messages(messages)
        assert len(converted) == 2
        assert [m.role for m in converted] == ["user", "assistant"]

    def test_output_length_matches_non_system_non_empty(self) -> None:
        messages = _five_turns()
        expected = sum(1 for m in messages if m.role != "system" and m.content)
        assert len(self.transpiler.convert_messages(messages)) == expected

    def test_caches_last_two_user_messages(self) -> None:
        converted = self.transpiler.convert_messages(
            _five_turns(), CacheBehavior(cache_conversation=True)
        )
        assert len(converted) == 9
        # filtered sequence: u a u a u a u a u -> last two users at 6 and 8
        assert _cached_indices(_dump(converted)) == [6, 8]

    def test_cache_window_with_alternating_turns(self) -> None:
        messages = [
            ChatMessage.user("u1"),
            ChatMessage.assistant("a1"),
            ChatMessage.user("u2"),
            ChatMessage.assistant("a2"),
            ChatMessage.user("u3"),
            ChatMessage.assistant("a3"),
        ]
        converted = self.transpiler.convert_messages(
            messages, CacheBehavior(cache_conversation=True)
        )
        assert _cached_indices(_dump(converted)) == [2, 4]

    def test_no_caching_when_disabled(self) -> None:
        converted = self.transpiler.convert_messages(_five_turns(), CacheBehavior())
        assert _cached_indices(_dump(converted)) == []

    def test_no_caching_without_cache_behavior(self) -> None:
        converted = self.transpiler.convert_messages(_five_turns())
        assert _cached_indices(_dump(converted)) == []

    def test_single_user_message_cached(self) -> None:
        converted = self.transpiler.convert_messages(
            [ChatMessage.user("only")], CacheBehavior(cache_conversation=True)
        )
        assert _cached_indices(_dump(converted)) == [0]

    def test_cache_ignores_assistant_messages(self) -> None:
        messages = [ChatMessage.user("q"), ChatMessage.assistant("a"), ChatMessage.assistant("b")]
        converted = self.transpiler.convert_messages(
            messages, CacheBehavior(cache_conversation=True)
        )
        assert _cached_indices(_dump(converted)) == [0]


# ---------------------------------------------------------------------------
# convert_message
# ---------------------------------------------------------------------------


class TestConvertMessage:
    def setup_method(self) -> None:
        self.transpiler = AnthropicTranspiler()

    def test_plain_string_user(self) -> None:
        msg = self.transpiler.convert_message(ChatMessage.user("Hello"), add_caching=False)
        assert msg.model_dump(exclude_none=True) == {
            "role": "user",
            "content": [{"type": "text", "text": "Hello"}],
        }

    def test_plain_string_with_caching(self) -> None:
        msg = self.transpiler.convert_message(ChatMessage.user("Hello"), add_caching=True)
        assert msg.model_dump(exclude_none=True)["content"] == [
            {"type": "text", "text": "Hello", "cache_control": {"type": "ephemeral"}}
        ]

    def test_plain_string_assistant_keeps_role(self) -> None:
        msg = self.transpiler.convert_message(ChatMessage.assistant("Sure"), add_caching=False)
        assert msg.role == "assistant"

    def test_tool_result(self) -> None:
        msg = self.transpiler.convert_message(
            ChatMessage.tool("call-1", "4"), add_caching=False
        )
        assert msg.model_dump(exclude_none=True) == {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": "call-1", "content": "4"}],
        }

    def test_tool_result_with_empty_rendering_omits_content(self) -> None:
        image_only: list[MessagePart] = [ImagePart.from_data_url(_PNG_URL)]
        msg = self.transpiler.convert_message(
            ChatMessage.tool("call-1", image_only), add_caching=False
        )
        block = msg.model_dump(exclude_none=True)["content"][0]
        assert block == {"type": "tool_result", "tool_use_id": "call-1"}

    def test_assistant_tool_calls(self) -> None:
        calls = [
            ToolCall.create("call-1", "calculator", '{"expression": "2+2"}'),
            ToolCall.create("call-2", "clock", ""),
        ]
        msg = self.transpiler.convert_message(
            ChatMessage.assistant("Let me check.", tool_calls=calls), add_caching=False
        )
        assert msg.model_dump(exclude_none=True) == {
            "role": "assistant",
            "content": [
                {
                    "type": "tool_use",
                    "id": "call-1",
                    "name": "calculator",
                    "input": {"expression": "2+2"},
                },
                {"type": "tool_use", "id": "call-2", "name": "clock", "input": {}},
            ],
        }

    def test_malformed_tool_arguments_raise(self) -> None:
        calls = [ToolCall.create("call-1", "calculator", "{")]
        with pytest.raises(EncodingError, match="calculator"):
            self.transpiler.convert_message(
                ChatMessage.assistant("x", tool_calls=calls), add_caching=False
            )

    def test_thinking(self) -> None:
        msg = self.transpiler.convert_message(
            ChatMessage.thinking("pondering", signature="sig-1"), add_caching=False
        )
        assert msg.model_dump(exclude_none=True) == {
            "role": "assistant",
            "content": [{"type": "thinking", "thinking": "pondering", "signature": "sig-1"}],
        }

    def test_redacted_thinking(self) -> None:
        msg = self.transpiler.convert_message(
            ChatMessage.thinking(redacted_thinking="opaque"), add_caching=False
        )
        assert msg.model_dump(exclude_none=True) == {
            "role": "assistant",
            "content": [{"type": "redacted_thinking", "data": "opaque"}],
        }

    def test_multipart_caches_only_last_text_part(self) -> None:
        parts: list[MessagePart] = [TextPart(text="first"), TextPart(text="second")]
        msg = self.transpiler.convert_message(ChatMessage.user(parts), add_caching=True)
        content = msg.model_dump(exclude_none=True)["content"]
        assert "cache_control" not in content[0]
        assert content[1]["cache_control"] == {"type": "ephemeral"}

    def test_multipart_ending_in_image_has_no_annotation(self) -> None:
        parts: list[MessagePart] = [TextPart(text="look"), ImagePart.from_data_url(_PNG_URL)]
        msg = self.transpiler.convert_message(ChatMessage.user(parts), add_caching=True)
        content = msg.model_dump(exclude_none=True)["content"]
        assert all("cache_control" not in block for block in content)

    def test_image_defaults_to_jpeg(self) -> None:
        parts: list[MessagePart] = [ImagePart.from_data_url(_PNG_URL)]
        msg = self.transpiler.convert_message(ChatMessage.user(parts), add_caching=False)
        assert msg.model_dump()["content"][0] == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/jpeg", "data": "iVBORw0KGgo="},
        }

    def test_image_media_type_detection(self) -> None:
        transpiler = AnthropicTranspiler(detect_image_media_type=True)
        parts: list[MessagePart] = [ImagePart.from_data_url(_PNG_URL)]
        msg = transpiler.convert_message(ChatMessage.user(parts), add_caching=False)
        assert msg.model_dump()["content"][0]["source"]["media_type"] == "image/png"

    def test_image_without_data_url_raises(self) -> None:
        parts: list[MessagePart] = [ImagePart.from_data_url("https://example.com/cat.png")]
        with pytest.raises(EncodingError):
            self.transpiler.convert_message(ChatMessage.user(parts), add_caching=False)


# ---------------------------------------------------------------------------
# convert_args
# ---------------------------------------------------------------------------


class TestConvertArgs:
    def setup_method(self) -> None:
        self.transpiler = AnthropicTranspiler()

    def test_defaults(self) -> None:
        params = self.transpiler.convert_args(CompletionOptions(model="claude-3-5-sonnet"))
        assert params.max_tokens == 2048
        assert params.stream is True
        assert params.tools is None
        assert params.thinking is None
        assert params.tool_choice is None

    def test_wire_names(self) -> None:
        params = self.transpiler.convert_args(
            CompletionOptions(
                model="m",
                temperature=0.2,
                top_p=0.9,
                top_k=40,
                max_tokens=100,
                stream=False,
            )
        )
        assert params.model_dump(exclude_none=True) == {
            "model": "m",
            "temperature": 0.2,
            "top_p": 0.9,
            "top_k": 40,
            "max_tokens": 100,
            "stream": False,
        }

    def test_blank_stop_sequences_removed(self) -> None:
        params = self.transpiler.convert_args(CompletionOptions(stop=["END", "", "   ", "\n\nHuman:"]))
        assert params.stop_sequences == ["END", "\n\nHuman:"]

    def test_tools_and_choice(self) -> None:
        schema = {"type": "object", "properties": {"q": {"type": "string"}}}
        params = self.transpiler.convert_args(
            CompletionOptions(
                tools=[ToolDescriptor.create("search", "Search the web", schema)],
                tool_choice=ToolChoice.named("search"),
            )
        )
        dumped = params.model_dump(exclude_none=True)
        assert dumped["tools"] == [
            {"name": "search", "description": "Search the web", "input_schema": schema}
        ]
        assert dumped["tool_choice"] == {"type": "tool", "name": "search"}

    def test_reasoning(self) -> None:
        params = self.transpiler.convert_args(
            CompletionOptions(reasoning=True, reasoning_budget_tokens=1024)
        )
        assert params.model_dump(exclude_none=True)["thinking"] == {
            "type": "enabled",
            "budget_tokens": 1024,
        }


# ---------------------------------------------------------------------------
# encode
# ---------------------------------------------------------------------------


class TestEncode:
    def test_full_payload(self) -> None:
        transpiler = AnthropicTranspiler()
        request = transpiler.encode(
            [ChatMessage.system("Be brief."), ChatMessage.user("Hi")],
            CompletionOptions(model="claude-3-5-sonnet-20241022", max_tokens=64),
        )
        assert request.to_payload() == {
            "model": "claude-3-5-sonnet-20241022",
            "max_tokens": 64,
            "stream": True,
            "system": "Be brief.",
            "messages": [{"role": "user", "content": [{"type": "text", "text": "Hi"}]}],
        }

    def test_system_prompt_cached(self) -> None:
        request = AnthropicTranspiler().encode(
            [ChatMessage.system("Be brief."), ChatMessage.user("Hi")],
            CompletionOptions(),
            CacheBehavior(cache_system_message=True),
        )
        assert request.to_payload()["system"] == [
            {"type": "text", "text": "Be brief.", "cache_control": {"type": "ephemeral"}}
        ]

    def test_configured_system_message_wins(self) -> None:
        request = AnthropicTranspiler(system_message="configured").encode(
            [ChatMessage.system("from conversation"), ChatMessage.user("Hi")],
            CompletionOptions(),
        )
        assert request.system == "configured"

    def test_no_system_prompt(self) -> None:
        request = AnthropicTranspiler().encode([ChatMessage.user("Hi")], CompletionOptions())
        assert "system" not in request.to_payload()

    def test_tools_dropped_when_unsupported(self) -> None:
        options = CompletionOptions(
            tools=[ToolDescriptor.create("search")],
            tool_choice=ToolChoice.named("search"),
        )
        request = AnthropicTranspiler(supports_tools=False).encode(
            [ChatMessage.user("Hi")], options
        )
        payload = request.to_payload()
        assert "tools" not in payload
        assert "tool_choice" not in payload

    def test_tools_kept_when_supported(self) -> None:
        options = CompletionOptions(tools=[ToolDescriptor.create("search")])
        request = AnthropicTranspiler(supports_tools=True).encode(
            [ChatMessage.user("Hi")], options
        )
        assert request.to_payload()["tools"][0]["name"] == "search"

    def test_extra_body_kept_out_of_payload(self) -> None:
        request = AnthropicTranspiler(extra_body={"custom_flag": True}).encode(
            [ChatMessage.user("Hi")], CompletionOptions()
        )
        assert "custom_flag" not in request.to_payload()
        assert request.extra_body == {"custom_flag": True}

    def test_extra_body_merged_into_wire_body(self) -> None:
        request = AnthropicTranspiler(extra_body={"custom_flag": True}).encode(
            [ChatMessage.user("Hi")], CompletionOptions()
        )
        wire = request.to_wire()
        assert wire["custom_flag"] is True
        assert wire["messages"] == request.to_payload()["messages"]
