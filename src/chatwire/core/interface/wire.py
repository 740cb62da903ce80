"""Provider wire schema — request payloads and streamed response events.

Every content block, stream event and delta is a closed variant tagged by
its ``type`` field, so the encoder and decoder dispatch exhaustively.
Serialize requests with :meth:`ProviderRequest.to_payload` (keyword
arguments for ``messages.create``) or :meth:`ProviderRequest.to_wire`
(the JSON body actually sent); both drop ``None`` fields.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Request content blocks
# ---------------------------------------------------------------------------


class CacheControl(BaseModel):
    type: Literal["ephemeral"] = "ephemeral"


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str
    cache_control: CacheControl | None = None


class Base64ImageSource(BaseModel):
    type: Literal["base64"] = "base64"
    media_type: str
    data: str


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    source: Base64ImageSource


class ToolUseBlock(BaseModel):
    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: Any


class ToolResultBlock(BaseModel):
    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: str | None = None


class ThinkingBlock(BaseModel):
    type: Literal["thinking"] = "thinking"
    thinking: str
    signature: str | None = None


class RedactedThinkingBlock(BaseModel):
    type: Literal["redacted_thinking"] = "redacted_thinking"
    data: str


ContentBlock = Annotated[
    TextBlock | ImageBlock | ToolUseBlock | ToolResultBlock | ThinkingBlock | RedactedThinkingBlock,
    Field(discriminator="type"),
]


class ProviderMessage(BaseModel):
    """One entry of the request's ``messages`` array."""

    role: Literal["user", "assistant"]
    content: list[ContentBlock]


# ---------------------------------------------------------------------------
# Request parameters
# ---------------------------------------------------------------------------


class ProviderTool(BaseModel):
    name: str
    description: str | None = None
    input_schema: dict[str, Any]


class ProviderToolChoice(BaseModel):
    type: Literal["tool"] = "tool"
    name: str


class ThinkingConfig(BaseModel):
    type: Literal["enabled"] = "enabled"
    budget_tokens: int | None = None


class ProviderCompletionParams(BaseModel):
    """Sampling/tool/reasoning parameters mapped to wire names."""

    model: str | None = None
    top_k: int | None = None
    top_p: float | None = None
    temperature: float | None = None
    max_tokens: int = 2048
    stop_sequences: list[str] | None = None
    stream: bool = True
    tools: list[ProviderTool] | None = None
    thinking: ThinkingConfig | None = None
    tool_choice: ProviderToolChoice | None = None


class ProviderRequest(ProviderCompletionParams):
    """A complete ``messages.create`` request."""

    messages: list[ProviderMessage] = []
    system: str | list[TextBlock] | None = None
    extra_body: dict[str, Any] = Field(default_factory=lambda: dict[str, Any](), exclude=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize the typed parameters, omitting unset fields.

        ``extra_body`` is not included; it travels through the SDK's own
        ``extra_body`` argument.
        """
        return self.model_dump(exclude_none=True)

    def to_wire(self) -> dict[str, Any]:
        """Return the request body as sent, with ``extra_body`` merged last."""
        body = self.to_payload()
        body.update(self.extra_body)
        return body


# ---------------------------------------------------------------------------
# Response stream events
# ---------------------------------------------------------------------------


class TextDelta(BaseModel):
    type: Literal["text_delta"] = "text_delta"
    text: str


class InputJsonDelta(BaseModel):
    type: Literal["input_json_delta"] = "input_json_delta"
    partial_json: str


class ThinkingDelta(BaseModel):
    type: Literal["thinking_delta"] = "thinking_delta"
    thinking: str


class SignatureDelta(BaseModel):
    type: Literal["signature_delta"] = "signature_delta"
    signature: str


BlockDelta = Annotated[
    TextDelta | InputJsonDelta | ThinkingDelta | SignatureDelta,
    Field(discriminator="type"),
]

DELTA_TYPES = frozenset({"text_delta", "input_json_delta", "thinking_delta", "signature_delta"})


class TextStartBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str = ""


class ToolUseStartBlock(BaseModel):
    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: Any = None


class ThinkingStartBlock(BaseModel):
    type: Literal["thinking"] = "thinking"
    thinking: str = ""
    signature: str | None = None


class RedactedThinkingStartBlock(BaseModel):
    type: Literal["redacted_thinking"] = "redacted_thinking"
    data: str


StartBlock = Annotated[
    TextStartBlock | ToolUseStartBlock | ThinkingStartBlock | RedactedThinkingStartBlock,
    Field(discriminator="type"),
]

START_BLOCK_TYPES = frozenset({"text", "tool_use", "thinking", "redacted_thinking"})


class MessageStart(BaseModel):
    type: Literal["message_start"] = "message_start"
    message: dict[str, Any] = Field(default_factory=lambda: dict[str, Any]())


class ContentBlockStart(BaseModel):
    type: Literal["content_block_start"] = "content_block_start"
    index: int = 0
    content_block: StartBlock


class ContentBlockDelta(BaseModel):
    type: Literal["content_block_delta"] = "content_block_delta"
    index: int = 0
    delta: BlockDelta


class ContentBlockStop(BaseModel):
    type: Literal["content_block_stop"] = "content_block_stop"
    index: int = 0


class MessageDelta(BaseModel):
    type: Literal["message_delta"] = "message_delta"
    delta: dict[str, Any] = Field(default_factory=lambda: dict[str, Any]())
    usage: dict[str, Any] | None = None


class MessageStop(BaseModel):
    type: Literal["message_stop"] = "message_stop"


StreamEvent = Annotated[
    MessageStart | ContentBlockStart | ContentBlockDelta | ContentBlockStop | MessageDelta | MessageStop,
    Field(discriminator="type"),
]

EVENT_TYPES = frozenset(
    {
        "message_start",
        "content_block_start",
        "content_block_delta",
        "content_block_stop",
        "message_delta",
        "message_stop",
    }
)
