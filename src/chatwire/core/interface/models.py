"""Abstract chat schema — the provider-agnostic message format for chatwire.

Callers build conversations out of :class:`ChatMessage` objects; the
encoder turns them into provider requests and the decoder turns provider
events back into (partial) ``ChatMessage`` deltas.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, model_validator

# ---------------------------------------------------------------------------
# Content Parts — multimodal content building blocks
# ---------------------------------------------------------------------------


class TextPart(BaseModel):
    """Plain text content part."""

    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    """Location of an image; chatwire expects a ``data:`` URL."""

    url: str


class ImagePart(BaseModel):
    """Image content part carrying an inline data URL."""

    type: Literal["imageUrl"] = "imageUrl"
    image_url: ImageUrl

    @classmethod
    def from_data_url(cls, url: str) -> "ImagePart":
        return cls(image_url=ImageUrl(url=url))


MessagePart = Annotated[TextPart | ImagePart, Field(discriminator="type")]

MessageContent = str | list[MessagePart]

Role = Literal["system", "user", "assistant", "tool", "thinking"]


# ---------------------------------------------------------------------------
# Tool Calling — structured tool invocations
# ---------------------------------------------------------------------------


class ToolCallFunction(BaseModel):
    """Name and raw JSON arguments of a function call."""

    name: str
    arguments: str = ""


class ToolCall(BaseModel):
    """A tool invocation emitted by an assistant message.

    ``function.arguments`` is kept as the raw JSON text. While streaming it
    holds a single partial fragment; callers concatenate fragments before
    parsing.
    """

    id: str
    type: Literal["function"] = "function"
    function: ToolCallFunction

    @classmethod
    def create(cls, id: str, name: str, arguments: str = "") -> "ToolCall":
        return cls(id=id, function=ToolCallFunction(name=name, arguments=arguments))


class FunctionDescriptor(BaseModel):
    name: str
    description: str | None = None
    parameters: dict[str, Any] = Field(default_factory=lambda: dict[str, Any]())


class ToolDescriptor(BaseModel):
    """A function tool the model may call (OpenAI-style descriptor)."""

    type: Literal["function"] = "function"
    function: FunctionDescriptor

    @classmethod
    def create(
        cls,
        name: str,
        description: str | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> "ToolDescriptor":
        return cls(
            function=FunctionDescriptor(
                name=name,
                description=description,
                parameters=parameters or {},
            )
        )


class ToolChoiceFunction(BaseModel):
    name: str


class ToolChoice(BaseModel):
    """Forces the model to call one specific tool."""

    type: Literal["function"] = "function"
    function: ToolChoiceFunction

    @classmethod
    def named(cls, name: str) -> "ToolChoice":
        return cls(function=ToolChoiceFunction(name=name))


# ---------------------------------------------------------------------------
# Chat Message — the core message type
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    """A single turn (or a streamed partial turn) in a conversation.

    Roles:
    - system: instruction/context messages (sent as a top-level field)
    - user: human input
    - assistant: model output, optionally carrying ``tool_calls``
    - tool: tool execution results (must include ``tool_call_id``)
    - thinking: extended-reasoning output, either renderable text plus
      ``signature`` or an opaque ``redacted_thinking`` payload
    """

    role: Role
    content: MessageContent = ""
    tool_call_id: str | None = None
    tool_calls: list[ToolCall] | None = None
    redacted_thinking: str | None = None
    signature: str | None = None

    @model_validator(mode="after")
    def _check_role_fields(self) -> "ChatMessage":
        if self.role == "tool" and not self.tool_call_id:
            msg = "tool messages require a tool_call_id"
            raise ValueError(msg)
        if self.role == "thinking" and self.redacted_thinking and self.content:
            msg = "thinking messages carry either redacted_thinking or content, not both"
            raise ValueError(msg)
        return self

    @property
    def text(self) -> str:
        """Concatenated text of the message, ignoring image parts."""
        if isinstance(self.content, str):
            return self.content
        return "".join(part.text for part in self.content if isinstance(part, TextPart))

    @classmethod
    def system(cls, text: str) -> "ChatMessage":
        return cls(role="system", content=text)

    @classmethod
    def user(cls, content: MessageContent) -> "ChatMessage":
        return cls(role="user", content=content)

    @classmethod
    def assistant(
        cls,
        content: MessageContent = "",
        tool_calls: list[ToolCall] | None = None,
    ) -> "ChatMessage":
        return cls(role="assistant", content=content, tool_calls=tool_calls)

    @classmethod
    def tool(cls, tool_call_id: str, content: MessageContent) -> "ChatMessage":
        return cls(role="tool", content=content, tool_call_id=tool_call_id)

    @classmethod
    def thinking(
        cls,
        content: str = "",
        *,
        signature: str | None = None,
        redacted_thinking: str | None = None,
    ) -> "ChatMessage":
        return cls(
            role="thinking",
            content=content,
            signature=signature,
            redacted_thinking=redacted_thinking,
        )


# ---------------------------------------------------------------------------
# Completion Options — per-request configuration
# ---------------------------------------------------------------------------


class CompletionOptions(BaseModel):
    """Per-request sampling, tool and reasoning configuration.

    ``max_tokens`` and ``stream`` stay ``None`` when unset; the encoder
    applies the provider defaults (2048 tokens, streaming on).
    """

    model: str | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_tokens: int | None = None
    stop: list[str] | None = None
    stream: bool | None = None
    tools: list[ToolDescriptor] | None = None
    tool_choice: ToolChoice | None = None
    reasoning: bool = False
    reasoning_budget_tokens: int | None = None

    def merged(self, overrides: "CompletionOptions | None") -> "CompletionOptions":
        """Return a copy with the explicitly-set fields of *overrides* applied."""
        if overrides is None:
            return self.model_copy()
        update = {name: getattr(overrides, name) for name in overrides.model_fields_set}
        return self.model_copy(update=update)
