"""Abstract chat schema, Anthropic wire translation and the chat client."""

from chatwire.core.interface.client import ChatClient
from chatwire.core.interface.config import (
    CacheBehavior,
    ProviderMode,
    ProviderSettings,
    RequestOptions,
)
from chatwire.core.interface.decoder import (
    StreamDecoder,
    ToolUseAccumulator,
    decode_response,
    decode_stream,
)
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
from chatwire.core.interface.rendering import render_chat_message, strip_images
from chatwire.core.interface.transpiler import RequestEncoder
from chatwire.core.interface.transpilers.anthropic import AnthropicTranspiler
from chatwire.core.interface.wire import ProviderMessage, ProviderRequest

__all__ = [
    "AnthropicTranspiler",
    "CacheBehavior",
    "ChatClient",
    "ChatMessage",
    "CompletionOptions",
    "ImagePart",
    "MessagePart",
    "ProviderMessage",
    "ProviderMode",
    "ProviderRequest",
    "ProviderSettings",
    "RequestEncoder",
    "RequestOptions",
    "StreamDecoder",
    "TextPart",
    "ToolCall",
    "ToolChoice",
    "ToolDescriptor",
    "ToolUseAccumulator",
    "decode_response",
    "decode_stream",
    "render_chat_message",
    "strip_images",
]
