"""Linearize message content to plain text."""

from chatwire.core.interface.models import ChatMessage, MessageContent, TextPart


def strip_images(content: MessageContent) -> str:
    """Return the text of *content*, dropping image parts.

    Multiple text parts are joined with newlines.
    """
    if isinstance(content, str):
        return content
    return "\n".join(part.text for part in content if isinstance(part, TextPart))


def render_chat_message(message: ChatMessage | None) -> str:
    """Render a message (or a streamed delta) as plain text."""
    if message is None:
        return ""
    return strip_images(message.content)
