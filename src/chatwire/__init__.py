"""chatwire — abstract chat messages over the Anthropic messages API."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from chatwire.core.interface.client import ChatClient as ChatClient
    from chatwire.core.interface.config import ProviderSettings as ProviderSettings
    from chatwire.core.interface.models import ChatMessage as ChatMessage

_EXPORTS = {
    "ChatClient": "chatwire.core.interface.client",
    "ChatMessage": "chatwire.core.interface.models",
    "ProviderSettings": "chatwire.core.interface.config",
}


def __getattr__(name: str) -> object:
    module_path = _EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'chatwire' has no attribute {name!r}")
