"""Provider-specific request encoders."""

from chatwire.core.interface.transpilers.anthropic import AnthropicTranspiler

__all__ = ["AnthropicTranspiler"]
