"""Shared error types for the encode/transport/decode pipeline."""


class ChatwireError(Exception):
    """Base error for all chatwire failures."""


class EncodingError(ChatwireError):
    """A message could not be converted into the provider request schema."""


class ProtocolError(ChatwireError):
    """The provider event stream violated the expected event ordering."""


class TransportError(ChatwireError):
    """The underlying network client failed while serving a request."""

    def __init__(self, provider: str, detail: str = "") -> None:
        self.provider = provider
        self.detail = detail
        label = "Anthropic" if provider == "anthropic" else "Bedrock"
        super().__init__(f"Failed to communicate with {label} API: {detail}")


class CredentialResolutionError(ChatwireError):
    """Neither the named nor the default AWS profile yielded credentials."""

    def __init__(self, profile: str | None, detail: str = "") -> None:
        self.profile = profile
        self.detail = detail
        msg = f"Could not resolve AWS credentials for profile: {profile or 'default'}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
