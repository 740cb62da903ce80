"""Network transports — direct API and AWS Bedrock."""

from chatwire.core.transport.credentials import AwsCredentials, resolve_credentials
from chatwire.core.transport.selector import (
    MessagesClient,
    TransportSelector,
    build_bedrock_client,
    build_direct_client,
)

__all__ = [
    "AwsCredentials",
    "MessagesClient",
    "TransportSelector",
    "build_bedrock_client",
    "build_direct_client",
    "resolve_credentials",
]
