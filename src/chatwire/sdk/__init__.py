"""chatwire SDK — settings files for building chat clients."""

from chatwire.sdk.errors import ConfigValidationError
from chatwire.sdk.loader import SettingsLoader
from chatwire.sdk.models import SettingsFile, TelemetrySettings

__all__ = [
    "ConfigValidationError",
    "SettingsFile",
    "SettingsLoader",
    "TelemetrySettings",
]
