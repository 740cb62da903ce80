"""SDK error types."""

from __future__ import annotations


class ConfigValidationError(Exception):
    """Raised when a settings YAML file fails parsing or validation."""
