"""Settings loading for the chatwire SDK."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from chatwire.sdk.errors import ConfigValidationError
from chatwire.sdk.models import SettingsFile

if TYPE_CHECKING:
    from pathlib import Path


class SettingsLoader:
    """Load and validate a settings YAML file into a :class:`SettingsFile`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> SettingsFile:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.

        Raises:
            ConfigValidationError: On read errors, YAML parse errors or
                schema validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigValidationError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigValidationError("Settings YAML must be a mapping")

        try:
            return SettingsFile.model_validate(data)
        except ValidationError as exc:
            raise ConfigValidationError(str(exc)) from exc
