"""Shared CLI helpers and output formatters."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from chatwire.core.capabilities.capabilities import CapabilityProfile  # noqa: TC001
from chatwire.sdk.errors import ConfigValidationError
from chatwire.sdk.loader import SettingsLoader
from chatwire.sdk.models import SettingsFile

console = Console()


def load_settings(config_path: str | None) -> SettingsFile:
    """Load the settings file, or defaults when no file is given.

    Exits with status 1 on validation errors.
    """
    if config_path is None:
        return SettingsFile()
    try:
        return SettingsLoader(Path(config_path)).load()
    except ConfigValidationError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)


def print_payload(payload: dict[str, Any]) -> None:
    """Pretty-print a provider request payload as JSON."""
    console.print_json(json.dumps(payload, default=str))


def print_models_table(rows: list[tuple[str, str, CapabilityProfile]]) -> None:
    """Pretty-print known model families as a table."""
    table = Table(title="Known Models")
    table.add_column("Provider", style="cyan")
    table.add_column("Model pattern")
    table.add_column("Tools")
    table.add_column("Vision")
    table.add_column("Thinking")
    table.add_column("Context", justify="right")

    for provider, pattern, profile in rows:
        table.add_row(
            provider,
            _truncate(pattern),
            _yes_no(profile.supports_native_tools),
            _yes_no(profile.supports_vision),
            _yes_no(profile.supports_thinking),
            f"{profile.context_window:,}",
        )

    console.print(table)


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "-"


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
