"""``chatwire models`` — list known model families and their capabilities."""

from __future__ import annotations

import click

from chatwire.cli_commands._output import print_models_table
from chatwire.core.capabilities.capabilities import CapabilityProfile
from chatwire.core.capabilities.registry_data import KNOWN_MODELS
from chatwire.core.interface.config import ProviderMode


@click.command()
@click.option(
    "--provider",
    type=click.Choice([mode.value for mode in ProviderMode]),
    default=None,
    help="Show only one transport.",
)
def models(provider: str | None) -> None:
    """List known model families and their capabilities."""
    rows: list[tuple[str, str, CapabilityProfile]] = []
    for mode, patterns in KNOWN_MODELS.items():
        if provider and mode.value != provider:
            continue
        for pattern, profile in patterns.items():
            rows.append((mode.value, pattern, profile))
    print_models_table(rows)
