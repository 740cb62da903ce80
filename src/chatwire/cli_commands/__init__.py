"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from chatwire.cli_commands.chat import chat
    from chatwire.cli_commands.encode import encode
    from chatwire.cli_commands.models import models

    cli.add_command(chat)
    cli.add_command(encode)
    cli.add_command(models)
