"""``chatwire encode`` — show the provider request for a conversation."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from pydantic import TypeAdapter, ValidationError

from chatwire.cli_commands._output import console, load_settings, print_payload
from chatwire.core.interface.client import ChatClient
from chatwire.core.interface.models import ChatMessage, CompletionOptions
from chatwire.errors import EncodingError

_messages_adapter: TypeAdapter[list[ChatMessage]] = TypeAdapter(list[ChatMessage])


@click.command()
@click.argument("messages_file", type=click.Path(exists=True))
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), default=None,
              help="Settings YAML file.")
@click.option("--model", "-m", default=None, help="Override the configured model.")
def encode(messages_file: str, config_path: str | None, model: str | None) -> None:
    """Print the request payload built from MESSAGES_FILE.

    MESSAGES_FILE is a JSON array of chat messages.
    """
    settings = load_settings(config_path).to_provider_settings()

    try:
        raw = json.loads(Path(messages_file).read_text(encoding="utf-8"))
        messages = _messages_adapter.validate_python(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        console.print(f"[red]Invalid messages file:[/red] {exc}")
        sys.exit(1)

    options = CompletionOptions()
    if model:
        options.model = model

    try:
        request = ChatClient(settings).encode(messages, options)
    except EncodingError as exc:
        console.print(f"[red]Encoding error:[/red] {exc}")
        sys.exit(1)

    print_payload(request.to_wire())
