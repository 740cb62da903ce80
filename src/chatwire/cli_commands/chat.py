"""``chatwire chat`` — stream a reply to a single prompt."""

from __future__ import annotations

import asyncio
import sys

import click

from chatwire.cli_commands._output import console, load_settings
from chatwire.core.interface.client import ChatClient
from chatwire.core.interface.models import ChatMessage, CompletionOptions
from chatwire.errors import ChatwireError
from chatwire.utils.telemetry import configure_telemetry


@click.command()
@click.argument("prompt")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), default=None,
              help="Settings YAML file.")
@click.option("--model", "-m", default=None, help="Override the configured model.")
@click.option("--system", "-s", "system_prompt", default=None, help="System prompt.")
@click.option("--max-tokens", type=int, default=None, help="Maximum tokens to generate.")
@click.option("--no-stream", is_flag=True, help="Request a single non-streamed response.")
@click.option("--test-mode", is_flag=True, help="Return canned output without calling the API.")
def chat(
    prompt: str,
    config_path: str | None,
    model: str | None,
    system_prompt: str | None,
    max_tokens: int | None,
    no_stream: bool,
    test_mode: bool,
) -> None:
    """Send PROMPT to the configured model and print the reply."""
    settings_file = load_settings(config_path)
    settings = settings_file.to_provider_settings()
    if test_mode:
        settings.test_mode = True

    if settings_file.telemetry and settings_file.telemetry.enabled:
        endpoint = settings_file.telemetry.otlp_endpoint
        configure_telemetry(export_to_console=endpoint is None, otlp_endpoint=endpoint)

    messages: list[ChatMessage] = []
    if system_prompt:
        messages.append(ChatMessage.system(system_prompt))
    messages.append(ChatMessage.user(prompt))

    options = CompletionOptions()
    if model:
        options.model = model
    if max_tokens is not None:
        options.max_tokens = max_tokens
    if no_stream:
        options.stream = False

    client = ChatClient(settings)
    try:
        asyncio.run(_print_stream(client, messages, options))
    except ChatwireError as exc:
        console.print(f"\n[red]Chat error:[/red] {exc}")
        sys.exit(1)


async def _print_stream(
    client: ChatClient,
    messages: list[ChatMessage],
    options: CompletionOptions,
) -> None:
    tool_args: dict[str, list[str]] = {}
    tool_names: dict[str, str] = {}

    async for delta in client.stream_chat(messages, options=options):
        if delta.tool_calls:
            for call in delta.tool_calls:
                tool_names[call.id] = call.function.name
                tool_args.setdefault(call.id, []).append(call.function.arguments)
        elif delta.role == "thinking":
            if delta.text:
                console.print(delta.text, end="", style="dim italic", markup=False, highlight=False)
        elif delta.text:
            console.print(delta.text, end="", markup=False, highlight=False)

    console.print()
    for call_id, fragments in tool_args.items():
        console.print(f"[cyan]tool call[/cyan] {tool_names[call_id]} ({call_id}): {''.join(fragments)}")
