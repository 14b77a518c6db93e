"""Cherry CLI - Run the webhook service and send test requests."""

import asyncio
import json
import sys
import tomllib
from collections.abc import Callable, Coroutine
from functools import wraps
from pathlib import Path
from typing import Any, ParamSpec, TypeVar, cast

import click
from rich.console import Console
from rich.table import Table

from cherry.client import (
    CherryClientError,
    HealthClient,
    TodoistWebhookClient,
    encode_payload,
    sample_event_data,
)
from cherry.client.todoist import SIGNATURE_HEADER
from cherry.common.hmac import sign
from cherry.common.models import TodoistWebhookRequest
from cherry.common.settings import get_settings
from cherry.server.main import main as run_server

console = Console()

P = ParamSpec("P")
R = TypeVar("R")

ITEM_EVENT_CHOICES = ["item:added", "item:updated", "item:deleted", "item:completed"]


def async_command(f: Callable[P, Coroutine[Any, Any, R]]) -> Callable[P, R]:
    """Decorator to run async commands."""

    @wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def _load_config(path: str | None) -> dict[str, Any]:
    if not path:
        return {}
    config_path = Path(path).expanduser()
    if not config_path.exists():
        console.print(f"[red]Config not found: {config_path}[/red]")
        sys.exit(1)

    raw = config_path.read_bytes()
    if config_path.suffix.lower() == ".toml":
        data = tomllib.loads(raw.decode("utf-8"))
    else:
        data = json.loads(raw.decode("utf-8"))

    if isinstance(data, dict) and isinstance(data.get("cli"), dict):
        return cast(dict[str, Any], data["cli"])
    return cast(dict[str, Any], data) if isinstance(data, dict) else {}


@click.group()
@click.option(
    "--url",
    "base_url",
    default=None,
    help="Webhook service base URL",
)
@click.option(
    "--config",
    type=click.Path(exists=False, dir_okay=False),
    help="Path to CLI config (JSON or TOML with optional [cli] section)",
)
@click.option("--timeout", type=float, default=None, help="HTTP timeout in seconds")
@click.pass_context
def cli(
    ctx: click.Context,
    base_url: str | None,
    config: str | None,
    timeout: float | None,
) -> None:
    """Cherry CLI - Todoist webhook receiver tools."""
    config_data = _load_config(config)
    settings = get_settings()
    base_url = base_url or config_data.get("base_url") or settings.client_base_url

    ctx.ensure_object(dict)
    ctx.obj["base_url"] = base_url.rstrip("/")
    ctx.obj["secret"] = config_data.get("secret")
    ctx.obj["timeout"] = timeout or config_data.get("timeout") or settings.http_timeout


# === Service ===


@cli.command("serve")
def serve() -> None:
    """Run the webhook service."""
    run_server()


# === Requests ===


@cli.command("simulate")
@click.option("--secret", default=None, help="Todoist client secret used for signing")
@click.option(
    "--event",
    "event_name",
    default="item:added",
    show_default=True,
    help=f"Event type ({', '.join(ITEM_EVENT_CHOICES)})",
)
@click.option("--user", "user_id", default="12345", show_default=True, help="User ID")
@click.pass_context
@async_command
async def simulate(
    ctx: click.Context,
    secret: str | None,
    event_name: str,
    user_id: str,
) -> None:
    """Send a sample Todoist webhook."""
    base_url = ctx.obj["base_url"]
    secret = secret or ctx.obj.get("secret")

    request = TodoistWebhookRequest(
        event_name=event_name,
        user_id=user_id,
        event_data=sample_event_data(),
        version="9",
    )

    if secret:
        signature = sign(encode_payload(request), secret)
        console.print(f"Added signature header with value: [cyan]{signature}[/cyan]")
    else:
        console.print("[yellow]Warning: No secret provided, skipping signature calculation[/yellow]")

    async with TodoistWebhookClient(base_url, secret=secret, timeout=ctx.obj["timeout"]) as client:
        try:
            response = await client.process_webhook(request)
        except CherryClientError as exc:
            console.print(f"[red]Error: {exc}[/red]")
            sys.exit(1)

    table = Table(title="Webhook Response")
    table.add_column("Event", style="cyan")
    table.add_column("Success", style="green")
    table.add_column("Message")
    table.add_row(event_name, str(response.success), response.message)
    console.print(table)
    console.print(f"[green]Successfully sent {event_name} webhook to {base_url}[/green]")


@cli.command("health")
@click.pass_context
@async_command
async def health(ctx: click.Context) -> None:
    """Check service liveness."""
    base_url = ctx.obj["base_url"]

    async with HealthClient(base_url, timeout=ctx.obj["timeout"]) as client:
        try:
            response = await client.check()
        except CherryClientError as exc:
            console.print(f"[red]✗ Health check failed: {exc}[/red]")
            sys.exit(1)

    console.print(f"[green]✓ Status: {response.status}[/green]")


@cli.command("sign")
@click.option("--secret", required=True, help="Todoist client secret")
@click.argument("payload", type=click.File("rb"), default="-")
def sign_payload(secret: str, payload: Any) -> None:
    """Print the signature header for a payload file (stdin by default)."""
    body = payload.read()
    click.echo(f"{SIGNATURE_HEADER}: {sign(body, secret)}")


def main() -> None:
    """CLI entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
