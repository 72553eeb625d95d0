"""CLI entry point for Gmail Inbox Buckets."""

from __future__ import annotations

import json
import os

import click

from . import __version__
from .config import AppConfig
from .constants import DEFAULT_PORT, ENV_PORT, MAX_RESULTS_CEILING
from .display import console, display_emails, display_grouped, display_rules, display_summary, err_console
from .exceptions import InboxBucketsError
from .logging_config import configure_logging
from .service import InboxService

_limit_option = click.option(
    "-n",
    "--limit",
    default=None,
    type=click.IntRange(1, MAX_RESULTS_CEILING),
    help="Number of newest messages to fetch (default 25).",
)
_json_option = click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables.")


def _service(ctx: click.Context) -> InboxService:
    """Build the service on first use and keep it on the context."""
    obj = ctx.ensure_object(dict)
    if "service" not in obj:
        try:
            obj["service"] = InboxService(obj["config"])
        except InboxBucketsError as e:
            raise click.ClickException(str(e)) from e
    return obj["service"]


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.version_option(version=__version__, prog_name="inbox-buckets")
@click.option("--rules", "rules_path", default=None, type=click.Path(dir_okay=False), help="Rules JSON file.")
@click.option("--token", "token_path", default=None, type=click.Path(dir_okay=False), help="Token file.")
@click.option("--snippet", "include_snippet", is_flag=True, help="Also match keywords against message snippets.")
@click.option("-v", "--verbose", count=True, help="Show log output (-v info, -vv debug).")
@click.pass_context
def cli(ctx: click.Context, rules_path: str | None, token_path: str | None, include_snippet: bool, verbose: int) -> None:
    """Gmail Inbox Buckets - group your newest Gmail messages by client."""
    level = {0: None, 1: "INFO"}.get(verbose, "DEBUG")
    configure_logging(err_console, level_override=level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = AppConfig.from_env(
        rules_path=rules_path,
        token_path=token_path,
        include_snippet=include_snippet or None,
    )


@cli.command()
@click.pass_context
def authorize(ctx: click.Context) -> None:
    """Print the Google consent URL to open in a browser."""
    try:
        url = _service(ctx).start_authorization()
    except InboxBucketsError as e:
        raise click.ClickException(str(e)) from e

    console.print("Open this URL in your browser and grant read-only access:")
    click.echo(url)
    console.print("[dim]Then run: inbox-buckets complete CODE[/dim]")


@cli.command()
@click.argument("code")
@click.pass_context
def complete(ctx: click.Context, code: str) -> None:
    """Exchange the authorization CODE from the callback URL for tokens."""
    try:
        _service(ctx).complete_authorization(code)
    except InboxBucketsError as e:
        raise click.ClickException(str(e)) from e
    console.print("[green]Authorization successful. Tokens saved.[/green]")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show whether a token is stored."""
    if _service(ctx).is_authorized():
        console.print("[green]Authorized.[/green]")
    else:
        console.print("[yellow]Not authorized. Run 'inbox-buckets authorize'.[/yellow]")


@cli.command()
@_limit_option
@_json_option
@click.pass_context
def emails(ctx: click.Context, limit: int | None, as_json: bool) -> None:
    """List the newest messages."""
    try:
        messages = _service(ctx).list_emails(limit)
    except InboxBucketsError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        _echo_json([m.to_dict() for m in messages])
    else:
        display_emails(messages)


@cli.command(name="by-client")
@_limit_option
@_json_option
@click.pass_context
def by_client(ctx: click.Context, limit: int | None, as_json: bool) -> None:
    """Group the newest messages by client."""
    try:
        grouped = _service(ctx).grouped_inbox(limit)
    except InboxBucketsError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        _echo_json({bucket: [m.to_dict() for m in msgs] for bucket, msgs in grouped.items()})
    else:
        display_grouped(grouped)


@cli.command()
@_limit_option
@_json_option
@click.pass_context
def summary(ctx: click.Context, limit: int | None, as_json: bool) -> None:
    """Count the newest messages per client."""
    try:
        result = _service(ctx).inbox_summary(limit)
    except InboxBucketsError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        _echo_json({"total": result.total, "byClient": result.by_bucket})
    else:
        display_summary(result)


@cli.command()
@click.pass_context
def rules(ctx: click.Context) -> None:
    """Show the loaded rules in match order."""
    display_rules(_service(ctx).ruleset)


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=None, type=int, help=f"Port (default ${ENV_PORT} or {DEFAULT_PORT}).")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int | None) -> None:
    """Run the web backend."""
    import uvicorn

    from .webapp import create_app

    port = port or int(os.getenv(ENV_PORT, DEFAULT_PORT))
    app = create_app(_service(ctx))
    console.print(f"Server running at http://localhost:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)
