"""Rich-based display functions for Gmail Inbox Buckets."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .constants import UNASSIGNED
from .models import InboxSummary, MessageRecord
from .rules import RuleSet

console = Console()
err_console = Console(stderr=True)


def _bucket_style(bucket: str) -> str:
    return "dim" if bucket == UNASSIGNED else "bold cyan"


def _messages_table(messages: list[MessageRecord], title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="dim")
    table.add_column("From")
    table.add_column("Subject")
    for idx, msg in enumerate(messages, start=1):
        table.add_row(str(idx), escape(msg.date), escape(msg.sender), escape(msg.subject))
    return table


def display_emails(messages: list[MessageRecord]) -> None:
    """Display fetched messages in list order."""
    if not messages:
        console.print("[dim]No messages found.[/dim]")
        return
    console.print(_messages_table(messages, "Inbox"))


def display_grouped(grouped: dict[str, list[MessageRecord]]) -> None:
    """Display one table per bucket."""
    if not grouped:
        console.print("[dim]No messages found.[/dim]")
        return
    for bucket, messages in grouped.items():
        style = _bucket_style(bucket)
        console.print(_messages_table(messages, f"[{style}]{escape(bucket)}[/{style}] ({len(messages)})"))


def display_summary(summary: InboxSummary) -> None:
    """Display message counts per bucket, largest first."""
    table = Table(title="Inbox Summary")
    table.add_column("Client")
    table.add_column("Messages", justify="right")

    for bucket, count in sorted(summary.by_bucket.items(), key=lambda kv: -kv[1]):
        style = _bucket_style(bucket)
        table.add_row(f"[{style}]{escape(bucket)}[/{style}]", str(count))

    console.print(table)
    console.print(Panel(f"Total messages: {summary.total}", title="Summary"))


def display_rules(ruleset: RuleSet) -> None:
    """Display the loaded rules in match order."""
    if not ruleset:
        console.print(f"[yellow]No rules loaded. Every message will be '{UNASSIGNED}'.[/yellow]")
        return

    table = Table(title="Rules (first match wins)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Client")
    table.add_column("Keywords")
    for idx, rule in enumerate(ruleset, start=1):
        table.add_row(str(idx), escape(rule.name), escape(", ".join(rule.keywords)))
    console.print(table)
