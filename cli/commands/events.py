"""
Events command: show how the router would treat recent pod events.
"""

import json
import typer
from datetime import datetime, timedelta, timezone
from typing import Optional
from rich.console import Console
from rich.table import Table

from kubernetes import client

from binder.core.errors import BinderError, EventParseError
from binder.core.events import LifecycleEvent, parse_timestamp
from binder.validation import EventValidator
from binder_operator.cluster import load_cluster_config
from binder_operator.router import classify, is_watched
from binder_operator.settings import BinderConfig

console = Console()


def events_command(
    namespace: Optional[str] = typer.Option(None, "--namespace", "-n", help="Namespace (default: watched namespace)"),
    since: Optional[str] = typer.Option(
        None,
        "--since",
        "-s",
        help="Treat this ISO-8601 time as controller start (default: 1 hour ago)",
    ),
    limit: int = typer.Option(200, "--limit", "-l", help="Maximum events to list"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List pod lifecycle events with their router classification and validity.

    Examples:
        upstream-binder events
        upstream-binder events -n staging --since 2024-05-01T10:00:00Z
    """
    try:
        config = BinderConfig.from_env()
        namespace = namespace or config.watch_namespace
        started_at = parse_timestamp(since) if since else datetime.now(timezone.utc) - timedelta(hours=1)
        load_cluster_config()
        listed = client.CoreV1Api().list_namespaced_event(
            namespace=namespace,
            field_selector=f"involvedObject.kind={config.watch_kind}",
            limit=limit,
        )
    except BinderError as e:
        _fail(json_output, str(e))
    except Exception as e:
        _fail(json_output, f"cluster request failed: {e}")

    # Classification is checked against the watched namespace, not --namespace
    validator = EventValidator(started_at)
    rows = []
    for raw in listed.items:
        try:
            event = LifecycleEvent.from_raw(raw)
        except EventParseError:
            continue
        transition = classify(event, config) if is_watched(event, config) else None
        rows.append({
            "pod": event.name,
            "reason": event.reason,
            "type": event.type,
            "count": event.count,
            "last_timestamp": event.last_timestamp.isoformat() if event.last_timestamp else None,
            "transition": transition.value if transition else None,
            "valid": validator.is_valid(event),
        })

    if json_output:
        print(json.dumps({"events": rows, "count": len(rows), "since": started_at.isoformat()}, indent=2))
        return

    if not rows:
        console.print("[yellow]No pod events found[/yellow]")
        return

    table = Table(title=f"Pod events in {namespace} (since {started_at.isoformat()})")
    table.add_column("Pod", style="cyan")
    table.add_column("Reason", style="green")
    table.add_column("Type")
    table.add_column("Count", justify="right")
    table.add_column("Last seen", style="dim")
    table.add_column("Transition", style="yellow")
    table.add_column("Valid")

    for row in rows:
        table.add_row(
            row["pod"],
            row["reason"],
            row["type"],
            str(row["count"]),
            row["last_timestamp"] or "N/A",
            row["transition"] or "-",
            "[green]yes[/green]" if row["valid"] else "[dim]no[/dim]",
        )

    console.print(table)
    console.print(f"\n[bold]Total events:[/bold] {len(rows)}")


def _fail(json_output: bool, message: str) -> None:
    if json_output:
        print(json.dumps({"error": message}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)
