#!/usr/bin/env python3
"""
Upstream Binder CLI

Main entrypoint for the upstream-binder command-line tool.
"""

import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from cli.commands import events, pods

app = typer.Typer(
    name="upstream-binder",
    help="Bind pods to the services that front them",
    add_completion=False,
)

console = Console()

app.command("events")(events.events_command)
app.command("resolve")(pods.resolve_command)
app.command("ready")(pods.ready_command)


@app.command()
def run(
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="Namespace to watch (default: BINDER_WATCH_NAMESPACE)"
    ),
):
    """Start the operator."""
    import os
    from binder_operator import main as operator_main

    if namespace:
        os.environ["BINDER_WATCH_NAMESPACE"] = namespace
    operator_main.run(namespace)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from binder_operator.settings import BinderConfig

    config = BinderConfig.from_env()
    table = Table(show_header=False, box=None)
    table.add_row("[bold]Upstream Binder[/bold]", f"v{__version__}")
    table.add_row("Watches", f"{config.watch_kind} events in {config.watch_namespace}")
    table.add_row("Selector keys", ", ".join(config.selector_keys))

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
