"""
Pod commands: resolve, ready
"""

import json
import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from binder.core.errors import BinderError
from binder_operator.cluster import KubeClusterApi, load_cluster_config
from binder_operator.readiness import ReadinessWaiter
from binder_operator.resolver import ServiceResolver, format_label_selector
from binder_operator.settings import BinderConfig

console = Console()


def resolve_command(
    pod: str = typer.Argument(..., help="Pod name"),
    namespace: Optional[str] = typer.Option(None, "--namespace", "-n", help="Namespace (default: watched namespace)"),
    strict: bool = typer.Option(False, "--strict", help="Fail if several services match"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the label selector and the service a pod would be bound to.

    Examples:
        upstream-binder resolve api-7
        upstream-binder resolve api-7 -n staging --json
    """
    try:
        config = BinderConfig.from_env()
        namespace = namespace or config.watch_namespace
        load_cluster_config()
        cluster = KubeClusterApi()
        resolver = ServiceResolver(
            cluster,
            selector_keys=config.selector_keys,
            limit=config.service_list_limit,
            strict=strict or config.strict_service_match,
        )
        instance = cluster.get_instance(namespace, pod)
        selector = format_label_selector(resolver.selector_for(instance))
        service = resolver.resolve(instance, namespace)
    except BinderError as e:
        _fail(json_output, str(e))
    except Exception as e:
        _fail(json_output, f"cluster request failed: {e}")

    if json_output:
        print(json.dumps({
            "pod": instance.name,
            "namespace": namespace,
            "address": instance.address,
            "ready": instance.ready,
            "selector": selector,
            "service": service.name,
        }, indent=2))
        return

    table = Table(title=f"Pod {namespace}/{instance.name}", show_header=False)
    table.add_row("[bold]Address[/bold]", instance.address or "-")
    table.add_row("[bold]Ready[/bold]", "[green]yes[/green]" if instance.ready else "[yellow]no[/yellow]")
    table.add_row("[bold]Selector[/bold]", selector)
    table.add_row("[bold]Service[/bold]", f"[cyan]{service.name}[/cyan]")
    console.print(table)


def ready_command(
    pod: str = typer.Argument(..., help="Pod name"),
    namespace: Optional[str] = typer.Option(None, "--namespace", "-n", help="Namespace (default: watched namespace)"),
    timeout: Optional[int] = typer.Option(None, "--timeout", "-t", help="Seconds to wait (default: BINDER_READY_TIMEOUT_SECONDS)"),
    interval: Optional[int] = typer.Option(None, "--interval", "-i", help="Seconds between polls"),
):
    """
    Wait for a pod to become ready, the way the bind flow does.

    Exit code 0 when ready, 1 on timeout, 2 on errors.
    """
    try:
        config = BinderConfig.from_env()
        load_cluster_config()
    except BinderError as e:
        _fail(False, str(e))

    namespace = namespace or config.watch_namespace
    waiter = ReadinessWaiter(
        KubeClusterApi(),
        interval=interval or config.poll_interval_seconds,
        timeout=timeout if timeout is not None else config.ready_timeout_seconds,
    )
    with console.status(f"Waiting for {namespace}/{pod}..."):
        result = waiter.wait(namespace, pod)

    if result.ready:
        console.print(f"[green]✓ {namespace}/{pod} ready[/green] after {result.elapsed:.0f}s ({result.polls} polls)")
        return
    console.print(f"[yellow]{namespace}/{pod} not ready[/yellow] after {result.elapsed:.0f}s ({result.polls} polls)")
    raise typer.Exit(1)


def _fail(json_output: bool, message: str) -> None:
    if json_output:
        print(json.dumps({"error": message}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)
