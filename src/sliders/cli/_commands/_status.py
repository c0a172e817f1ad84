# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""sliders status command - shows desired workers and registered hosts."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.table import Table

from sliders.exceptions import StoreError
from sliders.store import CapacityRegistry, DesiredStateSource

from ._shared import (
    ExitCode,
    exit_with_error,
    get_console,
    load_config_or_exit,
    open_store,
    store_overrides,
)

app = App(
    name="status",
    help="Show desired worker counts and registered hosts",
    help_on_error=True,
)


def desired_table(hostname: str, desired: dict[str, int]) -> Table:
    """Render a host's desired counts as a table with a total row."""
    table = Table(title=f"Desired workers on {hostname}")
    table.add_column("Queue")
    table.add_column("Workers", justify="right")
    for queue, count in sorted(desired.items()):
        table.add_row(queue, str(count))
    table.add_section()
    table.add_row("total", str(sum(desired.values())))
    return table


def hosts_table(hosts: dict[str, int], current: str) -> Table:
    """Render registered hosts and their capacities."""
    table = Table(title="Registered hosts")
    table.add_column("Host")
    table.add_column("Max children", justify="right")
    for host, capacity in sorted(hosts.items()):
        label = f"{host} (this host)" if host == current else host
        table.add_row(label, str(capacity))
    return table


@app.default
def status(
    *,
    config: Annotated[
        Path | None, Parameter(name="--config", help="Path to a TOML config file.")
    ] = None,
    hostname: Annotated[
        str | None, Parameter(help="Host to show desired state for.")
    ] = None,
    store_url: Annotated[str | None, Parameter(help="Redis connection URL.")] = None,
    namespace: Annotated[str | None, Parameter(help="Store key namespace.")] = None,
) -> None:
    """Show the desired worker counts for a host and all registered hosts."""
    cfg = load_config_or_exit(
        config,
        store_overrides(hostname=hostname, store_url=store_url, namespace=namespace),
    )
    store = open_store(cfg)
    host = cfg.supervisor.effective_hostname
    namespace = cfg.store.namespace

    try:
        desired = DesiredStateSource(store, host, namespace=namespace).read()
        hosts = CapacityRegistry(
            store, host, cfg.supervisor.max_children, namespace=namespace
        ).hosts()
    except StoreError as e:
        exit_with_error(str(e), ExitCode.STORE_ERROR)

    console = get_console()
    if desired:
        console.print(desired_table(host, desired))
    else:
        console.print(f"No desired workers declared for {host}")
    if hosts:
        console.print(hosts_table(hosts, host))
    else:
        console.print("No hosts registered")
