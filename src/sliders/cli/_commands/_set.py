# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""sliders set command - declares the desired worker count for a queue."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

from sliders.exceptions import StoreError
from sliders.store import DesiredStateSource

from ._shared import (
    ExitCode,
    exit_with_error,
    get_console,
    load_config_or_exit,
    open_store,
    store_overrides,
)

app = App(
    name="set",
    help="Set the desired number of workers for a queue",
    help_on_error=True,
)


@app.default
def set_count(
    queue: Annotated[str, Parameter(help="Queue name.")],
    count: Annotated[int, Parameter(help="Desired workers; 0 removes the queue.")],
    /,
    *,
    config: Annotated[
        Path | None, Parameter(name="--config", help="Path to a TOML config file.")
    ] = None,
    hostname: Annotated[
        str | None, Parameter(help="Host whose desired state is changed.")
    ] = None,
    store_url: Annotated[str | None, Parameter(help="Redis connection URL.")] = None,
    namespace: Annotated[str | None, Parameter(help="Store key namespace.")] = None,
) -> None:
    """Declare how many workers a host should run for a queue.

    Running supervisors pick the change up at their next reconciliation.
    """
    if count < 0:
        exit_with_error(
            f"Count must be zero or positive, got {count}", ExitCode.VALIDATION_ERROR
        )

    cfg = load_config_or_exit(
        config,
        store_overrides(hostname=hostname, store_url=store_url, namespace=namespace),
    )
    store = open_store(cfg)
    host = cfg.supervisor.effective_hostname

    try:
        DesiredStateSource(store, host, namespace=cfg.store.namespace).set_count(
            queue, count
        )
    except StoreError as e:
        exit_with_error(str(e), ExitCode.STORE_ERROR)

    if count == 0:
        get_console().print(f"Removed {queue} from {host}")
    else:
        get_console().print(f"{host}: {queue} = {count}")
