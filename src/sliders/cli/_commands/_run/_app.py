# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""sliders run command - supervises workers on this host."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

from sliders.exceptions import PidFileError
from sliders.utils import create_supervisor_logger, open_log_output

from .._shared import (
    ExitCode,
    exit_with_error,
    load_config_or_exit,
    open_store,
    store_overrides,
)
from ._runner import run_supervisor

app = App(
    name="run",
    help="Keep this host's workers in sync with the desired state in Redis",
    help_on_error=True,
)


@app.default
def run(  # noqa: PLR0913
    *,
    config: Annotated[
        Path | None, Parameter(name="--config", help="Path to a TOML config file.")
    ] = None,
    max_children: Annotated[
        int | None, Parameter(help="Maximum number of concurrent workers.")
    ] = None,
    interval: Annotated[
        float | None, Parameter(help="Seconds between supervisor ticks.")
    ] = None,
    store_url: Annotated[str | None, Parameter(help="Redis connection URL.")] = None,
    namespace: Annotated[str | None, Parameter(help="Store key namespace.")] = None,
    hostname: Annotated[
        str | None, Parameter(help="Host name to read desired state for.")
    ] = None,
    task_file: Annotated[
        Path | None, Parameter(help="Task definition file passed to workers.")
    ] = None,
    pidfile: Annotated[
        Path | None, Parameter(help="Write the supervisor pid to this file.")
    ] = None,
    verbose: Annotated[
        int,
        Parameter(
            name=["--verbose", "-v"],
            count=True,
            help="Increase verbosity (-v basic, -vv verbose with timestamps).",
        ),
    ] = 0,
    quiet: Annotated[bool, Parameter(help="Disable all log output.")] = False,
) -> None:
    """Run the supervisor in the foreground.

    Signals: TERM/INT/QUIT shut down, HUP restarts all workers, USR1 kills
    all workers and pauses, USR2 pauses, CONT resumes.
    """
    verbosity: int | None = None
    if quiet:
        verbosity = 0
    elif verbose:
        verbosity = min(verbose, 2)

    overrides = store_overrides(
        hostname=hostname, store_url=store_url, namespace=namespace
    )
    overrides["supervisor"].update(
        {"max_children": max_children, "interval": interval, "pidfile": pidfile}
    )
    overrides["worker"] = {"task_file": task_file}
    overrides["logging"] = {"verbosity": verbosity}

    cfg = load_config_or_exit(config, overrides)
    store = open_store(cfg)

    with open_log_output(cfg.logging.file) as output:
        logger = create_supervisor_logger(
            cfg.logging.verbosity,
            log_format=cfg.logging.format.value,  # type: ignore[arg-type]
            output=output,
        )
        try:
            run_supervisor(cfg, store, logger=logger)
        except PidFileError as e:
            exit_with_error(str(e), ExitCode.LOAD_ERROR)
