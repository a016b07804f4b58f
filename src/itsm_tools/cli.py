"""CLI for the ITSM tools service.

With no subcommand it runs the line protocol on stdin/stdout, which is what
process-spawning clients expect.

Usage:
    itsm-tools                                   # Line protocol on stdio
    itsm-tools serve --log-dir ./logs            # Same, also logging to a file
    itsm-tools serve --timeout 5 --concurrent    # Per-line tasks, 5s per call
    itsm-tools mcp                               # MCP SDK server on stdio
    itsm-tools tools                             # Print tool schemas as JSON
    itsm-tools --config itsm.json serve          # Settings from a JSON file
"""

from __future__ import annotations

import json as json_mod
import logging
import os
import signal
import sys
from pathlib import Path
from types import FrameType

import anyio
import click

from itsm_tools import __version__
from itsm_tools.config import read_config
from itsm_tools.dispatcher import Dispatcher
from itsm_tools.logging import setup_logging
from itsm_tools.loop import LineLoop, serve_stdio
from itsm_tools.repository import TicketRepository
from itsm_tools.types.core import ServiceConfig

logger = logging.getLogger(__name__)


def _build_dispatcher(config: ServiceConfig) -> Dispatcher:
    return Dispatcher(TicketRepository(id_start=config["id_start"]), url_base=config["url_base"])


def _setup_logging(config: ServiceConfig, log_dir: Path | None) -> None:
    if log_dir is None and config.get("log_dir"):
        log_dir = Path(config["log_dir"])
    setup_logging(log_dir, level=config.get("log_level", "INFO"))


def _install_signal_handlers() -> None:
    def _shutdown(signum: int, frame: FrameType | None) -> None:
        logger.info("service_shutdown", extra={"args_data": {"signal": signal.Signals(signum).name}})
        # Responses are flushed per line and no state outlives the process;
        # a worker thread blocked on stdin must not hold up exit.
        os._exit(0)

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _shutdown)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="itsm-tools")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON config file (url_base, id_start, log_dir, log_level, timeout, concurrent)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """ITSM tools: Jira/ServiceNow/Zendesk ticket tools over line-delimited JSON."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = read_config(config_path)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@cli.command()
@click.option("--log-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Also write JSONL logs here")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="Per-call timeout in seconds")
@click.option("--concurrent/--sequential", default=None, help="Handle each line in its own task (default: sequential)")
@click.pass_context
def serve(ctx: click.Context, log_dir: Path | None, timeout: float | None, concurrent: bool | None) -> None:
    """Run the line protocol on stdin/stdout until stdin closes."""
    config: ServiceConfig = ctx.obj["config"]
    _setup_logging(config, log_dir)

    loop = LineLoop(
        _build_dispatcher(config),
        timeout=timeout if timeout is not None else config.get("timeout"),
        concurrent=concurrent if concurrent is not None else config.get("concurrent", False),
    )
    _install_signal_handlers()
    anyio.run(serve_stdio, loop)


@cli.command()
@click.option("--log-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Also write JSONL logs here")
@click.pass_context
def mcp(ctx: click.Context, log_dir: Path | None) -> None:
    """Serve the same tools through the MCP SDK on stdio."""
    from itsm_tools.mcp_server import run_stdio

    config: ServiceConfig = ctx.obj["config"]
    _setup_logging(config, log_dir)
    anyio.run(run_stdio, _build_dispatcher(config))


@cli.command()
@click.option("--names", "names_only", is_flag=True, help="Print tool names only")
@click.pass_context
def tools(ctx: click.Context, names_only: bool) -> None:
    """Print the registered tools and their input schemas."""
    dispatcher = _build_dispatcher(ctx.obj["config"])
    if names_only:
        for name in dispatcher.tool_names:
            click.echo(name)
        return
    payload = [t.model_dump(mode="json", exclude_none=True) for t in dispatcher.tools]
    click.echo(json_mod.dumps(payload, indent=2))
