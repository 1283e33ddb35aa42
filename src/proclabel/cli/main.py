"""
Command-line interface for proclabel.

Sub-commands:
- process (ps): label a single snapshot of the running processes
- monitor (m): refresh the labelled process table until interrupted
- identify (i): label one command line given as an argument
"""

import argparse
import asyncio
import logging
import sys
import time
import tomllib
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..collectors import collect_process_queries
from ..config import get_config, set_config_path
from ..config.validators import LOG_LEVELS
from ..identification import IdentificationEngine
from ..models import (
    AppConfig,
    IdentifiedProcess,
    IdentifierConfig,
    ProcessQuery,
    format_process_display,
)
from ..system import is_command_available
from ..validation import (
    ValidationError,
    handle_cli_error,
    validate_positive_float,
    validate_positive_integer,
)

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

TABLE_COLUMNS = ("PID", "PORT", "NAME", "CATEGORY", "PROJECT")

_CLEAR_SCREEN = "\033[2J\033[H"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proclabel",
        description="Label running processes with human-readable names.",
    )
    parser.add_argument("--config", type=Path, help="Path to an alternative config.toml.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override the log level from the configuration.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    process_parser = subparsers.add_parser(
        "process", aliases=["ps"], help="Label a snapshot of the running processes."
    )
    process_parser.add_argument(
        "--all", action="store_true", help="Include processes without a listening port."
    )
    process_parser.add_argument(
        "--stats", action="store_true", help="Print cache statistics after the table."
    )

    monitor_parser = subparsers.add_parser(
        "monitor", aliases=["m"], help="Refresh the labelled process table until Ctrl-C."
    )
    monitor_parser.add_argument(
        "--interval", type=float, help="Seconds between refreshes (default from config)."
    )
    monitor_parser.add_argument(
        "--iterations", type=int, help="Stop after this many refreshes."
    )
    monitor_parser.add_argument(
        "--all", action="store_true", help="Include processes without a listening port."
    )

    identify_parser = subparsers.add_parser(
        "identify", aliases=["i"], help="Label a single command line."
    )
    identify_parser.add_argument("cmdline", metavar="COMMAND", help="Full command line to label.")
    identify_parser.add_argument("--pid", type=int, default=0, help="Process id, if known.")
    identify_parser.add_argument("--port", type=int, help="Listening port of the process.")
    identify_parser.add_argument("--cwd", help="Working directory of the process.")

    return parser


def render_table(
    queries: Sequence[ProcessQuery], identified: Dict[int, IdentifiedProcess]
) -> str:
    """Format labelled processes as a fixed-width text table."""
    rows: List[Sequence[str]] = [TABLE_COLUMNS]
    for query in queries:
        label = identified.get(query.pid)
        if label is None:
            continue
        rows.append(
            (
                str(query.pid),
                str(query.port) if query.port else "-",
                label.display_name,
                label.category.value,
                label.project or "-",
            )
        )

    widths = [max(len(row[col]) for row in rows) for col in range(len(TABLE_COLUMNS))]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]
    return "\n".join(lines)


def render_stats(engine: IdentificationEngine) -> str:
    stats = engine.get_cache_stats()
    return "Cache: " + ", ".join(f"{name}={count}" for name, count in stats.items())


def report_missing_tools(config: IdentifierConfig) -> None:
    """Tell the user which context sources are unavailable up front."""
    for tool in (config.lsof_command, config.docker_command):
        if not is_command_available(tool):
            logger.info(f"'{tool}' not found in PATH; labels will carry less context")


async def run_process(args: argparse.Namespace, app_config: AppConfig) -> None:
    listening_only = app_config.monitor.listening_only and not args.all
    report_missing_tools(app_config.identifier)
    engine = IdentificationEngine(app_config.identifier)

    queries = await asyncio.to_thread(collect_process_queries, listening_only)
    identified = await engine.identify_batch(queries)

    print(render_table(queries, identified))
    if args.stats:
        print()
        print(render_stats(engine))


async def run_monitor(args: argparse.Namespace, app_config: AppConfig) -> None:
    interval = app_config.monitor.refresh_interval_seconds
    if args.interval is not None:
        interval = validate_positive_float(
            args.interval, min_value=0.5, max_value=300.0, field_name="--interval"
        )
    iterations: Optional[int] = None
    if args.iterations is not None:
        iterations = validate_positive_integer(args.iterations, field_name="--iterations")

    listening_only = app_config.monitor.listening_only and not args.all
    report_missing_tools(app_config.identifier)
    # One engine for the whole loop so labels stay cached across refreshes.
    engine = IdentificationEngine(app_config.identifier)
    interactive = sys.stdout.isatty()

    logger.info(f"Monitoring processes every {interval}s")
    tick = 0
    while iterations is None or tick < iterations:
        started = time.monotonic()
        queries = await asyncio.to_thread(collect_process_queries, listening_only)
        identified = await engine.identify_batch(queries)

        if interactive:
            print(_CLEAR_SCREEN, end="")
        print(f"proclabel monitor - {time.strftime('%H:%M:%S')} - {len(queries)} process(es)")
        print(render_table(queries, identified))
        print(render_stats(engine))
        sys.stdout.flush()

        tick += 1
        if iterations is not None and tick >= iterations:
            break
        await asyncio.sleep(max(0.0, interval - (time.monotonic() - started)))


async def run_identify(args: argparse.Namespace, app_config: AppConfig) -> None:
    engine = IdentificationEngine(app_config.identifier)
    query = ProcessQuery(pid=args.pid, command=args.cmdline, port=args.port, cwd=args.cwd)
    identified = await engine.identify(query)

    print(f"name:      {identified.display_name}")
    print(f"label:     {format_process_display(identified, identified.port)}")
    print(f"category:  {identified.category.value}")
    print(f"project:   {identified.project or '-'}")
    if identified.port:
        print(f"port:      {identified.port}")
    if identified.container_info:
        print(f"container: {identified.container_info.name} ({identified.container_info.image})")


COMMANDS = {
    "process": run_process,
    "ps": run_process,
    "monitor": run_monitor,
    "m": run_monitor,
    "identify": run_identify,
    "i": run_identify,
}


def main_cli(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main command-line entry point.

    Loads the configuration, applies the log level and dispatches to the
    selected sub-command.

    Raises:
        SystemExit: On configuration or argument validation errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)

    try:
        app_config = get_config()
    except (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    log_level = args.log_level or app_config.monitor.log_level
    logging.getLogger().setLevel(getattr(logging, log_level))

    try:
        asyncio.run(COMMANDS[args.command](args, app_config))
    except ValidationError as e:
        handle_cli_error(error=e, context="argument validation", exit_code=1, logger=logger)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")


if __name__ == "__main__":
    main_cli()
