"""Command-line entry point for the vasu toolkit.

``vasu http``, ``vasu size`` and ``vasu count`` share one parser, the YAML
config loader and the logging setup. Installed as the ``vasu``
``console_scripts`` entry and supports shell auto-completion via
``argcomplete``.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import argcomplete
from rich.console import Console
from rich.table import Table

from common.base.fs import human_size
from common.base.logging import get_logger, normalize_use_rich, setup_logging
from common.shared.loader import default_config_path, load_task_config
from file.counter import count_by_extension, totals
from file.sizer import largest_entries
from serve.errors import BindError
from serve.server import ServerConfig, serve_directory

log = get_logger(__name__)
console = Console()

Handler = Callable[[argparse.Namespace, Dict[str, Any]], int]

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# ----------------------------------------------------------------------
# CONFIG + LOGGING
# ----------------------------------------------------------------------

def _resolve_config_path(explicit: Optional[str]) -> Optional[Path]:
    if explicit:
        return Path(explicit).expanduser().resolve()
    return default_config_path()


def _load_task_payload(task: str, config_arg: Optional[str]) -> tuple[Dict[str, Any], Dict[str, Any]]:
    config_path = _resolve_config_path(config_arg)
    payload: Dict[str, Any] = dict(load_task_config(task, config_path))
    logging_cfg = payload.pop("__logging__", {}) or {}
    return payload, logging_cfg


def _configure_logging(logging_cfg: Dict[str, Any], level_override: Optional[str] = None) -> None:
    setup_logging(
        level=level_override or logging_cfg.get("level"),
        use_rich=normalize_use_rich(logging_cfg.get("use_rich")),
        log_dir=logging_cfg.get("log_dir"),
        file_prefix=logging_cfg.get("file_prefix"),
    )


def _pick(cli_value: Any, cfg: Dict[str, Any], key: str) -> Any:
    return cli_value if cli_value is not None else cfg.get(key)


# ----------------------------------------------------------------------
# COMMANDS
# ----------------------------------------------------------------------

def cmd_http(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    config = ServerConfig.from_settings(
        _pick(args.directory, cfg, "directory"),
        _pick(args.port, cfg, "port"),
        host=_pick(args.host, cfg, "host"),
        backlog=cfg["backlog"],
        workers=_pick(args.workers, cfg, "workers"),
        read_timeout=_pick(args.read_timeout, cfg, "read_timeout"),
    )
    serve_directory(config)
    return EXIT_OK


def cmd_size(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    directory = Path(_pick(args.directory, cfg, "directory"))
    entries = largest_entries(directory, _pick(args.top, cfg, "top"))

    table = Table(show_edge=False, box=None, pad_edge=False)
    table.add_column("SIZE", style="yellow", no_wrap=True)
    table.add_column("ITEM")
    for entry in entries:
        icon = "📁" if entry.is_dir else "📄"
        table.add_row(human_size(entry.size), f"{icon}  {entry.name}")
    console.print(table)
    return EXIT_OK


def cmd_count(args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    directory = Path(_pick(args.directory, cfg, "directory"))
    extensions: List[str] = args.ext if args.ext else cfg.get("extensions", [])
    rows = count_by_extension(directory, extensions)
    if not rows:
        console.print("No files found.", style="yellow")
        return EXIT_OK

    table = Table(show_edge=False, box=None, pad_edge=False)
    table.add_column("EXTENSION", style="cyan")
    table.add_column("FILES", style="yellow", justify="right")
    table.add_column("LINES", justify="right")
    for row in rows:
        table.add_row(row.extension, str(row.files), str(row.lines))
    total = totals(rows)
    table.add_row(total.extension, str(total.files), str(total.lines), style="bold")
    console.print(table)
    return EXIT_OK


# ----------------------------------------------------------------------
# PARSER
# ----------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", "-c", help="Path to configuration YAML (defaults to the bundled config).")
    common.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="Override the configured logging verbosity.",
    )

    parser = argparse.ArgumentParser(prog="vasu", description="Personal filesystem toolkit.")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    http = subparsers.add_parser("http", parents=[common], help="Spin up a quick HTTP file server.")
    http.add_argument("port", nargs="?", type=int, help="Port number (default: 8080).")
    http.add_argument("directory", nargs="?", help="Directory to serve (default: current directory).")
    http.add_argument("--host", help="Address to listen on (default: 0.0.0.0).")
    http.add_argument("--workers", type=int, help="Serve connections on a pool of N threads (default: 1).")
    http.add_argument(
        "--read-timeout",
        type=float,
        help="Drop clients that do not send a request line within this many seconds.",
    )
    http.set_defaults(handler=cmd_http)

    size = subparsers.add_parser("size", parents=[common], help="Show the largest entries in a directory.")
    size.add_argument("directory", nargs="?", help="Directory to inspect (default: current directory).")
    size.add_argument("--top", "-n", type=int, help="Number of entries to show (default: 20).")
    size.set_defaults(handler=cmd_size)

    count = subparsers.add_parser("count", parents=[common], help="Count files and lines per extension.")
    count.add_argument("directory", nargs="?", help="Directory to walk (default: current directory).")
    count.add_argument(
        "--ext",
        "-e",
        action="extend",
        nargs="+",
        help="Only count these extensions (e.g. --ext py rs).",
    )
    count.set_defaults(handler=cmd_count)

    return parser


# ----------------------------------------------------------------------
# ENTRY POINT
# ----------------------------------------------------------------------

def run_command(handler: Handler, args: argparse.Namespace, cfg: Dict[str, Any]) -> int:
    """Run ``handler`` and map failures to exit codes."""
    try:
        return handler(args, cfg)
    except KeyboardInterrupt:
        log.warning("⚠️ Operation cancelled by user.")
        return EXIT_INTERRUPTED
    except BindError as exc:
        log.error("❌ %s", exc)
        return EXIT_FAILURE
    except (NotADirectoryError, ValueError) as exc:
        log.error("❌ %s", exc)
        return EXIT_CONFIG
    except Exception as exc:
        log.error("❌ Unexpected error: %s", exc, exc_info=True)
        return EXIT_FAILURE


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(list(argv) if argv is not None else None)

    handler: Optional[Handler] = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return EXIT_OK

    try:
        cfg, logging_cfg = _load_task_payload(args.command, args.config)
    except (FileNotFoundError, ValueError) as exc:
        setup_logging(args.log_level)
        log.error("❌ Invalid configuration: %s", exc)
        return EXIT_CONFIG

    _configure_logging(logging_cfg, args.log_level)
    log.debug("Arguments: %s", args)
    return run_command(handler, args, cfg)
