# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review for correctness and security.

"""
Command-line interface for perftop.

This module contains the main entry point, command-line argument handling
and the interactive and batch display loops.
"""

import argparse
import contextlib
import logging
import os
import sys
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from perftop.attributes import AttributeStack
from perftop.config import LOG_LEVELS, load_config
from perftop.cpu_types import CpuTypeRegistry, parse_cpu_types
from perftop.fmt_output import StructuredOutput, fmt_cpu_types, fmt_time
from perftop.helpers import DEFAULT_SMT_FACTOR, calculate_smt_util
from perftop.input_keys import read_key, terminal_cbreak_mode
from perftop.screen import ScreenBuffer
from perftop.ui_render import (
    HIDE_CURSOR,
    get_terminal_size,
    prepare_terminal_for_exit,
    render_display,
    reset_render_cache,
)
from perftop.view import ROWS_RESERVED_TOP, clamp_offset, compute_scroll_bounds, render_frame

logger = logging.getLogger(__name__)


_LOG_LEVEL_VALUES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _configure_logging(log_level: str, log_file: Optional[str]) -> None:
    """Configure logging handlers for CLI execution."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(os.path.expanduser(log_file), encoding="utf-8"))
    logging.basicConfig(
        level=_LOG_LEVEL_VALUES.get(str(log_level).upper(), logging.INFO),
        format="%(message)s",
        handlers=handlers,
        force=True,
    )


# Hardcoded defaults for config-overridable fields.
# Applied after config merging for any field still set to None.
_HARDCODED_DEFAULTS: Dict[str, Any] = {
    "smt_factor": DEFAULT_SMT_FACTOR,
    "batch_mode": False,
    "delay": 2.0,
    "iterations": 0,
    "cpu_types": "",
    "format": "text",
    "log_level": "INFO",
}


def _apply_config_to_args(args: argparse.Namespace, config: Dict[str, Any]) -> None:
    """
    Overlay config file values onto a parsed argument namespace.

    Only fields that are still ``None`` (i.e. not explicitly set on the CLI)
    are updated.

    Args:
        args: Namespace returned by ``argparse.ArgumentParser.parse_args()``.
        config: Dictionary of values loaded from the config file.
    """
    for key, value in config.items():
        if hasattr(args, key) and getattr(args, key) is None:
            setattr(args, key, value)


def handle_options() -> argparse.Namespace:
    """Parse and validate command-line arguments."""
    parser = argparse.ArgumentParser(
        description="perftop - Show hypervisor performance rows in a scrollable full-screen view",
        epilog="Rows are read from --input (re-read on every refresh) or from standard input.",
    )
    parser.add_argument(
        "-f",
        "--input",
        type=str,
        help="File with one display row per line",
        required=False,
    )
    parser.add_argument(
        "-b",
        "--batch-mode",
        action="store_true",
        default=None,
        help="Print plain frames to stdout instead of running the full-screen display",
    )
    parser.add_argument(
        "-n",
        "--iterations",
        type=int,
        default=None,
        help="Number of refresh iterations (default: 0 for infinite)",
    )
    parser.add_argument(
        "-d",
        "--delay",
        type=float,
        default=None,
        help="Delay in seconds between refreshes (default: 2.0)",
    )
    parser.add_argument(
        "-s",
        "--system",
        type=str,
        default=None,
        help="System name shown in the headline",
    )
    parser.add_argument(
        "-t",
        "--cpu-types",
        type=str,
        default=None,
        help="CPU types with counts, e.g. IFL:4,CP:2",
    )
    parser.add_argument(
        "--smt-factor",
        type=float,
        default=None,
        help=f"SMT scaling factor for utilization (default: {DEFAULT_SMT_FACTOR})",
    )
    parser.add_argument(
        "--smt-util",
        type=int,
        nargs=4,
        default=None,
        metavar=("CORE_US", "THREAD_US", "MGM_US", "THREADS_PER_CORE"),
        help="Print the SMT-adjusted utilization in microseconds and exit",
    )
    parser.add_argument(
        "--format",
        type=str,
        default=None,
        choices=["text", "json"],
        help="Batch mode output format (default: text)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=list(LOG_LEVELS),
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional log file path for persistent logging",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        default=False,
        help="Skip loading ~/.perftop.conf config file",
    )

    args = parser.parse_args()

    # Load and apply config file unless --no-config was given
    if not args.no_config:
        try:
            config = load_config()
            _apply_config_to_args(args, config)
        except ValueError as exc:
            parser.error(str(exc))

    # Apply hardcoded defaults for any config-overridable field still at None
    for field, default in _HARDCODED_DEFAULTS.items():
        if getattr(args, field, None) is None:
            setattr(args, field, default)

    if args.delay <= 0:
        parser.error("--delay must be a positive number of seconds.")
    if args.iterations < 0:
        parser.error("--iterations must be a non-negative number (0 for infinite).")
    if args.smt_factor <= 0:
        parser.error("--smt-factor must be positive.")
    if args.format not in ("text", "json"):
        parser.error("--format must be 'text' or 'json'.")
    if args.log_level not in LOG_LEVELS:
        parser.error(f"--log-level must be one of: {', '.join(LOG_LEVELS)}.")
    try:
        parse_cpu_types(args.cpu_types)
    except ValueError as exc:
        parser.error(str(exc))
    return args


def read_rows_file(path: str) -> List[str]:
    """Read display rows from a file, one row per line."""
    with open(os.path.expanduser(path), "r", encoding="utf-8") as fh:
        return [line.rstrip("\r\n").expandtabs() for line in fh]


def _load_rows(args: argparse.Namespace) -> Optional[List[str]]:
    """Load the initial row list, or print an error and return None."""
    if args.input:
        try:
            return read_rows_file(args.input)
        except OSError as exc:
            print(f"Error: Cannot read input file '{args.input}': {exc}", file=sys.stderr)
            return None
    if sys.stdin.isatty():
        return []
    return [line.rstrip("\r\n").expandtabs() for line in sys.stdin]


def _build_header(args: argparse.Namespace, rows: List[str]) -> str:
    source = os.path.basename(args.input) if args.input else "stdin"
    return f"{source} ({len(rows)} rows)"


def _reload_rows(args: argparse.Namespace, rows: List[str]) -> List[str]:
    """Re-read the input file, keeping the previous rows when it cannot be read."""
    if not args.input:
        return rows
    try:
        return read_rows_file(args.input)
    except OSError as exc:
        logger.warning("Cannot re-read input file '%s': %s", args.input, exc)
        return rows


def build_batch_frame(
    args: argparse.Namespace,
    registry: CpuTypeRegistry,
    rows: List[str],
    now: Optional[datetime] = None,
) -> str:
    """Build one batch mode frame as plain text or JSON."""
    if now is None:
        now = datetime.now()
    if args.format == "json":
        out = StructuredOutput()
        fmt_time(out, now)
        fmt_cpu_types(out, registry)
        out.pair("rows", list(rows))
        return out.dumps()
    width = get_terminal_size(fallback=(80, 24)).columns
    screen = ScreenBuffer(ROWS_RESERVED_TOP + len(rows), width)
    attrs = AttributeStack(screen, batch_mode=True)
    render_frame(
        screen,
        attrs,
        rows,
        0,
        registry,
        header=_build_header(args, rows),
        system_name=args.system,
        now=now,
        with_scrollbar=False,
    )
    return "\n".join(line.rstrip() for line in screen.text_lines())


def run_batch(args: argparse.Namespace, registry: CpuTypeRegistry, rows: List[str]) -> None:
    """Print frames to stdout until the iteration limit is reached."""
    iteration = 0
    try:
        while True:
            print(build_batch_frame(args, registry, rows))
            sys.stdout.flush()
            iteration += 1
            if args.iterations and iteration >= args.iterations:
                break
            time.sleep(args.delay)
            rows = _reload_rows(args, rows)
    except KeyboardInterrupt:
        logger.debug("Batch output interrupted after %d iterations", iteration)


def _handle_user_input(key: str, state: Dict[str, Any]) -> None:
    """Process one keyboard input event."""
    page = max(1, state["visible_rows"] - 1)
    if key in ("q", "Q"):
        state["running"] = False
        return
    if key in ("arrow_up", "k"):
        state["row_start"] -= 1
    elif key in ("arrow_down", "j"):
        state["row_start"] += 1
    elif key == "page_up":
        state["row_start"] -= page
    elif key in ("page_down", " "):
        state["row_start"] += page
    elif key == "g":
        state["row_start"] = 0
    elif key == "G":
        state["row_start"] = state["max_offset"]
    elif key == "t":
        state["registry"].cycle_selection()
    else:
        logger.debug("Ignoring key %r", key)
        return
    state["row_start"] = clamp_offset(state["row_start"], state["max_offset"])
    state["force_render"] = True


def _render_interactive_frame(args: argparse.Namespace, state: Dict[str, Any]) -> None:
    """Render a frame when a refresh is due or the user changed the view."""
    now = time.time()
    refresh_due = (now - state["last_refresh"]) >= args.delay
    if not (refresh_due or state["force_render"]):
        return
    if refresh_due:
        state["rows"] = _reload_rows(args, state["rows"])
        state["last_refresh"] = now
        state["iterations_done"] += 1

    term_size = get_terminal_size(fallback=(80, 24))
    screen: ScreenBuffer = state["screen"]
    if (screen.rows, screen.columns) != (term_size.lines, term_size.columns):
        screen.resize(term_size.lines, term_size.columns)
        reset_render_cache()

    rows = state["rows"]
    state["max_offset"], state["visible_rows"] = compute_scroll_bounds(len(rows), screen.rows)
    state["row_start"] = clamp_offset(state["row_start"], state["max_offset"])
    render_frame(
        screen,
        state["attrs"],
        rows,
        state["row_start"],
        state["registry"],
        header=_build_header(args, rows),
        system_name=args.system,
    )
    render_display(screen.render_lines())
    state["force_render"] = False


def run_interactive(args: argparse.Namespace, registry: CpuTypeRegistry, rows: List[str]) -> None:
    """Run the full-screen display until the user quits or the iterations are done."""
    term_size = get_terminal_size(fallback=(80, 24))
    screen = ScreenBuffer(term_size.lines, term_size.columns)
    state: Dict[str, Any] = {
        "screen": screen,
        "attrs": AttributeStack(screen),
        "registry": registry,
        "rows": rows,
        "row_start": 0,
        "max_offset": 0,
        "visible_rows": 0,
        "running": True,
        "force_render": True,
        "last_refresh": 0.0,
        "iterations_done": 0,
    }

    keyboard = contextlib.nullcontext(False)
    if sys.stdin.isatty():
        keyboard = terminal_cbreak_mode(sys.stdin.fileno())
    else:
        logger.warning("Standard input is not a terminal; keyboard navigation is disabled.")

    reset_render_cache()
    if sys.stdout.isatty():
        sys.stdout.write(HIDE_CURSOR)
    try:
        with keyboard:
            while state["running"]:
                key = read_key()
                if key:
                    _handle_user_input(key, state)
                _render_interactive_frame(args, state)
                if args.iterations and state["iterations_done"] >= args.iterations:
                    break
                time.sleep(0.05)
    except KeyboardInterrupt:
        state["running"] = False
    finally:
        prepare_terminal_for_exit()


def run(args: argparse.Namespace) -> None:
    """Run perftop with parsed arguments."""
    _configure_logging(getattr(args, "log_level", "INFO"), getattr(args, "log_file", None))
    if args.smt_util is not None:
        core_us, thread_us, mgm_us, threads_per_core = args.smt_util
        print(calculate_smt_util(core_us, thread_us, mgm_us, threads_per_core, args.smt_factor))
        return
    registry = parse_cpu_types(args.cpu_types)
    rows = _load_rows(args)
    if rows is None:
        sys.exit(1)
    logger.debug("Loaded %d rows", len(rows))
    if args.batch_mode:
        run_batch(args, registry, rows)
    else:
        run_interactive(args, registry, rows)


def main() -> None:
    """Main entrypoint for the CLI - parses arguments and runs the application."""
    args = handle_options()
    run(args)
