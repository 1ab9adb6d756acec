# DriverKit - WebDriver Process Supervision
# Copyright (C) 2026 DriverKit Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import os


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="driverkit",
        description="DriverKit - WebDriver process supervision",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("DRIVERKIT_LOG_LEVEL", "INFO"),
        help="Log level (default: DRIVERKIT_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Override runtime data directory (default: ~/.driverkit or DRIVERKIT_DATA_DIR)",
    )
    sub = parser.add_subparsers(dest="command")

    # ── Run ───────────────────────────────────────────────
    p_run = sub.add_parser("run", help="Start a driver and supervise it until interrupted")
    p_run.add_argument("--config", default=None, metavar="PATH", help="JSON config file")
    p_run.add_argument("--host", default=None)
    p_run.add_argument("--port", type=int, default=None)
    p_run.add_argument("--driver-path", default=None, help="Driver script to run")
    p_run.add_argument(
        "--node-path", default=None,
        help="Interpreter used to run the driver script (default: this Python)",
    )
    p_run.add_argument(
        "--start-timeout", type=float, default=None,
        help="Seconds to wait for the status endpoint to report ready",
    )
    p_run.add_argument("--log-path", default=None, help="Driver log file (enables --verbose)")
    p_run.add_argument("--cwd", default=None, help="Working directory for the driver")
    p_run.set_defaults(func=_lazy_run)

    # ── Status ────────────────────────────────────────────
    p_status = sub.add_parser("status", help="Check a driver's status endpoint once")
    p_status.add_argument("--host", default="localhost")
    p_status.add_argument("--port", type=int, default=9515)
    p_status.add_argument("--timeout", type=float, default=5.0)
    p_status.set_defaults(func=_lazy_status)

    return parser


def cli_main(argv: list[str] | None = None) -> None:
    from dotenv import load_dotenv

    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    # Apply --data-dir override before any command
    if args.data_dir:
        os.environ["DRIVERKIT_DATA_DIR"] = args.data_dir

    from driverkit.logging_config import setup_logging
    from driverkit.paths import get_log_dir

    setup_logging(level=args.log_level, log_dir=get_log_dir())

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


# ── Lazy import wrappers ──────────────────────────────────


def _lazy_run(args: argparse.Namespace) -> None:
    from cli.commands.driver import cmd_run

    cmd_run(args)


def _lazy_status(args: argparse.Namespace) -> None:
    from cli.commands.driver import cmd_status

    cmd_status(args)
