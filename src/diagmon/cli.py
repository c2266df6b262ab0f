"""Command-line interface for diagmon.

Evaluates a statistics snapshot stored as JSON and prints the resulting
diagnostic reports.

Usage:
    diagmon check snapshot.json --module sensing --module perception
    diagmon check snapshot.json --format json
    diagmon watch snapshot.json --count 5
    diagmon rules --module sensing
"""

import argparse
import json
import logging
import sys
import threading
from pathlib import Path
from typing import Optional

from diagmon import __version__
from diagmon.config import settings
from diagmon.engine import load_snapshot
from diagmon.export import reports_to_frame
from diagmon.registry import RuleRegistry, build_registry
from diagmon.updater import DiagnosticUpdater

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser with all commands and arguments.
    """
    parser = argparse.ArgumentParser(
        prog="diagmon",
        description="diagmon: State monitor diagnostics engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  diagmon check snapshot.json --module sensing --module perception
  diagmon check snapshot.json --format table
  diagmon watch snapshot.json --format json
  diagmon rules

Module names default to DIAGMON_MODULE_NAMES when --module is not given.
watch ticks at DIAGMON_UPDATE_RATE [Hz] and re-reads the snapshot each tick.
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    module_help = "Module to register a topic status rule for (repeatable)"

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Evaluate all rules against a snapshot file",
        description="Classify topic and tf statistics into diagnostic reports",
    )
    check_parser.add_argument(
        "snapshot",
        type=Path,
        help="JSON snapshot file (topic_stats / tf_stats)",
    )
    check_parser.add_argument(
        "--module",
        dest="modules",
        action="append",
        default=None,
        help=module_help,
    )
    check_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json", "table"],
        default="text",
        help="Output format (default: text)",
    )

    # watch command
    watch_parser = subparsers.add_parser(
        "watch",
        help="Re-evaluate a snapshot file periodically",
        description="Reload the snapshot and publish a diagnostic bundle every tick",
    )
    watch_parser.add_argument(
        "snapshot",
        type=Path,
        help="JSON snapshot file, re-read on every tick",
    )
    watch_parser.add_argument(
        "--module",
        dest="modules",
        action="append",
        default=None,
        help=module_help,
    )
    watch_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format per tick (default: text; json prints one line per bundle)",
    )
    watch_parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Stop after this many ticks (default: run until interrupted)",
    )

    # rules command
    rules_parser = subparsers.add_parser(
        "rules",
        help="List the registered diagnostic rules",
    )
    rules_parser.add_argument(
        "--module",
        dest="modules",
        action="append",
        default=None,
        help=module_help,
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def _registry_from_args(args: argparse.Namespace) -> RuleRegistry:
    module_names = args.modules if args.modules is not None else settings.module_names
    return build_registry(module_names, hardware_id=settings.hardware_id)


def cmd_check(args: argparse.Namespace) -> int:
    """Execute the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        registry = _registry_from_args(args)
        snapshot = load_snapshot(args.snapshot)

        logger.info("Evaluating %d rules against %s", len(registry), args.snapshot)

        updater = DiagnosticUpdater(
            registry,
            node_name=settings.node_name,
            max_workers=settings.max_workers,
        )
        array = updater.update(snapshot)

        if args.format == "json":
            print(json.dumps(array.to_dict(), indent=2))
        elif args.format == "table":
            print(reports_to_frame(array.statuses).to_string(index=False))
        else:
            print(array.format_full())

        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error("Check failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_watch(args: argparse.Namespace, stop_event: Optional[threading.Event] = None) -> int:
    """Execute the watch command.

    Args:
        args: Parsed command-line arguments
        stop_event: Ends the loop when set (a fresh event if omitted)

    Returns:
        Exit code (0 for success, 130 when interrupted, 1 for failure)
    """
    if args.count is not None and args.count < 1:
        print(f"Error: --count must be >= 1, got {args.count}", file=sys.stderr)
        return 1

    def publish(array) -> None:
        if args.format == "json":
            print(json.dumps(array.to_dict()), flush=True)
        else:
            print(array.format_full(), flush=True)
            print(flush=True)

    try:
        registry = _registry_from_args(args)
        updater = DiagnosticUpdater(
            registry,
            node_name=settings.node_name,
            max_workers=settings.max_workers,
        )

        logger.info("Watching %s at %.2f Hz", args.snapshot, settings.update_rate)

        updater.run(
            lambda: load_snapshot(args.snapshot),
            publish,
            stop_event if stop_event is not None else threading.Event(),
            period=settings.update_period,
            max_ticks=args.count,
        )
        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.error("Watch failed: %s", e, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_rules(args: argparse.Namespace) -> int:
    """Execute the rules command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        registry = _registry_from_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Hardware ID: {registry.hardware_id}")
    for rule in registry:
        print(f"  {rule.name} (module: {rule.target})")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Execute the version command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    print(f"diagmon v{__version__}")
    print("State monitor diagnostics engine")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = create_parser()
    args = parser.parse_args(argv)

    # Route to command handler
    if args.command == "check":
        return cmd_check(args)
    elif args.command == "watch":
        return cmd_watch(args)
    elif args.command == "rules":
        return cmd_rules(args)
    elif args.command == "version":
        return cmd_version(args)
    else:
        # No command specified
        parser.print_help()
        return 0


def cli_entry() -> None:
    """Console script entry point for setuptools."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry()
