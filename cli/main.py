"""Main CLI entry point for casenote."""

import argparse
import sys
from pathlib import Path
from typing import Optional

from casenote.config.config_loader import ConfigLoader
from casenote.services.case_notes import CaseNoteService
from casenote.storage.database import DatabaseConnection, KeyValueStore
from casenote.storage.environment import Environment
from casenote.utils.logging import configure_logging


def read_input(source: str) -> str:
    """Read pasted text from a file path, or stdin for "-"."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def build_service(config_path: Optional[Path] = None) -> tuple[CaseNoteService, DatabaseConnection]:
    """
    Load configuration and wire the service to the sqlite store.

    Args:
        config_path: Optional custom config file path

    Returns:
        Tuple of (service, open database connection)
    """
    config_loader = ConfigLoader(config_path)
    config = config_loader.load_app_config()
    configure_logging(config.logging.level, config.logging.format)

    db = DatabaseConnection(config.storage.get_database_path())
    db.execute_schema()
    env = Environment.from_store(KeyValueStore(db))

    return CaseNoteService(env, config), db


def cmd_notes(args) -> int:
    """Extract and consolidate points of contact."""
    service, db = build_service(args.config)
    try:
        result = service.process(read_input(args.source), selected_dates=args.date)
    finally:
        db.close()

    print(result.rendered)
    if result.is_pending:
        print("\nAdd a line such as [Last date in response: January 6, 2025] to finish the log.")
        return 2
    return 0


def cmd_threads(args) -> int:
    """Group the messages of a pasted thread."""
    service, db = build_service(args.config)
    try:
        threads = service.group_threads(read_input(args.source), merge=args.merge)
    finally:
        db.close()

    if not threads:
        print("No messages found.")
        return 1

    print(service.render_threads(threads))
    print(f"\n{sum(len(t.messages) for t in threads)} messages in {len(threads)} threads")
    return 0


def cmd_last(args) -> int:
    """Show the last saved output."""
    service, db = build_service(args.config)
    try:
        last_input, last_output = service.restore_last()
    finally:
        db.close()

    if last_output is None:
        print("Nothing saved yet.")
        return 1

    print(last_input if args.input else last_output)
    return 0


def cmd_init_db(args) -> int:
    """Initialize database command."""
    config = ConfigLoader(args.config).load_app_config()
    db = DatabaseConnection(config.storage.get_database_path())
    db.execute_schema()
    db.close()

    print(f"Database initialized at: {config.storage.get_database_path()}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="casenote - case notes from pasted email threads")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    notes_parser = subparsers.add_parser("notes", help="Build the point-of-contact log")
    notes_parser.add_argument("source", help="Text file to read, or - for stdin")
    notes_parser.add_argument(
        "--date",
        action="append",
        help="Only include this date in the note (repeatable, e.g. \"January 6, 2025\")",
    )
    notes_parser.add_argument("--config", type=Path, help="Custom config file path")

    threads_parser = subparsers.add_parser("threads", help="Group messages into threads")
    threads_parser.add_argument("source", help="Text file to read, or - for stdin")
    threads_parser.add_argument("--merge", action="store_true", help="Run the similar-thread merge pass")
    threads_parser.add_argument("--config", type=Path, help="Custom config file path")

    last_parser = subparsers.add_parser("last", help="Show the last saved output")
    last_parser.add_argument("--input", action="store_true", help="Show the last input instead")
    last_parser.add_argument("--config", type=Path, help="Custom config file path")

    init_parser = subparsers.add_parser("init-db", help="Initialize database")
    init_parser.add_argument("--config", type=Path, help="Custom config file path")

    args = parser.parse_args(argv)

    commands = {
        "notes": cmd_notes,
        "threads": cmd_threads,
        "last": cmd_last,
        "init-db": cmd_init_db,
    }
    if args.command is None:
        parser.print_help()
        return 1

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
