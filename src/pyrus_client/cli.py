"""Command line entrypoint.

Reads credentials from the environment (or `.env`) and prints API responses
as JSON.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import requests
from pydantic import ValidationError

from pyrus_client import __version__
from pyrus_client.client import PyrusClient
from pyrus_client.core.config import PyrusSettings
from pyrus_client.core.logging import configure_logging
from pyrus_client.errors import PyrusError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pyrus", description="Pyrus API client")
    parser.add_argument("--version", action="version", version=f"pyrus-client {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("profile", help="Show the profile of the configured account")
    subparsers.add_parser("forms", help="List available forms")
    subparsers.add_parser("lists", help="List task lists")

    task = subparsers.add_parser("task", help="Show a task with its comments")
    task.add_argument("task_id", type=int)

    inbox = subparsers.add_parser("inbox", help="Show inbox tasks")
    inbox.add_argument("--count", type=int, default=0, help="Maximum number of tasks")

    download = subparsers.add_parser("download", help="Download a file")
    download.add_argument("file_id", type=int)
    download.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory to save the file into (default: current directory)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = PyrusSettings()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    with PyrusClient.from_settings(settings) as client:
        try:
            if args.command == "profile":
                print(client.profile().model_dump_json(indent=2))
            elif args.command == "forms":
                print(client.forms().model_dump_json(indent=2, by_alias=True))
            elif args.command == "lists":
                print(client.lists().model_dump_json(indent=2))
            elif args.command == "task":
                print(client.task(args.task_id).model_dump_json(indent=2, by_alias=True))
            elif args.command == "inbox":
                print(client.inbox(args.count).model_dump_json(indent=2, by_alias=True))
            elif args.command == "download":
                downloaded = client.download_file(args.file_id)
                target = args.output_dir / Path(downloaded.filename).name
                target.write_bytes(downloaded.raw_file)
                logger.info("File saved", extra={"path": str(target)})
                print(f"Saved {target}")
        except (PyrusError, requests.RequestException) as e:
            logger.error("Command failed", extra={"command": args.command, "error": str(e)})
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
