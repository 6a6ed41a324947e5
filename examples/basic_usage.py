#!/usr/bin/env python3
"""Programmatic usage example.

This demonstrates using the client components directly:

* load settings from `.env`
* create a task and comment on it
* serve the webhook receiver and print incoming events

Run with `python examples/basic_usage.py --serve` to start the webhook
server (requires uvicorn).
"""

from __future__ import annotations

import argparse
import logging
import threading
from typing import Sequence

from pyrus_client import (
    APIError,
    PyrusClient,
    PyrusSettings,
    TaskCommentRequest,
    TaskRequest,
    configure_logging,
)
from pyrus_client.server import create_app

logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pyrus client example.")
    parser.add_argument("--text", default="Hello from the API", help="Text of the new task")
    parser.add_argument("--serve", action="store_true", help="Serve the webhook receiver")
    parser.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def _print_events(client: PyrusClient, settings: PyrusSettings, port: int) -> None:
    import uvicorn

    receiver = client.webhook_receiver()
    app = create_app(settings, receiver=receiver)

    def consume() -> None:
        while True:
            event = receiver.events.get()
            print(f"{event.event}: task {event.task_id}")
            receiver.events.task_done()

    threading.Thread(target=consume, daemon=True).start()
    uvicorn.run(app, host="0.0.0.0", port=port)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = PyrusSettings()
    configure_logging(settings.log_level)

    with PyrusClient.from_settings(settings) as client:
        if args.serve:
            _print_events(client, settings, args.port)
            return 0

        try:
            created = client.create_task(TaskRequest(text=args.text))
            client.comment_task(created.task.id, TaskCommentRequest(text="Created by a script"))
        except APIError as e:
            logger.error("API call failed", extra={"code": str(e.code), "error": e.description})
            return 1

        print(f"Created task #{created.task.id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
