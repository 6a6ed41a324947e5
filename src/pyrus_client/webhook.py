"""Webhook receiver.

Pyrus signs each webhook call with ``X-Pyrus-Sig``: the hex encoded
HMAC-SHA1 of the raw request body, keyed by the bot's security key. Verified
calls are decoded into :class:`Event` objects and put on a bounded queue.
Putting onto a full queue blocks the calling worker until a consumer takes
an event off; nothing is dropped.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import queue

from pydantic import ValidationError

from pyrus_client.errors import DecodeError, SignatureError
from pyrus_client.models.responses import Event

SIGNATURE_HEADER = "X-Pyrus-Sig"
DEFAULT_EVENT_BUFFER_SIZE = 100


def compute_signature(body: bytes, security_key: str) -> str:
    """Return the lowercase hex HMAC-SHA1 of ``body``."""

    return hmac.new(security_key.encode("utf-8"), body, hashlib.sha1).hexdigest()


def verify_signature(body: bytes, signature: str | None, security_key: str) -> bool:
    """Check a signature header against the body in constant time.

    The header is compared case-insensitively.
    """

    if not signature:
        return False
    expected = compute_signature(body, security_key)
    return hmac.compare_digest(expected.encode("ascii"), signature.strip().lower().encode("utf-8"))


def decode_event(body: bytes) -> Event:
    """Decode a verified webhook body."""

    try:
        return Event.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"Invalid webhook body: {e}") from e


class WebhookReceiver:
    """Verifies webhook calls and delivers their events.

    Consumers read from :attr:`events`, a :class:`queue.Queue` bounded by
    ``buffer_size``.
    """

    def __init__(
        self,
        security_key: str,
        *,
        buffer_size: int = DEFAULT_EVENT_BUFFER_SIZE,
        logger: logging.Logger | None = None,
    ) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be a positive integer")
        self._security_key = security_key
        self._logger = logger or logging.getLogger(__name__)
        self.events: queue.Queue[Event] = queue.Queue(maxsize=buffer_size)

    def receive(self, body: bytes, signature: str | None) -> Event:
        """Verify and decode one call, then put its event on the queue.

        Blocks while the queue is full.

        Raises:
            SignatureError: The signature does not match the body.
            DecodeError: The body is not a valid event.
        """

        if not verify_signature(body, signature, self._security_key):
            self._logger.error("Invalid webhook signature", extra={"body_size": len(body)})
            raise SignatureError("invalid signature")

        try:
            event = decode_event(body)
        except DecodeError as e:
            self._logger.error("Error while decoding a webhook body", extra={"error": str(e)})
            raise

        self.events.put(event)
        self._logger.debug(
            "Webhook event queued", extra={"event": event.event, "task_id": event.task_id}
        )
        return event

    def handle(self, body: bytes, signature: str | None) -> tuple[int, bytes]:
        """Framework-neutral handler returning ``(status_code, response_body)``."""

        try:
            self.receive(body, signature)
        except SignatureError as e:
            return 401, _error_body(e)
        except DecodeError as e:
            return 400, _error_body(e)
        return 200, b""


def _error_body(error: Exception) -> bytes:
    return json.dumps({"error": str(error)}).encode("utf-8")
