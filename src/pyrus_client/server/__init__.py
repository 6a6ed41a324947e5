"""FastAPI server adapter for the webhook receiver.

Design intent:
- Keep signature checks and event decoding in `pyrus_client.webhook`
- Keep HTTP concerns (routing, raw body, thread offloading) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from pyrus_client.server.app import create_app
