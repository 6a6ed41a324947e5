"""Core package initialization."""

from pyrus_client.core.config import PyrusSettings
from pyrus_client.core.logging import configure_logging

__all__ = [
    "PyrusSettings",
    "configure_logging",
]
