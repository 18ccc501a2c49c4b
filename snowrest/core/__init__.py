"""Core utilities for the snowrest client."""

from snowrest.core.config import VERSION, Settings, settings
from snowrest.core.http_client import create_http_client
from snowrest.core.logging import get_logger, setup_logging

__all__ = [
    "VERSION",
    "Settings",
    "settings",
    "create_http_client",
    "get_logger",
    "setup_logging",
]
