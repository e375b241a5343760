"""Networking utilities for resilient HTTP access."""

from .http import download_bytes, retry_session

__all__ = ["download_bytes", "retry_session"]
