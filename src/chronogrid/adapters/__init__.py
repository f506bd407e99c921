"""Adapters - I/O implementations of ports."""

from .api_client import CalendarApiAdapter, AuthenticationError
from .json_store import JsonFileStore, StoreFormatError

__all__ = [
    "CalendarApiAdapter",
    "AuthenticationError",
    "JsonFileStore",
    "StoreFormatError",
]
