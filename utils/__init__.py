"""Shared utilities package for the Amazon Q gateway"""

from .storage import CredentialStore, FileCredentialStore, MemoryCredentialStore
from .single_flight import SingleFlight
from .time import format_timestamp, parse_timestamp, utc_now

__all__ = [
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "SingleFlight",
    "format_timestamp",
    "parse_timestamp",
    "utc_now",
]
