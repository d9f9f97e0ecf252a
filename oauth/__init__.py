"""Credential and bearer token management for the Amazon Q upstream"""

from .credentials import CREDENTIAL_FIELD_ALIASES, normalize_credentials, resolve_field
from .token_refresh import exchange_refresh_token
from .token_manager import TokenLifecycleManager

__all__ = [
    "CREDENTIAL_FIELD_ALIASES",
    "TokenLifecycleManager",
    "exchange_refresh_token",
    "normalize_credentials",
    "resolve_field",
]
