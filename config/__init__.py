"""Configuration management package for the Amazon Q gateway"""

from .loader import ConfigLoader, get_config_loader, parse_bool, resolve_oidc_verify
from .gateway_config import GatewayConfig

__all__ = [
    "ConfigLoader",
    "GatewayConfig",
    "get_config_loader",
    "parse_bool",
    "resolve_oidc_verify",
]
