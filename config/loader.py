"""Configuration loader for the Amazon Q gateway

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. .env file
3. Hardcoded defaults (lowest priority)
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


def parse_bool(value: Any) -> Optional[bool]:
    """Parse a loose boolean flag, returning None when it is not recognized"""
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return None


class ConfigLoader:
    """Handles loading configuration from various sources"""

    def __init__(self, env_path: Optional[str] = None):
        """Initialize the config loader

        Args:
            env_path: Optional path to .env file.
                     Defaults to '.env' in the current directory.
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        self._load_env_file()

    def _load_env_file(self):
        """Load environment variables from .env file if it exists"""
        if self.env_path.exists():
            load_dotenv(dotenv_path=self.env_path)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f".env file not found at {self.env_path}, using environment variables and defaults only")

    def get(self, env_var: str, default: Any) -> Any:
        """Get a configuration value with priority: env > default

        Args:
            env_var: Environment variable name to check
            default: Default value if not found in environment

        Returns:
            The configuration value from environment or default
        """
        env_value = os.getenv(env_var)
        if env_value is not None:
            if isinstance(default, bool):
                return env_value.lower() in TRUE_VALUES
            elif isinstance(default, int):
                try:
                    return int(env_value)
                except ValueError:
                    logger.warning(f"Failed to parse {env_var}={env_value} as int, using default: {default}")
                    return default
            elif isinstance(default, float):
                try:
                    return float(env_value)
                except ValueError:
                    logger.warning(f"Failed to parse {env_var}={env_value} as float, using default: {default}")
                    return default
            return env_value

        if isinstance(default, str) and default.startswith("~/"):
            return str(Path(default).expanduser())
        return default

    def get_first(self, *env_vars: str) -> Optional[str]:
        """Return the first non-empty value among several environment variables"""
        for env_var in env_vars:
            value = os.getenv(env_var)
            if value:
                return value
        return None


_config_loader = None


def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def resolve_oidc_verify(loader: ConfigLoader) -> bool | str:
    """Decide how TLS verification is done for the OIDC token endpoint

    A CA bundle path wins, then an explicit disable flag, then an explicit
    verify flag. Verification is on otherwise.
    """
    ca_bundle = loader.get_first("AMAZONQ_CA_BUNDLE", "AWS_CA_BUNDLE", "REQUESTS_CA_BUNDLE")
    if ca_bundle:
        return ca_bundle

    disable = parse_bool(loader.get_first("DISABLE_AMAZONQ_SSL_VERIFY", "DISABLE_OIDC_SSL_VERIFY", "DISABLE_SSL_VERIFY"))
    if disable:
        logger.warning("SSL verification is disabled for OIDC token requests; only use this for debugging")
        return False

    verify = parse_bool(loader.get_first("AMAZONQ_SSL_VERIFY", "OIDC_SSL_VERIFY"))
    if verify is not None:
        return verify

    return True
