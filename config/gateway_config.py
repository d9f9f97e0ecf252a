"""Immutable configuration value handed to every gateway component"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GatewayConfig:
    amazonq_endpoint: str = "https://codewhisperer.us-east-1.amazonaws.com"
    oidc_endpoint: str = "https://oidc.us-east-1.amazonaws.com"
    oidc_verify: bool | str = True

    default_model: str = "claude-sonnet-4.5"
    anthropic_version: str = "2023-06-01"

    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    request_timeout: float = 120.0

    token_refresh_margin_seconds: int = 300
    fallback_credentials: Optional[str] = None
    credentials_file: Optional[str] = None
    credentials_key: str = "amazonq-credentials"

    stream_chunk_size: int = 1024
    stream_queue_size: int = 64
    buffer_max_size: int = 10240
    buffer_overflow_policy: str = "truncate"

    log_requests: bool = True
    log_responses: bool = True
    log_token_refresh: bool = True
    max_log_length: int = 500

    @classmethod
    def from_settings(cls) -> "GatewayConfig":
        """Build the configuration from the environment-backed settings module"""
        import settings

        return cls(
            amazonq_endpoint=settings.AMAZONQ_ENDPOINT.rstrip("/"),
            oidc_endpoint=settings.SSO_OIDC_ENDPOINT.rstrip("/"),
            oidc_verify=settings.OIDC_VERIFY,
            default_model=settings.DEFAULT_MODEL,
            anthropic_version=settings.ANTHROPIC_VERSION,
            connect_timeout=settings.CONNECT_TIMEOUT,
            read_timeout=settings.READ_TIMEOUT,
            request_timeout=settings.REQUEST_TIMEOUT,
            token_refresh_margin_seconds=settings.TOKEN_REFRESH_MARGIN,
            fallback_credentials=settings.AMAZONQ_CREDENTIALS or None,
            credentials_file=settings.CREDENTIALS_FILE,
            credentials_key=settings.CREDENTIALS_KEY,
            stream_chunk_size=settings.STREAM_CHUNK_SIZE,
            stream_queue_size=settings.STREAM_QUEUE_SIZE,
            buffer_max_size=settings.BUFFER_MAX_SIZE,
            buffer_overflow_policy=settings.BUFFER_OVERFLOW_POLICY,
            log_requests=settings.LOG_REQUESTS,
            log_responses=settings.LOG_RESPONSES,
            log_token_refresh=settings.LOG_TOKEN_REFRESH,
            max_log_length=settings.MAX_LOG_LENGTH,
        )
