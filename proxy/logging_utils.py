"""
Logging setup and request/response tracing helpers.
"""
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEBUG_LOG_FILE = "proxy_debug.log"
SENSITIVE_HEADERS = ("authorization", "x-api-key", "api-key")


def configure_logging(level: str = "info", debug: bool = False, log_file: Optional[str] = None) -> Optional[str]:
    """Install the gateway's log format on the root logger

    Debug mode lowers the level to DEBUG and appends to ``proxy_debug.log``
    (or ``log_file``). Returns the path of the debug log file, if any.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if not debug:
        return None

    log_path = os.path.abspath(log_file or DEBUG_LOG_FILE)
    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logger.info(f"Debug logging enabled - appending to {log_path}")
    return log_path


def truncate(text: str, max_length: int) -> str:
    if max_length <= 0 or len(text) <= max_length:
        return text
    return f"{text[:max_length]}... [truncated {len(text) - max_length} chars]"


def redact_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {
        name: "[REDACTED]" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def log_request(
    request_id: str,
    request_data: Dict[str, Any],
    endpoint: str,
    headers: Optional[Dict[str, str]] = None,
    max_length: int = 500,
):
    """Log incoming request details with secrets redacted"""
    logger.info(f"[{request_id}] {endpoint} model={request_data.get('model', 'default')} "
                f"stream={request_data.get('stream')} messages={len(request_data.get('messages') or [])}")

    if headers:
        logger.debug(f"[{request_id}] Headers: {redact_headers(headers)}")

    try:
        body = json.dumps(request_data, ensure_ascii=False)
    except (TypeError, ValueError):
        body = repr(request_data)
    logger.debug(f"[{request_id}] Body: {truncate(body, max_length)}")


def log_response(request_id: str, text: str, elapsed_ms: int, streamed: bool, max_length: int = 500):
    """Log a summary of the reply sent back to the caller"""
    mode = "stream" if streamed else "batch"
    logger.info(f"[{request_id}] Completed {mode} reply in {elapsed_ms}ms ({len(text)} chars)")
    if text:
        logger.debug(f"[{request_id}] Reply: {truncate(text, max_length)}")
