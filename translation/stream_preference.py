"""
Streaming vs batch decision for incoming chat requests.
"""
import logging
from typing import Any, Mapping, Optional, Tuple

from .response_builders import ANTHROPIC_FORMAT

logger = logging.getLogger(__name__)

TRUE_STREAM_TOKENS = frozenset({"true", "1", "yes", "on", "sse", "stream", "delta"})
FALSE_STREAM_TOKENS = frozenset({"false", "0", "no", "off"})

# Sub-fields checked, in order, when ``stream`` is an object
NESTED_STREAM_KEYS: Tuple[str, ...] = ("type", "mode", "format", "value", "enabled")

# Body fields some clients use instead of ``stream``
RESPONSE_MODE_ALIASES: Tuple[str, ...] = ("response_mode", "responseMode", "response_format", "responseFormat")

CLIENT_IDENTITY_HEADERS: Tuple[str, ...] = ("x-client-app", "x-app-name", "x-request-client")

# Known clients that expect SSE even when they do not ask for it
STREAMING_CLIENT_HINTS: Tuple[str, ...] = (
    "claudecode",
    "claude code",
    "claude-code",
    "anthropic/ide",
    "anthropic-ide",
    "anthropic-client",
    "amazon q developer",
    "amazonq-ide",
)


def normalize_stream_flag(value: Any) -> Optional[bool]:
    """
    Interpret a stream indicator.

    Returns True/False for a recognizable signal and None when the value is
    absent or ambiguous.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in TRUE_STREAM_TOKENS:
            return True
        if token in FALSE_STREAM_TOKENS:
            return False
        return None
    if isinstance(value, Mapping):
        for key in NESTED_STREAM_KEYS:
            if key in value:
                normalized = normalize_stream_flag(value[key])
                if normalized is not None:
                    return normalized
        return None
    return bool(value)


def _client_identity(headers: Mapping[str, str]) -> str:
    user_agent = headers.get("user-agent", "")
    client_name = ""
    for header in CLIENT_IDENTITY_HEADERS:
        if headers.get(header):
            client_name = headers[header]
            break
    return f"{user_agent} {client_name}".strip().lower()


def matches_streaming_client(headers: Mapping[str, str]) -> Optional[str]:
    """Return the first streaming-client hint found in the identity headers"""
    haystack = _client_identity(headers)
    if not haystack:
        return None
    for hint in STREAMING_CLIENT_HINTS:
        if hint in haystack:
            return hint
    return None


def resolve_stream_preference(
    body: Mapping[str, Any],
    format_type: str,
    headers: Optional[Mapping[str, str]] = None,
    query: Optional[Mapping[str, str]] = None,
) -> bool:
    """
    Decide whether to answer with an event stream.

    The first non-ambiguous signal wins: body ``stream``, ``stream`` query
    parameter, response-mode alias fields, the schema default (Anthropic streams,
    OpenAI streams when ``Accept`` asks for ``text/event-stream``), then a
    known-streaming-client match on the identity headers. Defaults to batch.

    Args:
        body: Parsed request body
        format_type: ``"openai"`` or ``"anthropic"``
        headers: Request headers (any casing)
        query: Query parameters
    """
    lowered = {str(k).lower(): str(v) for k, v in (headers or {}).items()}
    query = query or {}

    stream = normalize_stream_flag(body.get("stream"))
    if stream is not None:
        return stream

    stream = normalize_stream_flag(query.get("stream"))
    if stream is not None:
        return stream

    for key in RESPONSE_MODE_ALIASES:
        stream = normalize_stream_flag(body.get(key))
        if stream is not None:
            return stream

    if format_type == ANTHROPIC_FORMAT:
        return True
    if "text/event-stream" in lowered.get("accept", "").lower():
        return True

    hint = matches_streaming_client(lowered)
    if hint:
        logger.debug(f"Client identity matched streaming hint '{hint}', enabling stream mode")
        return True

    return False
