"""
Translation between the public chat schemas and the Amazon Q event stream.
"""
from .request_normalizer import extract_prompt
from .stream_preference import (
    STREAMING_CLIENT_HINTS,
    CLIENT_IDENTITY_HEADERS,
    RESPONSE_MODE_ALIASES,
    normalize_stream_flag,
    resolve_stream_preference,
)
from .event_extractor import (
    CONTENT_MARKER,
    UpstreamBuffer,
    collect_reply_text,
    extract_json_object,
    iter_json_objects,
    parse_fragment,
)
from .response_builders import (
    ANTHROPIC_FORMAT,
    OPENAI_FORMAT,
    build_anthropic_message,
    build_openai_completion,
    format_sse,
)
from .stream_session import SessionState, StreamSession

__all__ = [
    "extract_prompt",
    "STREAMING_CLIENT_HINTS",
    "CLIENT_IDENTITY_HEADERS",
    "RESPONSE_MODE_ALIASES",
    "normalize_stream_flag",
    "resolve_stream_preference",
    "CONTENT_MARKER",
    "UpstreamBuffer",
    "collect_reply_text",
    "extract_json_object",
    "iter_json_objects",
    "parse_fragment",
    "ANTHROPIC_FORMAT",
    "OPENAI_FORMAT",
    "build_anthropic_message",
    "build_openai_completion",
    "format_sse",
    "SessionState",
    "StreamSession",
]
