"""
Request and response handlers for the proxy server.
"""
from .request_handler import PreparedChat, handle_chat_request, parse_json_body, prepare_chat_request
from .streaming_handler import collect_upstream_text, stream_upstream_events

__all__ = [
    'PreparedChat',
    'handle_chat_request',
    'parse_json_body',
    'prepare_chat_request',
    'collect_upstream_text',
    'stream_upstream_events',
]
