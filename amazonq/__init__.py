"""Amazon Q (CodeWhisperer) upstream client"""

from .payload import build_conversation_payload, build_request_headers
from .api_client import AmazonQClient

__all__ = [
    "AmazonQClient",
    "build_conversation_payload",
    "build_request_headers",
]
