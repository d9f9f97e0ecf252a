"""
Test doubles for the Amazon Q and OIDC upstreams
"""

import json
from datetime import datetime, timedelta
from typing import Any, Dict, List

import httpx

from utils import format_timestamp
from utils.time import UTC

OIDC_ENDPOINT = "https://oidc.test"
AMAZONQ_ENDPOINT = "https://q.test"
CREDENTIALS_KEY = "amazonq-credentials"

FIXED_NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def future_expiry(hours: int = 1) -> str:
    return format_timestamp(FIXED_NOW + timedelta(hours=hours))


def past_expiry(hours: int = 1) -> str:
    return format_timestamp(FIXED_NOW - timedelta(hours=hours))


def amazonq_body(*fragments: str) -> bytes:
    """Mimic the binary event framing around the JSON content events"""
    parts = []
    for fragment in fragments:
        parts.append(b"\x00\x00\x00\x8b:event-type\x07\x00\x16assistantResponseEvent")
        parts.append(json.dumps({"content": fragment}).encode("utf-8"))
        parts.append(b"\x8f\x12\x0c\x01")
    return b"".join(parts)


class UpstreamStub:
    """MockTransport handler for the OIDC token and generateAssistantResponse calls

    Queued responses are returned in order; once exhausted the defaults apply.
    """

    def __init__(self) -> None:
        self.token_calls: List[Dict[str, Any]] = []
        self.chat_calls: List[httpx.Request] = []
        self.token_responses: List[Any] = []
        self.chat_responses: List[Any] = []
        self.token_payload: Dict[str, Any] = {"accessToken": "fresh-token", "expiresIn": 3600}
        self.chat_body: bytes = amazonq_body("Hello", " world")

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/token":
            self.token_calls.append(json.loads(request.content))
            if self.token_responses:
                response = self.token_responses.pop(0)
                if isinstance(response, Exception):
                    raise response
                return response
            return httpx.Response(200, json=self.token_payload)

        if request.url.path == "/generateAssistantResponse":
            self.chat_calls.append(request)
            if self.chat_responses:
                response = self.chat_responses.pop(0)
                if isinstance(response, Exception):
                    raise response
                return response
            return httpx.Response(200, content=self.chat_body)

        return httpx.Response(404, text="not found")

    def chat_payload(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.chat_calls[index].content)

    def chat_token(self, index: int = -1) -> str:
        return self.chat_calls[index].headers["authorization"].removeprefix("Bearer ")
