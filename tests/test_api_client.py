"""
Amazon Q client: payload, 403 retry protocol and error mapping
"""

import httpx
import pytest

from amazonq import AmazonQClient, build_conversation_payload
from errors import UpstreamAuthError, UpstreamTransportError

from tests.helpers import future_expiry


@pytest.fixture
def make_client(make_manager, gateway_config, http_client, base_credentials):
    def _make(record=None) -> AmazonQClient:
        if record is None:
            record = {**base_credentials, "access_token": "initial", "token_expiry": future_expiry()}
        manager = make_manager(record)
        return AmazonQClient(manager, gateway_config, http_client=http_client)

    return _make


def test_conversation_payload_shape():
    payload = build_conversation_payload("hi", "conv-1", "claude-sonnet-4", profile_arn="arn:aws:profile")

    state = payload["conversationState"]
    message = state["currentMessage"]["userInputMessage"]
    assert state["chatTriggerType"] == "MANUAL"
    assert state["conversationId"] == "conv-1"
    assert state["history"] == []
    assert message["content"] == "hi"
    assert message["modelId"] == "claude-sonnet-4"
    assert message["origin"] == "IDE"
    assert payload["profileArn"] == "arn:aws:profile"


def test_conversation_payload_omits_missing_profile():
    assert "profileArn" not in build_conversation_payload("hi", "c", "m")


@pytest.mark.asyncio
async def test_successful_call_uses_cached_token(make_client, upstream):
    client = make_client()

    response = await client.generate_assistant_response("hello", "claude-sonnet-4.5", "conv-1")
    await response.aclose()

    assert response.status_code == 200
    assert len(upstream.chat_calls) == 1
    assert upstream.chat_token() == "initial"
    assert upstream.chat_calls[0].headers["x-amzn-codewhisperer-optout"] == "false"
    assert upstream.chat_payload()["conversationState"]["currentMessage"]["userInputMessage"]["content"] == "hello"
    assert upstream.token_calls == []


@pytest.mark.asyncio
async def test_profile_arn_from_credentials_is_sent(make_client, upstream, base_credentials):
    client = make_client({**base_credentials, "access_token": "a", "profile_arn": "arn:aws:codewhisperer:p"})

    response = await client.generate_assistant_response("hello", "m", "conv-1")
    await response.aclose()

    assert upstream.chat_payload()["profileArn"] == "arn:aws:codewhisperer:p"


@pytest.mark.asyncio
async def test_single_403_refreshes_once_and_retries_once(make_client, upstream):
    client = make_client()
    upstream.chat_responses.append(httpx.Response(403, text="expired"))

    response = await client.generate_assistant_response("hello", "m", "conv-1")
    await response.aclose()

    assert response.status_code == 200
    assert len(upstream.token_calls) == 1
    assert len(upstream.chat_calls) == 2
    assert upstream.chat_token(0) == "initial"
    assert upstream.chat_token(1) == "fresh-token"


@pytest.mark.asyncio
async def test_second_403_is_terminal(make_client, upstream):
    client = make_client()
    upstream.chat_responses.extend([
        httpx.Response(403, text="expired"),
        httpx.Response(403, text="still forbidden"),
        httpx.Response(200, content=b"never reached"),
    ])

    with pytest.raises(UpstreamAuthError) as exc_info:
        await client.generate_assistant_response("hello", "m", "conv-1")

    assert exc_info.value.status_code == 403
    assert "still forbidden" in exc_info.value.body
    assert len(upstream.token_calls) == 1
    assert len(upstream.chat_calls) == 2


@pytest.mark.asyncio
async def test_non_auth_error_passes_status_through(make_client, upstream):
    client = make_client()
    upstream.chat_responses.append(httpx.Response(429, text="slow down"))

    with pytest.raises(UpstreamTransportError) as exc_info:
        await client.generate_assistant_response("hello", "m", "conv-1")

    error = exc_info.value
    assert error.status_code == 429
    assert error.to_dict() == {
        "error": {
            "message": "Amazon Q API call failed: slow down",
            "type": "amazon_q_error",
            "code": "service_unavailable",
        }
    }
    assert upstream.token_calls == []
    assert len(upstream.chat_calls) == 1


@pytest.mark.asyncio
async def test_connection_failure_maps_to_bad_gateway(make_client, upstream):
    client = make_client()
    upstream.chat_responses.append(httpx.ConnectError("connection refused"))

    with pytest.raises(UpstreamTransportError) as exc_info:
        await client.generate_assistant_response("hello", "m", "conv-1")

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_timeout_maps_to_gateway_timeout(make_client, upstream):
    client = make_client()
    upstream.chat_responses.append(httpx.ReadTimeout("too slow"))

    with pytest.raises(UpstreamTransportError) as exc_info:
        await client.generate_assistant_response("hello", "m", "conv-1")

    assert exc_info.value.status_code == 504


@pytest.mark.asyncio
async def test_injected_client_is_not_closed(make_client, http_client):
    client = make_client()

    await client.aclose()

    assert http_client.is_closed is False
