"""
Shared request flow for the OpenAI and Anthropic chat endpoints.
"""
import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from fastapi import Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from errors import InputValidationError
from models import select_model_id
from translation import (
    ANTHROPIC_FORMAT,
    StreamSession,
    build_anthropic_message,
    build_openai_completion,
    extract_prompt,
    resolve_stream_preference,
)
from translation.response_builders import new_request_id
from ..logging_utils import log_request
from ..models import ChatRequest
from .streaming_handler import collect_upstream_text, stream_upstream_events

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "cache-control": "no-cache",
    "connection": "keep-alive",
    "x-accel-buffering": "no",
}


@dataclass
class PreparedChat:
    """Everything needed to issue the upstream call for one request"""
    prompt: str
    model: str
    model_id: str
    stream: bool
    conversation_id: str


def parse_json_body(raw: bytes) -> Dict[str, Any]:
    """Decode a request body; an empty body is an empty object"""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InputValidationError("Invalid JSON payload") from e
    if not isinstance(data, dict):
        raise InputValidationError("Invalid JSON payload: expected an object")
    return data


def prepare_chat_request(
    body: Dict[str, Any],
    format_type: str,
    headers: Mapping[str, str],
    query: Mapping[str, str],
    default_model: str,
) -> PreparedChat:
    """Validate a chat body and resolve prompt, model and response mode

    Raises:
        InputValidationError: no messages, or no user text to send
    """
    try:
        request = ChatRequest.model_validate(body)
    except ValidationError as e:
        raise InputValidationError(f"Invalid request: {e.errors()[0].get('msg', 'validation failed')}") from e

    if not request.messages:
        raise InputValidationError("messages must be a non-empty list")

    prompt = extract_prompt(request.messages)
    if not prompt:
        raise InputValidationError("Could not extract user input from messages")

    model = request.model or default_model
    return PreparedChat(
        prompt=prompt,
        model=model,
        model_id=select_model_id(model, default=default_model),
        stream=resolve_stream_preference(body, format_type, headers=headers, query=query),
        conversation_id=str(uuid.uuid4()),
    )


async def handle_chat_request(raw_request: Request, format_type: str):
    """Run one chat request end to end in the caller's schema"""
    state = raw_request.app.state
    config = state.config
    request_id = new_request_id()
    is_anthropic = format_type == ANTHROPIC_FORMAT

    body = parse_json_body(await raw_request.body())
    if config.log_requests:
        log_request(request_id, body, raw_request.url.path, dict(raw_request.headers), config.max_log_length)

    prepared = prepare_chat_request(
        body,
        format_type,
        headers=raw_request.headers,
        query=raw_request.query_params,
        default_model=config.default_model,
    )
    logger.debug(
        f"[{request_id}] Resolved model '{prepared.model}' -> '{prepared.model_id}', stream={prepared.stream}"
    )

    upstream = await state.amazonq_client.generate_assistant_response(
        prepared.prompt,
        prepared.model_id,
        prepared.conversation_id,
        request_id=request_id,
    )

    extra_headers: Dict[str, str] = {}
    if is_anthropic:
        extra_headers = {"anthropic-version": config.anthropic_version, "x-request-id": request_id}

    if prepared.stream:
        session = StreamSession(format_type, prepared.model)
        return StreamingResponse(
            stream_upstream_events(upstream, session, config, request_id),
            media_type="text/event-stream",
            headers={**SSE_HEADERS, **extra_headers},
        )

    text = await collect_upstream_text(upstream, config, request_id)
    if is_anthropic:
        payload = build_anthropic_message(text, prepared.model)
    else:
        payload = build_openai_completion(text, prepared.model, prepared.conversation_id)
    return JSONResponse(payload, headers=extra_headers)
