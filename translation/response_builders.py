"""
Response shapes for the OpenAI and Anthropic public schemas.
"""
import json
import time
import uuid
from typing import Any, Dict, Optional

OPENAI_FORMAT = "openai"
ANTHROPIC_FORMAT = "anthropic"

STREAM_DONE = "data: [DONE]\n\n"


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex}"


def format_sse(payload: Dict[str, Any], event: Optional[str] = None) -> str:
    """Frame one SSE event, named when ``event`` is given"""
    prefix = f"event: {event}\n" if event else ""
    return f"{prefix}data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def _zero_openai_usage() -> Dict[str, int]:
    return {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}


def _zero_anthropic_usage() -> Dict[str, int]:
    return {"input_tokens": 0, "output_tokens": 0}


# Batch shapes

def build_openai_completion(content: str, model: str, conversation_id: str) -> Dict[str, Any]:
    return {
        "id": f"chatcmpl-{conversation_id[:8]}",
        "object": "chat.completion",
        "created": int(time.time()),
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": _zero_openai_usage(),
    }


def build_anthropic_message(content: str, model: str, message_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": message_id or f"msg_{uuid.uuid4().hex}",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": content}],
        "model": model,
        "stop_reason": "end_turn",
        "stop_sequence": None,
        "usage": _zero_anthropic_usage(),
    }


# OpenAI streaming chunks

def openai_chunk(message_id: str, model: str, delta: Dict[str, Any], finish_reason: Optional[str] = None) -> str:
    payload = {
        "id": message_id,
        "object": "chat.completion.chunk",
        "created": int(time.time()),
        "model": model,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }
    return format_sse(payload)


def openai_error(message: str) -> str:
    return format_sse({"error": {"message": message, "type": "stream_error"}})


# Anthropic streaming events

def anthropic_message_start(message_id: str, model: str) -> str:
    return format_sse(
        {
            "type": "message_start",
            "message": {
                "id": message_id,
                "type": "message",
                "role": "assistant",
                "content": [],
                "model": model,
                "stop_reason": None,
                "stop_sequence": None,
                "usage": _zero_anthropic_usage(),
            },
        },
        event="message_start",
    )


def anthropic_content_block_start() -> str:
    return format_sse(
        {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
        event="content_block_start",
    )


def anthropic_content_block_delta(text: str) -> str:
    return format_sse(
        {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": text}},
        event="content_block_delta",
    )


def anthropic_content_block_stop() -> str:
    return format_sse({"type": "content_block_stop", "index": 0}, event="content_block_stop")


def anthropic_message_delta() -> str:
    return format_sse(
        {
            "type": "message_delta",
            "delta": {"stop_reason": "end_turn", "stop_sequence": None},
            "usage": {"output_tokens": 0},
        },
        event="message_delta",
    )


def anthropic_message_stop(message_id: str, model: str, final_text: str) -> str:
    return format_sse(
        {
            "type": "message_stop",
            "message": {
                "id": message_id,
                "type": "message",
                "role": "assistant",
                "model": model,
                "content": [{"type": "text", "text": final_text}],
                "stop_reason": "end_turn",
                "stop_sequence": None,
                "usage": _zero_anthropic_usage(),
            },
        },
        event="message_stop",
    )


def anthropic_error(message: str) -> str:
    return format_sse({"type": "error", "error": {"type": "stream_error", "message": message}}, event="error")
