"""
OpenAI chat completions endpoint backed by Amazon Q.
"""
from fastapi import APIRouter, Request

from translation import OPENAI_FORMAT
from ..handlers import handle_chat_request

router = APIRouter()


@router.post("/v1/chat/completions")
async def chat_completions(raw_request: Request):
    """OpenAI-compatible chat completions, batch or delta-chunk stream"""
    return await handle_chat_request(raw_request, OPENAI_FORMAT)
