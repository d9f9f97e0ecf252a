"""
Native Anthropic messages endpoint backed by Amazon Q.
"""
from fastapi import APIRouter, Request

from translation import ANTHROPIC_FORMAT
from ..handlers import handle_chat_request

router = APIRouter()


@router.post("/v1/messages")
async def anthropic_messages(raw_request: Request):
    """Anthropic messages API; streams unless the request opts out"""
    return await handle_chat_request(raw_request, ANTHROPIC_FORMAT)
