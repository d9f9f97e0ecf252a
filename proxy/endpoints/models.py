"""
Models listing and index endpoints.
"""
from fastapi import APIRouter, Depends

from config import GatewayConfig
from models import models_response
from ..deps import get_config

router = APIRouter()

ENDPOINT_MAP = {
    "openai_chat": "/v1/chat/completions",
    "anthropic_messages": "/v1/messages",
    "models": "/v1/models",
    "credentials": "/credentials",
    "health": "/health",
}


@router.get("/v1/models")
@router.get("/models")
async def list_models():
    """OpenAI-compatible models endpoint"""
    return models_response()


@router.get("/")
async def index(config: GatewayConfig = Depends(get_config)):
    """Describe the gateway and its endpoints"""
    import settings

    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "auth_method": "OAuth 2.0",
        "endpoints": dict(ENDPOINT_MAP),
        "default_model": config.default_model,
    }
