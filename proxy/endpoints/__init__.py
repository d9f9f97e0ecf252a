"""
Endpoint handlers for the proxy server.
"""
from .health import router as health_router
from .models import router as models_router
from .credentials import router as credentials_router
from .chat_completions import router as chat_completions_router
from .anthropic_messages import router as anthropic_messages_router

__all__ = [
    'health_router',
    'models_router',
    'credentials_router',
    'chat_completions_router',
    'anthropic_messages_router',
]
