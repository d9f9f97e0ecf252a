"""
Amazon Q gateway - HTTP front end.

Serves OpenAI chat-completions and Anthropic messages requests and answers
them from Amazon Q, batch or streamed.
"""
from .server import ProxyServer
from .app import create_app

__version__ = "2.0.0"

__all__ = [
    'ProxyServer',
    'create_app',
]
