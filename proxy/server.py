"""
ProxyServer class for CLI control of the FastAPI application.
"""
import logging
from typing import Optional

import uvicorn

from settings import PORT, LOG_LEVEL, BIND_ADDRESS
from .app import create_app
from .logging_utils import configure_logging

logger = logging.getLogger(__name__)


class ProxyServer:
    """Proxy server wrapper for CLI control"""

    def __init__(self, debug: bool = False, bind_address: Optional[str] = None, port: Optional[int] = None):
        self.server = None
        self.config = None
        self.debug = debug
        self.bind_address = bind_address or BIND_ADDRESS
        self.port = port or PORT
        self.debug_log_file = configure_logging(LOG_LEVEL, debug=debug)

    def run(self):
        """Run the proxy server (blocking)"""
        logger.info(f"Starting Amazon Q gateway on http://{self.bind_address}:{self.port}")
        logger.info("Available endpoints: /v1/messages (Anthropic), /v1/chat/completions (OpenAI)")
        self.config = uvicorn.Config(
            create_app(),
            host=self.bind_address,
            port=self.port,
            log_level="debug" if self.debug else LOG_LEVEL,
            access_log=False  # Reduce noise in CLI
        )
        self.server = uvicorn.Server(self.config)
        self.server.run()

    def stop(self):
        """Stop the proxy server"""
        if self.server:
            self.server.should_exit = True
