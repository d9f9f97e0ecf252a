"""
FastAPI dependencies resolving the components held on ``app.state``.
"""
from fastapi import Request

from config import GatewayConfig
from oauth import TokenLifecycleManager


def get_config(request: Request) -> GatewayConfig:
    return request.app.state.config


def get_token_manager(request: Request) -> TokenLifecycleManager:
    return request.app.state.token_manager
