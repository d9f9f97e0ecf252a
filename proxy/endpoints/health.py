"""
Health check and status endpoints.
"""
from fastapi import APIRouter, Depends

from oauth import TokenLifecycleManager, resolve_field
from utils import format_timestamp, utc_now
from ..deps import get_token_manager
from ..models import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def health_check(token_manager: TokenLifecycleManager = Depends(get_token_manager)):
    """Health check endpoint, reporting whether a refresh token is configured"""
    credentials = await token_manager.get_credentials()
    return HealthStatus(
        status="ok",
        timestamp=format_timestamp(utc_now()),
        has_credentials=bool(resolve_field(credentials, "refresh_token")),
    )


@router.get("/healthz")
async def healthz_check():
    """Alternative health check endpoint (Kubernetes style)"""
    return {"status": "ok", "timestamp": format_timestamp(utc_now())}
