"""
Credential provisioning endpoints.
"""
import logging

from fastapi import APIRouter, Depends, Request

from errors import MissingFieldsError
from oauth import TokenLifecycleManager, normalize_credentials
from ..deps import get_token_manager
from ..handlers import parse_json_body
from ..models import CredentialsSaved, CredentialsStatus

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/credentials", response_model=CredentialsStatus)
async def credentials_status(token_manager: TokenLifecycleManager = Depends(get_token_manager)):
    """Report whether credentials and an access token are present"""
    status = await token_manager.status()
    return CredentialsStatus(**status)


@router.post("/credentials", response_model=CredentialsSaved)
async def set_credentials(
    raw_request: Request,
    token_manager: TokenLifecycleManager = Depends(get_token_manager),
):
    """Store refresh credentials; camelCase field names are accepted"""
    body = parse_json_body(await raw_request.body())
    normalized, missing = normalize_credentials(body)
    if missing:
        logger.warning(f"Rejected credentials update, missing: {', '.join(missing)}")
        raise MissingFieldsError(missing)

    record = await token_manager.set_credentials(normalized)
    return CredentialsSaved(
        message="Credentials saved",
        has_profile_arn=bool(record.get("profile_arn") or record.get("profileArn")),
    )
