"""OIDC refresh-token exchange"""

import logging
from typing import Any, Dict

import httpx

from errors import UpstreamAuthError, UpstreamTransportError

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = 3600


async def exchange_refresh_token(
    client: httpx.AsyncClient,
    oidc_endpoint: str,
    refresh_token: str,
    client_id: str,
    client_secret: str,
) -> Dict[str, Any]:
    """Trade a refresh token for a new access token

    Args:
        client: HTTP client used for the call (its timeout bounds the exchange)
        oidc_endpoint: Base URL of the OIDC service
        refresh_token: Long-lived refresh token
        client_id: Registered client id
        client_secret: Registered client secret

    Returns:
        Dict with ``accessToken``, ``expiresIn`` and, when rotated, ``refreshToken``

    Raises:
        UpstreamAuthError: non-success status, unreadable body or no access token
        UpstreamTransportError: the token endpoint could not be reached or timed out
    """
    payload = {
        "grantType": "refresh_token",
        "refreshToken": refresh_token,
        "clientId": client_id,
        "clientSecret": client_secret,
    }

    try:
        response = await client.post(
            f"{oidc_endpoint}/token",
            json=payload,
            headers={"content-type": "application/json"},
        )
    except httpx.TimeoutException as e:
        logger.error(f"Token refresh request timed out: {e}")
        raise UpstreamTransportError(504, str(e), message=f"Token refresh request timed out: {e}") from e
    except httpx.HTTPError as e:
        logger.error(f"Token refresh request failed: {e}")
        raise UpstreamTransportError(502, str(e), message=f"Token refresh request failed: {e}") from e

    if not response.is_success:
        logger.error(f"Token refresh failed with status {response.status_code}: {response.text}")
        raise UpstreamAuthError(
            response.status_code,
            response.text,
            message=f"Token refresh failed: {response.status_code}",
        )

    try:
        token_data = response.json()
    except ValueError as e:
        raise UpstreamAuthError(502, response.text, message="Token refresh returned invalid JSON") from e

    if not isinstance(token_data, dict) or not token_data.get("accessToken"):
        raise UpstreamAuthError(502, response.text, message="Token refresh response missing accessToken")

    token_data.setdefault("expiresIn", DEFAULT_EXPIRES_IN)
    if token_data["expiresIn"] is None:
        token_data["expiresIn"] = DEFAULT_EXPIRES_IN
    return token_data
