"""Amazon Q HTTP client with one token refresh on authorization rejection"""

import logging
from typing import Any, Dict, Optional

import httpx

from config import GatewayConfig
from errors import UpstreamAuthError, UpstreamTransportError
from oauth import TokenLifecycleManager
from .payload import build_conversation_payload, build_request_headers

logger = logging.getLogger(__name__)

GENERATE_PATH = "/generateAssistantResponse"


class AmazonQClient:
    """Sends chat requests to Amazon Q and returns the open streamed response"""

    def __init__(
        self,
        token_manager: TokenLifecycleManager,
        config: GatewayConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.token_manager = token_manager
        self.config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(
                config.request_timeout,
                connect=config.connect_timeout,
                read=config.read_timeout,
            )
        )

    @property
    def url(self) -> str:
        return f"{self.config.amazonq_endpoint}{GENERATE_PATH}"

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def generate_assistant_response(
        self,
        prompt: str,
        model_id: str,
        conversation_id: str,
        request_id: str = "",
    ) -> httpx.Response:
        """Start a generateAssistantResponse call

        A 403 closes the response, forces one token refresh and retries once. The
        returned response body has not been read; the caller must close it.

        Raises:
            UpstreamAuthError: the retried call was rejected again, or refresh failed
            UpstreamTransportError: any other non-2xx status or a connection failure
            ConfigurationError: a refresh was needed without the required fields
        """
        credentials = await self.token_manager.get_credentials()
        profile_arn = credentials.get("profile_arn") or credentials.get("profileArn")
        payload = build_conversation_payload(prompt, conversation_id, model_id, profile_arn=profile_arn)

        access_token = await self.token_manager.get_access_token()
        response = await self._send(payload, access_token, request_id)

        if response.status_code == 403:
            await response.aclose()
            logger.warning(f"[{request_id}] Amazon Q returned 403, refreshing access token and retrying once")
            access_token = await self.token_manager.refresh(stale_token=access_token)
            response = await self._send(payload, access_token, request_id)

            if response.status_code == 403:
                body = await self._read_body(response)
                logger.error(f"[{request_id}] Amazon Q rejected the refreshed token: {body}")
                raise UpstreamAuthError(403, body, message=f"Amazon Q API call failed: {body}")

        if not response.is_success:
            body = await self._read_body(response)
            logger.error(f"[{request_id}] Amazon Q API error {response.status_code}: {body}")
            raise UpstreamTransportError(response.status_code, body)

        return response

    async def _send(self, payload: Dict[str, Any], access_token: str, request_id: str) -> httpx.Response:
        request = self._client.build_request(
            "POST",
            self.url,
            json=payload,
            headers=build_request_headers(access_token),
        )
        try:
            return await self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            logger.error(f"[{request_id}] Amazon Q request timed out: {e}")
            raise UpstreamTransportError(504, str(e), message=f"Amazon Q request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"[{request_id}] Amazon Q request failed: {e}")
            raise UpstreamTransportError(502, str(e), message=f"Amazon Q request failed: {e}") from e

    @staticmethod
    async def _read_body(response: httpx.Response) -> str:
        try:
            await response.aread()
            return response.text
        finally:
            await response.aclose()
