"""Bearer token lifecycle for the Amazon Q upstream"""

import json
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

import httpx

from config import GatewayConfig
from errors import ConfigurationError
from utils.single_flight import SingleFlight
from utils.storage import CredentialStore
from utils.time import format_timestamp, parse_timestamp, utc_now
from .credentials import CREDENTIAL_FIELD_ALIASES, resolve_field
from .token_refresh import exchange_refresh_token

logger = logging.getLogger(__name__)


class TokenLifecycleManager:
    """Keeps a valid access token available for upstream calls

    The in-memory token state is a cache of the last record persisted to the
    credential store. Refreshed tokens are written back before they are handed
    out, and concurrent refreshes for the same credential key share a single
    token exchange.
    """

    def __init__(
        self,
        store: CredentialStore,
        config: GatewayConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        single_flight: Optional[SingleFlight] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            store: Durable credential store
            config: Gateway configuration
            http_client: Client for the OIDC endpoint; a short-lived one is
                created per refresh when omitted
            single_flight: Shared guard, so several managers over one store
                still exchange a refresh token once
            clock: Source of the current UTC time
        """
        self.store = store
        self.config = config
        self._http_client = http_client
        self._single_flight = single_flight or SingleFlight()
        self._clock = clock

        self._credentials: Optional[Dict[str, Any]] = None
        self._access_token: Optional[str] = None
        self._token_expiry: Optional[datetime] = None

    @property
    def credential_key(self) -> str:
        return self.config.credentials_key

    def _log_token(self, message: str) -> None:
        if self.config.log_token_refresh:
            logger.info(message)

    def _adopt(self, record: Dict[str, Any]) -> None:
        self._credentials = record
        if record.get("access_token"):
            self._access_token = record["access_token"]
        if record.get("token_expiry"):
            self._token_expiry = parse_timestamp(record["token_expiry"])

    def _parse_fallback(self) -> Optional[Dict[str, Any]]:
        blob = self.config.fallback_credentials
        if not blob:
            return None
        try:
            parsed = json.loads(blob)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse AMAZONQ_CREDENTIALS: {e}")
            return None
        if not isinstance(parsed, dict):
            logger.error("Ignoring AMAZONQ_CREDENTIALS: expected a JSON object")
            return None
        return parsed

    async def load(self) -> Dict[str, Any]:
        """Load credentials from the store, then the environment fallback

        Absence of both is a valid, unauthenticated state and yields ``{}``.
        """
        stored = await self.store.get(self.credential_key)
        if stored:
            self._adopt(stored)
            if stored.get("access_token"):
                self._log_token(f"Loaded access_token from store (length: {len(stored['access_token'])})")
            return stored

        fallback = self._parse_fallback()
        if fallback:
            self._adopt(fallback)
            if fallback.get("access_token"):
                self._log_token(f"Loaded access_token from environment (length: {len(fallback['access_token'])})")
            return fallback

        self._credentials = {}
        return self._credentials

    async def get_credentials(self) -> Dict[str, Any]:
        if self._credentials is None:
            await self.load()
        return self._credentials

    def is_token_valid(self) -> bool:
        if not self._access_token:
            return False
        if self._token_expiry is None:
            return True
        return self._clock() < self._token_expiry

    async def get_access_token(self) -> str:
        """Return the cached token while it is valid, refreshing it otherwise"""
        await self.get_credentials()
        if self.is_token_valid():
            return self._access_token

        self._log_token("Access token missing or expired, refreshing...")
        return await self.refresh()

    async def refresh(self, stale_token: Optional[str] = None) -> str:
        """Obtain a new access token

        Args:
            stale_token: Token the upstream just rejected. If another caller has
                already replaced it, the replacement is returned without a new
                exchange.

        Raises:
            ConfigurationError: refresh_token, client_id or client_secret missing
            UpstreamAuthError: the OIDC endpoint refused the exchange
            UpstreamTransportError: the OIDC endpoint was unreachable or timed out
        """
        return await self._single_flight.do(self.credential_key, lambda: self._refresh(stale_token))

    async def _refresh(self, stale_token: Optional[str]) -> str:
        if stale_token is not None and self._access_token != stale_token and self.is_token_valid():
            return self._access_token

        stored = await self.store.get(self.credential_key)
        if stored:
            self._credentials = stored
        credentials = await self.get_credentials()

        # Adopt a token rotated by someone else, unless it is the rejected one or already expired
        stored_token = credentials.get("access_token")
        if stored_token and stored_token != self._access_token and stored_token != stale_token:
            stored_expiry = parse_timestamp(credentials.get("token_expiry"))
            if stored_expiry is None or self._clock() < stored_expiry:
                self._access_token = stored_token
                self._token_expiry = stored_expiry
                self._log_token(f"Adopted access_token present in credentials (length: {len(stored_token)})")
                return stored_token

        values = {field: resolve_field(credentials, field) for field in CREDENTIAL_FIELD_ALIASES}
        missing = [field for field, value in values.items() if not value]
        if missing:
            raise ConfigurationError(
                f"Cannot refresh access token, missing: {', '.join(missing)}",
                details={"missing_fields": missing},
            )

        self._log_token(f"Refreshing access token via OIDC (client_id: {str(values['client_id'])[:8]}***)")
        token_data = await self._exchange(values["refresh_token"], values["client_id"], values["client_secret"])

        access_token = token_data["accessToken"]
        expires_in = float(token_data["expiresIn"])
        expiry = self._clock() + timedelta(seconds=expires_in - self.config.token_refresh_margin_seconds)

        updated = {
            **credentials,
            "access_token": access_token,
            "token_expiry": format_timestamp(expiry),
        }
        rotated = token_data.get("refreshToken")
        if rotated and rotated != values["refresh_token"]:
            updated["refresh_token"] = rotated

        # Persist first: the token only becomes valid once it is durable
        await self.store.put(self.credential_key, updated)
        self._credentials = updated
        self._access_token = access_token
        self._token_expiry = expiry

        self._log_token(f"Access token refreshed (expires_in: {int(expires_in)}s)")
        return access_token

    async def _exchange(self, refresh_token: str, client_id: str, client_secret: str) -> Dict[str, Any]:
        if self._http_client is not None:
            return await exchange_refresh_token(
                self._http_client, self.config.oidc_endpoint, refresh_token, client_id, client_secret
            )

        timeout = httpx.Timeout(self.config.request_timeout, connect=self.config.connect_timeout)
        async with httpx.AsyncClient(verify=self.config.oidc_verify, timeout=timeout) as client:
            return await exchange_refresh_token(
                client, self.config.oidc_endpoint, refresh_token, client_id, client_secret
            )

    async def set_credentials(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a provisioned record and make it the current one

        The record replaces the stored one. An embedded access token and expiry
        are adopted immediately; otherwise the cached token is dropped so the
        next request refreshes against the new credentials.
        """
        record = dict(record)
        await self.store.put(self.credential_key, record)

        self._credentials = record
        self._access_token = record.get("access_token") or None
        self._token_expiry = parse_timestamp(record.get("token_expiry"))
        self._log_token("Credentials updated")
        return record

    def has_access_token(self) -> bool:
        return bool(self._access_token)

    def token_expiry_iso(self) -> Optional[str]:
        return format_timestamp(self._token_expiry)

    async def status(self) -> Dict[str, Any]:
        credentials = await self.get_credentials()
        return {
            "has_credentials": bool(resolve_field(credentials, "refresh_token")),
            "has_access_token": self.has_access_token(),
            "token_expiry": self.token_expiry_iso(),
        }
