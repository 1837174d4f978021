"""Bot Framework app credentials (client-credentials OAuth flow).

Tokens are cached until shortly before expiry. Without an app id the bot
runs unauthenticated, which is what the local Bot Framework Emulator
expects.
"""

import asyncio
import logging
import time
from typing import Optional

import httpx

logger = logging.getLogger("teamsflow.auth.bot_framework")

_TOKEN_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"
_DEFAULT_TENANT = "botframework.com"
_SCOPE = "https://api.botframework.com/.default"

# Expire 5 minutes early as buffer
_EXPIRY_BUFFER = 300


class BotFrameworkCredentials:
    """Manages the bot's outbound access token."""

    def __init__(
        self,
        app_id: Optional[str],
        app_password: Optional[str],
        tenant_id: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.app_id = app_id
        self.app_password = app_password
        self.tenant_id = tenant_id
        self.access_token: Optional[str] = None
        self.expires_at: float = 0.0
        self._http_client = http_client
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.app_id)

    @property
    def is_expired(self) -> bool:
        return self.access_token is None or time.time() >= self.expires_at

    @property
    def token_url(self) -> str:
        return _TOKEN_URL.format(tenant=self.tenant_id or _DEFAULT_TENANT)

    async def get_token(self) -> Optional[str]:
        """Get a valid access token, or None when running without an app id."""
        if not self.enabled:
            return None
        if not self.is_expired:
            return self.access_token

        async with self._lock:
            if not self.is_expired:
                return self.access_token
            await self._refresh()
            return self.access_token

    async def _refresh(self):
        logger.info("Requesting Bot Framework access token...")
        data = {
            "grant_type": "client_credentials",
            "client_id": self.app_id,
            "client_secret": self.app_password or "",
            "scope": _SCOPE,
        }
        if self._http_client is not None:
            resp = await self._http_client.post(self.token_url, data=data)
        else:
            async with httpx.AsyncClient(timeout=30) as client:
                resp = await client.post(self.token_url, data=data)
        resp.raise_for_status()
        payload = resp.json()

        self.access_token = payload["access_token"]
        self.expires_at = time.time() + int(payload.get("expires_in", 3600)) - _EXPIRY_BUFFER

    async def auth_headers(self) -> dict:
        token = await self.get_token()
        return {"Authorization": f"Bearer {token}"} if token else {}
