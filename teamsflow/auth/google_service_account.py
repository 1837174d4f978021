"""Google service-account access tokens for the Dialogflow API.

Uses Application Default Credentials: set GOOGLE_APPLICATION_CREDENTIALS
to a service account key file. See
https://cloud.google.com/dialogflow/cx/docs/quick/setup for details.
"""

import asyncio
import logging

import google.auth
from google.auth.transport.requests import Request

logger = logging.getLogger("teamsflow.auth.google")

_SCOPES = [
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/dialogflow",
]


class GoogleServiceAccountToken:
    """Callable token provider with auto-refresh.

    google-auth refreshes synchronously, so the refresh runs in a worker
    thread under a lock.
    """

    def __init__(self, credentials=None):
        self._credentials = credentials
        self._lock = asyncio.Lock()

    def _load(self):
        credentials, project_id = google.auth.default(scopes=_SCOPES)
        self._credentials = credentials
        logger.info(f"Loaded Google credentials (project: {project_id or 'unknown'})")

    def _refresh(self):
        if self._credentials is None:
            self._load()
        self._credentials.refresh(Request())

    async def get_token(self) -> str:
        """Get a valid access token, refreshing if needed."""
        if self._credentials is not None and self._credentials.valid:
            return self._credentials.token

        async with self._lock:
            # Double-check after acquiring lock
            if self._credentials is not None and self._credentials.valid:
                return self._credentials.token
            await asyncio.to_thread(self._refresh)
            logger.debug("Google access token refreshed.")
            return self._credentials.token

    async def __call__(self) -> str:
        return await self.get_token()
