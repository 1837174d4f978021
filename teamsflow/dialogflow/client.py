"""Dialogflow CX session client — calls detectIntent and returns the query result.

REST reference:
https://cloud.google.com/dialogflow/cx/docs/reference/rest/v3/projects.locations.agents.sessions/detectIntent
"""

import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from .errors import error_for_status

logger = logging.getLogger("teamsflow.dialogflow")

TokenProvider = Callable[[], Awaitable[str]]

_API_URL = "https://{location}-dialogflow.googleapis.com/v3/{session}:detectIntent"
_GLOBAL_API_URL = "https://dialogflow.googleapis.com/v3/{session}:detectIntent"


def response_messages(query_result: Optional[dict]) -> list:
    """Extract response messages from a query result.

    CX returns `responseMessages`; ES-style results carry
    `fulfillmentMessages`. Both are accepted.
    """
    if not query_result:
        return []
    messages = query_result.get("responseMessages")
    if messages is None:
        messages = query_result.get("fulfillmentMessages")
    return list(messages or [])


class DialogflowSessionClient:
    """Contacts Dialogflow and returns the query result for one turn."""

    def __init__(
        self,
        project_id: str,
        agent_id: str,
        token_provider: TokenProvider,
        location: str = "us-central1",
        language_code: str = "en",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.project_id = project_id
        self.agent_id = agent_id
        self.location = location
        self.language_code = language_code
        self._token_provider = token_provider
        self._http_client = http_client
        self._timeout = timeout

    def session_path(self, session_id: str) -> str:
        return (
            f"projects/{self.project_id}/locations/{self.location}"
            f"/agents/{self.agent_id}/sessions/{session_id}"
        )

    def endpoint(self, session_id: str) -> str:
        session = self.session_path(session_id)
        if self.location == "global":
            return _GLOBAL_API_URL.format(session=session)
        return _API_URL.format(location=self.location, session=session)

    def construct_request(self, text: str, payload: Optional[dict] = None) -> dict:
        request: dict[str, Any] = {
            "queryInput": {
                "text": {"text": text},
                "languageCode": self.language_code,
            },
        }
        if payload is not None:
            request["queryParams"] = {"payload": payload}
        return request

    def construct_event_request(self, event_name: str) -> dict:
        return {
            "queryInput": {
                "event": {"event": event_name},
                "languageCode": self.language_code,
            },
        }

    async def _post(self, url: str, body: dict, headers: dict) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(url, json=body, headers=headers)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(url, json=body, headers=headers)

    async def _detect_intent(self, session_id: str, body: dict) -> dict:
        token = await self._token_provider()
        headers = {"Authorization": f"Bearer {token}"}
        url = self.endpoint(session_id)

        resp = await self._post(url, body, headers)
        if resp.status_code >= 400:
            logger.warning(f"detectIntent failed: HTTP {resp.status_code} for session {session_id}")
            raise error_for_status(resp.status_code, resp.text)

        query_result = resp.json().get("queryResult") or {}
        logger.debug(
            f"detectIntent session={session_id}: "
            f"{len(response_messages(query_result))} response messages"
        )
        return query_result

    async def detect_intent(self, text: str, session_id: str, payload: Optional[dict] = None) -> dict:
        """Send a text query.

        Args:
            text: User utterance
            session_id: Conversation session identifier
            payload: Optional custom payload forwarded to webhooks

        Returns:
            The `queryResult` object of the response
        """
        return await self._detect_intent(session_id, self.construct_request(text, payload))

    async def detect_intent_with_event(self, event_name: str, session_id: str) -> dict:
        """Trigger an event (e.g. a welcome event) instead of a text query."""
        return await self._detect_intent(session_id, self.construct_event_request(event_name))
