"""Bot Framework channel adapter — delivers reply activities to Teams.

Replies go to the Bot Connector REST API of the conversation's service URL:
    POST {serviceUrl}/v3/conversations/{conversationId}/activities/{replyToId}
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from ..auth.bot_framework import BotFrameworkCredentials

logger = logging.getLogger("teamsflow.teams")


class BotFrameworkError(Exception):
    """Reply delivery failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BotFrameworkAdapter:
    """Sends activities back into the conversation an inbound activity came from."""

    def __init__(
        self,
        credentials: BotFrameworkCredentials,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.credentials = credentials
        self._http_client = http_client
        self._timeout = timeout

    def build_reply(self, incoming: dict, activity: dict) -> dict:
        """Address an outgoing activity as a reply to `incoming`."""
        reply = dict(activity)
        reply.setdefault("type", "message")
        reply["from"] = incoming.get("recipient")
        reply["recipient"] = incoming.get("from")
        reply["conversation"] = incoming.get("conversation")
        reply["serviceUrl"] = incoming.get("serviceUrl")
        reply["channelId"] = incoming.get("channelId")
        if incoming.get("id"):
            reply["replyToId"] = incoming["id"]
        return reply

    def reply_url(self, incoming: dict) -> str:
        service_url = (incoming.get("serviceUrl") or "").rstrip("/")
        if not service_url:
            raise BotFrameworkError("Inbound activity has no serviceUrl")
        conversation = quote((incoming.get("conversation") or {}).get("id") or "", safe="")
        url = f"{service_url}/v3/conversations/{conversation}/activities"
        if incoming.get("id"):
            url += f"/{quote(incoming['id'], safe='')}"
        return url

    async def _post(self, url: str, body: dict, headers: dict) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(url, json=body, headers=headers)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(url, json=body, headers=headers)

    async def send_activities(self, incoming: dict, activities: list[dict]) -> list[Optional[str]]:
        """Send activities in order as replies to `incoming`.

        Returns:
            Resource ids assigned by the connector (None where not returned)
        """
        if not activities:
            return []

        url = self.reply_url(incoming)
        headers = await self.credentials.auth_headers()
        ids = []
        for activity in activities:
            resp = await self._post(url, self.build_reply(incoming, activity), headers)
            if resp.status_code >= 400:
                raise BotFrameworkError(
                    f"Bot Connector HTTP {resp.status_code}: {resp.text[:500]}",
                    resp.status_code,
                )
            ids.append(_resource_id(resp))
        logger.info(f"Sent {len(activities)} activities to conversation {(incoming.get('conversation') or {}).get('id')}")
        return ids


def _resource_id(resp: httpx.Response) -> Optional[str]:
    try:
        data = resp.json()
    except ValueError:
        return None
    return data.get("id") if isinstance(data, dict) else None
