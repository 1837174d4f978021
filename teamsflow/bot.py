"""Turn handler — one inbound activity in, one batch of Teams replies out.

Turns within a conversation are serialised: the next utterance is only
sent to Dialogflow once the previous turn's replies have gone out.
Different conversations run concurrently.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from .conversion import classify_error, convert_to_activities
from .dialogflow import DialogflowSessionClient, response_messages
from .teams import BotFrameworkAdapter
from .teams.activity import (
    added_members,
    conversation_id,
    get_message_text,
    is_member_added,
    is_message,
    sender_id,
)

logger = logging.getLogger("teamsflow.bot")


class TeamsBot:
    """Routes Teams activities through Dialogflow and back."""

    def __init__(
        self,
        session_client: DialogflowSessionClient,
        adapter: BotFrameworkAdapter,
        platform: str = "TEAMS",
        welcome_event: str = "TEAMS_WELCOME",
    ):
        self.session_client = session_client
        self.adapter = adapter
        self.platform = platform
        self.welcome_event = welcome_event
        # Locks live only while a turn holds or waits on them
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def _conversation_turn(self, activity: dict):
        key = conversation_id(activity) or ""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if not self._waiters[key]:
                del self._waiters[key]
                del self._locks[key]

    async def on_turn(self, activity: dict) -> list[dict]:
        """Handle one inbound activity.

        Returns:
            The activities sent back (empty for ignored activity types)
        """
        async with self._conversation_turn(activity):
            if is_message(activity):
                return await self._on_message(activity)
            if is_member_added(activity):
                return await self._on_members_added(activity)
            logger.debug(f"Ignoring activity of type {activity.get('type')!r}")
            return []

    async def _on_message(self, activity: dict) -> list[dict]:
        utterance = get_message_text(activity)
        if not utterance.strip():
            logger.debug(f"Ignoring message without text (id={activity.get('id')!r})")
            return []
        session_id = sender_id(activity) or conversation_id(activity) or "anonymous"
        logger.info(f"Message from {session_id}: {utterance[:100]!r}")

        replies = await self._query(self.session_client.detect_intent(utterance, session_id))
        await self.adapter.send_activities(activity, replies)
        return replies

    async def _on_members_added(self, activity: dict) -> list[dict]:
        sent = []
        for member in added_members(activity):
            logger.info(f"Member added: {member.get('id')}, sending {self.welcome_event}")
            replies = await self._query(
                self.session_client.detect_intent_with_event(self.welcome_event, member["id"])
            )
            await self.adapter.send_activities(activity, replies)
            sent.extend(replies)
        return sent

    async def _query(self, request) -> list[dict]:
        """Await a Dialogflow request and convert its replies.

        Engine failures become a single user-facing error reply.
        """
        try:
            query_result = await request
        except Exception as e:
            logger.error(f"Error querying Dialogflow: {e}", exc_info=True)
            return [{"type": "message", "text": classify_error(e)}]

        return convert_to_activities(response_messages(query_result), self.platform)


def build_bot(settings, http_client=None) -> TeamsBot:
    """Construct the bot and its collaborators from settings."""
    from .auth.bot_framework import BotFrameworkCredentials
    from .auth.google_service_account import GoogleServiceAccountToken

    session_client = DialogflowSessionClient(
        project_id=settings.google_project_id or "",
        agent_id=settings.dialogflow_agent_id or "",
        token_provider=GoogleServiceAccountToken(),
        location=settings.dialogflow_location,
        language_code=settings.language_code,
        http_client=http_client,
        timeout=settings.request_timeout,
    )
    credentials = BotFrameworkCredentials(
        app_id=settings.microsoft_app_id,
        app_password=settings.microsoft_app_password,
        tenant_id=settings.microsoft_tenant_id,
        http_client=http_client,
    )
    adapter = BotFrameworkAdapter(credentials, http_client=http_client, timeout=settings.request_timeout)
    return TeamsBot(
        session_client,
        adapter,
        platform=settings.platform,
        welcome_event=settings.welcome_event,
    )
