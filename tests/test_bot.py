"""Tests for the Teams turn handler."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from teamsflow.bot import TeamsBot, build_bot
from teamsflow.config import TeamsflowSettings
from teamsflow.dialogflow import DialogflowRateLimitError


def _bot(detect_intent=None, detect_event=None):
    session_client = MagicMock()
    session_client.detect_intent = detect_intent or AsyncMock(return_value={})
    session_client.detect_intent_with_event = detect_event or AsyncMock(return_value={})
    adapter = MagicMock()
    adapter.send_activities = AsyncMock(return_value=[])
    return TeamsBot(session_client, adapter, platform="TEAMS", welcome_event="TEAMS_WELCOME")


class TestMessageTurn:
    @pytest.mark.asyncio
    async def test_converts_and_sends(self, message_activity):
        query_result = {"responseMessages": [
            {"text": {"text": ["Hi!"]}},
            {"text": {"text": ["Slack only"]}, "channel": "SLACK"},
            {"quickReplies": {"quickReplies": ["Yes", "No"], "title": "Continue?"}},
        ]}
        bot = _bot(detect_intent=AsyncMock(return_value=query_result))

        replies = await bot.on_turn(message_activity)

        bot.session_client.detect_intent.assert_awaited_once_with("hello bot", "29:user-1")
        bot.adapter.send_activities.assert_awaited_once_with(message_activity, replies)
        assert replies[0] == {"type": "message", "text": "Hi!"}
        assert replies[1]["suggestedActions"]["actions"][1]["value"] == "No"
        assert len(replies) == 2

    @pytest.mark.asyncio
    async def test_engine_failure_sends_classified_error(self, message_activity):
        bot = _bot(detect_intent=AsyncMock(side_effect=DialogflowRateLimitError("quota", 429)))

        replies = await bot.on_turn(message_activity)

        assert len(replies) == 1
        assert "Too many requests" in replies[0]["text"]
        bot.adapter.send_activities.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unexpected_failure_sends_classified_error(self, message_activity):
        bot = _bot(detect_intent=AsyncMock(side_effect=KeyError("queryResult")))
        replies = await bot.on_turn(message_activity)
        assert "Unexpected response format" in replies[0]["text"]

    @pytest.mark.asyncio
    async def test_message_without_text_is_ignored(self, message_activity):
        message_activity.pop("text")
        message_activity["value"] = {"action": "submit"}
        bot = _bot()

        assert await bot.on_turn(message_activity) == []
        bot.session_client.detect_intent.assert_not_awaited()
        bot.adapter.send_activities.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_whitespace_text_is_ignored(self, message_activity):
        message_activity["text"] = "   "
        bot = _bot()
        assert await bot.on_turn(message_activity) == []
        bot.session_client.detect_intent.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_reply_batch(self, message_activity):
        bot = _bot(detect_intent=AsyncMock(return_value={"responseMessages": []}))
        assert await bot.on_turn(message_activity) == []


class TestMembersAdded:
    @pytest.mark.asyncio
    async def test_welcomes_each_new_member(self, members_added_activity):
        welcome = {"responseMessages": [{"text": {"text": ["Welcome!"]}}]}
        bot = _bot(detect_event=AsyncMock(return_value=welcome))

        replies = await bot.on_turn(members_added_activity)

        bot.session_client.detect_intent_with_event.assert_awaited_once_with("TEAMS_WELCOME", "29:user-2")
        assert replies == [{"type": "message", "text": "Welcome!"}]
        bot.session_client.detect_intent.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_members_without_id_are_skipped(self):
        activity = {
            "type": "conversationUpdate",
            "recipient": {"id": "bot"},
            "conversation": {"id": "c"},
            "membersAdded": [{"name": "no id"}, {"id": "29:user-2"}],
        }
        bot = _bot(detect_event=AsyncMock(return_value={"responseMessages": [{"text": {"text": ["Hi"]}}]}))

        replies = await bot.on_turn(activity)

        bot.session_client.detect_intent_with_event.assert_awaited_once_with("TEAMS_WELCOME", "29:user-2")
        assert replies == [{"type": "message", "text": "Hi"}]


class TestOtherActivities:
    @pytest.mark.asyncio
    async def test_ignored(self):
        bot = _bot()
        assert await bot.on_turn({"type": "typing", "conversation": {"id": "c"}}) == []
        bot.adapter.send_activities.assert_not_awaited()


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_turns_in_one_conversation_are_serialised(self, message_activity):
        active = 0
        peak = 0

        async def slow_detect(text, session_id):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return {}

        bot = _bot(detect_intent=AsyncMock(side_effect=slow_detect))
        await asyncio.gather(*(bot.on_turn(dict(message_activity)) for _ in range(3)))
        assert peak == 1

    @pytest.mark.asyncio
    async def test_different_conversations_overlap(self, message_activity):
        active = 0
        peak = 0

        async def slow_detect(text, session_id):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return {}

        bot = _bot(detect_intent=AsyncMock(side_effect=slow_detect))
        other = dict(message_activity, conversation={"id": "a:conv-2"})
        await asyncio.gather(bot.on_turn(message_activity), bot.on_turn(other))
        assert peak == 2

    @pytest.mark.asyncio
    async def test_locks_released_after_sequential_turns(self, message_activity):
        bot = _bot()
        for i in range(1000):
            await bot.on_turn(dict(message_activity, conversation={"id": f"conv-{i}"}))
        assert bot._locks == {}
        assert bot._waiters == {}

    @pytest.mark.asyncio
    async def test_locks_released_after_concurrent_turns(self, message_activity):
        async def slow_detect(text, session_id):
            await asyncio.sleep(0.01)
            return {}

        bot = _bot(detect_intent=AsyncMock(side_effect=slow_detect))
        await asyncio.gather(*(bot.on_turn(dict(message_activity)) for _ in range(3)))
        assert bot._locks == {}

    @pytest.mark.asyncio
    async def test_lock_released_when_turn_fails(self, message_activity):
        bot = _bot()
        bot.adapter.send_activities = AsyncMock(side_effect=RuntimeError("connector down"))
        with pytest.raises(RuntimeError):
            await bot.on_turn(message_activity)
        assert bot._locks == {}


class TestBuildBot:
    def test_from_settings(self):
        settings = TeamsflowSettings(
            google_project_id="proj",
            dialogflow_agent_id="agent",
            platform="TEAMS",
            welcome_event="HELLO",
            _env_file=None,
        )
        bot = build_bot(settings)
        assert bot.session_client.session_path("s") == (
            "projects/proj/locations/us-central1/agents/agent/sessions/s"
        )
        assert bot.welcome_event == "HELLO"
        assert not bot.adapter.credentials.enabled
