"""Helpers for reading inbound Bot Framework activities."""

from typing import Optional


def activity_type(activity: dict) -> Optional[str]:
    return activity.get("type")


def is_message(activity: dict) -> bool:
    return activity_type(activity) == "message"


def get_message_text(activity: dict) -> str:
    return activity.get("text") or ""


def is_member_added(activity: dict) -> bool:
    return isinstance(activity.get("membersAdded"), list)


def sender_id(activity: dict) -> Optional[str]:
    return (activity.get("from") or {}).get("id")


def conversation_id(activity: dict) -> Optional[str]:
    return (activity.get("conversation") or {}).get("id")


def added_members(activity: dict) -> list[dict]:
    """Members added in a conversationUpdate, excluding the bot itself.

    Entries without an id cannot be addressed and are dropped.
    """
    if not is_member_added(activity):
        return []
    bot_id = (activity.get("recipient") or {}).get("id")
    return [
        m for m in activity["membersAdded"]
        if isinstance(m, dict) and m.get("id") and m.get("id") != bot_id
    ]
