"""Conversion entry point: Dialogflow responses → Teams messages.

Pipeline order:
1. Filter by platform tag (untagged responses always pass)
2. Map each survivor to zero or one Teams message
3. Keep input order; never merge
"""

import logging
from typing import Any, Iterable, Optional

from .filtering import filter_responses
from .mapping import map_one
from .messages import ChannelMessage

logger = logging.getLogger("teamsflow.conversion")


def convert_responses(raw_responses: Optional[Iterable[Any]], platform: str) -> list[ChannelMessage]:
    """Convert one turn's response messages for delivery on `platform`.

    Args:
        raw_responses: Response message dicts from the engine (may be None)
        platform: Target platform identifier (e.g. "TEAMS")

    Returns:
        Ordered list of ChannelMessage (possibly empty)
    """
    filtered = filter_responses(raw_responses, platform)
    namespace = platform.lower()

    replies = []
    for response in filtered:
        message = map_one(response, namespace)
        if message is not None:
            replies.append(message)

    logger.debug(f"Converted {len(filtered)} {platform} responses into {len(replies)} messages")
    return replies


def convert_to_activities(raw_responses: Optional[Iterable[Any]], platform: str) -> list[dict]:
    """Same as convert_responses, rendered as Bot Framework activity dicts."""
    return [m.to_activity() for m in convert_responses(raw_responses, platform)]
