"""Platform filtering: keep responses meant for the target channel."""

import logging
from typing import Any, Iterable, Mapping, Optional

from .messages import ResponseMessage

logger = logging.getLogger("teamsflow.conversion.filtering")


def coerce_response(item: Any) -> Optional[ResponseMessage]:
    """Turn a raw entry into a ResponseMessage, or None if it is malformed."""
    if isinstance(item, ResponseMessage):
        response = item
    elif isinstance(item, Mapping):
        response = ResponseMessage.from_dict(item)
    else:
        return None
    return response if response.kind else None


def filter_responses(responses: Optional[Iterable[Any]], platform: str) -> list[ResponseMessage]:
    """Select responses eligible for `platform`, preserving order.

    A response with no platform tags is eligible for every platform.
    Malformed entries are dropped with a warning; the rest of the batch
    still goes through.

    Args:
        responses: Raw response dicts and/or ResponseMessage instances
        platform: Target platform identifier (e.g. "TEAMS")

    Returns:
        Filtered list of ResponseMessage
    """
    if not responses:
        return []

    result = []
    for index, item in enumerate(responses):
        response = coerce_response(item)
        if response is None:
            logger.warning(f"Dropping malformed response message #{index}: {item!r:.200}")
            continue
        if response.is_for(platform):
            result.append(response)
        else:
            logger.debug(
                f"Skipping {response.kind} response tagged {sorted(response.platforms)} "
                f"(target: {platform})"
            )
    return result
