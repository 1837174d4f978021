"""Conversion core — Dialogflow response messages → Teams messages.

This package is the single source of truth for reply conversion:
- Messages: response/channel data model, input shape normalisation
- Filtering: platform tag selection
- Mapping: per-kind conversion to Teams messages
- Convert: the pipeline entry point used by the turn handler
- Errors: user-facing classification of upstream failures
"""

from .messages import (
    Button,
    ChannelMessage,
    ChannelMessageKind,
    HeroCard,
    ResponseKind,
    ResponseMessage,
    is_url_action,
)
from .filtering import filter_responses
from .mapping import map_one
from .convert import convert_responses, convert_to_activities
from .errors import classify_error

__all__ = [
    # Messages
    "Button",
    "ChannelMessage",
    "ChannelMessageKind",
    "HeroCard",
    "ResponseKind",
    "ResponseMessage",
    "is_url_action",
    # Pipeline
    "filter_responses",
    "map_one",
    "convert_responses",
    "convert_to_activities",
    # Errors
    "classify_error",
]
