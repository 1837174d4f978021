"""Dialogflow engine client."""

from .client import DialogflowSessionClient, response_messages
from .errors import (
    DialogflowAuthError,
    DialogflowBadRequestError,
    DialogflowError,
    DialogflowRateLimitError,
)

__all__ = [
    "DialogflowSessionClient",
    "response_messages",
    "DialogflowError",
    "DialogflowAuthError",
    "DialogflowBadRequestError",
    "DialogflowRateLimitError",
]
