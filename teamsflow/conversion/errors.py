"""Channel-agnostic error classification for user-facing messages."""

import asyncio
import httpx

from ..dialogflow.errors import (
    DialogflowAuthError,
    DialogflowBadRequestError,
    DialogflowError,
    DialogflowRateLimitError,
)


def classify_error(e: Exception) -> str:
    """Classify any exception into a user-friendly message.

    Returns a short string suitable for sending directly to the user.
    """
    # 1-4: Typed Dialogflow exceptions
    if isinstance(e, DialogflowRateLimitError):
        return "Too many requests right now. Please wait a moment and try again."
    if isinstance(e, DialogflowAuthError):
        return "The bot could not authenticate with its assistant service. Please contact the bot owner."
    if isinstance(e, DialogflowBadRequestError):
        return "The assistant could not understand that request. Please rephrase and try again."
    if isinstance(e, DialogflowError):
        if e.status_code and 500 <= e.status_code < 600:
            return "The assistant service is having server issues. Please try again later."
        return "The assistant service returned an error. Please try again later."

    # 5: httpx HTTP status errors
    if isinstance(e, httpx.HTTPStatusError):
        code = e.response.status_code
        if code == 429:
            return "Too many requests right now. Please wait a moment and try again."
        if code in (401, 403):
            return "The bot could not authenticate with its assistant service. Please contact the bot owner."
        if code == 400:
            return "The assistant could not understand that request. Please rephrase and try again."
        if 500 <= code < 600:
            return "The assistant service is having server issues. Please try again later."
        return f"The assistant service returned HTTP {code}. Please try again later."

    # 6-7: Network / timeout errors
    if isinstance(e, (httpx.ReadTimeout, httpx.WriteTimeout, httpx.PoolTimeout, httpx.ConnectTimeout)):
        return "Request timed out. Please try again."
    if isinstance(e, httpx.ConnectError):
        return "Cannot reach the assistant service. Please try again shortly."

    # 8: asyncio timeout
    if isinstance(e, asyncio.TimeoutError):
        return "Request timed out. Please try again."

    # 9: Unexpected response shape
    if isinstance(e, (KeyError, IndexError)):
        return "Unexpected response format from the assistant service. Please try again."

    # 10: Fallback, include type name for debugging
    type_name = type(e).__name__
    return f"Something went wrong ({type_name}). Check logs for details."
