"""Dialogflow exception hierarchy — classify errors by type,
not by string matching. The turn handler catches these."""

from typing import Optional


class DialogflowError(Exception):
    """Base class for all Dialogflow client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DialogflowRateLimitError(DialogflowError):
    """429 — quota exceeded."""
    pass


class DialogflowAuthError(DialogflowError):
    """401/403 — credentials missing, expired or lacking permission."""
    pass


class DialogflowBadRequestError(DialogflowError):
    """400 — malformed query (bad session path, language, payload...)."""
    pass


def error_for_status(status_code: int, detail: str) -> DialogflowError:
    """Build the typed exception for an HTTP error status."""
    message = f"Dialogflow HTTP {status_code}: {detail[:500]}"
    if status_code == 429:
        return DialogflowRateLimitError(message, status_code)
    if status_code in (401, 403):
        return DialogflowAuthError(message, status_code)
    if status_code == 400:
        return DialogflowBadRequestError(message, status_code)
    return DialogflowError(message, status_code)
