"""Microsoft Teams (Bot Framework) channel adapter."""

from .adapter import BotFrameworkAdapter, BotFrameworkError

__all__ = ["BotFrameworkAdapter", "BotFrameworkError"]
