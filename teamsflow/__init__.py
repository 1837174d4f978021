"""teamsflow — Dialogflow to Microsoft Teams bridge."""

__version__ = "0.1.0"
