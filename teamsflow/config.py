"""teamsflow configuration management."""

import logging

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


class TeamsflowSettings(BaseSettings):
    """Settings loaded from environment variables or .env file."""

    # Dialogflow: credentials come from GOOGLE_APPLICATION_CREDENTIALS
    google_project_id: Optional[str] = Field(default=None, description="Google Cloud project ID")
    dialogflow_agent_id: Optional[str] = Field(default=None, description="Dialogflow CX agent ID")
    dialogflow_location: str = Field(default="us-central1", description="Dialogflow agent region")
    language_code: str = Field(default="en", description="Language code sent with every query")

    # Microsoft Bot Framework
    microsoft_app_id: Optional[str] = Field(default=None, description="Bot app (client) ID")
    microsoft_app_password: Optional[str] = Field(default=None, description="Bot app secret")
    microsoft_tenant_id: Optional[str] = Field(default=None, description="Single-tenant bot tenant ID")

    # Conversion
    platform: str = Field(default="TEAMS", description="Platform tag replies are filtered for")
    welcome_event: str = Field(default="TEAMS_WELCOME", description="Event sent when a member joins")

    # Server
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=3978, description="HTTP port")
    debug: bool = Field(default=False, description="Debug mode")
    request_timeout: float = Field(default=30.0, description="Outbound HTTP timeout (seconds)")

    model_config = {"env_prefix": "TEAMSFLOW_", "env_file": ".env", "extra": "ignore"}


def load_settings() -> TeamsflowSettings:
    """Load settings from environment."""
    settings = TeamsflowSettings()

    logger = logging.getLogger("teamsflow.config")
    if not settings.google_project_id or not settings.dialogflow_agent_id:
        logger.warning(
            "Dialogflow project or agent ID is not set — set TEAMSFLOW_GOOGLE_PROJECT_ID "
            "and TEAMSFLOW_DIALOGFLOW_AGENT_ID. Every turn will fail until they are configured."
        )
    if not settings.microsoft_app_id:
        logger.warning(
            "TEAMSFLOW_MICROSOFT_APP_ID is not set — replies are sent without authentication "
            "(only the Bot Framework Emulator accepts that)."
        )

    return settings
