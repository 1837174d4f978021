"""teamsflow — HTTP entry point for Bot Framework activities."""

import logging
import os
from typing import Optional

from fastapi import FastAPI, HTTPException, Request

from .bot import TeamsBot, build_bot
from .config import TeamsflowSettings, load_settings

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_log_file = os.path.expanduser("~/teamsflow.log")

logger = logging.getLogger("teamsflow")


def setup_logging(debug: bool = False):
    """Configure root logging once: stderr plus ~/teamsflow.log."""
    logging.basicConfig(
        level=logging.INFO,
        format=_log_format,
        handlers=[
            logging.StreamHandler(),                           # stderr (console)
            logging.FileHandler(_log_file, encoding="utf-8"),  # ~/teamsflow.log
        ],
    )
    logging.getLogger("teamsflow").setLevel(logging.DEBUG if debug else logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def create_app(settings: Optional[TeamsflowSettings] = None, bot: Optional[TeamsBot] = None) -> FastAPI:
    """Build the FastAPI app receiving Bot Framework activities."""
    settings = settings or load_settings()
    bot = bot or build_bot(settings)

    app = FastAPI(title="teamsflow")
    app.state.settings = settings
    app.state.bot = bot

    async def _handle_activity(request: Request) -> dict:
        try:
            activity = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Body is not valid JSON")
        if not isinstance(activity, dict):
            raise HTTPException(status_code=400, detail="Activity must be a JSON object")

        logger.debug(f"Inbound activity: type={activity.get('type')!r} id={activity.get('id')!r}")
        await bot.on_turn(activity)
        return {}

    # Bot Framework's conventional route, plus "/" for existing registrations
    app.add_api_route("/api/messages", _handle_activity, methods=["POST"])
    app.add_api_route("/", _handle_activity, methods=["POST"])

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def run(debug: bool = False):
    """Serve the app with uvicorn using configured host/port."""
    import uvicorn

    setup_logging(debug)
    settings = load_settings()
    if debug:
        settings.debug = True

    app = create_app(settings)
    logger.info(f"teamsflow listening on {settings.host}:{settings.port} (platform: {settings.platform})")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="debug" if settings.debug else "info")


if __name__ == "__main__":
    run()
