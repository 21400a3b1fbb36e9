import logging

import uvicorn
from fastapi import FastAPI

from taskbridge.config import get_settings
from taskbridge.models.common import StatusResponse
from taskbridge.routers.bridge import router as bridge_router

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(log_level: str, force: bool = False) -> None:
    """Configure the root logger. ``force`` replaces handlers a host runtime already installed."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, force=force)


# --- FastAPI app ---

app = FastAPI(title="Taskbridge", version="0.1.0")
app.include_router(bridge_router)


@app.get("/api/status")
def api_status() -> StatusResponse:
    config = get_settings().bridge_config()
    return StatusResponse(
        secret_configured=config.secret is not None,
        token_configured=config.token is not None,
        default_project_id=config.default_project_id,
        api_base=config.api_base,
    )


def run():
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "taskbridge.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
