from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings

TODOIST_API_BASE = "https://api.todoist.com/rest/v2"


class BridgeConfig(BaseModel):
    """Process-wide values the bridge handler reads. Fixed at startup."""

    secret: str | None = None
    token: str | None = None
    default_project_id: str | None = None
    api_base: str = TODOIST_API_BASE
    timeout: float = 30.0

    model_config = {"frozen": True}


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"
    task_push_secret: str = ""
    todoist_token: str = ""
    default_todoist_project_id: str = ""
    todoist_api_base: str = TODOIST_API_BASE
    request_timeout: float = 30.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def bridge_config(self) -> BridgeConfig:
        # Empty env vars count as unset
        return BridgeConfig(
            secret=self.task_push_secret or None,
            token=self.todoist_token or None,
            default_project_id=self.default_todoist_project_id.strip() or None,
            api_base=self.todoist_api_base.rstrip("/"),
            timeout=self.request_timeout,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
