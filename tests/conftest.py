import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from taskbridge.config import BridgeConfig, get_settings
from taskbridge.models.bridge import BridgeRequest
from taskbridge.services.bridge import BridgeHandler


SECRET = "s3cret"
TOKEN = "todoist-token"

# --- Canned Todoist API records ---

TODOIST_PARENT = {
    "id": "2995104339",
    "content": "Launch website",
    "project_id": "2203306141",
    "parent_id": None,
    "url": "https://todoist.com/showTask?id=2995104339",
}


def todoist_child(task_id: str, content: str) -> dict:
    return {"id": task_id, "content": content, "parent_id": TODOIST_PARENT["id"]}


def bridge_body(*contents: str, **project) -> dict:
    return {
        "project": {"title": "Launch website", **project},
        "subtasks": [{"content": c} for c in contents],
    }


def make_request(body=None, method="POST", headers=None, query=None) -> BridgeRequest:
    """BridgeRequest authenticated with SECRET unless headers are given."""
    return BridgeRequest(
        method=method,
        headers={"x-task-push-secret": SECRET} if headers is None else headers,
        query=query or {},
        body=body,
    )


@pytest.fixture
def config():
    return BridgeConfig(secret=SECRET, token=TOKEN)


@pytest.fixture
def mock_todoist():
    """Stand-in TodoistClient; tests set create_task.side_effect."""
    return MagicMock()


@pytest.fixture
def handler(config, mock_todoist):
    return BridgeHandler(config, client_factory=lambda _config: mock_todoist)


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Isolate Settings from the host environment and any local .env file."""
    for var in (
        "TASK_PUSH_SECRET",
        "TODOIST_TOKEN",
        "DEFAULT_TODOIST_PROJECT_ID",
        "TODOIST_API_BASE",
        "REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def api_client(handler):
    """FastAPI TestClient whose bridge routes use the mocked handler."""
    from taskbridge.main import app
    from taskbridge.routers.bridge import get_bridge_handler

    app.dependency_overrides[get_bridge_handler] = lambda: handler
    yield TestClient(app)
    app.dependency_overrides.clear()
