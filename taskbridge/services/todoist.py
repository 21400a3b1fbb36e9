import logging

import requests

from taskbridge.config import TODOIST_API_BASE
from taskbridge.exceptions import ExternalCallFailed
from taskbridge.http_client import get_session

logger = logging.getLogger(__name__)


class TodoistClient:
    """Thin client for the Todoist REST API task endpoint."""

    def __init__(
        self,
        token: str | None,
        base_url: str = TODOIST_API_BASE,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or get_session()

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def create_task(self, payload: dict) -> dict:
        """Create one task and return Todoist's record of it.

        Raises ExternalCallFailed with the raw response text on any non-2xx status.
        """
        resp = self.session.post(
            f"{self.base_url}/tasks",
            json=payload,
            headers=self._headers(),
            timeout=self.timeout,
        )
        if not 200 <= resp.status_code < 300:
            logger.warning("Todoist create_task returned %s", resp.status_code)
            raise ExternalCallFailed(resp.status_code, resp.text)
        return resp.json()
