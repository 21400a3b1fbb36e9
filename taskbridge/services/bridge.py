"""Translate a project + subtasks payload into Todoist task creations.

One parent task is created from ``project``, then each entry of ``subtasks`` is
created in order with ``parent_id`` pointing at it. Every step before the first
Todoist call is a gate that ends the request with an error envelope. The first
failed create call stops the run; tasks already created stay in Todoist.
"""

import hmac
import json
import logging
import math
import re
from collections.abc import Callable
from typing import Any

from taskbridge.config import BridgeConfig
from taskbridge.exceptions import (
    BadPayloadError,
    BridgeError,
    ExternalCallFailed,
    InvalidBodyError,
    MethodNotAllowedError,
    MissingConfigurationError,
    ParentTaskFailed,
    SubtaskFailed,
    UnauthorizedError,
)
from taskbridge.models.bridge import BridgeRequest, BridgeResponse, BridgeResult, DryRunResult
from taskbridge.services.todoist import TodoistClient

logger = logging.getLogger(__name__)

SECRET_HEADER = "x-task-push-secret"
DRY_RUN_HEADER = "x-dry-run"
DRY_RUN_PARAM = "dryRun"

_NUMERIC_ID = re.compile(r"[0-9]+")

# Copied only when not None
_OPTIONAL_FIELDS = ("description", "labels", "priority")
# Copied only when truthy by JSON-client rules (empty objects and lists count)
_DATE_FIELDS = ("due", "due_string")


def is_truthy(value: Any) -> bool:
    """Truthiness as JSON clients see it: empty objects and lists count as present."""
    if isinstance(value, (dict, list)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def extract_secret(headers: dict[str, str]) -> str | None:
    """Return the caller's secret from x-task-push-secret or an Authorization Bearer token."""
    authorization = headers.get("authorization", "")
    bearer = authorization[len("Bearer "):] if authorization.startswith("Bearer ") else None
    return headers.get(SECRET_HEADER) or bearer


def is_authorized(headers: dict[str, str], expected: str | None) -> bool:
    incoming = extract_secret(headers)
    if not incoming or not expected:
        return False
    return hmac.compare_digest(incoming.encode("utf-8"), expected.encode("utf-8"))


def parse_body(body: Any) -> dict:
    """Return the request body as a dict, parsing JSON text if needed.

    Unparseable text and non-object JSON raise InvalidBodyError.
    """
    if not body or isinstance(body, (str, bytes, bytearray)):
        try:
            body = json.loads(body or "{}")
        except ValueError:
            body = None
    if not isinstance(body, dict):
        raise InvalidBodyError()
    return body


def validate_payload(body: dict) -> tuple[dict, list[dict]]:
    project = body.get("project")
    subtasks = body.get("subtasks")
    if not isinstance(project, dict) or not is_truthy(project.get("title")) or not isinstance(subtasks, list):
        raise BadPayloadError()
    if not all(isinstance(subtask, dict) for subtask in subtasks):
        raise BadPayloadError()
    return project, subtasks


def is_dry_run(request: BridgeRequest, headers: dict[str, str]) -> bool:
    return request.query.get(DRY_RUN_PARAM) == "true" or headers.get(DRY_RUN_HEADER) == "true"


def resolve_project_id(raw: Any, default: str | None = None) -> str | None:
    """Resolve the Todoist project id for every task in the request.

    Accepts any number or an all-digits string. Anything else (a project name,
    a boolean) falls back to ``default``. Fractional numbers are forwarded as
    their decimal text. None means "omit the field" and Todoist files the task
    in the Inbox.
    """
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, float):
        return _format_number(raw)
    if isinstance(raw, str) and _NUMERIC_ID.fullmatch(raw.strip()):
        return raw.strip()
    return default


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def build_task_payload(content: Any, source: dict, project_id: str | None) -> dict:
    payload: dict = {}
    if content is not None:
        payload["content"] = content
    if project_id is not None:
        payload["project_id"] = project_id
    for field in _OPTIONAL_FIELDS:
        if source.get(field) is not None:
            payload[field] = source[field]
    for field in _DATE_FIELDS:
        if is_truthy(source.get(field)):
            payload[field] = source[field]
    return payload


def _default_client(config: BridgeConfig) -> TodoistClient:
    return TodoistClient(config.token, base_url=config.api_base, timeout=config.timeout)


class BridgeHandler:
    def __init__(
        self,
        config: BridgeConfig,
        client_factory: Callable[[BridgeConfig], TodoistClient] = _default_client,
    ):
        self.config = config
        self.client_factory = client_factory

    def handle(self, request: BridgeRequest) -> BridgeResponse:
        """Run one bridge request. Never raises; every outcome is a JSON response."""
        try:
            return self._handle(request)
        except ExternalCallFailed as e:
            logger.warning("%s with status %s", e.error, e.status_code)
            return BridgeResponse(status_code=e.status_code, content=e.to_content())
        except BridgeError as e:
            logger.warning("Rejected request: %s %s", e.status_code, e.error)
            return BridgeResponse(status_code=e.status_code, content=e.to_content())
        except Exception as e:
            logger.exception("Unhandled exception while bridging tasks")
            return BridgeResponse(
                status_code=500,
                content={"error": "Unhandled exception", "message": str(e)},
            )

    def _handle(self, request: BridgeRequest) -> BridgeResponse:
        if request.method.upper() != "POST":
            raise MethodNotAllowedError()

        headers = {name.lower(): value for name, value in request.headers.items()}
        if not is_authorized(headers, self.config.secret):
            raise UnauthorizedError()

        project, subtasks = validate_payload(parse_body(request.body))

        dry_run = is_dry_run(request, headers)
        if not self.config.token and not dry_run:
            raise MissingConfigurationError("TODOIST_TOKEN")

        project_id = resolve_project_id(project.get("todoist_project_id"), self.config.default_project_id)
        parent_payload = build_task_payload(project["title"], project, project_id)
        children_payloads = [
            build_task_payload(subtask.get("content"), subtask, project_id) for subtask in subtasks
        ]

        if dry_run:
            logger.info("Dry run: parent %r with %d subtasks", parent_payload["content"], len(children_payloads))
            result = DryRunResult(parent_payload=parent_payload, children_payloads_count=len(children_payloads))
            return BridgeResponse(status_code=200, content=result.model_dump(by_alias=True))

        return self._create_tree(parent_payload, children_payloads)

    def _create_tree(self, parent_payload: dict, children_payloads: list[dict]) -> BridgeResponse:
        client = self.client_factory(self.config)

        try:
            parent = client.create_task(parent_payload)
        except ExternalCallFailed as e:
            raise ParentTaskFailed(e.status_code, e.detail) from e
        logger.info("Created parent task %s", parent["id"])

        created = []
        for index, payload in enumerate(children_payloads):
            try:
                child = client.create_task({**payload, "parent_id": parent["id"]})
            except ExternalCallFailed as e:
                raise SubtaskFailed(e.status_code, e.detail, index) from e
            logger.info("Created subtask %s under %s", child.get("id"), parent["id"])
            created.append(child)

        result = BridgeResult(parent=parent, subtasks=created)
        return BridgeResponse(status_code=200, content=result.model_dump())
