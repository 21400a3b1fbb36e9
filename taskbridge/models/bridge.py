from typing import Any

from pydantic import BaseModel, Field


class BridgeRequest(BaseModel):
    method: str
    headers: dict[str, str] = {}  # names lower-cased
    query: dict[str, str] = {}
    body: Any = None  # parsed object, raw JSON str/bytes, or None


class BridgeResponse(BaseModel):
    status_code: int
    content: dict


class DryRunResult(BaseModel):
    dry_run: bool = Field(True, serialization_alias="dryRun")
    parent_payload: dict = Field(serialization_alias="parentPayload")
    children_payloads_count: int = Field(serialization_alias="childrenPayloadsCount")
    hint: str = "Remove ?dryRun=true to actually create tasks"


class BridgeResult(BaseModel):
    parent: dict
    subtasks: list[dict]
