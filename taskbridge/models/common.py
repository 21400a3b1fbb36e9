from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    hint: str | None = None
    detail: str | None = None
    message: str | None = None
    expected: str | None = None
    index: int | None = None


class StatusResponse(BaseModel):
    secret_configured: bool
    token_configured: bool
    default_project_id: str | None = None
    api_base: str
