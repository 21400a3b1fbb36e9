class BridgeError(Exception):
    """Base class for failures that end a bridge request with a JSON error envelope."""

    status_code = 500
    error = "Bridge error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.error)

    def to_content(self) -> dict:
        return {"error": self.error}


class MethodNotAllowedError(BridgeError):
    """Raised when the request method is not POST."""

    status_code = 405
    error = "Method not allowed"

    def to_content(self) -> dict:
        return {"error": self.error, "hint": "Use POST with JSON body"}


class UnauthorizedError(BridgeError):
    """Raised when the shared secret is missing or does not match."""

    status_code = 401
    error = "Unauthorized"

    def to_content(self) -> dict:
        return {"error": self.error, "hint": "x-task-push-secret / Bearer mismatch"}


class InvalidBodyError(BridgeError):
    """Raised when the request body is not a JSON object."""

    status_code = 400
    error = "Invalid JSON body"


class BadPayloadError(BridgeError):
    """Raised when the body lacks project.title or a subtasks list."""

    status_code = 400
    error = "Bad payload"
    expected = "{ project: { title, todoist_project_id? }, subtasks: [{ content, ... }] }"

    def to_content(self) -> dict:
        return {"error": self.error, "expected": self.expected}


class MissingConfigurationError(BridgeError):
    """Raised when a required setting (the Todoist token) is not configured."""

    status_code = 500

    def __init__(self, setting: str):
        super().__init__(f"Missing {setting} env var")
        self.error = str(self)


class ExternalCallFailed(BridgeError):
    """Raised when the Todoist API answers a create call with a non-2xx status."""

    error = "Todoist request failed"

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"Todoist API returned {status_code}")
        self.status_code = status_code
        self.detail = detail

    def to_content(self) -> dict:
        return {"error": self.error, "detail": self.detail}


class ParentTaskFailed(ExternalCallFailed):
    """Raised when creating the parent task fails. No subtask was attempted."""

    error = "Parent task failed"


class SubtaskFailed(ExternalCallFailed):
    """Raised on the first failed subtask. Earlier tasks are left in place."""

    error = "Subtask failed"

    def __init__(self, status_code: int, detail: str, index: int):
        super().__init__(status_code, detail)
        self.index = index

    def to_content(self) -> dict:
        return {"error": self.error, "detail": self.detail, "index": self.index}
