"""Error taxonomy shared by services and routers.

Each error carries the HTTP status it maps to; the handler registered in
``app.main`` turns it into a ``{"detail": ...}`` response.
"""


class TaskAppError(Exception):
    """Base exception for task manager errors."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(TaskAppError):
    """Malformed input that passed schema parsing but is still invalid."""

    status_code = 400


class NotFoundError(TaskAppError):
    """Task absent or owned by someone else (the two are indistinguishable)."""

    status_code = 404

    def __init__(self, message: str = "Task not found"):
        super().__init__(message)


class AuthError(TaskAppError):
    """No valid session attached to the request."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class StorageError(TaskAppError):
    """Transactional write failure or blob I/O failure."""

    status_code = 500

    def __init__(self, message: str = "Storage failure"):
        super().__init__(message)
