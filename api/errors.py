"""
Exception classes for the HTTP API.
Every API error is rendered as {"message": ...} with its status code.
"""


class AppError(Exception):
    """Base application exception with an HTTP status code."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(AppError):
    """Malformed or incomplete ingestion payload (400)."""

    def __init__(
        self,
        message: str = "All primary sensor data fields are required",
        missing: list[str] | None = None,
    ) -> None:
        super().__init__(message, status_code=400)
        self.missing = missing or []


class NotFoundError(AppError):
    """No readings stored yet (404)."""

    def __init__(self, message: str = "No sensor data found") -> None:
        super().__init__(message, status_code=404)


class StorageError(AppError):
    """Store unavailable or failing (500)."""

    def __init__(self, message: str = "Error saving to store") -> None:
        super().__init__(message, status_code=500)


def error_response(error: AppError) -> dict[str, str]:
    """Build the response body for an API error."""
    return {"message": error.message}
