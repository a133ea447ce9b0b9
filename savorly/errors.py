"""Exception hierarchy for the engine and its HTTP status mapping."""


class EngineError(Exception):
    """Base class for errors the API renders as a JSON error body."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(EngineError):
    """Raised when request input is missing or invalid."""

    status_code = 400


class AuthError(EngineError):
    """Raised when the bearer credential is missing (401) or invalid (403)."""

    status_code = 401


class NotFoundError(EngineError):
    """Raised when a user, recipe or achievement does not exist."""

    status_code = 404


class UpstreamError(EngineError):
    """Raised when the inference service fails or returns unusable output.

    Recovered inside the preference extractor; never reaches a client.
    """

    status_code = 502


class StoreError(EngineError):
    """Raised when a write transaction fails and has been rolled back."""

    status_code = 500
