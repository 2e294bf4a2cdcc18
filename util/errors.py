# util/errors.py
from fastapi import HTTPException, status

from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)

    @classmethod
    def of(cls, error: ErrorMessage, detail: str | None = None) -> "AppError":
        message = error.value.message
        if detail:
            message = f"{message}: {detail}"
        return cls(message, error.value.http_status)


class EmbeddingError(Exception):
    """Remote embedding call failed or returned an unexpected payload."""


class GenerationError(Exception):
    """Remote generation call failed (transport error, timeout or non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class IndexNotBuiltError(Exception):
    """retrieve() was called on an index that was never built or was cleared."""


class AnalysisError(Exception):
    """
    Single-analysis failure. Carries the elapsed time up to the failure and the
    message of the inner cause.
    """

    def __init__(self, cause: str, processing_time: int) -> None:
        super().__init__(f"Analysis failed: {cause}")
        self.cause = cause
        self.processing_time = processing_time


class StoreError(Exception):
    """Relational store request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
