# app/core/errors.py
"""
Domain errors raised by services and dependencies.

Routes never build HTTP responses for these themselves: `app.main` registers a
single handler that turns any `AppError` into the standard error envelope using
`status_code` and `message`.
"""
from __future__ import annotations

from typing import Any


class AppError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, errors: list[dict[str, Any]] | None = None) -> None:
        self.message = message or self.message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Validation failed"


class UnauthenticatedError(AppError):
    status_code = 401
    message = "Authentication required"


class NotFoundError(AppError):
    status_code = 404
    message = "Resource not found"


class UserNotFound(NotFoundError):
    message = "User not found"


class JobNotFound(NotFoundError):
    message = "Job not found"


class ApplicationNotFound(NotFoundError):
    message = "Application not found"


class CVNotFound(NotFoundError):
    message = "CV not found"


class CoverLetterNotFound(NotFoundError):
    message = "Cover letter not found"


class ConflictError(AppError):
    status_code = 409
    message = "Resource already exists"


class AIServiceNotConfigured(AppError):
    status_code = 503
    message = "AI service is not configured. Please add OPENAI_API_KEY to your environment variables."


class AIGenerationFailed(AppError):
    status_code = 502
    message = "Failed to generate cover letter. Please try again."
