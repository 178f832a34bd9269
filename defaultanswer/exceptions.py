"""Custom exceptions for the readiness engine.

Page content never raises: extraction and scoring degrade to sentinel
results. These exceptions cover caller contract violations only.
"""

from typing import Any


class DefaultAnswerError(Exception):
    """Base exception for the readiness engine."""

    def __init__(
        self,
        message: str,
        code: str = "error",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class EmptyRunsError(DefaultAnswerError, ValueError):
    """Aggregation was requested over zero cold-summary runs."""

    def __init__(self, message: str = "At least one cold-summary run is required"):
        super().__init__(message=message, code="empty_runs")


class RubricError(DefaultAnswerError):
    """Rubric definition violates the category budget invariant."""

    def __init__(self, message: str, category: str | None = None):
        details = {"category": category} if category else {}
        super().__init__(message=message, code="rubric_error", details=details)
