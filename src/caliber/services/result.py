"""The value every service method hands back to its caller.

Services never raise for expected failures (bad dates, missing lines,
unreadable journals). They return ``ServiceResult(ok=False, ...)`` with
an :class:`ErrorCode`, and the CLI decides how to show it.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    IO_ERROR = "IO_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_TAG = "INVALID_TAG"
    INVALID_DATE = "INVALID_DATE"
    INVALID_INDEX = "INVALID_INDEX"
    EMPTY_CONTENT = "EMPTY_CONTENT"


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    ``op`` names the operation and selects the renderer. ``data`` is
    only meaningful when ``ok``; ``error`` only when not. ``warnings``
    carry non-fatal notes (unknown date tokens, dropped tags) and
    ``meta`` holds out-of-band extras such as the telemetry tree.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        error = ServiceError(code=str(code), message=message, detail=detail)
        return cls(ok=False, op=op, error=error)
