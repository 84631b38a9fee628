"""The result envelope returned by every MaskService operation.

Services never raise for bad user input.  They return
``ServiceResult(ok=False)`` carrying a :class:`ServiceError` whose ``code``
is one of :class:`ErrorCode`, and the CLI turns that into exit status 1.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Machine-readable failure codes."""

    UNKNOWN_PRESET = "UNKNOWN_PRESET"
    INVALID_MASK = "INVALID_MASK"
    INVALID_KEYS = "INVALID_KEYS"


class ServiceError(BaseModel):
    """Why an operation failed.  ``detail`` holds code-specific context."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False when ``error`` is set.
        op: Operation name (``"replay"``, ``"describe_mask"`` ...), used by
            the CLI to pick a renderer.
        data: Payload of a successful operation.
        warnings: Problems that did not stop the operation, such as a
            plugin hook raising.
        meta: Counters that only verbose output shows.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: ErrorCode | str, message: str, **detail: Any) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=str(code), message=message, detail=detail),
        )
