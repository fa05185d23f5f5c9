"""Pydantic models for batch analysis API responses."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class BatchSubmission(BaseModel):
    """Response to ``POST /process_wallet_batch``."""

    task_id: str = Field(min_length=1)

    @field_validator("task_id", mode="before")
    @classmethod
    def coerce_task_id(cls, v: Any) -> Any:
        """Task ids are opaque; numeric ids become strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class BatchStatus(BaseModel):
    """Response to ``GET /batch_status/{task_id}``.

    Attributes:
        status: Job state; ``completed`` and ``error`` are terminal.
        results: Raw wallet records (only meaningful when completed).
        error: Error description (only meaningful on error).
    """

    status: Literal["processing", "completed", "error"]
    results: list[Any] = Field(default_factory=list)
    error: str | None = None

    @field_validator("results", mode="before")
    @classmethod
    def null_results(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("error", mode="before")
    @classmethod
    def stringify_error(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @property
    def is_terminal(self) -> bool:
        return self.status != "processing"
