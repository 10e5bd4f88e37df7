"""ValidationResult — the non-raising outcome of a validation run."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """Aggregated pass/fail plus the error bag for one run.

    Attributes:
        ok: Whether every checked field passed.
        errors: Field key to ordered failure messages, in field-check order.
        checked: Field keys that were evaluated (fewer than configured
            when bail mode stopped the run early).
    """

    model_config = {"frozen": True}

    ok: bool
    errors: dict[str, list[str]] = Field(default_factory=dict)
    checked: list[str] = Field(default_factory=list)
