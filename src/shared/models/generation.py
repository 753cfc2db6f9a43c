"""Pydantic v2 models for downstream generation steps."""
from __future__ import annotations

from pydantic import BaseModel, Field


class GenerationResult(BaseModel):
    """Outcome of a schema or seed generation step."""
    message: str
    tables: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)


class ValidationOutcome(BaseModel):
    """Verdict on whether a user request fits the extracted data."""
    valid: bool
    message: str
