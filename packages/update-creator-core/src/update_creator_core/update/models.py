"""Data models for update generation and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from update_creator_core.descriptor.models import UpdateDescriptor
from update_creator_core.distribution.models import ClassificationSets


class UpdateError(Exception):
    """Raised when an update cannot be generated from the given inputs."""


@dataclass
class GenerateResult:
    """Output of a single `generate` run."""

    update_name: str
    distribution_name: str
    classification: ClassificationSets
    descriptor: UpdateDescriptor
    zip_path: Path | None = None


class ValidationResult(BaseModel):
    """Result of validating an update zip against a previous distribution."""

    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    path: str = ""

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.valid = False
