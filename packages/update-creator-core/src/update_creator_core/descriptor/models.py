"""Pydantic models for the update descriptor (update-descriptor.yaml)."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

_UPDATE_NUMBER_RE = re.compile(r"\d+")
_PLATFORM_VERSION_RE = re.compile(r"\d+(\.\d+)+")


class DescriptorError(Exception):
    """Raised when an update descriptor cannot be read or fails validation."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"invalid update descriptor {self.path}: {reason}")


class FileChanges(BaseModel):
    """Files an update adds, removes or modifies, relative to the distribution root."""

    added_files: list[str] = Field(default_factory=list)
    removed_files: list[str] = Field(default_factory=list)
    modified_files: list[str] = Field(default_factory=list)

    @field_validator("added_files", "removed_files", "modified_files", mode="before")
    @classmethod
    def none_as_empty(cls, v: object) -> object:
        return [] if v is None else v


class UpdateDescriptor(BaseModel):
    """Manifest shipped inside every update zip."""

    update_number: str
    platform_version: str
    platform_name: str = Field(min_length=1)
    applies_to: str = ""
    bug_fixes: dict[str, str] = Field(default_factory=dict)
    description: str = ""
    file_changes: FileChanges = Field(default_factory=FileChanges)

    @field_validator("update_number")
    @classmethod
    def validate_update_number(cls, v: str) -> str:
        if not _UPDATE_NUMBER_RE.fullmatch(v):
            raise ValueError(f"update_number must be numeric, got {v!r}")
        return v

    @field_validator("platform_version")
    @classmethod
    def validate_platform_version(cls, v: str) -> str:
        if not _PLATFORM_VERSION_RE.fullmatch(v):
            raise ValueError(f"platform_version must look like 4.4.0, got {v!r}")
        return v

    @field_validator("bug_fixes", mode="before")
    @classmethod
    def none_as_empty(cls, v: object) -> object:
        return {} if v is None else v

    @field_validator("file_changes", mode="before")
    @classmethod
    def missing_file_changes(cls, v: object) -> object:
        return {} if v is None else v


def update_name(descriptor: UpdateDescriptor, prefix: str) -> str:
    """Name used for the update zip and its top-level directory."""
    return f"{prefix}-{descriptor.platform_version}-{descriptor.update_number}"
