"""Data models for the distribution diff subsystem."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


class ArchiveReadError(Exception):
    """Raised when a distribution archive cannot be read."""

    def __init__(self, path: str | Path, cause: Exception) -> None:
        self.path = str(path)
        super().__init__(f"failed to read archive {self.path}: {cause}")
        self.__cause__ = cause


@dataclass(frozen=True)
class ArchiveEntry:
    """A single member of a distribution archive, content fully drained."""

    path: str
    is_directory: bool
    content: bytes = b""


@dataclass
class DistributionNode:
    """A node in the distribution tree, representing either a file or directory.

    ``relative_path`` never includes the distribution's top-level directory.
    """

    name: str = ""
    is_directory: bool = True
    relative_path: str = ""
    content_digest: str = ""
    children: dict[str, DistributionNode] = field(default_factory=dict)


@dataclass
class ClassificationSets:
    """Result of diffing a previous distribution against an updated one."""

    modified: set[str] = field(default_factory=set)
    removed_files: set[str] = field(default_factory=set)
    removed_directories: set[str] = field(default_factory=set)
    added: set[str] = field(default_factory=set)

    @property
    def has_changes(self) -> bool:
        return bool(
            self.modified or self.removed_files or self.removed_directories or self.added
        )

    @property
    def changed_files(self) -> set[str]:
        """Paths that must be shipped inside the update (added + modified)."""
        return self.added | self.modified

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "modified": sorted(self.modified),
            "removed_files": sorted(self.removed_files),
            "removed_directories": sorted(self.removed_directories),
            "added": sorted(self.added),
        }
