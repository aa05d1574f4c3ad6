"""In-memory tree over a distribution archive's contents."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from update_creator_core.distribution.archive import iter_entries, split_member_name
from update_creator_core.distribution.models import ArchiveEntry, DistributionNode

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ("md5", "sha1", "sha256")


def compute_digest(content: bytes, algorithm: str = "md5") -> str:
    """Hex digest of *content*. Used as a change signal, not for security."""
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported digest algorithm: {algorithm!r}")
    return hashlib.new(algorithm, content, usedforsecurity=False).hexdigest()


class DistributionTree:
    """Tree of a distribution's files and directories, rooted inside its top-level directory.

    Built once from an archive's entries and read-only afterwards.
    """

    def __init__(
        self,
        root: DistributionNode,
        distribution_name: str = "",
        algorithm: str = "md5",
    ) -> None:
        self.root = root
        self.distribution_name = distribution_name
        self.algorithm = algorithm

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        entries: Iterable[ArchiveEntry],
        algorithm: str = "md5",
    ) -> DistributionTree:
        """Build a tree from archive *entries*, in any order.

        The top-level directory segment of each entry is stripped. Entries
        for the distribution root itself contribute no node. When a path
        shows up twice the last entry wins.
        """
        root = DistributionNode()
        distribution_name = ""
        count = 0

        for entry in entries:
            top, rel = split_member_name(entry.path)
            if not distribution_name:
                distribution_name = top
            if not rel:
                continue

            digest = "" if entry.is_directory else compute_digest(entry.content, algorithm)
            _insert(root, rel.split("/"), entry.is_directory, digest)
            count += 1

        logger.debug("built tree for %s with %d entries", distribution_name or "<empty>", count)
        return cls(root=root, distribution_name=distribution_name, algorithm=algorithm)

    @classmethod
    def from_archive(cls, path: str | Path, algorithm: str = "md5") -> DistributionTree:
        """Read the zip at *path* and build its tree."""
        return cls.build(iter_entries(path), algorithm=algorithm)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(
        self, relative_path: str, is_directory: bool
    ) -> tuple[bool, DistributionNode | None]:
        """Find the node at *relative_path* if it has the expected type.

        A node of the other type counts as not found.
        """
        node = self.root
        if relative_path:
            for segment in relative_path.split("/"):
                child = node.children.get(segment)
                if child is None:
                    return False, None
                node = child
        if node.is_directory != is_directory:
            return False, None
        return True, node

    def exists(self, relative_path: str, is_directory: bool) -> bool:
        found, _ = self.lookup(relative_path, is_directory)
        return found

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def walk(self) -> Iterator[DistributionNode]:
        """Yield every node below the root, parents before children."""
        stack = _sorted_children(self.root)
        while stack:
            node = stack.pop()
            yield node
            stack.extend(_sorted_children(node))

    def files(self) -> Iterator[DistributionNode]:
        return (n for n in self.walk() if not n.is_directory)

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())


def _insert(
    root: DistributionNode, segments: list[str], is_directory: bool, digest: str
) -> None:
    """Walk/create nodes for *segments* and write the leaf's type and digest."""
    node = root
    for segment in segments[:-1]:
        child = node.children.get(segment)
        if child is None:
            child = DistributionNode(
                name=segment,
                is_directory=True,
                relative_path=_join(node.relative_path, segment),
            )
            node.children[segment] = child
        node = child

    leaf_name = segments[-1]
    leaf = node.children.get(leaf_name)
    if leaf is None:
        leaf = DistributionNode(
            name=leaf_name,
            relative_path=_join(node.relative_path, leaf_name),
        )
        node.children[leaf_name] = leaf
    leaf.is_directory = is_directory
    leaf.content_digest = digest


def _sorted_children(node: DistributionNode) -> list[DistributionNode]:
    """Children in reverse name order, ready to be popped off a stack."""
    return [node.children[name] for name in sorted(node.children, reverse=True)]


def _join(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name
