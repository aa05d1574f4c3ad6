"""Classification of files between a previous and an updated distribution."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from update_creator_core.config.models import DiffConfig
from update_creator_core.distribution.models import (
    ArchiveEntry,
    ClassificationSets,
    DistributionNode,
)
from update_creator_core.distribution.tree import DistributionTree

logger = logging.getLogger(__name__)


class DistributionDiffer:
    """Compares two distribution trees and sorts every path into modified, removed or added.

    Both trees must be fully built before classification starts: removals and
    modifications walk the previous tree against the updated one, additions
    walk the updated tree against the previous one.
    """

    def __init__(self, config: DiffConfig | None = None) -> None:
        self.config = config or DiffConfig()

    def classify(
        self, previous: DistributionTree, updated: DistributionTree
    ) -> ClassificationSets:
        sets = ClassificationSets()
        self._find_modified_and_removed(previous, updated, sets)
        self._find_added(previous, updated, sets)
        if self.config.features_root:
            collapse_feature_roots(sets, self.config.features_root)

        logger.debug(
            "classified %d modified, %d removed files, %d removed directories, %d added",
            len(sets.modified),
            len(sets.removed_files),
            len(sets.removed_directories),
            len(sets.added),
        )
        return sets

    # ------------------------------------------------------------------
    # Pass 1: previous against updated
    # ------------------------------------------------------------------

    def _find_modified_and_removed(
        self,
        previous: DistributionTree,
        updated: DistributionTree,
        sets: ClassificationSets,
    ) -> None:
        collapse = self.config.collapse_removed_directories
        stack: list[DistributionNode] = [previous.root]

        while stack:
            node = stack.pop()
            for name in sorted(node.children):
                child = node.children[name]
                path = child.relative_path

                if child.is_directory:
                    if collapse and not updated.exists(path, is_directory=True):
                        # Nothing below a removed directory is visited, so
                        # only the shallowest removed ancestor is recorded.
                        logger.debug("directory %s removed", path)
                        sets.removed_directories.add(path)
                        continue
                    stack.append(child)
                    continue

                found, match = updated.lookup(path, is_directory=False)
                if not found:
                    logger.debug("file %s removed", path)
                    sets.removed_files.add(path)
                elif match.content_digest != child.content_digest:
                    logger.debug("file %s modified", path)
                    sets.modified.add(path)

    # ------------------------------------------------------------------
    # Pass 2: updated against previous
    # ------------------------------------------------------------------

    def _find_added(
        self,
        previous: DistributionTree,
        updated: DistributionTree,
        sets: ClassificationSets,
    ) -> None:
        for node in updated.files():
            if not previous.exists(node.relative_path, is_directory=False):
                logger.debug("file %s added", node.relative_path)
                sets.added.add(node.relative_path)


def collapse_feature_roots(sets: ClassificationSets, features_root: str) -> None:
    """Replace removed files inside a feature directory with the feature directory.

    ``<features_root>/<feature>/...`` becomes ``<features_root>/<feature>``,
    recorded once among the removed directories. Removed directories already
    recorded below it are dropped, so only the shallowest one remains. Files
    directly under the features root and all additions are left as they are.

    Features are expected to be versioned directories that are installed and
    replaced as a whole: removing one file of a feature removes the entire
    feature directory, including files that did not change.
    """
    prefix = features_root.strip("/") + "/"
    for path in sorted(sets.removed_files):
        if not path.startswith(prefix):
            continue
        rest = path[len(prefix):]
        if "/" not in rest:
            continue
        feature_dir = prefix + rest.split("/", 1)[0]
        sets.removed_files.discard(path)
        if any(is_under(feature_dir, d) for d in sets.removed_directories):
            continue
        nested = {d for d in sets.removed_directories if is_under(d, feature_dir)}
        sets.removed_directories -= nested
        sets.removed_directories.add(feature_dir)


def is_under(path: str, directory: str) -> bool:
    """True if *path* is *directory* itself or lies somewhere below it."""
    return path == directory or path.startswith(directory + "/")


def diff_entries(
    previous_entries: Iterable[ArchiveEntry],
    updated_entries: Iterable[ArchiveEntry],
    config: DiffConfig | None = None,
) -> ClassificationSets:
    """Build both trees from raw entries and classify them."""
    config = config or DiffConfig()
    previous = DistributionTree.build(previous_entries, algorithm=config.algorithm)
    updated = DistributionTree.build(updated_entries, algorithm=config.algorithm)
    return DistributionDiffer(config).classify(previous, updated)
