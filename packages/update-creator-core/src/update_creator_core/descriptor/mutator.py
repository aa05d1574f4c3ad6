"""Folds a distribution classification into an update descriptor."""

from __future__ import annotations

import logging

from update_creator_core.descriptor.models import UpdateDescriptor
from update_creator_core.distribution.models import ClassificationSets

logger = logging.getLogger(__name__)


def apply_classification(
    descriptor: UpdateDescriptor, sets: ClassificationSets
) -> UpdateDescriptor:
    """Append the classified paths to ``descriptor.file_changes`` in place.

    Removed directories go before leftover removed files, and a path is
    appended to ``removed_files`` at most once per call. This is not a merge:
    applying the same sets twice duplicates entries.
    """
    changes = descriptor.file_changes

    changes.modified_files.extend(sorted(sets.modified))
    logger.debug("appended %d modified files", len(sets.modified))

    seen: set[str] = set()
    removed = 0
    for path in [*sorted(sets.removed_directories), *sorted(sets.removed_files)]:
        if path in seen:
            continue
        seen.add(path)
        changes.removed_files.append(path)
        removed += 1
    logger.debug("appended %d removed files and directories", removed)

    changes.added_files.extend(sorted(sets.added))
    logger.debug("appended %d added files", len(sets.added))

    return descriptor
