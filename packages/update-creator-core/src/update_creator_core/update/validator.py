"""Checks that an update zip can be applied on top of a previous distribution."""

from __future__ import annotations

import logging
from pathlib import Path

from update_creator_core.config.models import CreatorConfig
from update_creator_core.descriptor.loader import parse_descriptor
from update_creator_core.descriptor.models import DescriptorError
from update_creator_core.distribution.archive import is_distribution_archive, read_member
from update_creator_core.distribution.tree import DistributionTree
from update_creator_core.update.models import ValidationResult

logger = logging.getLogger(__name__)


class UpdateZipValidator:
    """Validates an update zip against the distribution it will be applied to.

    - every added and modified file listed in the descriptor must be shipped
      under ``<carbon_home>/`` in the update zip
    - every removed entry must exist in the previous distribution; entries
      ending in ``/`` must be directories, others may be a file or a
      directory
    """

    def __init__(self, config: CreatorConfig | None = None) -> None:
        self.config = config or CreatorConfig()

    def validate(self, update_zip: str | Path, previous_dist: str | Path) -> ValidationResult:
        update_zip = Path(update_zip)
        previous_dist = Path(previous_dist)
        result = ValidationResult(path=str(update_zip))

        for label, path in (("update zip", update_zip), ("previous distribution", previous_dist)):
            if not is_distribution_archive(path):
                result.add_error(f"The {label} at '{path}' does not exist or is not a zip file")
        if not result.valid:
            return result

        ucfg = self.config.update
        update_name = update_zip.stem
        member = f"{update_name}/{ucfg.descriptor_file}"
        raw = read_member(update_zip, member)
        if raw is None:
            result.add_error(f"'{member}' not found in {update_zip}")
            return result
        try:
            descriptor = parse_descriptor(raw.decode("utf-8"), source=f"{update_zip}:{member}")
        except (DescriptorError, UnicodeDecodeError) as e:
            result.add_error(str(e))
            return result

        changes = descriptor.file_changes
        if not (changes.added_files or changes.modified_files or changes.removed_files):
            result.warnings.append("Descriptor lists no file changes")

        algorithm = self.config.diff.algorithm
        update_tree = DistributionTree.from_archive(update_zip, algorithm=algorithm)
        if update_tree.distribution_name != update_name:
            result.warnings.append(
                f"Top-level directory '{update_tree.distribution_name}' does not match update name '{update_name}'"
            )

        logger.info("Checking added and modified files in the update zip")
        for rel in [*changes.added_files, *changes.modified_files]:
            if not update_tree.exists(f"{ucfg.carbon_home}/{rel}", is_directory=False):
                result.add_error(f"{rel} does not exist in update zip")

        logger.info("Checking removed files in the previous distribution")
        previous_tree = DistributionTree.from_archive(previous_dist, algorithm=algorithm)
        for rel in changes.removed_files:
            if rel.endswith("/"):
                found = previous_tree.exists(rel.rstrip("/"), is_directory=True)
            else:
                found = previous_tree.exists(rel, is_directory=False) or previous_tree.exists(
                    rel, is_directory=True
                )
            if not found:
                result.add_error(f"{rel} does not exist in previous distribution")

        logger.info(
            "Validated %s: %d error(s), %d warning(s)",
            update_zip,
            len(result.errors),
            len(result.warnings),
        )
        return result
