"""UpdateGenerator: diff two distributions and package the changes as an update zip."""

from __future__ import annotations

import logging
from pathlib import Path

from update_creator_core.config.models import CreatorConfig
from update_creator_core.descriptor.loader import load_descriptor
from update_creator_core.descriptor.models import update_name
from update_creator_core.descriptor.mutator import apply_classification
from update_creator_core.distribution.archive import is_distribution_archive
from update_creator_core.distribution.differ import DistributionDiffer
from update_creator_core.distribution.tree import DistributionTree
from update_creator_core.update.assembler import UpdateAssembler
from update_creator_core.update.models import GenerateResult, UpdateError

logger = logging.getLogger(__name__)


def distribution_name(path: str | Path) -> str:
    """Product name of a distribution archive, e.g. ``wso2am-2.1.0`` for ``wso2am-2.1.0.zip``."""
    return Path(path).name.removesuffix(".zip")


class UpdateGenerator:
    """Runs the full generate workflow for one update directory.

    The update directory must already contain the descriptor and license
    files (see `update-creator init`). Both distributions are read fully
    before classification; any read error aborts the run before anything
    is written.
    """

    def __init__(self, config: CreatorConfig | None = None) -> None:
        self.config = config or CreatorConfig()

    def generate(
        self,
        updated_dist: str | Path,
        previous_dist: str | Path,
        update_dir: str | Path,
        *,
        dry_run: bool = False,
    ) -> GenerateResult:
        updated_dist = Path(updated_dist)
        previous_dist = Path(previous_dist)
        update_dir = Path(update_dir)
        ucfg = self.config.update

        self._check_update_dir(update_dir)
        self._check_distribution(updated_dist, "updated")
        self._check_distribution(previous_dist, "previous")

        descriptor = load_descriptor(update_dir / ucfg.descriptor_file)
        name = update_name(descriptor, ucfg.name_prefix)
        product = distribution_name(updated_dist)
        logger.debug("update name: %s", name)

        algorithm = self.config.diff.algorithm
        logger.info("Reading the previous %s. Please wait...", product)
        previous = DistributionTree.from_archive(previous_dist, algorithm=algorithm)
        logger.info("Reading the updated %s. Please wait...", product)
        updated = DistributionTree.from_archive(updated_dist, algorithm=algorithm)

        sets = DistributionDiffer(self.config.diff).classify(previous, updated)
        logger.info(
            "Found %d modified, %d removed and %d added file(s)",
            len(sets.modified),
            len(sets.removed_files) + len(sets.removed_directories),
            len(sets.added),
        )

        apply_classification(descriptor, sets)
        result = GenerateResult(
            update_name=name,
            distribution_name=product,
            classification=sets,
            descriptor=descriptor,
        )
        if dry_run:
            logger.debug("dry run: not writing %s.zip", name)
            return result

        zip_path = update_dir / f"{name}.zip"
        with UpdateAssembler(ucfg, name) as assembler:
            assembler.copy_resource_files(update_dir)
            assembler.write_descriptor(descriptor)
            assembler.extract_changed_files(updated_dist, sets.changed_files)
            result.zip_path = assembler.make_zip(zip_path)

        logger.info("Update for %s created successfully", product)
        return result

    # -- pre-flight checks -------------------------------------------------

    def _check_update_dir(self, update_dir: Path) -> None:
        if not update_dir.is_dir():
            raise UpdateError(
                f"Directory does not exist at '{update_dir}'. Update location must be a directory."
            )
        for name in (self.config.update.descriptor_file, self.config.update.license_file):
            if not (update_dir / name).is_file():
                raise UpdateError(f"'{name}' not found at '{update_dir}' directory.")

    @staticmethod
    def _check_distribution(path: Path, state: str) -> None:
        if not path.is_file():
            raise UpdateError(
                f"File does not exist at '{path}'. The {state} distribution must be a zip file."
            )
        if not is_distribution_archive(path):
            raise UpdateError(f"The {state} distribution at '{path}' is not a zip file.")
