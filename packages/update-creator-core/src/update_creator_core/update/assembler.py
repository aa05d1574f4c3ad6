"""UpdateAssembler: stages changed files and resources, then writes the update zip."""

from __future__ import annotations

import logging
import shutil
import signal
import threading
import zipfile
from collections.abc import Iterable
from pathlib import Path

from update_creator_core.config.models import UpdateConfig
from update_creator_core.descriptor.loader import save_descriptor
from update_creator_core.descriptor.models import UpdateDescriptor
from update_creator_core.distribution.archive import READ_ERRORS, split_member_name
from update_creator_core.distribution.models import ArchiveReadError
from update_creator_core.update.models import UpdateError

logger = logging.getLogger(__name__)


def _interrupt(signum, frame):
    raise KeyboardInterrupt(f"received signal {signum}")


class UpdateAssembler:
    """Builds an update in a staging directory and zips it.

    Use as a context manager: the staging directory is created on entry and
    removed on exit, including when the run is interrupted. SIGTERM is
    turned into KeyboardInterrupt while the context is active so the same
    cleanup path runs.

    Layout of the staging directory::

        <staging_dir>/<update_name>/
            update-descriptor.yaml
            LICENSE.txt
            <carbon_home>/<relative path of each added or modified file>
    """

    def __init__(
        self,
        config: UpdateConfig,
        update_name: str,
        staging_dir: str | Path | None = None,
    ) -> None:
        self.config = config
        self.update_name = update_name
        self.staging_root = Path(staging_dir or config.staging_dir)
        self.update_root = self.staging_root / update_name
        self.carbon_home = self.update_root / config.carbon_home
        self._previous_handler = None
        self._created_parents: list[Path] = []

    # -- context management ------------------------------------------------

    def __enter__(self) -> UpdateAssembler:
        if self.update_root.exists():
            logger.debug("removing stale staging directory %s", self.update_root)
            shutil.rmtree(self.update_root)
        self._created_parents = [p for p in self.staging_root.parents if not p.exists()]
        self.carbon_home.mkdir(parents=True)
        if threading.current_thread() is threading.main_thread():
            self._previous_handler = signal.signal(signal.SIGTERM, _interrupt)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._previous_handler is not None:
            signal.signal(signal.SIGTERM, self._previous_handler)
            self._previous_handler = None
        self.cleanup()

    def cleanup(self) -> None:
        """Remove this update's staging directory.

        The staging root, and any parent directories created for it on entry,
        are removed too while they are empty.
        """
        shutil.rmtree(self.update_root, ignore_errors=True)
        for directory in [self.staging_root, *self._created_parents]:
            try:
                directory.rmdir()
            except OSError:
                break
        logger.debug("cleaned up staging directory %s", self.update_root)

    # -- staging -------------------------------------------------------------

    def copy_resource_files(self, update_dir: str | Path) -> list[str]:
        """Copy mandatory and optional resource files from *update_dir*.

        A missing mandatory file is an error; missing optional files are skipped.
        Returns the names of the files copied.
        """
        update_dir = Path(update_dir)
        copied: list[str] = []

        for name in self.config.resource_files_mandatory:
            src = update_dir / name
            if not src.is_file():
                raise UpdateError(
                    f"Mandatory resource file '{name}' not found in {update_dir}"
                )
            shutil.copy2(src, self.update_root / name)
            copied.append(name)

        for name in self.config.resource_files_optional:
            src = update_dir / name
            if not src.is_file():
                logger.info("Optional resource file '%s' not copied.", name)
                continue
            shutil.copy2(src, self.update_root / name)
            copied.append(name)

        logger.debug("copied resource files: %s", copied)
        return copied

    def write_descriptor(self, descriptor: UpdateDescriptor) -> Path:
        return save_descriptor(descriptor, self.update_root / self.config.descriptor_file)

    def extract_changed_files(
        self, updated_dist: str | Path, relative_paths: Iterable[str]
    ) -> int:
        """Copy the given members of the updated distribution under carbon home.

        Members are streamed one at a time. Returns the number of files copied.
        """
        updated_dist = Path(updated_dist)
        wanted = set(relative_paths)
        carbon_home = self.carbon_home.resolve()
        copied: set[str] = set()

        try:
            with zipfile.ZipFile(updated_dist) as zf:
                for info in zf.infolist():
                    if info.is_dir():
                        continue
                    _, rel = split_member_name(info.filename)
                    if rel not in wanted:
                        continue
                    dest = self.carbon_home / rel
                    # Guard against member names escaping the staging directory
                    if not dest.resolve().is_relative_to(carbon_home):
                        raise UpdateError(f"Refusing to extract {info.filename!r} outside staging")
                    dest.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(info) as src, open(dest, "wb") as dst:
                        shutil.copyfileobj(src, dst)
                    copied.add(rel)
                    logger.debug("copied %s to staging", rel)
        except READ_ERRORS as e:
            raise ArchiveReadError(updated_dist, e) from e

        missing = wanted - copied
        if missing:
            raise UpdateError(
                f"{len(missing)} changed file(s) not found in {updated_dist}: "
                + ", ".join(sorted(missing)[:5])
            )
        return len(copied)

    # -- output --------------------------------------------------------------

    def make_zip(self, destination: str | Path) -> Path:
        """Zip the staged update so that every member sits under ``<update_name>/``.

        The archive is written next to *destination* and moved into place
        only once complete.
        """
        destination = Path(destination)
        if destination.resolve().is_relative_to(self.staging_root.resolve()):
            raise UpdateError("Update zip must not be written inside the staging directory")

        destination.parent.mkdir(parents=True, exist_ok=True)
        partial = destination.with_name(destination.name + ".part")

        rel_paths = sorted(
            p.relative_to(self.update_root).as_posix()
            for p in self.update_root.rglob("*")
        )
        try:
            with zipfile.ZipFile(partial, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
                for rel in rel_paths:
                    src = self.update_root / rel
                    arcname = f"{self.update_name}/{rel}"
                    if src.is_dir():
                        zf.writestr(arcname + "/", b"")
                    else:
                        zf.write(src, arcname)
            partial.replace(destination)
        finally:
            partial.unlink(missing_ok=True)

        logger.info("wrote update zip %s (%d entries)", destination, len(rel_paths))
        return destination
