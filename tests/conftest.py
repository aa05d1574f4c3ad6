"""Shared test fixtures for Update Creator."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from update_creator_core.config.models import CreatorConfig, DiffConfig
from update_creator_core.descriptor.loader import DESCRIPTOR_TEMPLATE

DIST_NAME = "wso2am-2.1.0"


def write_zip(
    path: Path,
    files: dict[str, bytes],
    top: str = DIST_NAME,
    with_dirs: bool = True,
) -> Path:
    """Write a distribution zip whose members all sit under ``<top>/``.

    Keys ending in ``/`` are written as directory entries. With *with_dirs*
    every parent directory also gets an explicit entry, as most packaging
    tools produce; without it the directories are implicit.
    """
    names: dict[str, bytes | None] = {}
    if with_dirs:
        names[f"{top}/"] = None
    for rel, content in files.items():
        parts = rel.rstrip("/").split("/")
        if with_dirs:
            for i in range(1, len(parts)):
                names.setdefault(f"{top}/{'/'.join(parts[:i])}/", None)
        if rel.endswith("/"):
            names[f"{top}/{rel}"] = None
        else:
            names[f"{top}/{rel}"] = content

    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in names.items():
            zf.writestr(name, b"" if content is None else content)
    return path


@pytest.fixture
def make_dist(tmp_path):
    """Factory writing distribution zips into tmp_path."""

    def _make(filename: str, files: dict[str, bytes], **kwargs) -> Path:
        return write_zip(tmp_path / filename, files, **kwargs)

    return _make


@pytest.fixture
def previous_files():
    return {
        "bin/wso2server.sh": b"#!/bin/sh\necho start\n",
        "lib/old.jar": b"old jar v1",
        "lib/keep.jar": b"keep me",
        "repository/components/plugins/a_1.0.0.jar": b"plugin a",
        "repository/components/plugins/b_1.0.0.jar": b"plugin b",
        "repository/components/features/foo_1.0.0/feature.xml": b"<feature id='foo'/>",
        "repository/components/features/foo_1.0.0/runtimes/foo.jar": b"foo runtime",
        "dbscripts/mysql.sql": b"CREATE TABLE t (id INT);",
    }


@pytest.fixture
def updated_files(previous_files):
    files = dict(previous_files)
    files["lib/old.jar"] = b"old jar v2"
    del files["repository/components/plugins/b_1.0.0.jar"]
    del files["repository/components/features/foo_1.0.0/feature.xml"]
    del files["repository/components/features/foo_1.0.0/runtimes/foo.jar"]
    del files["dbscripts/mysql.sql"]
    files["repository/components/plugins/c_1.0.0.jar"] = b"plugin c"
    files["repository/components/features/foo_1.1.0/feature.xml"] = b"<feature id='foo' v='1.1'/>"
    return files


@pytest.fixture
def distributions(make_dist, previous_files, updated_files):
    """(updated, previous) distribution zips with a realistic set of changes."""
    previous = make_dist("previous/wso2am-2.1.0.zip", previous_files)
    updated = make_dist("updated/wso2am-2.1.0.zip", updated_files)
    return updated, previous


@pytest.fixture
def update_dir(tmp_path):
    """An update directory as left by `update-creator init`, plus a license."""
    d = tmp_path / "update"
    d.mkdir()
    (d / "update-descriptor.yaml").write_text(DESCRIPTOR_TEMPLATE, encoding="utf-8")
    (d / "LICENSE.txt").write_text("Apache License 2.0\n", encoding="utf-8")
    return d


@pytest.fixture
def creator_config(tmp_path):
    """Default config with staging kept inside tmp_path."""
    cfg = CreatorConfig()
    cfg.update.staging_dir = str(tmp_path / "staging")
    return cfg


@pytest.fixture
def diff_config():
    return DiffConfig()
