"""Tests for distribution archive reading and the distribution tree."""

from __future__ import annotations

import hashlib
import zipfile

import pytest

from update_creator_core.distribution import (
    ArchiveEntry,
    ArchiveReadError,
    DistributionTree,
    build_tree,
    compute_digest,
    is_distribution_archive,
    iter_entries,
    read_member,
    split_member_name,
)

from conftest import write_zip


def _entries(*specs: tuple[str, bytes | None]) -> list[ArchiveEntry]:
    """ArchiveEntry list from (name, content) pairs; None content means directory."""
    return [
        ArchiveEntry(path=name, is_directory=content is None, content=content or b"")
        for name, content in specs
    ]


# ── compute_digest ───────────────────────────────────────────────────


def test_digest_is_md5_hex_by_default():
    """Default digest matches hashlib's md5 of the same bytes."""
    assert compute_digest(b"hello") == hashlib.md5(b"hello").hexdigest()


def test_digest_empty_content():
    """Empty content has the well-known md5 of the empty string."""
    assert compute_digest(b"") == "d41d8cd98f00b204e9800998ecf8427e"


def test_digest_other_algorithms():
    """sha1 and sha256 are accepted and differ from md5."""
    assert compute_digest(b"x", "sha1") == hashlib.sha1(b"x").hexdigest()
    assert compute_digest(b"x", "sha256") == hashlib.sha256(b"x").hexdigest()


def test_digest_rejects_unknown_algorithm():
    with pytest.raises(ValueError, match="Unsupported"):
        compute_digest(b"x", "crc32")


# ── split_member_name ────────────────────────────────────────────────


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("wso2am-2.1.0/", ("wso2am-2.1.0", "")),
        ("wso2am-2.1.0", ("wso2am-2.1.0", "")),
        ("wso2am-2.1.0/bin/", ("wso2am-2.1.0", "bin")),
        ("wso2am-2.1.0/lib/a.jar", ("wso2am-2.1.0", "lib/a.jar")),
    ],
)
def test_split_member_name(name, expected):
    assert split_member_name(name) == expected


# ── Build ────────────────────────────────────────────────────────────


def test_build_strips_top_level_directory():
    """Relative paths never include the distribution's top-level directory."""
    tree = DistributionTree.build(_entries(
        ("wso2am-2.1.0/", None),
        ("wso2am-2.1.0/lib/", None),
        ("wso2am-2.1.0/lib/a.jar", b"a"),
    ))
    assert tree.distribution_name == "wso2am-2.1.0"
    found, node = tree.lookup("lib/a.jar", is_directory=False)
    assert found
    assert node.relative_path == "lib/a.jar"
    assert node.name == "a.jar"


def test_build_root_entry_adds_no_node():
    """The distribution root entry contributes nothing to the walk."""
    tree = DistributionTree.build(_entries(("wso2am-2.1.0/", None)))
    assert len(tree) == 0
    assert tree.distribution_name == "wso2am-2.1.0"


def test_build_creates_implicit_directories():
    """Parents missing from the archive are created as directory nodes."""
    tree = DistributionTree.build(_entries(("dist/a/b/c.txt", b"c")))
    assert tree.exists("a", is_directory=True)
    assert tree.exists("a/b", is_directory=True)
    assert tree.exists("a/b/c.txt", is_directory=False)


def test_build_is_order_independent():
    """A file listed before its parent directory ends up in the same tree."""
    forward = DistributionTree.build(_entries(
        ("dist/", None), ("dist/lib/", None), ("dist/lib/a.jar", b"a"),
    ))
    backward = DistributionTree.build(_entries(
        ("dist/lib/a.jar", b"a"), ("dist/lib/", None), ("dist/", None),
    ))
    assert [n.relative_path for n in forward.walk()] == [n.relative_path for n in backward.walk()]
    assert backward.exists("lib", is_directory=True)


def test_build_records_digest_per_file():
    """Files carry their digest, directories carry none."""
    tree = DistributionTree.build(_entries(("dist/lib/", None), ("dist/lib/a.jar", b"a")))
    _, lib = tree.lookup("lib", is_directory=True)
    _, jar = tree.lookup("lib/a.jar", is_directory=False)
    assert lib.content_digest == ""
    assert jar.content_digest == compute_digest(b"a")


def test_build_duplicate_path_last_wins():
    """A path listed twice keeps the type and digest of the last entry."""
    tree = DistributionTree.build(_entries(("dist/a.txt", b"first"), ("dist/a.txt", b"second")))
    _, node = tree.lookup("a.txt", is_directory=False)
    assert node.content_digest == compute_digest(b"second")
    assert len(tree) == 1


def test_build_uses_requested_algorithm():
    tree = DistributionTree.build(_entries(("dist/a.txt", b"a")), algorithm="sha256")
    _, node = tree.lookup("a.txt", is_directory=False)
    assert node.content_digest == hashlib.sha256(b"a").hexdigest()
    assert tree.algorithm == "sha256"


def test_build_tree_wrapper():
    """build_tree() is a thin wrapper around DistributionTree.build()."""
    tree = build_tree(_entries(("dist/a.txt", b"a")))
    assert tree.exists("a.txt", is_directory=False)


def test_build_empty_entries():
    tree = DistributionTree.build([])
    assert tree.distribution_name == ""
    assert len(tree) == 0


# ── Lookup ───────────────────────────────────────────────────────────


@pytest.fixture
def small_tree():
    return DistributionTree.build(_entries(
        ("dist/", None),
        ("dist/bin/", None),
        ("dist/bin/run.sh", b"run"),
        ("dist/lib/a.jar", b"a"),
    ))


def test_lookup_file(small_tree):
    found, node = small_tree.lookup("bin/run.sh", is_directory=False)
    assert found
    assert node.is_directory is False


def test_lookup_directory(small_tree):
    found, node = small_tree.lookup("lib", is_directory=True)
    assert found
    assert "a.jar" in node.children


def test_lookup_type_mismatch_is_not_found(small_tree):
    """A directory looked up as a file (and vice versa) is reported missing."""
    assert small_tree.lookup("bin", is_directory=False) == (False, None)
    assert small_tree.lookup("bin/run.sh", is_directory=True) == (False, None)


def test_lookup_missing_path(small_tree):
    assert small_tree.lookup("conf/carbon.xml", is_directory=False) == (False, None)
    assert small_tree.lookup("bin/run.sh/extra", is_directory=False) == (False, None)


def test_lookup_empty_path_is_root(small_tree):
    found, node = small_tree.lookup("", is_directory=True)
    assert found
    assert node is small_tree.root


# ── Traversal ────────────────────────────────────────────────────────


def test_walk_is_sorted_preorder(small_tree):
    """Parents come before children and siblings are in name order."""
    paths = [n.relative_path for n in small_tree.walk()]
    assert paths == ["bin", "bin/run.sh", "lib", "lib/a.jar"]


def test_files_skips_directories(small_tree):
    assert [n.relative_path for n in small_tree.files()] == ["bin/run.sh", "lib/a.jar"]


def test_len_counts_all_nodes_below_root(small_tree):
    assert len(small_tree) == 4


# ── Archive reading ─────────────────────────────────────────────────


def test_from_archive_reads_zip(tmp_path):
    path = write_zip(tmp_path / "dist.zip", {"lib/a.jar": b"a", "conf/": b""})
    tree = DistributionTree.from_archive(path)
    assert tree.distribution_name == "wso2am-2.1.0"
    assert tree.exists("lib/a.jar", is_directory=False)
    assert tree.exists("conf", is_directory=True)


def test_from_archive_without_directory_entries(tmp_path):
    """Zips that omit directory entries still produce directory nodes."""
    path = write_zip(tmp_path / "dist.zip", {"lib/ext/a.jar": b"a"}, with_dirs=False)
    tree = DistributionTree.from_archive(path)
    assert tree.exists("lib/ext", is_directory=True)


def test_iter_entries_drains_content(tmp_path):
    path = write_zip(tmp_path / "dist.zip", {"a.txt": b"hello"})
    entries = {e.path: e for e in iter_entries(path)}
    assert entries["wso2am-2.1.0/"].is_directory
    assert entries["wso2am-2.1.0/a.txt"].content == b"hello"


def test_corrupt_archive_raises_archive_read_error(tmp_path):
    """A file that is not a zip surfaces as ArchiveReadError with the cause chained."""
    bad = tmp_path / "broken.zip"
    bad.write_bytes(b"this is not a zip file")
    with pytest.raises(ArchiveReadError) as exc_info:
        DistributionTree.from_archive(bad)
    assert exc_info.value.path == str(bad)
    assert isinstance(exc_info.value.__cause__, zipfile.BadZipFile)


def test_missing_archive_raises_archive_read_error(tmp_path):
    with pytest.raises(ArchiveReadError):
        DistributionTree.from_archive(tmp_path / "nope.zip")


def test_is_distribution_archive(tmp_path):
    good = write_zip(tmp_path / "dist.zip", {"a.txt": b"a"})
    bad = tmp_path / "notes.txt"
    bad.write_text("not a zip")
    assert is_distribution_archive(good)
    assert not is_distribution_archive(bad)
    assert not is_distribution_archive(tmp_path)
    assert not is_distribution_archive(tmp_path / "missing.zip")


def test_read_member(tmp_path):
    path = write_zip(tmp_path / "dist.zip", {"conf/carbon.xml": b"<carbon/>"})
    assert read_member(path, "wso2am-2.1.0/conf/carbon.xml") == b"<carbon/>"
    assert read_member(path, "wso2am-2.1.0/conf/missing.xml") is None
