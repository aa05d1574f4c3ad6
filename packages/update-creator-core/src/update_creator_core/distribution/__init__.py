"""Distribution tree and diff subsystem."""

from update_creator_core.distribution.archive import (
    is_distribution_archive,
    iter_entries,
    read_member,
    split_member_name,
)
from update_creator_core.distribution.differ import (
    DistributionDiffer,
    collapse_feature_roots,
    diff_entries,
    is_under,
)
from update_creator_core.distribution.models import (
    ArchiveEntry,
    ArchiveReadError,
    ClassificationSets,
    DistributionNode,
)
from update_creator_core.distribution.tree import DistributionTree, compute_digest


def build_tree(*args, **kwargs):
    """Convenience wrapper around DistributionTree.build()."""
    return DistributionTree.build(*args, **kwargs)


__all__ = [
    "ArchiveEntry",
    "ArchiveReadError",
    "ClassificationSets",
    "DistributionDiffer",
    "DistributionNode",
    "DistributionTree",
    "build_tree",
    "collapse_feature_roots",
    "compute_digest",
    "diff_entries",
    "is_distribution_archive",
    "is_under",
    "iter_entries",
    "read_member",
    "split_member_name",
]
