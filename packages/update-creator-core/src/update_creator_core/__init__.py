"""Update Creator Core - distribution diffing and update packaging."""

from update_creator_core.config import CreatorConfig, load_config
from update_creator_core.descriptor import UpdateDescriptor, apply_classification, load_descriptor
from update_creator_core.distribution import (
    ClassificationSets,
    DistributionDiffer,
    DistributionTree,
)
from update_creator_core.update import UpdateGenerator, UpdateZipValidator

__version__ = "0.1.0"

__all__ = [
    "ClassificationSets",
    "CreatorConfig",
    "DistributionDiffer",
    "DistributionTree",
    "UpdateDescriptor",
    "UpdateGenerator",
    "UpdateZipValidator",
    "apply_classification",
    "load_config",
    "load_descriptor",
]
