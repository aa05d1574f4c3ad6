"""Reading and writing update-descriptor.yaml."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from update_creator_core.descriptor.models import DescriptorError, UpdateDescriptor

logger = logging.getLogger(__name__)

_NUMERIC_TAGS = {"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"}


class _DescriptorLoader(yaml.SafeLoader):
    """SafeLoader that keeps numeric-looking scalars as strings.

    Update numbers such as ``0010`` would otherwise load as octal ints.
    """


_DescriptorLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_descriptor(raw: str, source: str | Path = "<string>") -> UpdateDescriptor:
    """Parse and validate descriptor YAML text."""
    try:
        data = yaml.load(raw, Loader=_DescriptorLoader)
    except yaml.YAMLError as e:
        raise DescriptorError(source, f"invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise DescriptorError(source, "expected a mapping at the top level")
    try:
        return UpdateDescriptor(**data)
    except ValidationError as e:
        raise DescriptorError(source, str(e)) from e


def load_descriptor(path: str | Path) -> UpdateDescriptor:
    """Read and validate the descriptor at *path*."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DescriptorError(path, f"cannot read file: {e}") from e
    descriptor = parse_descriptor(raw, source=path)
    logger.debug("loaded descriptor %s (update %s)", path, descriptor.update_number)
    return descriptor


def dump_descriptor(descriptor: UpdateDescriptor) -> str:
    return yaml.safe_dump(
        descriptor.model_dump(),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def save_descriptor(descriptor: UpdateDescriptor, path: str | Path) -> Path:
    """Write *descriptor* to *path*, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_descriptor(descriptor), encoding="utf-8")
    logger.debug("saved descriptor to %s", path)
    return path


# Written by `update-creator init`
DESCRIPTOR_TEMPLATE = """\
update_number: "0001"
platform_version: "4.4.0"
platform_name: "wilkes"
applies_to: "<applicable products>"
bug_fixes:
  N/A: N/A
description: |
  <description of the update>
file_changes:
  added_files: []
  removed_files: []
  modified_files: []
"""

# Printed by `update-creator init --sample`
DESCRIPTOR_SAMPLE = """\
update_number: 0001
platform_version: 4.4.0
platform_name: wilkes
applies_to: All the products based on carbon 4.4.1
bug_fixes:
  CARBON-15395: Upgrade Hazelcast version to 3.5.2
description: |
  This update contains the relevant fixes for upgrading Hazelcast to 3.5.2.
  Applying it requires a full cluster restart.
file_changes:
  added_files: []
  removed_files:
  - repository/components/plugins/org.wso2.carbon.logging.admin.ui_4.4.7.jar
  modified_files:
  - repository/components/plugins/activity-all_5.21.0.wso2v1.jar
"""
