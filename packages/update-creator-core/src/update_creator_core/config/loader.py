"""Config file discovery and loading for update-creator.yaml."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import CreatorConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "update-creator.yaml"

_ENV_REF = re.compile(r"\$\{(\w+)\}")


def config_search_path(cli_path: str | None = None) -> list[Path]:
    """Candidate config files, highest precedence first."""
    candidates = [Path(CONFIG_FILENAME), Path.home() / ".update-creator" / "config.yaml"]
    if cli_path:
        candidates.insert(0, Path(cli_path))
    return candidates


def load_config(cli_path: str | None = None) -> CreatorConfig:
    """Resolve config from --config, then ./update-creator.yaml, then
    ~/.update-creator/config.yaml, falling back to defaults.

    An explicit *cli_path* must exist. Empty files are skipped.
    """
    if cli_path and not Path(cli_path).is_file():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_search_path(cli_path):
        if not path.is_file():
            continue
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            logger.debug("skipping empty config %s", path)
            continue
        try:
            config = CreatorConfig(**_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        logger.debug("loaded config from %s", path)
        return config

    return CreatorConfig()


def _expand_env_vars(obj: object) -> object:
    """Substitute ${VAR} in every string of a parsed YAML document; unset vars become ''."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    return obj


# Default YAML template for `update-creator config init`
DEFAULT_CONFIG_TEMPLATE = """\
# update-creator.yaml

# Distribution diff
diff:
  algorithm: "md5"                  # md5 | sha1 | sha256
  features_root: "repository/components/features"
  collapse_removed_directories: true

# Update packaging
update:
  name_prefix: "WSO2-CARBON-UPDATE"
  descriptor_file: "update-descriptor.yaml"
  license_file: "LICENSE.txt"
  carbon_home: "carbon.home"
  staging_dir: ".update-creator/staging"
  resource_files_mandatory:
    - "LICENSE.txt"
  resource_files_optional:
    - "instructions.txt"
    - "NOT_A_CONTRIBUTION.txt"

# Logging
log_level: "info"                   # debug | info | warn | error
"""
