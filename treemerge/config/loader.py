"""YAML config loading."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import TreemergeConfig

logger = logging.getLogger(__name__)


def load_config(cli_path: str | None = None) -> TreemergeConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./treemerge.yaml"),
        Path.home() / ".treemerge" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                config = TreemergeConfig.model_validate(raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e
            logger.debug("Loaded config from %s", path)
            return config

    return TreemergeConfig()


# Default YAML template for `treemerge config init`
DEFAULT_CONFIG_TEMPLATE = """\
# treemerge.yaml

# Classifiers, in priority order: a node joins the group of the first
# classifier it matches. Keep a catch-all ("any") last, otherwise unmatched
# nodes are dropped from the summary.
classifiers:
  - name: "ARCHIVE"
    suffixes: [".zip"]
  - name: "IMAGE"
    suffixes: [".jpeg", ".jpg", ".png", ".PNG", ".JPEG", ".JPG"]
    approach: "differenciate_none_one_multiple"
  - name: "TEXT"
    suffixes: [".txt"]
  - name: "DIRECTORY"
    kind: "has_children"         # suffix | has_children | any
  - name: "OTHER"
    kind: "any"
    # approach: predicate_only | group_existence | differenciate_none_one_multiple | exact_count

hashing:
  duplicate_max: 2               # copies kept by differenciate_none_one_multiple

scan:
  ignore_patterns: [".git", "node_modules", "__pycache__", ".venv", ".tox"]

output:
  indentation: 2

# Logging
log_level: "info"              # debug | info | warn | error
"""
