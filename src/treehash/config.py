"""Configuration management for treehash."""

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from treehash.errors import InvalidArgumentError

DEFAULT_INDEX_NAME = ".sha1s"

# Largest day count whose second count fits in 32 bits
MAX_IGNORE_DAYS = 0xFFFFFFFF // 86400

SECONDS_PER_DAY = 86400


class BuilderConfig(BaseModel):
    """Options for one index update run."""
    index_name: str = Field(default=DEFAULT_INDEX_NAME, min_length=1)
    remove_missing: bool = False
    ignore_older_than_days: Optional[int] = Field(default=None, ge=0, le=MAX_IGNORE_DAYS)
    # exclude: old files are neither hashed nor kept
    # expire: old files stay tracked while present, expire once gone
    ignore_mode: Literal["exclude", "expire"] = "exclude"
    settle_seconds: float = Field(default=2.0, ge=0)
    max_depth: Optional[int] = Field(default=None, ge=0)
    follow_symlinks: bool = True
    digest_backend: Literal["hashlib", "python"] = "hashlib"
    chunk_size: int = Field(default=1024 * 1024, gt=0)

    @field_validator("index_name")
    @classmethod
    def normalize_index_name(cls, v: str) -> str:
        """Reduce the name to the tree-relative form the walker compares against."""
        name = os.path.normpath(v)
        if os.path.isabs(name):
            raise ValueError(f"index_name must be relative to the tree root: {v}")
        if name == "." or name == ".." or name.startswith(".." + os.sep):
            raise ValueError(f"index_name must name a file inside the tree root: {v}")
        return name

    @property
    def ignore_older_than_ns(self) -> Optional[int]:
        """Ignore threshold in nanoseconds, or None when disabled (0 or unset)."""
        if not self.ignore_older_than_days:
            return None
        return self.ignore_older_than_days * SECONDS_PER_DAY * 1_000_000_000

    @property
    def settle_ns(self) -> int:
        return int(self.settle_seconds * 1_000_000_000)


class TreehashConfig(BaseModel):
    """Root configuration."""
    builder: BuilderConfig = Field(default_factory=BuilderConfig)


def load_config(config_path: Path) -> TreehashConfig:
    """Load and validate configuration file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated TreehashConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        InvalidArgumentError: If config file is invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidArgumentError(f"Invalid YAML in {config_path}: {e}") from e

    try:
        return TreehashConfig(**data)
    except (ValidationError, TypeError) as e:
        raise InvalidArgumentError(f"Invalid configuration in {config_path}: {e}") from e


def save_config(config: TreehashConfig, config_path: Path):
    """Save configuration to file.

    Args:
        config: Configuration to save
        config_path: Path to save YAML file
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w') as f:
        yaml.dump(config.model_dump(mode='json'), f, default_flow_style=False)
