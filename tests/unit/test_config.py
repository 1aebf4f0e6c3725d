"""Tests for configuration loading and validation."""

import pytest
from pydantic import ValidationError

from treehash.config import (
    DEFAULT_INDEX_NAME,
    MAX_IGNORE_DAYS,
    BuilderConfig,
    TreehashConfig,
    load_config,
    save_config,
)
from treehash.errors import InvalidArgumentError


class TestBuilderConfig:
    """Tests for BuilderConfig defaults and derived values."""

    def test_defaults(self):
        config = BuilderConfig()
        assert config.index_name == DEFAULT_INDEX_NAME == ".sha1s"
        assert config.remove_missing is False
        assert config.ignore_older_than_ns is None
        assert config.ignore_mode == "exclude"
        assert config.settle_ns == 2_000_000_000
        assert config.digest_backend == "hashlib"

    def test_ignore_threshold_in_ns(self):
        config = BuilderConfig(ignore_older_than_days=2)
        assert config.ignore_older_than_ns == 2 * 86400 * 1_000_000_000

    def test_zero_days_disables(self):
        assert BuilderConfig(ignore_older_than_days=0).ignore_older_than_ns is None

    def test_ignore_days_upper_bound(self):
        BuilderConfig(ignore_older_than_days=MAX_IGNORE_DAYS)
        with pytest.raises(ValidationError):
            BuilderConfig(ignore_older_than_days=MAX_IGNORE_DAYS + 1)

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            BuilderConfig(settle_seconds=-1)
        with pytest.raises(ValidationError):
            BuilderConfig(ignore_mode="sometimes")
        with pytest.raises(ValidationError):
            BuilderConfig(index_name="")

    def test_index_name_normalized(self):
        assert BuilderConfig(index_name="./.sha1s").index_name == ".sha1s"
        assert BuilderConfig(index_name="meta//hashes.idx").index_name == "meta/hashes.idx"
        assert BuilderConfig(index_name="meta/../.sha1s").index_name == ".sha1s"

    @pytest.mark.parametrize("name", ["/tmp/.sha1s", "../.sha1s", "..", ".", "./"])
    def test_index_name_outside_root_rejected(self, name):
        with pytest.raises(ValidationError):
            BuilderConfig(index_name=name)


class TestLoadConfig:
    """Tests for YAML configuration files."""

    def test_round_trip(self, temp_dir):
        config = TreehashConfig(builder=BuilderConfig(remove_missing=True, settle_seconds=5))
        path = temp_dir / "conf" / "treehash.yaml"
        save_config(config, path)

        assert load_config(path) == config

    def test_partial_file(self, temp_dir):
        path = temp_dir / "treehash.yaml"
        path.write_text("builder:\n  index_name: .hashes\n")

        config = load_config(path)
        assert config.builder.index_name == ".hashes"
        assert config.builder.settle_seconds == 2.0

    def test_empty_file(self, temp_dir):
        path = temp_dir / "treehash.yaml"
        path.write_text("")
        assert load_config(path) == TreehashConfig()

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "missing.yaml")

    def test_invalid_value(self, temp_dir):
        path = temp_dir / "treehash.yaml"
        path.write_text("builder:\n  settle_seconds: -3\n")
        with pytest.raises(InvalidArgumentError):
            load_config(path)

    def test_invalid_yaml(self, temp_dir):
        path = temp_dir / "treehash.yaml"
        path.write_text("builder: [unclosed\n")
        with pytest.raises(InvalidArgumentError):
            load_config(path)

    def test_not_a_mapping(self, temp_dir):
        path = temp_dir / "treehash.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(InvalidArgumentError):
            load_config(path)
