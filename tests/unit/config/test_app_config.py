"""Tests for application config models and loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from swatchkit.core.color import TextSize, WcagLevel
from swatchkit.core.config import (
    AppConfig,
    EngineConfig,
    ExecutorConfig,
    default_cache_path,
    detect_format,
    find_config_path,
    load_app_config,
    load_config,
)


class TestModels:
    """Tests for config model defaults and validation."""

    def test_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test AppConfig() fills every section."""
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
        config = AppConfig()

        assert config.engine.wcag_level == WcagLevel.AA
        assert config.engine.text_size == TextSize.NORMAL
        assert (config.engine.min_colors, config.engine.max_colors) == (2, 5)
        assert 1 <= config.executor.max_threads <= 8
        assert config.cache.enabled
        assert config.cache.db_path == tmp_path / "swatchkit" / "cache.db"
        assert config.logging.level == "INFO"

    def test_default_cache_path_without_xdg(self, monkeypatch: pytest.MonkeyPatch):
        """Test fallback to ~/.cache."""
        monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
        assert default_cache_path() == Path.home() / ".cache" / "swatchkit" / "cache.db"

    def test_min_colors_above_max_rejected(self):
        """Test engine bounds must be ordered."""
        with pytest.raises(ValidationError):
            EngineConfig(min_colors=6, max_colors=3)

    def test_engine_rejects_unknown_keys(self):
        """Test engine section forbids extras."""
        with pytest.raises(ValidationError):
            EngineConfig(colour="red")

    def test_executor_bounds(self):
        """Test max_threads outside [1, 8] is rejected."""
        with pytest.raises(ValidationError):
            ExecutorConfig(max_threads=0)
        with pytest.raises(ValidationError):
            ExecutorConfig(max_threads=9)

    def test_app_config_ignores_unknown_sections(self):
        """Test top-level extras are ignored."""
        config = AppConfig.model_validate({"plugins": {"x": 1}})
        assert not hasattr(config, "plugins")

    def test_load_or_default_missing_default_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        """Test defaults are used when swatchkit.yaml is absent."""
        monkeypatch.chdir(tmp_path)
        assert AppConfig.load_or_default() == AppConfig()

    def test_load_or_default_explicit_missing_path(self, tmp_path: Path):
        """Test explicit missing path raises."""
        with pytest.raises(FileNotFoundError):
            AppConfig.load_or_default(tmp_path / "nope.yaml")


class TestLoader:
    """Tests for file loading and env overrides."""

    def test_detect_format(self):
        """Test extension detection."""
        assert detect_format("a.json") == "json"
        assert detect_format("a.YAML") == "yaml"
        assert detect_format(Path("a.yml")) == "yaml"
        with pytest.raises(ValueError, match="Unsupported"):
            detect_format("a.toml")

    def test_load_yaml(self, tmp_path: Path):
        """Test YAML sections map onto the models."""
        path = tmp_path / "swatchkit.yaml"
        path.write_text(
            "engine:\n"
            "  wcag_level: AAA\n"
            "  text_size: large\n"
            "executor:\n"
            "  max_threads: 2\n"
            "cache:\n"
            f"  db_path: {tmp_path / 'c.db'}\n"
            "  max_items: 50\n"
            "  target_items: 40\n"
        )

        config = load_app_config(path, environ={})

        assert config.engine.wcag_level == WcagLevel.AAA
        assert config.engine.text_size == TextSize.LARGE
        assert config.executor.max_threads == 2
        assert config.cache.db_path == tmp_path / "c.db"
        assert config.cache.max_items == 50

    def test_load_json(self, tmp_path: Path):
        """Test JSON config."""
        path = tmp_path / "swatchkit.json"
        path.write_text(json.dumps({"logging": {"level": "DEBUG", "structured": True}}))

        config = load_app_config(path, environ={})

        assert config.logging.level == "DEBUG"
        assert config.logging.structured

    def test_empty_file_is_empty_mapping(self, tmp_path: Path):
        """Test an empty YAML file loads as {}."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == {}

    def test_non_mapping_root_rejected(self, tmp_path: Path):
        """Test a list root is a ValueError."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_invalid_json_rejected(self, tmp_path: Path):
        """Test malformed JSON is a ValueError."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(path)

    def test_missing_explicit_path(self, tmp_path: Path):
        """Test explicit missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_app_config(tmp_path / "missing.yaml", environ={})

    def test_invalid_values_raise_validation_error(self, tmp_path: Path):
        """Test bad values surface as pydantic errors."""
        path = tmp_path / "swatchkit.yaml"
        path.write_text("engine:\n  wcag_level: AAAA\n")
        with pytest.raises(ValidationError):
            load_app_config(path, environ={})

    def test_finds_default_file_in_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test swatchkit.yml is picked up when no path is given."""
        monkeypatch.chdir(tmp_path)
        assert find_config_path() is None

        Path("swatchkit.yml").write_text("engine:\n  batch_size: 7\n")

        assert find_config_path() == Path("swatchkit.yml")
        assert load_app_config(environ={}).engine.batch_size == 7

    def test_env_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test SWATCHKIT_* variables override file values."""
        monkeypatch.chdir(tmp_path)
        environ = {
            "SWATCHKIT_LOG_LEVEL": "warning",
            "SWATCHKIT_CACHE_DB": str(tmp_path / "env.db"),
            "SWATCHKIT_MAX_THREADS": "3",
        }

        config = load_app_config(environ=environ)

        assert config.logging.level == "WARNING"
        assert config.cache.db_path == tmp_path / "env.db"
        assert config.executor.max_threads == 3

    def test_env_override_is_validated(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test out-of-range env values are rejected."""
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ValidationError):
            load_app_config(environ={"SWATCHKIT_MAX_THREADS": "99"})
