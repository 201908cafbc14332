"""Tests for the swatchkit command line."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from swatchkit.cli.main import EXIT_FAILED, EXIT_OK, EXIT_USAGE, main


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run from an empty directory and drop the handlers main() installs."""
    monkeypatch.chdir(tmp_path)
    for var in ("SWATCHKIT_LOG_LEVEL", "SWATCHKIT_CACHE_DB", "SWATCHKIT_MAX_THREADS"):
        monkeypatch.delenv(var, raising=False)
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def config_file(tmp_path: Path) -> str:
    path = tmp_path / "cli.yaml"
    path.write_text(
        "executor:\n"
        "  max_threads: 2\n"
        "cache:\n"
        f"  db_path: {tmp_path / 'cli-cache.db'}\n"
    )
    return str(path)


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, str]:
    code = main(["--log-level", "ERROR", *argv])
    return code, capsys.readouterr().out


class TestContrastCommand:
    """Tests for `swatchkit contrast`."""

    def test_json(self, capsys: pytest.CaptureFixture[str]):
        """Test JSON output for black on white."""
        code, out = _run(capsys, "contrast", "white", "black", "--json")

        assert code == EXIT_OK
        payload = json.loads(out)
        assert payload["ratio"] == 21.0
        assert payload["compliant"] is True

    def test_table(self, capsys: pytest.CaptureFixture[str]):
        """Test table output names the highest level."""
        code, out = _run(capsys, "contrast", "red", "white")

        assert code == EXIT_FAILED
        assert "Highest level: AA-Large" in out

    def test_large_text_passes(self, capsys: pytest.CaptureFixture[str]):
        """Test #777777 on white passes for large text only."""
        assert _run(capsys, "contrast", "#777777", "white")[0] == EXIT_FAILED
        assert _run(capsys, "contrast", "#777777", "white", "--text-size", "large")[0] == EXIT_OK

    def test_bad_color(self, capsys: pytest.CaptureFixture[str]):
        """Test unparseable input is a usage error."""
        code, out = _run(capsys, "contrast", "notacolor", "white")
        assert code == EXIT_USAGE
        assert "ERROR" in out


class TestValidateCommand:
    """Tests for `swatchkit validate`."""

    def test_valid_json(self, capsys: pytest.CaptureFixture[str]):
        """Test a compliant pair."""
        code, out = _run(capsys, "validate", "white", "black", "--json")

        assert code == EXIT_OK
        report = json.loads(out)
        assert report["valid"] is True
        assert report["colors"] == ["#FFFFFF", "#000000"]

    def test_invalid(self, capsys: pytest.CaptureFixture[str]):
        """Test a low-contrast pair fails."""
        code, out = _run(capsys, "validate", "white", "yellow", "--json")

        assert code == EXIT_FAILED
        failed = [r["rule_id"] for r in json.loads(out)["results"] if not r["valid"]]
        assert failed == ["wcag_compliance"]

    def test_rule_selection(self, capsys: pytest.CaptureFixture[str]):
        """Test --rules limits the rules that run."""
        code, out = _run(capsys, "validate", "white", "yellow", "--rules", "no_duplicates", "--json")

        assert code == EXIT_OK
        assert [r["rule_id"] for r in json.loads(out)["results"]] == ["no_duplicates"]

    def test_bad_option(self, capsys: pytest.CaptureFixture[str]):
        """Test out-of-range options are usage errors."""
        code, _ = _run(capsys, "validate", "white", "black", "--min-contrast", "0.5")
        assert code == EXIT_USAGE


class TestSearchAndCacheCommands:
    """Tests for `swatchkit search` and `swatchkit cache`."""

    def test_search_then_cached(self, capsys: pytest.CaptureFixture[str], config_file: str):
        """Test a repeated search is served from the cache."""
        argv = ["--config", config_file, "search", "--palette", "white,black,navy", "--arity", "2"]

        code, out = _run(capsys, *argv, "--json")
        assert code == EXIT_OK
        first = json.loads(out)
        assert first["stats"]["compliant"] == 2
        assert first["from_cache"] is False

        code, out = _run(capsys, *argv, "--json", "--top", "1")
        second = json.loads(out)
        assert second["from_cache"] is True
        assert len(second["valid_swatches"]) == 1

    def test_search_no_cache(self, capsys: pytest.CaptureFixture[str], config_file: str):
        """Test --no-cache bypasses stored results."""
        argv = ["--config", config_file, "search", "--palette", "white,black,navy", "--arity", "2"]
        _run(capsys, *argv)

        code, out = _run(capsys, *argv, "--no-cache", "--json")

        assert code == EXIT_OK
        assert json.loads(out)["from_cache"] is False

    def test_search_bad_arity(self, capsys: pytest.CaptureFixture[str], config_file: str):
        """Test arity outside [2, 7] is a usage error."""
        code, out = _run(
            capsys, "--config", config_file, "search", "--palette", "white,black", "--arity", "9"
        )
        assert code == EXIT_USAGE
        assert "ERROR" in out

    def test_cache_stats_and_clear(self, capsys: pytest.CaptureFixture[str], config_file: str):
        """Test stats reflect a stored search and clear empties it."""
        _run(capsys, "--config", config_file, "search", "--palette", "white,black", "--arity", "2")

        code, out = _run(capsys, "--config", config_file, "cache", "stats")
        assert code == EXIT_OK
        assert "items" in out

        code, out = _run(capsys, "--config", config_file, "cache", "clear")
        assert code == EXIT_OK
        assert "Cache cleared" in out

    def test_missing_config(self, capsys: pytest.CaptureFixture[str], tmp_path: Path):
        """Test a missing --config file is a usage error."""
        code, out = _run(capsys, "--config", str(tmp_path / "none.yaml"), "contrast", "white", "black")
        assert code == EXIT_USAGE
        assert "Could not load config" in out
