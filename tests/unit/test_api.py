"""Tests for the functional API and host detection."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from swatchkit.core import api
from swatchkit.core.device import (
    DeviceInfo,
    clamp_workers,
    detect_concurrency,
    device_fingerprint,
)
from swatchkit.core.errors import FormatError, RangeError


class TestApi:
    """Tests for one-off entry points."""

    def test_parse_color(self):
        """Test names and short hex parse to canonical hex."""
        assert api.parse_color("navy").hex == "#000080"
        assert api.parse_color("fff").hex == "#FFFFFF"
        with pytest.raises(FormatError):
            api.parse_color("#12345")

    def test_contrast(self):
        """Test black on white at AAA."""
        result = api.contrast("black", "white", level="AAA")
        assert result.ratio == 21.0
        assert result.compliant

    def test_validate_single_string(self):
        """Test a lone string is a one-color swatch, reported not raised."""
        report = api.validate_swatch("white")
        assert not report.valid
        assert report.colors == ["#FFFFFF"]

    def test_validate_non_iterable(self):
        """Test a non-sequence is reported as invalid."""
        report = api.validate_swatch(42)  # type: ignore[arg-type]
        assert not report.valid
        assert "Expected a sequence of colors" in report.errors[0]

    def test_validate_bad_option_raises(self):
        """Test invalid options raise pydantic errors."""
        with pytest.raises(ValidationError):
            api.validate_swatch(["white", "black"], wcag_level="AAAA")

    async def test_search_swatches(self, mono_palette: list[str]):
        """Test the uncached search helper."""
        result = await api.search_swatches(mono_palette, 2, max_workers=1)
        assert result.stats.compliant == 2
        assert not result.from_cache

    async def test_search_swatches_bad_arity(self, mono_palette: list[str]):
        """Test arity outside [2, 7] raises RangeError."""
        with pytest.raises(RangeError):
            await api.search_swatches(mono_palette, 8)


class TestDevice:
    """Tests for worker sizing and fingerprints."""

    @pytest.mark.parametrize(
        "cpus,expected",
        [(1, 1), (2, 1), (4, 3), (9, 8), (64, 8)],
    )
    def test_detect_concurrency(self, cpus: int, expected: int):
        """Test one less than the CPU count, clamped to [1, 8]."""
        assert detect_concurrency(cpus) == expected

    def test_clamp_workers(self):
        """Test clamping at both ends."""
        assert clamp_workers(0) == 1
        assert clamp_workers(100) == 8

    def test_fingerprint(self):
        """Test fingerprints are stable and differ by host."""
        info = DeviceInfo(
            system="linux", machine="x86_64", hostname="a", python_version="3.12.0", cpu_count=8
        )
        other = info.model_copy(update={"hostname": "b"})

        assert device_fingerprint(info) == device_fingerprint(info)
        assert len(device_fingerprint(info)) == 16
        assert device_fingerprint(info) != device_fingerprint(other)
