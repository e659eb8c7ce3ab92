"""Tests for EnvReader class."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from vts.config.env import EnvReader


class TestEnvReaderGetStr:
    """Tests for EnvReader.get_str method."""

    def test_returns_value_when_set(self) -> None:
        """Should return the value when environment variable is set."""
        reader = EnvReader(env={"VTS_LOG_LEVEL": "debug"})
        assert reader.get_str("VTS_LOG_LEVEL") == "debug"

    def test_returns_default_when_not_set(self) -> None:
        """Should return default when environment variable is not set."""
        reader = EnvReader(env={})
        assert reader.get_str("VTS_LOG_LEVEL", "info") == "info"


class TestEnvReaderGetPath:
    """Tests for EnvReader.get_path method."""

    def test_existing_path(self, temp_dir: Path) -> None:
        """Should return existing paths."""
        reader = EnvReader(env={"VTS_FFMPEG_PATH": str(temp_dir)})
        assert reader.get_path("VTS_FFMPEG_PATH") == temp_dir

    def test_missing_path_returns_default(
        self, temp_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Should warn and return default for missing paths."""
        reader = EnvReader(env={"VTS_FFMPEG_PATH": str(temp_dir / "nope")})
        with caplog.at_level(logging.WARNING):
            assert reader.get_path("VTS_FFMPEG_PATH") is None
        assert "non-existent path" in caplog.text

    def test_missing_path_allowed(self, temp_dir: Path) -> None:
        """Should return missing paths when must_exist is False."""
        missing = temp_dir / "nope"
        reader = EnvReader(env={"VTS_FFMPEG_PATH": str(missing)})
        assert reader.get_path("VTS_FFMPEG_PATH", must_exist=False) == missing
