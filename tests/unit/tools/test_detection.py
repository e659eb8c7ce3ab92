"""Unit tests for external tool lookup."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from vts.exceptions import ToolNotAvailableError
from vts.tools import find_tool, require_tool


class TestFindTool:
    """Tests for find_tool()."""

    def test_configured_file_wins(self, temp_dir: Path) -> None:
        """An existing configured file is used without a PATH lookup."""
        tool = temp_dir / "ffmpeg"
        tool.touch()
        with patch("vts.tools.detection.shutil.which") as mock_which:
            assert find_tool("ffmpeg", tool) == tool
        mock_which.assert_not_called()

    @patch("vts.tools.detection.shutil.which")
    def test_configured_command_name(self, mock_which: MagicMock) -> None:
        """A configured bare command name is looked up on PATH."""
        mock_which.return_value = "/opt/bin/ffmpeg6"
        assert find_tool("ffmpeg", "ffmpeg6") == Path("/opt/bin/ffmpeg6")
        mock_which.assert_called_once_with("ffmpeg6")

    @patch("vts.tools.detection.shutil.which", return_value=None)
    def test_configured_path_missing(self, mock_which: MagicMock) -> None:
        """A configured path that cannot be found yields None."""
        assert find_tool("ffmpeg", "/nowhere/ffmpeg") is None

    @patch("vts.tools.detection.shutil.which")
    def test_path_lookup(self, mock_which: MagicMock) -> None:
        """Without configuration the tool name is looked up on PATH."""
        mock_which.return_value = "/usr/bin/ffprobe"
        assert find_tool("ffprobe") == Path("/usr/bin/ffprobe")
        mock_which.assert_called_once_with("ffprobe")


class TestRequireTool:
    """Tests for require_tool()."""

    @patch("vts.tools.detection.shutil.which", return_value=None)
    def test_raises_when_missing(self, mock_which: MagicMock) -> None:
        """Raises ToolNotAvailableError naming the tool."""
        with pytest.raises(ToolNotAvailableError, match="ffmpeg"):
            require_tool("ffmpeg")

    @patch("vts.tools.detection.shutil.which", return_value="/usr/bin/ffmpeg")
    def test_returns_path(self, mock_which: MagicMock) -> None:
        """Returns the resolved path."""
        assert require_tool("ffmpeg") == Path("/usr/bin/ffmpeg")
