"""External tool lookup.

Resolves ffmpeg/ffprobe executables from a configured path or PATH.
"""

import logging
import shutil
from pathlib import Path

from vts.exceptions import ToolNotAvailableError

logger = logging.getLogger(__name__)

INSTALL_HINT = (
    "Install ffmpeg (which provides ffprobe) or configure a path via "
    "VTS_FFMPEG_PATH / VTS_FFPROBE_PATH or ~/.vts/config.toml"
)


def find_tool(name: str, configured_path: Path | str | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path or command name override.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path:
        candidate = Path(configured_path).expanduser()
        if candidate.is_file():
            return candidate
        # A bare command name is looked up on PATH
        which_result = shutil.which(str(configured_path))
        if which_result:
            return Path(which_result)
        logger.warning("Configured path for %s is not a file: %s", name, candidate)
        return None

    which_result = shutil.which(name)
    if which_result:
        return Path(which_result)
    return None


def require_tool(name: str, configured_path: Path | str | None = None) -> Path:
    """Get path to a required tool, raising an error if not available.

    Raises:
        ToolNotAvailableError: If the tool cannot be found.
    """
    path = find_tool(name, configured_path)
    if path is None:
        raise ToolNotAvailableError(
            f"Required tool not available: {name}. {INSTALL_HINT}"
        )
    return path
