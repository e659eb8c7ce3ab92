"""FFprobe-based implementation of the MediaProbe protocol."""

import json
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from vts.introspector.interface import MediaIntrospectionError, ProbeResult
from vts.introspector.parsers import parse_ffprobe_output
from vts.tools.detection import find_tool

PROBE_TIMEOUT = 60


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaProbe."""

    def __init__(
        self, ffprobe_path: Path | str | None = None, timeout: float = PROBE_TIMEOUT
    ) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Optional explicit path to ffprobe. If not provided,
                ffprobe is looked up on PATH.
            timeout: Seconds to wait for ffprobe before giving up.

        Raises:
            MediaIntrospectionError: If ffprobe is not available.
        """
        self._ffprobe_path = find_tool("ffprobe", ffprobe_path)
        self._timeout = timeout

        if self._ffprobe_path is None:
            raise MediaIntrospectionError(
                "ffprobe is not installed or not in PATH. "
                "You can configure a custom path via VTS_FFPROBE_PATH "
                "environment variable or ~/.vts/config.toml"
            )

    @property
    def ffprobe_path(self) -> Path:
        return self._ffprobe_path  # type: ignore[return-value]

    def probe(self, path: Path) -> ProbeResult:
        """Extract metadata from a media file.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        path = Path(path)
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        try:
            data = self._run_ffprobe(path)
        except subprocess.TimeoutExpired as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            raise MediaIntrospectionError(
                f"ffprobe failed for {path}: {e.stderr or e}"
            ) from e
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe output for {path}: {e}"
            ) from e

        return parse_ffprobe_output(path, data)

    def _run_ffprobe(self, path: Path) -> dict:
        result = subprocess.run(  # nosec B603 - ffprobe path is validated
            [
                str(self._ffprobe_path),
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                str(path),
            ],
            capture_output=True,
            text=True,
            errors="replace",
            check=True,
            timeout=self._timeout,
        )
        return json.loads(result.stdout)
