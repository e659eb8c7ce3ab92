"""High-level transcode entry point.

Transcoder ties the pieces together for one source/output pair:

    options -> geometry -> assembled option set -> command -> supervised run

Configuration problems (unknown option formats, unparseable resolutions
or raw strings) surface from the constructor, before any process exists.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any

from vts.config.models import SupervisorConfig, TranscodingOptions
from vts.exceptions import ToolNotAvailableError
from vts.executor.outcome import OutcomeValidator, RunOutcome
from vts.executor.process import ProcessLauncher
from vts.executor.supervisor import ProcessSupervisor, ProgressCallback
from vts.geometry.resolver import resolve_geometry
from vts.geometry.types import GeometryResult, SourceMedia
from vts.introspector.ffprobe import FFprobeIntrospector
from vts.introspector.interface import (
    MediaIntrospectionError,
    MediaProbe,
    ProbeResult,
)
from vts.logging.context import run_context
from vts.options.assembler import assemble_options, parse_option_input
from vts.options.encoding import EncodingOptions, OptionInput

logger = logging.getLogger(__name__)


class Transcoder:
    """Transcodes one source file into one output file.

    Example:
        transcoder = Transcoder(
            source,
            Path("out.mp4"),
            {"video_codec": "libx264", "resolution": "320x240"},
            transcoding=TranscodingOptions(preserve_aspect_ratio=AspectMode.WIDTH),
        )
        encoded = transcoder.transcode(on_progress=print)
    """

    def __init__(
        self,
        source: SourceMedia | ProbeResult,
        output_path: Path | str,
        options: Any = None,
        transcoding: TranscodingOptions | None = None,
        config: SupervisorConfig | None = None,
        probe: MediaProbe | None = None,
        launcher: ProcessLauncher | None = None,
        ffprobe_path: Path | str | None = None,
    ) -> None:
        """Initialize the transcoder.

        Args:
            source: Source media, or the probe result it came from.
            output_path: File to write.
            options: EncodingOptions, a mapping, a raw argument string or None.
            transcoding: Aspect ratio and autorotation settings.
            config: Supervisor settings (ffmpeg path, inactivity timeout).
            probe: Probe used to validate and inspect the output. Defaults
                to an FFprobeIntrospector.
            launcher: Process launcher; defaults to subprocess.
            ffprobe_path: ffprobe override for the default probe.

        Raises:
            ConfigurationError: If the options cannot be interpreted.
            ToolNotAvailableError: If no probe was given and ffprobe is missing.
        """
        if isinstance(source, ProbeResult):
            source = source.media
        self.source = source
        self.output_path = Path(output_path)
        self.transcoding = transcoding or TranscodingOptions()
        self.config = config or SupervisorConfig()

        parsed = parse_option_input(options)
        requested = (
            parsed.resolution if isinstance(parsed, EncodingOptions) else None
        )
        self._geometry = resolve_geometry(
            source,
            requested,
            self.transcoding.aspect_policy,
            self.transcoding.autorotate,
        )
        self._option_set = assemble_options(parsed, self._geometry)
        self._command = self._build_command()

        # Resolved before any process exists so a missing ffprobe fails fast
        if probe is None:
            try:
                probe = FFprobeIntrospector(ffprobe_path)
            except MediaIntrospectionError as e:
                raise ToolNotAvailableError(str(e)) from e
        self._probe = probe

        self._supervisor = ProcessSupervisor(
            OutcomeValidator(probe), self.config, launcher
        )
        self._outcome: RunOutcome | None = None
        self._encoded: ProbeResult | None = None

    @property
    def geometry(self) -> GeometryResult:
        """Resolved resolution and orientation directives."""
        return self._geometry

    @property
    def option_set(self) -> OptionInput:
        """Options after the geometry has been merged in."""
        return self._option_set

    @property
    def outcome(self) -> RunOutcome | None:
        """Outcome of the last run, or None if not run yet."""
        return self._outcome

    @property
    def progress(self) -> float | None:
        """Last reported progress fraction."""
        return self._supervisor.progress

    def build_command(self) -> list[str]:
        """Return the ffmpeg command line as an argument list."""
        return list(self._command)

    def _build_command(self) -> list[str]:
        return [
            str(self.config.ffmpeg_path),
            "-y",
            "-i",
            str(self.source.path),
            *self._option_set.to_args(),
            str(self.output_path),
        ]

    def run(self, on_progress: ProgressCallback | None = None) -> RunOutcome:
        """Run the transcode and return its outcome without raising.

        Args:
            on_progress: Called with fractions in [0, 1] (see
                ProcessSupervisor.run).

        Returns:
            The terminal RunOutcome.
        """
        run_id = uuid.uuid4().hex[:8]
        with run_context(run_id, self.source.path):
            logger.info("Transcoding %s to %s", self.source.path, self.output_path)
            outcome = self._supervisor.run(
                self._command,
                self.output_path,
                self.source.duration_seconds,
                on_progress,
            )
        self._outcome = outcome
        self._encoded = outcome.encoded
        return outcome

    def transcode(self, on_progress: ProgressCallback | None = None) -> ProbeResult:
        """Run the transcode and return the probed output.

        Raises:
            TranscodeError: The subclass matching the failure.
        """
        outcome = self.run(on_progress)
        outcome.raise_for_status()
        return self.encoded

    def cancel(self) -> None:
        """Kill the running ffmpeg process, if any."""
        self._supervisor.cancel()

    @property
    def encoded(self) -> ProbeResult:
        """Probe result of the output file, probed on first access.

        Raises:
            MediaIntrospectionError: If the output cannot be probed.
        """
        if self._encoded is None:
            self._encoded = self.probe.probe(self.output_path)
        return self._encoded

    @property
    def probe(self) -> MediaProbe:
        """The probe used for output validation."""
        return self._probe
