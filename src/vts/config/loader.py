"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (VTS_*)
3. Config file (~/.vts/config.toml)
4. Default values

Environment variables:
- VTS_CONFIG_PATH: Path to config file (overrides default location)
- VTS_FFMPEG_PATH: Path to ffmpeg executable
- VTS_FFPROBE_PATH: Path to ffprobe executable
- VTS_TIMEOUT: Inactivity timeout in seconds ("off" disables it)
- VTS_LOG_LEVEL: Log level (debug, info, warning, error)

Only the CLI loads configuration this way; the library itself takes
explicit config objects.
"""

from __future__ import annotations

import logging
import threading
import tomllib
from dataclasses import replace
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vts.config.env import EnvReader
from vts.config.models import VTSConfig
from vts.config.schema import ConfigFileModel, parse_timeout
from vts.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".vts"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

# path -> (parsed dict, mtime)
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the config file path, honouring VTS_CONFIG_PATH."""
    reader = env_reader or EnvReader()
    env_path = reader.get_str("VTS_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from a TOML file.

    Results are cached and reloaded when the file's mtime changes.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise ConfigurationError when the file cannot be
            parsed. If False, log a warning and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        return {}

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        try:
            with path.open("rb") as f:
                result = tomllib.load(f)
        except (tomllib.TOMLDecodeError, OSError) as e:
            if strict:
                raise ConfigurationError(
                    f"Cannot parse config file {path}: {e}"
                ) from e
            logger.warning("Ignoring unreadable config file %s: %s", path, e)
            return {}

        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Clear the config file cache."""
    with _config_cache_lock:
        _config_cache.clear()


def parse_config(data: dict[str, Any], source: str = "config") -> VTSConfig:
    """Validate a parsed config mapping and convert it to VTSConfig.

    Raises:
        ConfigurationError: If the mapping does not match the schema.
    """
    try:
        return ConfigFileModel.model_validate(data).to_config()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid {source}: {e}") from e


def get_config(
    config_path: Path | None = None,
    *,
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    timeout: float | None = None,
    disable_timeout: bool = False,
    log_level: str | None = None,
    env_reader: EnvReader | None = None,
    strict: bool = False,
) -> VTSConfig:
    """Get vts configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides VTS_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        timeout: CLI override for the inactivity timeout.
        disable_timeout: CLI override disabling the inactivity timeout.
        log_level: CLI override for the log level.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, unparseable config files raise ConfigurationError.

    Returns:
        VTSConfig with merged configuration.

    Raises:
        ConfigurationError: If the file or an override is invalid.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    config = parse_config(load_config_file(path, strict=strict), f"config file {path}")

    # Environment layer
    env_ffmpeg = reader.get_path("VTS_FFMPEG_PATH")
    env_ffprobe = reader.get_path("VTS_FFPROBE_PATH")
    env_timeout = reader.get_str("VTS_TIMEOUT")
    env_log_level = reader.get_str("VTS_LOG_LEVEL")

    ffmpeg = ffmpeg_path or env_ffmpeg or config.tools.ffmpeg
    ffprobe = ffprobe_path or env_ffprobe or config.tools.ffprobe

    effective_timeout = config.supervisor.timeout
    try:
        if env_timeout is not None:
            effective_timeout = parse_timeout(env_timeout)
        if timeout is not None:
            effective_timeout = parse_timeout(timeout)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    if disable_timeout:
        effective_timeout = None

    level = log_level or env_log_level or config.logging.level

    try:
        return VTSConfig(
            tools=replace(config.tools, ffmpeg=ffmpeg, ffprobe=ffprobe),
            supervisor=replace(
                config.supervisor,
                timeout=effective_timeout,
                ffmpeg_path=ffmpeg or "ffmpeg",
            ),
            transcoding=config.transcoding,
            logging=replace(config.logging, level=level),
        )
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
