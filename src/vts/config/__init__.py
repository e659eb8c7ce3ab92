"""Configuration management for vts.

Configuration is layered: CLI flags, then environment variables (VTS_*),
then the config file (~/.vts/config.toml), then defaults. The layering is
only used by the CLI; library callers pass config objects directly.
"""

from vts.config.env import EnvReader
from vts.config.loader import (
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
    parse_config,
)
from vts.config.logging_factory import build_logging_config
from vts.config.models import (
    DEFAULT_TIMEOUT,
    LoggingConfig,
    SupervisorConfig,
    ToolPathsConfig,
    TranscodingOptions,
    VTSConfig,
)
from vts.config.schema import parse_timeout

__all__ = [
    "DEFAULT_TIMEOUT",
    "EnvReader",
    "LoggingConfig",
    "SupervisorConfig",
    "ToolPathsConfig",
    "TranscodingOptions",
    "VTSConfig",
    "build_logging_config",
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "parse_config",
    "parse_timeout",
]
