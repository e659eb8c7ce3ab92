"""Tests for configuration loading and precedence."""

from pathlib import Path

import pytest

from vts.config import (
    EnvReader,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)
from vts.config.loader import DEFAULT_CONFIG_FILE
from vts.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _clear_cache():
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    path = temp_dir / "config.toml"
    path.write_text(
        "[supervisor]\n"
        "timeout = 30\n"
        "\n"
        "[transcoding]\n"
        'preserve_aspect_ratio = "width"\n'
        "\n"
        "[logging]\n"
        'level = "warning"\n'
    )
    return path


class TestGetDefaultConfigPath:
    """Tests for get_default_config_path()."""

    def test_default_location(self) -> None:
        """Uses ~/.vts/config.toml by default."""
        assert get_default_config_path(EnvReader(env={})) == DEFAULT_CONFIG_FILE

    def test_env_override(self) -> None:
        """VTS_CONFIG_PATH overrides the location."""
        reader = EnvReader(env={"VTS_CONFIG_PATH": "/etc/vts.toml"})
        assert get_default_config_path(reader) == Path("/etc/vts.toml")


class TestLoadConfigFile:
    """Tests for load_config_file()."""

    def test_missing_file(self, temp_dir: Path) -> None:
        """A missing file is an empty config."""
        assert load_config_file(temp_dir / "none.toml") == {}

    def test_parses_toml(self, config_file: Path) -> None:
        """Parses the TOML file."""
        assert load_config_file(config_file)["supervisor"] == {"timeout": 30}

    def test_invalid_toml_lenient(self, temp_dir: Path) -> None:
        """Broken files are ignored unless strict."""
        path = temp_dir / "broken.toml"
        path.write_text("[supervisor\n")
        assert load_config_file(path) == {}

    def test_invalid_toml_strict(self, temp_dir: Path) -> None:
        """Broken files raise in strict mode."""
        path = temp_dir / "broken.toml"
        path.write_text("[supervisor\n")
        with pytest.raises(ConfigurationError, match="Cannot parse config file"):
            load_config_file(path, strict=True)


class TestGetConfig:
    """Tests for get_config() precedence."""

    def test_defaults_without_file(self, temp_dir: Path) -> None:
        """Defaults apply when nothing is configured."""
        config = get_config(temp_dir / "none.toml", env_reader=EnvReader(env={}))
        assert config.supervisor.timeout == 200.0
        assert config.logging.level == "info"

    def test_file_values(self, config_file: Path) -> None:
        """Values from the file are used."""
        config = get_config(config_file, env_reader=EnvReader(env={}))

        assert config.supervisor.timeout == 30.0
        assert config.transcoding.preserve_aspect_ratio.value == "width"
        assert config.logging.level == "warning"

    def test_env_overrides_file(self, config_file: Path) -> None:
        """Environment variables override the file."""
        reader = EnvReader(env={"VTS_TIMEOUT": "off", "VTS_LOG_LEVEL": "debug"})
        config = get_config(config_file, env_reader=reader)

        assert config.supervisor.timeout is None
        assert config.logging.level == "debug"

    def test_cli_overrides_env(self, config_file: Path, temp_dir: Path) -> None:
        """Explicit arguments override environment variables."""
        ffmpeg = temp_dir / "ffmpeg"
        ffmpeg.touch()
        reader = EnvReader(
            env={"VTS_TIMEOUT": "60", "VTS_FFMPEG_PATH": str(ffmpeg)}
        )
        config = get_config(
            config_file, timeout=5, log_level="error", env_reader=reader
        )

        assert config.supervisor.timeout == 5.0
        assert config.supervisor.ffmpeg_path == ffmpeg
        assert config.logging.level == "error"

    def test_disable_timeout(self, config_file: Path) -> None:
        """disable_timeout wins over every timeout setting."""
        config = get_config(
            config_file,
            timeout=10,
            disable_timeout=True,
            env_reader=EnvReader(env={}),
        )
        assert config.supervisor.timeout is None

    def test_invalid_env_timeout(self, config_file: Path) -> None:
        """Invalid environment values are configuration errors."""
        reader = EnvReader(env={"VTS_TIMEOUT": "-4"})
        with pytest.raises(ConfigurationError, match="negative"):
            get_config(config_file, env_reader=reader)

    def test_invalid_file(self, temp_dir: Path) -> None:
        """Schema violations are configuration errors."""
        path = temp_dir / "config.toml"
        path.write_text('[transcoding]\npreserve_aspect_ratio = "diagonal"\n')
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            get_config(path, env_reader=EnvReader(env={}))

    def test_invalid_log_level(self, temp_dir: Path) -> None:
        """Invalid overrides are configuration errors."""
        with pytest.raises(ConfigurationError, match="level must be one of"):
            get_config(
                temp_dir / "none.toml",
                log_level="chatty",
                env_reader=EnvReader(env={}),
            )
