"""Unit tests for EncodingOptions and RawOptions."""

import logging

import pytest

from vts.exceptions import ConfigurationError
from vts.geometry import Resolution
from vts.options import EncodingOptions, RawOptions


class TestEncodingOptionsMapping:
    """Tests for EncodingOptions mapping behaviour."""

    def test_behaves_like_mapping(self) -> None:
        """Supports lookup, iteration and len."""
        options = EncodingOptions({"video_codec": "libx264", "threads": 2})
        assert options["video_codec"] == "libx264"
        assert list(options) == ["video_codec", "threads"]
        assert len(options) == 2
        assert "threads" in options

    def test_rejects_non_string_keys(self) -> None:
        """Option names must be strings."""
        with pytest.raises(ConfigurationError, match="must be strings"):
            EncodingOptions({1: "x"})

    def test_merged_overrides_win(self) -> None:
        """merged() returns a copy where override keys replace existing ones."""
        options = EncodingOptions({"resolution": "640x480", "video_codec": "mpeg4"})
        merged = options.merged({"resolution": Resolution(320, 240)})

        assert merged["resolution"] == Resolution(320, 240)
        assert merged["video_codec"] == "mpeg4"
        assert options["resolution"] == "640x480"


class TestEncodingOptionsResolution:
    """Tests for the resolution, width and height properties."""

    def test_parses_resolution_string(self) -> None:
        """Reads width and height from a WxH string."""
        options = EncodingOptions({"resolution": "320x240"})
        assert options.resolution == Resolution(320, 240)
        assert options.width == 320
        assert options.height == 240

    def test_missing_resolution(self) -> None:
        """Width and height are None without a resolution."""
        options = EncodingOptions()
        assert options.resolution is None
        assert options.width is None
        assert options.height is None

    def test_invalid_resolution(self) -> None:
        """An unparseable resolution is a configuration error."""
        options = EncodingOptions({"resolution": "big"})
        with pytest.raises(ConfigurationError, match="Invalid resolution"):
            _ = options.resolution


class TestEncodingOptionsToArgs:
    """Tests for EncodingOptions.to_args()."""

    def test_renders_in_insertion_order(self) -> None:
        """Flags follow the order the options were given in."""
        options = EncodingOptions(
            {
                "video_codec": "libx264",
                "frame_rate": 10,
                "resolution": "320x240",
                "audio_codec": "libfaac",
                "audio_sample_rate": 22050,
                "audio_channels": 1,
            }
        )
        assert options.to_args() == [
            "-vcodec", "libx264",
            "-r", "10",
            "-s", "320x240",
            "-acodec", "libfaac",
            "-ar", "22050",
            "-ac", "1",
        ]  # fmt: skip

    def test_integer_bitrates_are_kilobits(self) -> None:
        """Integer bitrates get a k suffix; strings pass through."""
        options = EncodingOptions(
            {"video_bitrate": 300, "audio_bitrate": "96k", "buffer_size": 2000}
        )
        assert options.to_args() == [
            "-b:v", "300k",
            "-b:a", "96k",
            "-bufsize", "2000k",
        ]  # fmt: skip

    def test_boolean_bitrate_rejected(self) -> None:
        """Booleans are not valid bitrates."""
        with pytest.raises(ConfigurationError, match="Invalid bitrate"):
            EncodingOptions({"video_bitrate": True}).to_args()

    def test_resolution_object_rendered(self) -> None:
        """A Resolution value renders as WxH."""
        options = EncodingOptions({"resolution": Resolution(426, 240)})
        assert options.to_args() == ["-s", "426x240"]

    def test_screenshot(self) -> None:
        """screenshot=True grabs a single image frame."""
        options = EncodingOptions({"seek_time": 3, "screenshot": True})
        assert options.to_args() == ["-ss", "3", "-vframes", "1", "-f", "image2"]
        assert EncodingOptions({"screenshot": False}).to_args() == []

    def test_custom_rendered_last(self) -> None:
        """custom is split like a shell would and appended last."""
        options = EncodingOptions(
            {"custom": "-map 0 -metadata title='My Movie'", "video_codec": "copy"}
        )
        assert options.to_args() == [
            "-vcodec", "copy",
            "-map", "0",
            "-metadata", "title=My Movie",
        ]  # fmt: skip

    def test_custom_sequence(self) -> None:
        """custom may also be a list of arguments."""
        options = EncodingOptions({"custom": ["-map", 0]})
        assert options.to_args() == ["-map", "0"]

    def test_none_values_skipped(self) -> None:
        """Options set to None are not rendered."""
        options = EncodingOptions({"video_codec": None, "audio_codec": "aac"})
        assert options.to_args() == ["-acodec", "aac"]

    def test_unknown_options_skipped_with_warning(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Unknown option names are logged and ignored."""
        options = EncodingOptions({"wobble": 3, "threads": 4})
        with caplog.at_level(logging.WARNING):
            assert options.to_args() == ["-threads", "4"]
        assert "wobble" in caplog.text

    def test_rotation_directives(self) -> None:
        """video_filter and metadata render as -vf and -metadata."""
        options = EncodingOptions(
            {"video_filter": "transpose=1", "metadata": "s:v:0 rotate=0"}
        )
        assert options.to_args() == [
            "-vf", "transpose=1",
            "-metadata", "s:v:0 rotate=0",
        ]  # fmt: skip


class TestRawOptions:
    """Tests for RawOptions."""

    def test_splits_like_shell(self) -> None:
        """Quoted arguments stay together."""
        raw = RawOptions("-vcodec libx264 -metadata 'title=Two Words'")
        assert raw.to_args() == ["-vcodec", "libx264", "-metadata", "title=Two Words"]

    def test_str_returns_text(self) -> None:
        """str() returns the string unchanged."""
        assert str(RawOptions("-an")) == "-an"

    def test_unbalanced_quotes(self) -> None:
        """Unparseable strings are configuration errors."""
        with pytest.raises(ConfigurationError, match="Cannot parse raw options"):
            RawOptions("-metadata 'title=oops").to_args()
