"""Tests for color parsing and escape sequences."""

import pytest

from cliproxy_quota.core.colors import (
    FOREGROUND_RESET,
    AnsiColor,
    apply_foreground_color,
    parse_color,
)
from cliproxy_quota.core.errors import ColorError, ConfigError


class TestEscapes:
    def test_c16_low(self):
        assert AnsiColor.c16(1).escape_prefix() == "\x1b[31m"

    def test_c16_bright(self):
        assert AnsiColor.c16(11).escape_prefix() == "\x1b[93m"

    def test_c256(self):
        assert AnsiColor.c256(214).escape_prefix() == "\x1b[38;5;214m"

    def test_rgb(self):
        assert AnsiColor.rgb(1, 2, 3).escape_prefix() == "\x1b[38;2;1;2;3m"

    def test_apply_resets_foreground_only(self):
        result = apply_foreground_color("opus:70%", AnsiColor.c256(214))
        assert result == "\x1b[38;5;214mopus:70%\x1b[39m"
        assert result.endswith(FOREGROUND_RESET)
        assert "\x1b[0m" not in result


class TestParseColor:
    def test_object_forms(self):
        assert parse_color({"c16": 9}) == AnsiColor.c16(9)
        assert parse_color({"c256": 45}) == AnsiColor.c256(45)
        assert parse_color({"r": 255, "g": 136, "b": 0}) == AnsiColor.rgb(255, 136, 0)

    def test_round_trip_through_dict(self):
        for color in (AnsiColor.c16(3), AnsiColor.c256(129), AnsiColor.rgb(9, 8, 7)):
            assert parse_color(color.to_dict()) == color

    def test_named_string(self):
        assert parse_color("red") == AnsiColor.c16(1)
        assert parse_color("bright_yellow") == AnsiColor.c16(11)

    def test_eight_bit_string(self):
        assert parse_color("color(214)") == AnsiColor.c256(214)

    def test_hex_string(self):
        assert parse_color("#ff8800") == AnsiColor.rgb(255, 136, 0)

    def test_out_of_range(self):
        with pytest.raises(ColorError):
            parse_color({"c16": 16})
        with pytest.raises(ColorError):
            parse_color({"c256": 256})
        with pytest.raises(ColorError):
            parse_color({"r": 0, "g": 0, "b": 300})

    def test_bool_is_not_an_index(self):
        with pytest.raises(ColorError):
            parse_color({"c16": True})

    def test_garbage(self):
        with pytest.raises(ColorError):
            parse_color("definitely-not-a-color")
        with pytest.raises(ColorError):
            parse_color(42)
        with pytest.raises(ColorError):
            parse_color({"hue": 3})

    def test_default_is_rejected(self):
        with pytest.raises(ColorError):
            parse_color("default")

    def test_color_error_is_config_error(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_color([], key="opus_color")
        assert exc_info.value.key == "opus_color"
