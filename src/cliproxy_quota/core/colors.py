# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Terminal color model for segment text.

Colors come from the host's theme config in one of three JSON shapes:

    {"c16": 11}                  4-bit palette index (0-15)
    {"c256": 214}                8-bit palette index (0-255)
    {"r": 255, "g": 136, "b": 0} truecolor

Strings such as "bright_yellow", "color(214)" or "#ff8800" are also
accepted and parsed with rich's color parser.
"""

from dataclasses import dataclass
from typing import Any, Tuple

from rich.color import Color, ColorParseError, ColorType

from .errors import ColorError

# Resets the foreground only, so a background set by the renderer survives
FOREGROUND_RESET = "\x1b[39m"


@dataclass(frozen=True)
class AnsiColor:
    """A foreground color in one of the three terminal color models."""

    kind: str  # "c16", "c256" or "rgb"
    value: Tuple[int, ...]

    @classmethod
    def c16(cls, index: int) -> "AnsiColor":
        return cls("c16", (index,))

    @classmethod
    def c256(cls, index: int) -> "AnsiColor":
        return cls("c256", (index,))

    @classmethod
    def rgb(cls, r: int, g: int, b: int) -> "AnsiColor":
        return cls("rgb", (r, g, b))

    def escape_prefix(self) -> str:
        """Return the SGR sequence that selects this foreground color."""
        if self.kind == "c16":
            index = self.value[0]
            code = 30 + index if index < 8 else 90 + (index - 8)
            return f"\x1b[{code}m"
        if self.kind == "c256":
            return f"\x1b[38;5;{self.value[0]}m"
        r, g, b = self.value
        return f"\x1b[38;2;{r};{g};{b}m"

    def to_dict(self) -> dict:
        """Serialize back to the theme-config JSON shape."""
        if self.kind == "rgb":
            r, g, b = self.value
            return {"r": r, "g": g, "b": b}
        return {self.kind: self.value[0]}


def apply_foreground_color(text: str, color: AnsiColor) -> str:
    """Wrap text in a foreground color, resetting only the foreground after it."""
    return f"{color.escape_prefix()}{text}{FOREGROUND_RESET}"


def _channel(key: str, value: Any, upper: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ColorError(key, f"expected an integer, got {value!r}")
    if not 0 <= value <= upper:
        raise ColorError(key, f"{value} is outside 0-{upper}")
    return value


def _parse_color_string(key: str, text: str) -> AnsiColor:
    try:
        color = Color.parse(text)
    except ColorParseError as e:
        raise ColorError(key, str(e)) from e

    if color.type == ColorType.STANDARD:
        return AnsiColor.c16(color.number)
    if color.type == ColorType.EIGHT_BIT:
        return AnsiColor.c256(color.number)
    if color.type == ColorType.TRUECOLOR:
        triplet = color.triplet
        return AnsiColor.rgb(triplet.red, triplet.green, triplet.blue)
    raise ColorError(key, f"{text!r} does not name a concrete color")


def parse_color(value: Any, key: str = "color") -> AnsiColor:
    """
    Parse a color option value.

    Args:
        value: A theme-config color object or a color string
        key: Option name, used in error messages

    Returns:
        The parsed AnsiColor

    Raises:
        ColorError: If the value is not a recognizable color
    """
    if isinstance(value, AnsiColor):
        return value
    if isinstance(value, str):
        return _parse_color_string(key, value)
    if isinstance(value, dict):
        if "c16" in value:
            return AnsiColor.c16(_channel(key, value["c16"], 15))
        if "c256" in value:
            return AnsiColor.c256(_channel(key, value["c256"], 255))
        if {"r", "g", "b"} <= value.keys():
            return AnsiColor.rgb(
                _channel(key, value["r"], 255),
                _channel(key, value["g"], 255),
                _channel(key, value["b"], 255),
            )
    raise ColorError(key, f"unrecognized color value {value!r}")
