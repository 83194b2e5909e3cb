# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""Exceptions raised by the quota segment.

Only configuration problems are raised. Network, parse and cache failures
are logged and degrade to "no data" instead.
"""


class QuotaSegmentError(Exception):
    """Base class for quota segment errors."""


class ConfigError(QuotaSegmentError):
    """An option in the segment's options map is present but malformed."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")


class ColorError(ConfigError):
    """A color option could not be parsed."""
