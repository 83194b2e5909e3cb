# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

from .colors import AnsiColor, apply_foreground_color, parse_color
from .config import ModelDisplayConfig, QuotaSegmentConfig, default_segment_options
from .errors import ColorError, ConfigError, QuotaSegmentError
from .types import (
    AuthEntry,
    AuthType,
    CachedQuotas,
    ModelQuota,
    SegmentData,
    SegmentState,
    TrackedModel,
)

__all__ = [
    "AnsiColor",
    "AuthEntry",
    "AuthType",
    "CachedQuotas",
    "ColorError",
    "ConfigError",
    "ModelDisplayConfig",
    "ModelQuota",
    "QuotaSegmentConfig",
    "QuotaSegmentError",
    "SegmentData",
    "SegmentState",
    "TrackedModel",
    "apply_foreground_color",
    "default_segment_options",
    "parse_color",
]
