# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
cliproxy_quota - remaining-quota statusline segment for a local CLI proxy.

Queries the proxy's management API for every configured credential,
averages the remaining quota of the tracked models (Opus, Gemini 3 Pro,
Gemini 3 Flash) and renders them as colored "alias:NN%" fragments, with a
persisted TTL cache in front of the network calls.
"""

from .aggregator import aggregate_quotas
from .cache import QuotaCache
from .classifier import classify_model, normalize_model_text
from .core import (
    AnsiColor,
    AuthEntry,
    CachedQuotas,
    ColorError,
    ConfigError,
    ModelQuota,
    QuotaSegmentConfig,
    QuotaSegmentError,
    SegmentData,
    SegmentState,
    TrackedModel,
    default_segment_options,
)
from .fetcher import QuotaFetcher
from .formatter import format_tracked_output
from .segment import QuotaResolution, QuotaSegment

__version__ = "0.3.0"

__all__ = [
    "AnsiColor",
    "AuthEntry",
    "CachedQuotas",
    "ColorError",
    "ConfigError",
    "ModelQuota",
    "QuotaCache",
    "QuotaFetcher",
    "QuotaResolution",
    "QuotaSegment",
    "QuotaSegmentConfig",
    "QuotaSegmentError",
    "SegmentData",
    "SegmentState",
    "TrackedModel",
    "aggregate_quotas",
    "classify_model",
    "default_segment_options",
    "format_tracked_output",
    "normalize_model_text",
]
