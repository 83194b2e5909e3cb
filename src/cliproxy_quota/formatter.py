# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""Render aggregated quotas as colored "alias:NN%" fragments."""

import math
from typing import List, Mapping, Optional

from .core.colors import apply_foreground_color
from .core.config import QuotaSegmentConfig
from .core.types import TrackedModel


def quota_percent(fraction: float) -> int:
    """
    Convert a remaining fraction to a whole percentage in 0-100.

    Halves round up (0.705 -> 71) rather than to even.
    """
    scaled = fraction * 100.0
    if math.isnan(scaled) or scaled <= 0:
        return 0
    if scaled >= 100:
        return 100
    return int(math.floor(scaled + 0.5))


def format_tracked_output(
    aggregate: Mapping[TrackedModel, float],
    config: Optional[QuotaSegmentConfig] = None,
    separator: Optional[str] = None,
) -> str:
    """
    Render one fragment per tracked model present in the aggregate.

    Args:
        aggregate: TrackedModel -> average remaining fraction
        config: Supplies aliases, colors and the default separator
        separator: Overrides config.separator when given

    Returns:
        Fragments in fixed model order joined by the separator; "" if none
    """
    config = config or QuotaSegmentConfig()
    if separator is None:
        separator = config.separator

    parts: List[str] = []
    for model in TrackedModel.all():
        if model not in aggregate:
            continue
        display = config.display_for(model)
        label = f"{display.alias}:{quota_percent(aggregate[model])}%"
        parts.append(apply_foreground_color(label, display.color))

    return separator.join(parts)
