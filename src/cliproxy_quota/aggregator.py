# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""Reduce per-auth quota readings to one average per tracked model."""

import math
from typing import Dict, Iterable, List

from .classifier import classify_model
from .core.types import ModelQuota, TrackedModel


def aggregate_quotas(quotas: Iterable[ModelQuota]) -> Dict[TrackedModel, float]:
    """
    Average the remaining fraction of each tracked model.

    Readings that do not classify are ignored. Models with no readings are
    absent from the result rather than reported as zero. Sums use
    math.fsum, so the result does not depend on input order.
    """
    readings: Dict[TrackedModel, List[float]] = {}
    for quota in quotas:
        model = classify_model(quota.model_id, quota.display_name)
        if model is None:
            continue
        readings.setdefault(model, []).append(quota.remaining_fraction)

    return {
        model: math.fsum(values) / len(values)
        for model, values in readings.items()
        if values
    }


def count_readings(quotas: Iterable[ModelQuota]) -> Dict[TrackedModel, int]:
    """Number of readings contributing to each tracked model's average."""
    counts: Dict[TrackedModel, int] = {}
    for quota in quotas:
        model = classify_model(quota.model_id, quota.display_name)
        if model is not None:
            counts[model] = counts.get(model, 0) + 1
    return counts
