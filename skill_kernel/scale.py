"""
Skill Kernel - Usage Scale

Maps raw usage to a bounded intensity for visual encoding.
Degenerate extents (one distinct value, or nothing but the 0 anchor)
yield a constant.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from .constants import USAGE_SCALE_DEGENERATE, USAGE_SCALE_MAX, USAGE_SCALE_MIN
from .domain_types import PersonMetricsIndex, coerce_usage
from .metrics import observed_usage_values


@dataclass(frozen=True)
class UsageScale:
    """Clamped linear map from [low, high] to [range_min, range_max]."""

    low: float = 0.0
    high: float = 0.0
    range_min: float = USAGE_SCALE_MIN
    range_max: float = USAGE_SCALE_MAX
    constant: float = USAGE_SCALE_DEGENERATE

    @property
    def degenerate(self) -> bool:
        return self.low == self.high

    def __call__(self, usage: float) -> float:
        if self.degenerate:
            return self.constant
        value = coerce_usage(usage)
        t = (value - self.low) / (self.high - self.low)
        t = min(1.0, max(0.0, t))
        return self.range_min + t * (self.range_max - self.range_min)

    def to_dict(self) -> dict:
        return {
            "domain": [self.low, self.high],
            "range": [self.range_min, self.range_max],
            "degenerate": self.degenerate,
        }


def create_usage_scale(values: Iterable[float]) -> UsageScale:
    """Build a scale over the finite members of *values*."""
    finite = [float(v) for v in values if isinstance(v, (int, float)) and math.isfinite(v)]
    if not finite:
        return UsageScale()
    return UsageScale(low=min(finite), high=max(finite))


def usage_scale_from_metrics(metrics: PersonMetricsIndex) -> UsageScale:
    """Scale over every observed usage plus the implicit 0 anchor."""
    return create_usage_scale([0.0, *observed_usage_values(metrics)])
