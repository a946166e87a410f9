from __future__ import annotations

import math

from .color_space import Color
from .config import DEFAULT_CONFIG, SessionConfig


def rounds_for_chroma(ab_mag: float, config: SessionConfig = DEFAULT_CONFIG) -> int:
    """
    Linear map from Lab chroma to a round budget.
      abMag = 0                        → min_rounds (neutral)
      abMag ≥ config.saturated_chroma  → max_rounds
    """
    lo, hi = config.min_rounds, config.max_rounds
    predicted = math.floor(lo + (ab_mag / config.saturated_chroma) * (hi - lo) + 0.5)
    return max(lo, min(predicted, hi))


def predict_total_rounds(color: Color, config: SessionConfig = DEFAULT_CONFIG) -> int:
    _, a, b = color.lab
    return rounds_for_chroma(math.hypot(a, b), config)


__all__ = ["predict_total_rounds", "rounds_for_chroma"]
