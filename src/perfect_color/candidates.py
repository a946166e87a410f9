# candidates.py – perturbed Lab candidates at a target ΔE
#
# Each call is a bounded stochastic search: sample a box around the reference,
# widen the box when the sample lands too close, narrow it when too far, and
# stop at the first sample within tolerance of the target. After
# max_generation_attempts the last sample is returned as-is.
#
# The two candidates of a round come from two independent calls; they may end
# up close to each other and that is accepted.

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from .color_space import Lab, clamp_lab, perceptual_distance
from .config import DEFAULT_CONFIG, SessionConfig

log = logging.getLogger(__name__)


@dataclass
class CandidateGenerator:
    config: SessionConfig = DEFAULT_CONFIG
    rng: np.random.Generator = field(default_factory=np.random.default_rng)

    def initial_half_widths(self, round_index: int) -> np.ndarray:
        cfg = self.config
        decay = cfg.base_decay_factor ** int(round_index)
        spreads = np.array(
            [cfg.lightness_spread, cfg.chroma_spread, cfg.chroma_spread], dtype=np.float64
        )
        return spreads / decay

    def generate(self, reference_lab: Lab, round_index: int) -> Lab:
        cfg = self.config
        ref = np.asarray(reference_lab, dtype=np.float64)
        half = self.initial_half_widths(round_index)

        candidate = ref
        delta = 0.0
        attempt = 0
        for attempt in range(1, cfg.max_generation_attempts + 1):
            offsets = np.asarray(self.rng.uniform(-half, half), dtype=np.float64)
            candidate = clamp_lab(ref + offsets)
            delta = perceptual_distance(candidate, ref)
            if abs(delta - cfg.target_delta) < cfg.delta_tolerance:
                break
            if delta < cfg.target_delta:
                half = half * cfg.widen_factor
            else:
                half = half * cfg.narrow_factor

        log.debug(
            "candidate round=%d attempts=%d ΔE=%.2f", round_index, attempt, delta
        )
        return candidate

    def generate_pair(self, reference_lab: Lab, round_index: int) -> tuple[Lab, Lab]:
        return (
            self.generate(reference_lab, round_index),
            self.generate(reference_lab, round_index),
        )


__all__ = ["CandidateGenerator"]
