from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

# -----------------------------
# Session constants
# -----------------------------


@dataclass(frozen=True)
class SessionConfig:
    min_rounds: int = 7
    max_rounds: int = 15
    refinement_threshold: float = 3.0  # ΔE between consecutive picks
    base_decay_factor: float = 1.5
    target_delta: float = 10.0
    delta_tolerance: float = 2.0
    max_generation_attempts: int = 10
    # initial perturbation half-widths at round 0
    lightness_spread: float = 15.0
    chroma_spread: float = 20.0
    widen_factor: float = 1.1
    narrow_factor: float = 0.9
    # abMag at which the predictor saturates to max_rounds
    saturated_chroma: float = 150.0

    def __post_init__(self) -> None:
        if not 0 < self.min_rounds <= self.max_rounds:
            raise ValueError("require 0 < min_rounds <= max_rounds")
        if self.base_decay_factor <= 1.0:
            raise ValueError("base_decay_factor must be > 1")
        if self.max_generation_attempts < 1:
            raise ValueError("max_generation_attempts must be ≥ 1")


DEFAULT_CONFIG = SessionConfig()

# -----------------------------
# App settings (environment)
# -----------------------------
DEFAULT_STORE = Path.home() / ".perfect_color.json"


@dataclass(frozen=True)
class Settings:
    store_path: Path = DEFAULT_STORE
    seed: int | None = None
    log_level: int = logging.INFO
    session: SessionConfig = DEFAULT_CONFIG

    @classmethod
    def from_env(cls) -> "Settings":
        store = os.getenv("PERFECT_COLOR_STORE")
        raw_seed = os.getenv("PERFECT_COLOR_SEED")
        level_name = os.getenv("PERFECT_COLOR_LOG_LEVEL", "INFO").strip().upper()

        seed = None
        if raw_seed:
            try:
                seed = int(raw_seed)
            except ValueError:
                raise ValueError(f"PERFECT_COLOR_SEED must be an integer, got {raw_seed!r}")

        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(f"unknown log level {level_name!r}")

        return cls(
            store_path=Path(store).expanduser() if store else DEFAULT_STORE,
            seed=seed,
            log_level=level,
        )
