from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .candidates import CandidateGenerator
from .color_space import Color
from .config import DEFAULT_CONFIG, SessionConfig
from .rounds import predict_total_rounds

log = logging.getLogger(__name__)

FinishListener = Callable[[Color], None]


class Phase(enum.Enum):
    SELECTING = "selecting"
    PRESENTING = "presenting"
    FINISHED = "finished"


@dataclass(frozen=True)
class RoundState:
    round_index: int
    color: Color


@dataclass(frozen=True)
class Round:
    round_index: int
    predicted_total_rounds: int
    current: Color
    candidates: Tuple[Color, Color]


@dataclass
class SessionController:
    """
    Owns one preference session: current color, round index and the undo log.

    Selecting ──start──▶ Presenting ──choose/back──▶ Presenting ──▶ Finished
        ▲                    │ back (empty history)                  │
        └────────────────────┴──────────────── reset ◀───────────────┘

    Termination is evaluated each time a new round is about to be produced.
    Invalid inputs for the current phase are no-ops.
    """

    config: SessionConfig = DEFAULT_CONFIG
    generator: Optional[CandidateGenerator] = None
    on_finish: List[FinishListener] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.generator is None:
            self.generator = CandidateGenerator(self.config)
        self._generator: CandidateGenerator = self.generator
        self._phase = Phase.SELECTING
        self._current: Optional[Color] = None
        self._round_index = 0
        self._history: List[RoundState] = []
        self._predicted = self.config.max_rounds
        self._round: Optional[Round] = None

    # ---------- read-only views ----------
    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def current(self) -> Optional[Color]:
        return self._current

    @property
    def round_index(self) -> int:
        return self._round_index

    @property
    def history(self) -> Tuple[RoundState, ...]:
        return tuple(self._history)

    @property
    def predicted_total_rounds(self) -> int:
        return self._predicted

    @property
    def current_round(self) -> Optional[Round]:
        return self._round if self._phase is Phase.PRESENTING else None

    @property
    def result(self) -> Optional[Color]:
        return self._current if self._phase is Phase.FINISHED else None

    # ---------- transitions ----------
    def start(self, color: Color) -> Optional[Round]:
        self._current = color
        self._round_index = 0
        self._history.clear()
        self._predicted = predict_total_rounds(color, self.config)
        self._phase = Phase.PRESENTING
        log.info("session started at %s, predicted %d rounds", color.hex, self._predicted)
        return self._next_round()

    def choose(self, color: Color) -> Optional[Round]:
        if self._phase is not Phase.PRESENTING or self._current is None:
            log.debug("choose ignored in phase %s", self._phase.value)
            return None
        self._history.append(RoundState(self._round_index, self._current))
        self._current = color
        self._round_index += 1
        return self._next_round()

    def back(self) -> Optional[Round]:
        if self._phase is not Phase.PRESENTING:
            log.debug("back ignored in phase %s", self._phase.value)
            return None
        if not self._history:
            self.reset()
            return None
        prev = self._history.pop()
        self._current = prev.color
        self._round_index = prev.round_index
        self._round = self._make_round(prev.color)
        return self._round

    def reset(self) -> None:
        self._phase = Phase.SELECTING
        self._current = None
        self._round_index = 0
        self._history.clear()
        self._predicted = self.config.max_rounds
        self._round = None
        log.info("session reset")

    # ---------- helpers ----------
    def _next_round(self) -> Optional[Round]:
        current = self._current
        if current is None:
            return None
        reason = self._termination_reason(current)
        if reason is not None:
            self._finish(current, reason)
            return None
        self._round = self._make_round(current)
        return self._round

    def _termination_reason(self, current: Color) -> Optional[str]:
        cfg = self.config
        if self._round_index >= cfg.min_rounds and self._history:
            diff = current.distance_to(self._history[-1].color)
            if diff < cfg.refinement_threshold:
                self._predicted = self._round_index
                return f"converged (ΔE={diff:.2f})"
        if self._round_index >= cfg.max_rounds:
            self._predicted = cfg.max_rounds
            return "round limit"
        return None

    def _make_round(self, current: Color) -> Round:
        lab1, lab2 = self._generator.generate_pair(current.lab, self._round_index)
        return Round(
            round_index=self._round_index,
            predicted_total_rounds=self._predicted,
            current=current,
            candidates=(Color.from_lab(lab1), Color.from_lab(lab2)),
        )

    def _finish(self, current: Color, reason: str) -> None:
        self._phase = Phase.FINISHED
        self._round = None
        log.info(
            "session finished at round %d with %s: %s",
            self._round_index,
            current.hex,
            reason,
        )
        for listener in list(self.on_finish):
            try:
                listener(current)
            except Exception:
                log.exception("finish listener failed")


__all__ = ["Phase", "Round", "RoundState", "SessionController"]
