from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

import numpy as np

from .color_space import Color
from .session import Phase, Round, SessionController

log = logging.getLogger(__name__)

KEEP_LABEL = "Keep Current"
NEW_LABEL = "New Option"


@dataclass(frozen=True)
class Option:
    color: Color
    label: str


class View(Protocol):
    """UI collaborator; only ever sees colors, labels and progress numbers."""

    def show_picker(self) -> None: ...

    def present_options(self, options: Sequence[Option]) -> None: ...

    def render_progress(self, round_index: int, predicted_total_rounds: int) -> None: ...

    def show_result(self, color: Color) -> None: ...


def progress_text(round_index: int, predicted_total_rounds: int) -> str:
    return f"Round {round_index + 1} of {predicted_total_rounds}: Which option looks best?"


def progress_fraction(round_index: int, predicted_total_rounds: int) -> float:
    if predicted_total_rounds <= 0:
        return 1.0
    return min(1.0, round_index / predicted_total_rounds)


class PresentationAdapter:
    """Translates UI events into controller transitions and renders the outcome."""

    def __init__(
        self,
        controller: SessionController,
        view: View,
        rng: Optional[np.random.Generator] = None,
    ):
        self.controller = controller
        self.view = view
        self._rng = rng if rng is not None else np.random.default_rng()
        self._options: List[Option] = []

    @property
    def options(self) -> tuple[Option, ...]:
        return tuple(self._options)

    # ---------- inputs ----------
    def on_pick(self, color: Color) -> None:
        self.controller.start(color)
        self.render()

    def on_choice(self, index: int) -> bool:
        if self.controller.phase is not Phase.PRESENTING:
            log.debug("choice %s ignored: not presenting", index)
            return False
        if not 0 <= index < len(self._options):
            log.warning("choice index %s out of range", index)
            return False
        self.controller.choose(self._options[index].color)
        self.render()
        return True

    def on_back(self) -> None:
        self.controller.back()
        self.render()

    def on_restart(self) -> None:
        self.controller.reset()
        self.render()

    # ---------- output ----------
    def render(self) -> None:
        ctrl = self.controller
        rnd = ctrl.current_round
        if rnd is not None:
            self.present_options(rnd)
            self.view.render_progress(rnd.round_index, ctrl.predicted_total_rounds)
        elif ctrl.result is not None:
            self._options = []
            self.view.show_result(ctrl.result)
        else:
            self._options = []
            self.view.show_picker()

    def present_options(self, rnd: Round) -> None:
        options = [
            Option(rnd.current, KEEP_LABEL),
            Option(rnd.candidates[0], NEW_LABEL),
            Option(rnd.candidates[1], NEW_LABEL),
        ]
        # uniform shuffle; order carries no meaning
        self._options = [options[i] for i in self._rng.permutation(len(options))]
        self.view.present_options(self.options)


__all__ = [
    "KEEP_LABEL",
    "NEW_LABEL",
    "Option",
    "PresentationAdapter",
    "View",
    "progress_fraction",
    "progress_text",
]
