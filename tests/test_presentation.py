import numpy as np

from perfect_color.candidates import CandidateGenerator
from perfect_color.color_space import Color
from perfect_color.presentation import (
    KEEP_LABEL,
    NEW_LABEL,
    PresentationAdapter,
    progress_fraction,
    progress_text,
)
from perfect_color.session import Phase, SessionController

GRAY = Color.from_hex("#808080")


class RecordingView:
    def __init__(self):
        self.calls = []

    def show_picker(self):
        self.calls.append(("picker",))

    def present_options(self, options):
        self.calls.append(("options", list(options)))

    def render_progress(self, round_index, predicted_total_rounds):
        self.calls.append(("progress", round_index, predicted_total_rounds))

    def show_result(self, color):
        self.calls.append(("result", color))

    @property
    def last_options(self):
        return [c for c in self.calls if c[0] == "options"][-1][1]


def _adapter(seed=0):
    ctrl = SessionController(generator=CandidateGenerator(rng=np.random.default_rng(seed)))
    view = RecordingView()
    return PresentationAdapter(ctrl, view, np.random.default_rng(seed)), view


def _keep_index(options):
    return next(i for i, o in enumerate(options) if o.label == KEEP_LABEL)


def test_pick_presents_three_options_and_progress():
    adapter, view = _adapter()
    adapter.on_pick(GRAY)
    options = view.last_options
    assert len(options) == 3
    assert sorted(o.label for o in options) == sorted([KEEP_LABEL, NEW_LABEL, NEW_LABEL])
    assert options[_keep_index(options)].color == GRAY
    assert view.calls[-1] == ("progress", 0, 7)


def test_choice_advances_round():
    adapter, view = _adapter()
    adapter.on_pick(GRAY)
    new_index = next(i for i, o in enumerate(view.last_options) if o.label == NEW_LABEL)
    chosen = view.last_options[new_index].color
    assert adapter.on_choice(new_index)
    assert adapter.controller.current == chosen
    assert view.calls[-1] == ("progress", 1, 7)


def test_out_of_range_choice_is_ignored():
    adapter, view = _adapter()
    adapter.on_pick(GRAY)
    before = len(view.calls)
    assert not adapter.on_choice(3)
    assert not adapter.on_choice(-1)
    assert len(view.calls) == before
    assert adapter.controller.round_index == 0


def test_choice_before_pick_is_ignored():
    adapter, view = _adapter()
    assert not adapter.on_choice(0)
    assert view.calls == []


def test_option_order_is_shuffled():
    adapter, view = _adapter(seed=1)
    adapter.on_pick(GRAY)
    positions = set()
    for _ in range(30):
        adapter.on_back()  # empty history: back to picker
        adapter.on_pick(GRAY)
        positions.add(_keep_index(view.last_options))
    assert len(positions) > 1


def test_back_to_picker_and_finish():
    adapter, view = _adapter()
    adapter.on_pick(GRAY)
    adapter.on_back()
    assert view.calls[-1] == ("picker",)
    assert adapter.options == ()

    adapter.on_pick(GRAY)
    for _ in range(7):
        adapter.on_choice(_keep_index(view.last_options))
    assert adapter.controller.phase is Phase.FINISHED
    assert view.calls[-1] == ("result", GRAY)

    adapter.on_restart()
    assert view.calls[-1] == ("picker",)


def test_progress_helpers():
    assert progress_text(0, 7) == "Round 1 of 7: Which option looks best?"
    assert progress_fraction(0, 7) == 0.0
    assert progress_fraction(7, 7) == 1.0
    assert progress_fraction(3, 0) == 1.0
