import numpy as np

from perfect_color.candidates import CandidateGenerator
from perfect_color.color_space import Color, perceptual_distance


class ScriptedRng:
    """Returns fixed offsets and records the half-widths it was asked for."""

    def __init__(self, offsets):
        self.offsets = [np.asarray(o, dtype=float) for o in offsets]
        self.highs = []

    def uniform(self, low, high):
        self.highs.append(np.asarray(high, dtype=float).copy())
        return self.offsets[min(len(self.highs), len(self.offsets)) - 1]


class CountingRng:
    def __init__(self, seed):
        self._rng = np.random.default_rng(seed)
        self.calls = 0

    def uniform(self, low, high):
        self.calls += 1
        return self._rng.uniform(low, high)


def _in_domain(lab):
    L, a, b = lab
    return 0 <= L <= 100 and -128 <= a <= 127 and -128 <= b <= 127


def test_initial_half_widths_decay():
    gen = CandidateGenerator()
    assert np.allclose(gen.initial_half_widths(0), [15, 20, 20])
    assert np.allclose(gen.initial_half_widths(2), [15 / 2.25, 20 / 2.25, 20 / 2.25])
    widths = [gen.initial_half_widths(n)[0] for n in range(16)]
    assert all(widths[i] > widths[i + 1] for i in range(len(widths) - 1))


def test_accepts_first_sample_within_tolerance():
    rng = ScriptedRng([[10.0, 0.0, 0.0]])
    ref = np.array([50.0, 0.0, 0.0])
    out = CandidateGenerator(rng=rng).generate(ref, 0)
    assert np.allclose(out, [60.0, 0.0, 0.0])
    assert len(rng.highs) == 1


def test_widens_when_too_close_and_returns_last():
    rng = ScriptedRng([[0.0, 0.0, 0.0]])
    ref = np.array([50.0, 10.0, -10.0])
    out = CandidateGenerator(rng=rng).generate(ref, 0)
    assert np.allclose(out, ref)
    assert len(rng.highs) == 10
    for i, h in enumerate(rng.highs):
        assert np.allclose(h, np.array([15.0, 20.0, 20.0]) * 1.1**i)


def test_narrows_when_too_far():
    rng = ScriptedRng([[30.0, 0.0, 0.0]])
    ref = np.array([50.0, 0.0, 0.0])
    out = CandidateGenerator(rng=rng).generate(ref, 1)
    assert np.allclose(out, [80.0, 0.0, 0.0])
    assert len(rng.highs) == 10
    assert np.allclose(rng.highs[1], rng.highs[0] * 0.9)


def test_candidates_stay_in_lab_domain():
    gen = CandidateGenerator(rng=np.random.default_rng(11))
    extremes = [[0, -128, -128], [100, 127, 127], [100, -128, 127], [0, 127, -128]]
    for ref in extremes:
        for round_index in (0, 1, 5):
            for _ in range(20):
                assert _in_domain(gen.generate(np.array(ref, dtype=float), round_index))


def test_gray_scenario_round_zero():
    ref = Color.from_hex("#808080").lab
    for seed in range(50):
        rng = CountingRng(seed)
        cand = CandidateGenerator(rng=rng).generate(ref, 0)
        assert _in_domain(cand)
        delta = perceptual_distance(ref, cand)
        # stopping early means the sample was accepted
        if rng.calls < 10:
            assert 8 < delta < 12


def test_pair_is_two_independent_draws():
    gen = CandidateGenerator(rng=np.random.default_rng(5))
    a, b = gen.generate_pair(np.array([50.0, 0.0, 0.0]), 0)
    assert not np.allclose(a, b)
