import math

import pytest

from taixiu.analytics.streaks import MomentumModel, RunLengthModel

def test_continuation_decreases_with_run():
    rl = RunLengthModel(short=6, long=20)
    ps = [rl.continuation(run) for run in range(1, 40)]
    assert all(a > b for a, b in zip(ps, ps[1:]) if b > 0.05)
    assert all(0.05 <= p <= 0.95 for p in ps)

def test_long_streak_favors_break():
    p = RunLengthModel(short=6, long=20).predict_proba(list("TTTTTT"))
    expected = 0.6 * math.exp(-1) + 0.3 * math.exp(-0.3)
    assert p['T'] == pytest.approx(expected) and p['T'] < 0.5
    assert p['X'] == pytest.approx(1 - expected)

def test_run_length_empty_is_uniform():
    assert RunLengthModel().predict_proba([]) == {'T': 0.5, 'X': 0.5}

def test_momentum():
    mm = MomentumModel()
    assert mm.predict_proba(list("T" * 15))['T'] == pytest.approx(0.9)
    assert mm.predict_proba(list("X" * 15))['T'] == pytest.approx(0.1)
    assert mm.predict_proba([]) == {'T': 0.5, 'X': 0.5}
    p = mm.predict_proba(list("TXTXX"))
    assert 0.02 <= p['T'] <= 0.98 and abs(p['T'] + p['X'] - 1) < 1e-9
