import random

import pytest

from taixiu.analytics.ensemble import Ensemble
from taixiu.config import MODELS

def _seq(n, seed=7):
    rnd = random.Random(seed)
    return [rnd.choice('TX') for _ in range(n)]

def test_initial_state():
    ens = Ensemble()
    assert ens.weights == {m: 0.25 for m in MODELS}
    assert ens.perf_ema == {m: 0.5 for m in MODELS}

def test_mix_is_a_distribution():
    ens = Ensemble()
    seq = _seq(60)
    ens.train_all(seq)
    for i in range(1, len(seq)):
        out = ens.predict_mix(seq[:i])
        d = out.distribution
        assert 0 <= d['T'] <= 1 and 0 <= d['X'] <= 1
        assert d['T'] + d['X'] == pytest.approx(1, abs=1e-6)
        assert set(out.model_probas) == set(MODELS)

def test_weights_stay_normalized():
    ens = Ensemble()
    seq = _seq(300, seed=3)
    for i in range(1, len(seq)):
        ens.update_weights(seq[:i], seq[i])
        ens.train_all(seq[:i + 1])
        assert sum(ens.weights.values()) == pytest.approx(1, abs=1e-6)
        assert all(0.0001 <= w <= 0.9999 for w in ens.weights.values())

def test_accurate_model_gains_weight():
    ens = Ensemble()
    seq = ['T'] * 40
    for i in range(1, len(seq)):
        ens.update_weights(seq[:i], 'T')
        ens.train_all(seq[:i + 1])
    assert ens.weights['momentum'] > ens.weights['run_length']
    assert max(ens.weights, key=ens.weights.get) == 'markov'
    assert ens.perf_ema['momentum'] > ens.perf_ema['run_length']

def test_reset():
    ens = Ensemble()
    ens.update_weights(list("TTTT"), 'T')
    ens.reset()
    assert ens.weights == {m: 0.25 for m in MODELS}
