import pytest

from taixiu.analytics.patterns import PatternModel, runs
from taixiu.analytics.road import classify_road

def test_runs():
    assert runs("TTTXX") == [('T', 3), ('X', 2)]
    assert runs("") == []

def test_zigzag():
    seq = list("TXTXTXTXTX")
    pm = PatternModel()
    sig = pm.detect_pattern(seq)
    assert sig.type == 'zigzag' and sig.strength == 0.9
    p = pm.predict_proba(seq)
    assert p['T'] == pytest.approx(0.94) and p['T'] > p['X']

def test_streak():
    seq = list("XTTTTTT")
    sig = PatternModel().detect_pattern(seq)
    assert sig.type == 'streak' and sig.strength == pytest.approx(0.3)
    assert PatternModel().predict_proba(seq)['T'] == pytest.approx(0.615)

def test_streak_strength_is_clamped():
    assert PatternModel().detect_pattern(list("XXXX")).strength == pytest.approx(0.2)
    assert PatternModel().detect_pattern(list("T" * 20)).strength == pytest.approx(0.9)

def test_twin():
    seq = list("TTXXTTXX")
    sig = PatternModel().detect_pattern(seq)
    assert sig.type == 'twin' and sig.strength == 0.85
    assert PatternModel().predict_proba(seq)['T'] == pytest.approx(0.907)

def test_none():
    assert PatternModel().detect_pattern(list("TTX")).type == 'none'
    assert PatternModel().predict_proba(list("TTX")) == {'T': 0.5, 'X': 0.5}
    assert PatternModel().predict_proba([]) == {'T': 0.5, 'X': 0.5}

def test_road_types():
    assert classify_road(list("TTXTXTXTX")) == 'zigzag'
    assert classify_road(list("XTTTTTT")) == 'streaky'
    assert classify_road(list("TTXXTTXXTTXX")) == 'flat'
    assert classify_road(list("TTTXTTTXTTXX")) == 'trending_T'
    assert classify_road(list("XXXTXXXTXXTT")) == 'trending_X'
    assert classify_road(list("TTXTTXTXXTTX")) == 'mixed'
