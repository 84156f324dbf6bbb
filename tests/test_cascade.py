from taixiu.engine.cascade import CascadeInput, HeuristicCascade
from taixiu.models import PatternStats, SessionFlags


def run(labels, **kw):
    kw.setdefault('dice', [1, 2, 4])
    return HeuristicCascade().evaluate(CascadeInput(labels=list(labels), **kw))


def test_first_round_high_total():
    out = run('', dice=[6, 6, 5])
    assert (out.pred, out.score) == ('T', 98)


def test_first_round_low_and_middle_totals():
    assert (run('', dice=[1, 2, 2]).pred, run('', dice=[1, 2, 2]).score) == ('X', 98)
    assert (run('', dice=[3, 4, 4]).pred, run('', dice=[3, 4, 4]).score) == ('T', 75)
    assert run('', dice=[3, 3, 4]).pred == 'X'


def test_second_round_reverses():
    out = run('T', dice=[2, 3, 4])
    assert (out.pred, out.score) == ('X', 80)


def test_miss_streak_reverses():
    out = run('XTTTTT', miss_streak=4)
    assert (out.pred, out.score) == ('X', 87)


def test_learned_pattern_prefers_longest_suffix():
    memory = {
        'T': PatternStats(count=10, correct=9, next_pred='T'),
        'XT': PatternStats(count=5, correct=4, next_pred='X'),
        'TXT': PatternStats(count=2, correct=2, next_pred='T'),
    }
    out = run('TXXTXT', pattern_memory=memory)
    assert (out.pred, out.score) == ('X', 98)
    assert "'XT'" in out.reason


def test_low_accuracy_pattern_is_ignored():
    memory = {'XT': PatternStats(count=10, correct=5, next_pred='X')}
    out = run('TTXT', pattern_memory=memory)
    assert 'mẫu đã học' not in out.reason
    assert (out.pred, out.score) == ('T', 72)


def test_error_memory_reverses():
    out = run('TXTTX', error_memory={'T,T,X': 2})
    assert (out.pred, out.score) == ('T', 89)


def test_double_run():
    out = run('XTTTTXXXX')
    assert (out.pred, out.score) == ('X', 90)
    assert 'TTTTXXXX' in out.reason


def test_repeated_totals():
    out = run('TTX', recent_totals=[10, 10], dice=[3, 3, 4])
    assert (out.pred, out.score) == ('X', 96)
    out = run('TTX', recent_totals=[9, 12], dice=[3, 4, 5])
    assert (out.pred, out.score) == ('T', 94)


def test_current_total_used_without_dice():
    out = run('XXX', recent_totals=[10, 10], dice=[], current_total=10)
    assert (out.pred, out.score) == ('X', 96)
    assert out.reason == '3 lần lặp điểm: 10'
    out = run('', dice=[], current_total=17)
    assert (out.pred, out.score) == ('T', 98)


def test_triple_dice():
    out = run('TXT', dice=[2, 2, 2])
    assert (out.pred, out.score) == ('X', 97)
    out = run('TXT', dice=[5, 5, 5])
    assert (out.pred, out.score) == ('T', 97)
    # triple six only counts on a streak
    out = run('TXT', dice=[6, 6, 6])
    assert (out.pred, out.score) == ('T', 72)


def test_streak_break_then_hold():
    flags = SessionFlags()
    out = run('XTTTTT', dice=[6, 5, 2], flags=flags)
    assert (out.pred, out.score) == ('X', 80)
    assert flags.broke_streak_tai
    out = run('XTTTTT', dice=[6, 5, 2], flags=flags)
    assert (out.pred, out.score) == ('T', 90)
    out = run('XTTTTT', dice=[3, 1, 2], flags=flags)
    assert (out.pred, out.score) == ('X', 95)
    assert not flags.broke_streak_tai


def test_short_streak_holds():
    out = run('XTTT')
    assert (out.pred, out.score) == ('T', 93)


def test_flag_cleared_when_streak_ends():
    flags = SessionFlags(broke_streak_tai=True)
    run('TTTTTX', flags=flags)
    assert not flags.broke_streak_tai


def test_one_one_cadence_depends_on_length():
    assert (run('XTXTX').pred, run('XTXTX').score) == ('T', 85)
    assert (run('TXTXTX').pred, run('TXTXTX').score) == ('T', 90)
    assert (run('XTXTXTX').pred, run('XTXTXTX').score) == ('X', 72)


def test_named_cadence():
    out = run('XTTXXTT')
    assert (out.pred, out.score) == ('X', 90)
    assert '2-2' in out.reason


def test_miss_and_error_fallbacks():
    assert (run('TTXT', miss_streak=3).pred, run('TTXT', miss_streak=3).score) == ('X', 88)
    out = run('TTXT', error_memory={'T,X,T': 0})
    assert (out.pred, out.score) == ('X', 86)


def test_imbalance():
    out = run('TTTXTTXT')
    assert (out.pred, out.score) == ('T', 84)


def test_default_follows_last():
    out = run('TTXT')
    assert (out.pred, out.score) == ('T', 72)


def test_failure_is_contained():
    out = HeuristicCascade().evaluate(CascadeInput(labels=None))
    assert (out.pred, out.score) == ('T', 50)
    assert out.reason
