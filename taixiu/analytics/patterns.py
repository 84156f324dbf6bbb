from typing import Iterable

from taixiu.analytics.streaks import clamp
from taixiu.core.symbols import TAI, XIU, current_run, opposite
from taixiu.models import PatternSignal

ZIGZAG_TEMPLATES = ('TXTXTX', 'XTXTXT')
TWIN_TEMPLATES = ('TTXXTTXX', 'XXTTXXTT')


def ends_with_any(labels: Iterable[str], templates: Iterable[str]) -> bool:
    s = ''.join(labels)
    return any(s.endswith(t) for t in templates)


def runs(labels: Iterable[str]) -> list[tuple[str, int]]:
    """Collapse a sequence into (symbol, length) segments."""
    out = []
    for y in labels:
        if out and out[-1][0] == y:
            out[-1] = (y, out[-1][1] + 1)
        else:
            out.append((y, 1))
    return out


class PatternModel:
    def detect_pattern(self, seq: list[str]) -> PatternSignal:
        if len(seq) >= 6 and ends_with_any(seq, ZIGZAG_TEMPLATES):
            return PatternSignal(type='zigzag', strength=0.9)
        _, run = current_run(seq)
        if run >= 4:
            return PatternSignal(type='streak', strength=clamp((run - 3) / 10, 0.2, 0.9))
        if len(seq) >= 8 and ends_with_any(seq, TWIN_TEMPLATES):
            return PatternSignal(type='twin', strength=0.85)
        return PatternSignal()

    def predict_proba(self, seq: list[str]) -> dict[str, float]:
        detected = self.detect_pattern(seq)
        if detected.type == 'none':
            return {TAI: 0.5, XIU: 0.5}
        last = seq[-1]
        other = opposite(last)
        if detected.type == 'zigzag':
            p_other = 0.6 * detected.strength + 0.4
            return {other: p_other, last: 1 - p_other}
        if detected.type == 'streak':
            p_last = 0.55 * detected.strength + 0.45
            return {last: p_last, other: 1 - p_last}
        # twin
        p_other = 0.62 * detected.strength + 0.38
        return {other: p_other, last: 1 - p_other}
