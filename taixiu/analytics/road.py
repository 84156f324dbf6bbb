from taixiu.analytics.patterns import ZIGZAG_TEMPLATES, ends_with_any
from taixiu.core.symbols import TAI, XIU, counts, current_run, tail


def classify_road(seq: list[str], window: int = 12) -> str:
    c = counts(tail(seq, window))
    rate_tai = c[TAI] / ((c[TAI] + c[XIU]) or 1)
    _, run = current_run(seq)
    if len(seq) >= 6 and ends_with_any(seq, ZIGZAG_TEMPLATES):
        return 'zigzag'
    if run >= 6:
        return 'streaky'
    if abs(rate_tai - 0.5) < 0.08:
        return 'flat'
    if rate_tai > 0.6:
        return 'trending_T'
    if rate_tai < 0.4:
        return 'trending_X'
    return 'mixed'
