import math

from taixiu.config import settings
from taixiu.core.symbols import TAI, XIU, counts, current_run, opposite, tail


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


class RunLengthModel:
    """Long streaks are increasingly likely to break."""

    def __init__(self, short: int = settings.run_window_short, long: int = settings.run_window_long):
        self.short = short
        self.long = long

    def continuation(self, run: int) -> float:
        p = 0.6 * math.exp(-run / self.short) + 0.3 * math.exp(-run / self.long)
        return clamp(p, 0.05, 0.95)

    def predict_proba(self, seq: list[str]) -> dict[str, float]:
        if not seq:
            return {TAI: 0.5, XIU: 0.5}
        value, run = current_run(seq)
        p = self.continuation(run)
        return {value: p, opposite(value): 1 - p}


class MomentumModel:
    def __init__(self, n_short: int = 5, n_mid: int = 15):
        self.n_short = n_short
        self.n_mid = n_mid

    def momentum(self, seq: list[str]) -> float:
        c1 = counts(tail(seq, self.n_short))
        c2 = counts(tail(seq, self.n_mid))
        score_short = (c1[TAI] - c1[XIU]) / (self.n_short or 1)
        score_mid = (c2[TAI] - c2[XIU]) / (self.n_mid or 1)
        return 0.7 * score_short + 0.3 * score_mid

    def predict_proba(self, seq: list[str]) -> dict[str, float]:
        shift = clamp(self.momentum(seq) * 0.4, -0.4, 0.4)
        pT = clamp(0.5 + shift, 0.02, 0.98)
        return {TAI: pT, XIU: 1 - pT}
