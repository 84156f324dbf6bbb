from taixiu.analytics.stats import entropy, weight_concentration
from taixiu.analytics.streaks import clamp
from taixiu.core.symbols import TAI, XIU
from taixiu.models import CascadeResult, FusionResult, ManualMatch

BASE_WEIGHTS = {'ensemble': 0.45, 'cascade': 0.35, 'manual': 0.20}
MANUAL_WEIGHTS = {'ensemble': 0.35, 'cascade': 0.25, 'manual': 0.40}


def cascade_proba(cascade: CascadeResult, y: str) -> float:
    return cascade.score / 100 if cascade.pred == y else (100 - cascade.score) / 100


def manual_proba(manual: ManualMatch, y: str) -> float:
    return manual.weight if manual.pred == y else 1 - manual.weight


class FusionEngine:
    """Blends ensemble, cascade and manual-table signals into one answer."""

    def fuse(self, distribution: dict[str, float], cascade: CascadeResult,
             manual: ManualMatch | None = None) -> FusionResult:
        weights = dict(MANUAL_WEIGHTS if manual else BASE_WEIGHTS)
        scores = {}
        for y in (TAI, XIU):
            s = weights['ensemble'] * distribution[y] + weights['cascade'] * cascade_proba(cascade, y)
            if manual:
                s += weights['manual'] * manual_proba(manual, y)
            scores[y] = s
        norm = (scores[TAI] + scores[XIU]) or 1
        final = {TAI: scores[TAI] / norm, XIU: scores[XIU] / norm}
        pred = TAI if final[TAI] >= final[XIU] else XIU
        return FusionResult(pred=pred, distribution=final,
                            confidence=clamp(max(final[TAI], final[XIU]), 0, 1),
                            weights=weights)


def blended_confidence(distribution: dict[str, float], weights: dict[str, float],
                       base: float) -> float:
    top = max(distribution.values())
    conf = base * 0.3 + top * 0.6 + weight_concentration(weights) * 0.1 - entropy(distribution.values()) * 0.05
    return clamp(conf, 0, 1)
