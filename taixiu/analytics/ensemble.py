import logging

from taixiu.analytics.markov import MarkovModel
from taixiu.analytics.patterns import PatternModel
from taixiu.analytics.streaks import MomentumModel, RunLengthModel, clamp
from taixiu.config import MODELS, Settings, settings
from taixiu.core.symbols import TAI, XIU
from taixiu.models import EnsembleOutput

logger = logging.getLogger(__name__)

EMA_ALPHA = 0.08
DRIFT = 0.05
W_MIN, W_MAX = 0.0001, 0.9999


class Ensemble:
    """
    Weighted mix of the component predictors with online reweighting.

    After each settled round every model's probability on the true outcome is
    folded into a performance EMA; the live weights then drift 5% of the way
    toward a target proportional to EMA**3.
    """

    def __init__(self, model_names=MODELS, cfg: Settings = settings):
        self.names = tuple(model_names)
        self.models = {
            'markov': MarkovModel(cfg.markov_order),
            'run_length': RunLengthModel(cfg.run_window_short, cfg.run_window_long),
            'momentum': MomentumModel(),
            'pattern': PatternModel(),
        }
        self.reset()

    def reset(self):
        n = len(self.names)
        self.weights: dict[str, float] = {m: 1 / n for m in self.names}
        self.perf_ema: dict[str, float] = {m: 0.5 for m in self.names}
        self.models['markov'].reset()

    def train_all(self, seq: list[str]):
        # the other models are stateless functions of the sequence
        self.models['markov'].train(seq)

    def predict_mix(self, seq: list[str]) -> EnsembleOutput:
        probas = {m: self.models[m].predict_proba(seq) for m in self.names}
        mix = {TAI: 0.0, XIU: 0.0}
        for m in self.names:
            w = self.weights.get(m, 0.0)
            mix[TAI] += w * probas[m][TAI]
            mix[XIU] += w * probas[m][XIU]
        tot = (mix[TAI] + mix[XIU]) or 1
        mix = {TAI: mix[TAI] / tot, XIU: mix[XIU] / tot}
        return EnsembleOutput(distribution=mix, model_probas=probas, weights=dict(self.weights))

    def update_weights(self, seq_before: list[str], actual: str):
        for m in self.names:
            score = clamp(self.models[m].predict_proba(seq_before)[actual], 0.001, 0.999)
            old = self.perf_ema.get(m, 0.5)
            self.perf_ema[m] = old * (1 - EMA_ALPHA) + EMA_ALPHA * score

        raw = {m: self.perf_ema[m] ** 3 for m in self.names}
        sum_raw = sum(raw.values())
        new_weights = {}
        for m in self.names:
            target = raw[m] / sum_raw if sum_raw else 1 / len(self.names)
            new_weights[m] = clamp(self.weights[m] * (1 - DRIFT) + target * DRIFT, W_MIN, W_MAX)
        sum_new = sum(new_weights.values()) or 1
        self.weights = {m: w / sum_new for m, w in new_weights.items()}
        logger.debug("Updated model weights: %s", self.weights)
