import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Iterable, Optional

from taixiu.analytics.ensemble import Ensemble
from taixiu.analytics.patterns import runs
from taixiu.analytics.road import classify_road
from taixiu.config import MODELS, Settings, settings
from taixiu.core.symbols import LABELS, TAI, XIU, current_run, encode, encode_result, known_labels
from taixiu.engine.cascade import TOTALS_WINDOW, CascadeInput, HeuristicCascade, error_key
from taixiu.engine.fusion import FusionEngine, blended_confidence
from taixiu.engine.manual import ManualPatternMatcher
from taixiu.models import PatternStats, PredictionOut, Round, RunInfo, SessionFlags

logger = logging.getLogger(__name__)


class PredictorService:
    """
    Owns one session: history, ensemble weights, pattern/error memories,
    streak flags and the miss counter.

    predict() reads a consistent snapshot and never mutates state; learn()
    applies a settled round. Both hold the same lock so one instance can be
    shared between request handlers.
    """

    def __init__(self, rounds: Optional[Iterable[Round]] = None, cfg: Settings = settings):
        self.settings = cfg
        self._lock = threading.RLock()
        self.ensemble = Ensemble(MODELS, cfg)
        self.cascade = HeuristicCascade()
        self.manual = ManualPatternMatcher()
        self.fusion = FusionEngine()
        self.reset()
        if rounds:
            self.load(rounds)

    def reset(self):
        with self._lock:
            self.history: deque[Round] = deque(maxlen=self.settings.max_history)
            self._seq: list[str] | None = None
            self.pattern_memory: dict[str, PatternStats] = {}
            self.error_memory: dict[str, int] = {}
            self.flags = SessionFlags()
            self.miss_streak = 0
            self.ensemble.reset()

    def load(self, rounds: Iterable[Round]):
        """Seed history without learning from it (markov table only)."""
        with self._lock:
            self.history.extend(rounds)
            self._seq = None
            self.ensemble.train_all(self.sequence)

    @property
    def sequence(self) -> list[str]:
        if self._seq is None:
            self._seq = encode(self.history)
        return self._seq

    # ---------------- predict ----------------
    def predict(self) -> PredictionOut:
        with self._lock:
            out, _flags = self._evaluate()
            return out

    def _evaluate(self) -> tuple[PredictionOut, SessionFlags]:
        seq = list(self.sequence)
        rounds = list(self.history)
        last = rounds[-1] if rounds else None
        totals = [r.total for r in rounds if r.total is not None]
        prev_totals = [r.total for r in rounds[:-1] if r.total is not None][-(TOTALS_WINDOW - 1):]

        mix = self.ensemble.predict_mix(seq)
        dist = mix.distribution
        model_conf = blended_confidence(dist, mix.weights, self.settings.base_confidence)
        ensemble_pred = TAI if dist[TAI] >= dist[XIU] else XIU

        # the cascade flips flags as it goes; work on a copy so predict stays pure
        flags = self.flags.model_copy()
        cascade = self.cascade.evaluate(CascadeInput(
            labels=known_labels(rounds),
            miss_streak=self.miss_streak,
            pattern_memory=self.pattern_memory,
            error_memory=self.error_memory,
            recent_totals=prev_totals,
            dice=last.dice if last else [],
            current_total=last.total if last else None,
            flags=flags,
        ))
        manual = self.manual.match(totals)
        fused = self.fusion.fuse(dist, cascade, manual)

        value, run = current_run(seq)
        road = classify_road(seq)
        top_model = max(mix.weights, key=lambda m: mix.weights[m] * mix.model_probas[m][ensemble_pred])
        signal = self.ensemble.models['pattern'].detect_pattern(seq)

        pieces = [
            f"Ensemble: {ensemble_pred} (pT={dist[TAI]:.3f}, pX={dist[XIU]:.3f})",
            f"Top model: {top_model} (w={mix.weights[top_model]:.3f})",
            f"Road type: {road}",
            f"Run: {run} of {value or '-'}",
        ]
        if signal.type != 'none':
            pieces.append(f"Pattern detected: {signal.type} (str={signal.strength:.2f})")
        if run >= self.settings.run_window_short:
            pieces.append("Long run → tăng khả năng bẻ")
        pieces.append(f"du_doan: {cascade.pred} (score={cascade.score}) - {cascade.reason}")
        if manual:
            pieces.append(f"Manual: {manual.pred} ({manual.note})")
        w = fused.weights
        pieces.append(f"Fusion weights: ensemble={w['ensemble']}, du={w['cascade']}, manual={w['manual']}")
        pieces.append(f"Final fusion: pT={fused.distribution[TAI]:.3f}, pX={fused.distribution[XIU]:.3f}")

        out = PredictionOut(
            timestamp=datetime.now(timezone.utc),
            prediction=LABELS[fused.pred],
            confidence=round(fused.confidence * 100, 2),
            model_confidence=round(model_conf * 100, 2),
            distribution=fused.distribution,
            ensemble=mix,
            cascade=cascade,
            manual=manual,
            reason=' | '.join(pieces),
            road_type=road,
            run_info=RunInfo(value=value, run=run),
            history_len=len(rounds),
            last_round=last,
        )
        return out, flags

    # ---------------- learn ----------------
    def learn(self, actual_round: Round):
        with self._lock:
            seq_before = list(self.sequence)
            actual = encode_result(actual_round.result)
            if actual_round.result:
                out, flags = self._evaluate()
                self._settle(out, flags, actual)
            self.ensemble.update_weights(seq_before, actual)
            self.history.append(actual_round)
            self._seq = None
            self.ensemble.train_all(self.sequence)
            logger.debug("Learned round %s: actual=%s, history=%d",
                         actual_round.session, actual, len(self.history))

    def _settle(self, out: PredictionOut, flags: SessionFlags, actual: str):
        labels = known_labels(self.history)
        pred = out.cascade.pred
        hit = pred == actual

        if len(labels) >= 3:
            key = error_key(labels)
            if hit:
                if key in self.error_memory:
                    self.error_memory[key] = 0
            else:
                self.error_memory[key] = self.error_memory.get(key, 0) + 1

        pattern = ''.join(labels)
        for n in range(3, self.settings.pattern_max_len + 1):
            if len(pattern) < n:
                break
            self._remember(pattern[-n:], pred, actual)

        final = TAI if out.prediction == LABELS[TAI] else XIU
        self.miss_streak = 0 if final == actual else self.miss_streak + 1
        self.flags = flags
        logger.debug("Settled: cascade=%s final=%s actual=%s miss_streak=%d",
                     pred, final, actual, self.miss_streak)

    def _remember(self, suffix: str, pred: str, actual: str):
        stats = self.pattern_memory.get(suffix)
        if stats is None:
            stats = self.pattern_memory[suffix] = PatternStats(next_pred=pred)
        stats.count += 1
        if stats.next_pred == actual:
            stats.correct += 1
        elif stats.count >= 3 and stats.accuracy < 0.4:
            # the recorded continuation keeps failing: start over on what happened
            self.pattern_memory[suffix] = PatternStats(count=1, correct=1, next_pred=actual)
        while len(self.pattern_memory) > self.settings.pattern_memory_limit:
            self.pattern_memory.pop(next(iter(self.pattern_memory)))

    def ingest(self, rounds: Iterable[Round]) -> int:
        """Learn every round whose session id is not in history yet."""
        with self._lock:
            seen = {r.session for r in self.history if r.session is not None}
            fresh = sorted((r for r in rounds if r.session is not None and r.session not in seen),
                           key=lambda r: r.session)
            added = 0
            for r in fresh:
                if r.session in seen:
                    continue
                self.learn(r)
                seen.add(r.session)
                added += 1
            if added:
                logger.info("Ingested %d new rounds, history length %d", added, len(self.history))
            return added

    # ---------------- diagnostics ----------------
    def state(self) -> dict:
        with self._lock:
            seq = self.sequence
            return {
                'history_len': len(self.history),
                'weights': dict(self.ensemble.weights),
                'perf_ema': dict(self.ensemble.perf_ema),
                'pattern_memory': len(self.pattern_memory),
                'error_memory': len(self.error_memory),
                'miss_streak': self.miss_streak,
                'flags': self.flags.model_dump(),
                'streaks': runs(seq)[-6:],
                'last_session': self.history[-1].session if self.history else None,
            }
