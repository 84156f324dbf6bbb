from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from taixiu.core.validation import coerce_dice, coerce_total, normalize_result


def _first(payload: dict, *keys):
    for k in keys:
        if payload.get(k) is not None:
            return payload[k]
    return None


class Round(BaseModel):
    """One settled round of the game. Missing fields stay None, never raise."""
    model_config = ConfigDict(frozen=True)

    session: int | None = None
    d1: int | None = None
    d2: int | None = None
    d3: int | None = None
    total: int | None = None
    result: str | None = None  # 'Tài' | 'Xỉu' | None

    @model_validator(mode='before')
    @classmethod
    def _clean(cls, data: Any):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for k in ('d1', 'd2', 'd3'):
            data[k] = coerce_dice(data.get(k))
        data['total'] = coerce_total(data.get('total'))
        if data['total'] is None and None not in (data['d1'], data['d2'], data['d3']):
            data['total'] = data['d1'] + data['d2'] + data['d3']
        data['result'] = normalize_result(data.get('result'))
        return data

    @classmethod
    def from_dice(cls, d1: int, d2: int, d3: int, session: int | None = None) -> 'Round':
        total = d1 + d2 + d3
        return cls(session=session, d1=d1, d2=d2, d3=d3, total=total,
                   result='Tài' if 11 <= total <= 17 else 'Xỉu')

    @classmethod
    def from_payload(cls, r: dict) -> 'Round':
        """Accepts the field spellings used by the upstream feeds."""
        result = r.get('Ket_qua')
        if result is None and r.get('result') is not None:
            result = 'Tài' if r['result'] in ('T', 'Tài', 'Tai') else 'Xỉu'
        session = _first(r, 'Phien', 'id', 'Phien_hien_tai', 'session')
        try:
            session = int(session) if session is not None else None
        except (TypeError, ValueError):
            session = None
        return cls(
            session=session,
            d1=_first(r, 'Xuc_xac_1', 'x1', 'd1'),
            d2=_first(r, 'Xuc_xac_2', 'x2', 'd2'),
            d3=_first(r, 'Xuc_xac_3', 'x3', 'd3'),
            total=_first(r, 'Tong', 'total'),
            result=result,
        )

    @property
    def dice(self) -> list[int]:
        return [d for d in (self.d1, self.d2, self.d3) if d is not None]

    @property
    def is_triple(self) -> bool:
        return self.d1 is not None and self.d1 == self.d2 == self.d3


class SessionFlags(BaseModel):
    # set once a tentative break of a long streak has been tried
    broke_streak_tai: bool = False
    broke_streak_xiu: bool = False


class PatternStats(BaseModel):
    count: int = 0
    correct: int = 0
    next_pred: str = 'T'

    @property
    def accuracy(self) -> float:
        return self.correct / self.count if self.count > 0 else 0.0


class PatternSignal(BaseModel):
    type: str = 'none'  # 'zigzag' | 'streak' | 'twin' | 'none'
    strength: float = 0.0


class RunInfo(BaseModel):
    value: str | None = None
    run: int = 0


class EnsembleOutput(BaseModel):
    distribution: dict[str, float]
    model_probas: dict[str, dict[str, float]]
    weights: dict[str, float]


class CascadeResult(BaseModel):
    pred: str
    score: int
    reason: str


class ManualMatch(BaseModel):
    pred: str
    note: str
    pattern: list[int] = Field(default_factory=list)
    weight: float = 0.9
    source: str = 'manual'


class FusionResult(BaseModel):
    pred: str
    distribution: dict[str, float]
    confidence: float
    weights: dict[str, float]


class PredictionOut(BaseModel):
    timestamp: datetime
    prediction: str  # 'Tài' | 'Xỉu'
    confidence: float  # 0..100
    model_confidence: float  # 0..100
    distribution: dict[str, float]
    ensemble: EnsembleOutput
    cascade: CascadeResult
    manual: Optional[ManualMatch] = None
    reason: str
    road_type: str
    run_info: RunInfo
    history_len: int
    last_round: Optional[Round] = None
