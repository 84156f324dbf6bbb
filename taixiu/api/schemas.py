from pydantic import BaseModel, Field
from typing import Optional

from taixiu.models import PredictionOut  # noqa: F401


class LearnIn(BaseModel):
    d1: int = Field(ge=1, le=6)
    d2: int = Field(ge=1, le=6)
    d3: int = Field(ge=1, le=6)
    session: Optional[int] = None
    result: Optional[str] = None  # derived from the dice when omitted


class IngestIn(BaseModel):
    rounds: list[dict]


class IngestOut(BaseModel):
    added: int
    history_len: int


class StateOut(BaseModel):
    history_len: int
    weights: dict[str, float]
    perf_ema: dict[str, float]
    pattern_memory: int
    error_memory: int
    miss_streak: int
    flags: dict[str, bool]
    streaks: list[tuple[str, int]]
    last_session: int | None


class SunwinOut(BaseModel):
    Phien: int | None
    Phien_sau: int | None
    d1: int | None
    d2: int | None
    d3: int | None
    Tong: int | None
    Result: str | None
    Du_doan: str
    Do_tin_cay: float
    Giai_thich: str
    Pattern: str
    id: str = '@taixiu-predictor'
