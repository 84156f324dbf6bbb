# Rule cascade ("du doan"): ordered heuristics, first match wins.

import logging
from dataclasses import dataclass, field
from typing import Callable

from taixiu.core.symbols import TAI, XIU, alternating, counts, current_run, opposite
from taixiu.engine.templates import CAU_MAU
from taixiu.models import CascadeResult, PatternStats, SessionFlags

logger = logging.getLogger(__name__)

MAX_LABELS = 100
TOTALS_WINDOW = 6

# dice face that breaks a long streak of each side
BREAK_FACE = {TAI: 3, XIU: 5}
TRIPLE_MAP = {1: XIU, 2: XIU, 4: XIU, 3: TAI, 5: TAI}


def error_key(labels: list[str]) -> str:
    return ','.join(labels[-3:])


@dataclass
class CascadeInput:
    labels: list[str]
    miss_streak: int = 0
    pattern_memory: dict[str, PatternStats] = field(default_factory=dict)
    error_memory: dict[str, int] = field(default_factory=dict)
    recent_totals: list[int] = field(default_factory=list)
    dice: list[int] = field(default_factory=list)
    current_total: int | None = None
    flags: SessionFlags = field(default_factory=SessionFlags)


@dataclass
class _Ctx:
    inp: CascadeInput
    labels: list[str]
    pattern: str
    last: str | None
    run: int
    tong: int
    totals: list[int]

    @property
    def reverse(self) -> str:
        return opposite(self.last)


class HeuristicCascade:
    """
    Priority-ordered decision table over the recent outcomes.

    Each rule returns a CascadeResult or None; the first non-None wins. The
    SessionFlags on the input are mutated in place by the streak rule, so
    callers that need a pure evaluation pass a copy.
    """

    def __init__(self):
        self.rules: list[Callable[[_Ctx], CascadeResult | None]] = [
            self._learned_pattern,
            self._error_memory,
            self._miss_streak_4,
            self._trend_change,
            self._first_rounds,
            self._double_run,
            self._repeated_totals,
            self._triple_dice,
            self._streak,
            self._cadence_templates,
            self._alternating_blocks,
            self._fallback_misses,
            self._imbalance,
            self._follow_last,
        ]

    def evaluate(self, inp: CascadeInput) -> CascadeResult:
        try:
            ctx = self._context(inp)
            for rule in self.rules:
                out = rule(ctx)
                if out is not None:
                    return out
            raise RuntimeError('no cascade rule matched')
        except Exception as e:
            logger.warning("Cascade evaluation failed: %s", e, exc_info=True)
            return CascadeResult(pred=TAI, score=50, reason=f'Lỗi trong cascade: {e}')

    def _context(self, inp: CascadeInput) -> _Ctx:
        labels = [TAI if y == TAI else XIU for y in inp.labels][-MAX_LABELS:]
        last, run = current_run(labels)
        tong = inp.current_total if inp.current_total is not None else sum(inp.dice)
        totals = (list(inp.recent_totals) + [tong])[-TOTALS_WINDOW:]
        flags = inp.flags
        # a tentative break only stays armed while its long streak lasts
        if not (last == TAI and run >= 5):
            flags.broke_streak_tai = False
        if not (last == XIU and run >= 5):
            flags.broke_streak_xiu = False
        return _Ctx(inp=inp, labels=labels, pattern=''.join(labels), last=last,
                    run=run, tong=tong, totals=totals)

    # 1
    def _learned_pattern(self, c: _Ctx):
        best, best_key = None, None
        for pat, stats in c.inp.pattern_memory.items():
            if not pat or not c.pattern.endswith(pat):
                continue
            if stats.count < 3 or stats.accuracy < 0.6:
                continue
            key = (len(pat), stats.accuracy)
            if best_key is None or key > best_key:
                best, best_key = (pat, stats), key
        if best is None:
            return None
        pat, stats = best
        return CascadeResult(pred=stats.next_pred, score=90 + int(stats.accuracy * 10),
                             reason=f"Dự theo mẫu đã học '{pat}' tin cậy {stats.accuracy:.2f}")

    # 2
    def _error_memory(self, c: _Ctx):
        if len(c.labels) < 3:
            return None
        key = error_key(c.labels)
        if c.inp.error_memory.get(key, 0) >= 2:
            return CascadeResult(pred=c.reverse, score=89, reason=f'AI tự học lỗi: mẫu {key} gây sai nhiều → đảo')
        return None

    # 3
    def _miss_streak_4(self, c: _Ctx):
        if c.inp.miss_streak >= 4:
            return CascadeResult(pred=c.reverse, score=87, reason=f'Sai liên tiếp {c.inp.miss_streak} → đổi')
        return None

    # 4
    def _trend_change(self, c: _Ctx):
        if len(c.labels) < 5:
            return None
        n = counts(c.labels[-5:])
        if n[TAI] == n[XIU] and c.labels[-1] != c.labels[-2]:
            return CascadeResult(pred=c.reverse, score=88, reason='Phát hiện dấu hiệu đổi cầu → đổi hướng')
        return None

    # 5
    def _first_rounds(self, c: _Ctx):
        n = len(c.labels)
        if n >= 2:
            return None
        hand = 'Tay đầu' if n == 0 else 'Tay 2'
        if c.tong >= 16:
            return CascadeResult(pred=TAI, score=98, reason=f'{hand} tổng {c.tong} >=16 → Tài')
        if c.tong <= 6:
            return CascadeResult(pred=XIU, score=98, reason=f'{hand} tổng {c.tong} <=6 → Xỉu')
        if n == 0:
            return CascadeResult(pred=TAI if c.tong >= 11 else XIU, score=75,
                                 reason=f'Tay đầu → Dựa tổng {c.tong}')
        return CascadeResult(pred=c.reverse, score=80, reason=f'Tay 2 → dự đoán ngược ({c.last})')

    # 6
    def _double_run(self, c: _Ctx):
        if len(c.pattern) < 9:
            return None
        for i in range(4, 7):
            if len(c.pattern) < i * 2:
                continue
            sub1, sub2 = c.pattern[-i * 2:-i], c.pattern[-i:]
            for a in (TAI, XIU):
                b = opposite(a)
                if sub1 == a * i and sub2 == b * i:
                    return CascadeResult(pred=b, score=90, reason=f'Phát hiện cầu bệt-bệt {sub1 + sub2}')
        return None

    # 7
    def _repeated_totals(self, c: _Ctx):
        t = c.totals
        if len(t) >= 3 and len(set(t[-3:])) == 1:
            return CascadeResult(pred=TAI if c.tong % 2 == 1 else XIU, score=96,
                                 reason=f'3 lần lặp điểm: {c.tong}')
        if len(t) >= 2 and t[-1] == t[-2]:
            return CascadeResult(pred=TAI if c.tong % 2 == 0 else XIU, score=94,
                                 reason=f'Kép điểm: {c.tong}')
        return None

    # 8
    def _triple_dice(self, c: _Ctx):
        d = c.inp.dice
        if len(d) != 3 or not d[0] == d[1] == d[2]:
            return None
        so = d[0]
        if so in TRIPLE_MAP:
            side = TRIPLE_MAP[so]
            name = 'Tài' if side == TAI else 'Xỉu'
            return CascadeResult(pred=side, score=97, reason=f'3 xúc xắc {so} → {name}')
        if so == 6 and c.run >= 3:
            return CascadeResult(pred=TAI, score=97, reason='3 xúc xắc 6 + bệt → Tài')
        return None

    # 9
    def _streak(self, c: _Ctx):
        if c.run < 3:
            return None
        side = c.last
        name = 'Tài' if side == TAI else 'Xỉu'
        face = BREAK_FACE[side]
        flag = 'broke_streak_tai' if side == TAI else 'broke_streak_xiu'
        flags = c.inp.flags
        if c.run >= 5 and face not in c.inp.dice:
            if not getattr(flags, flag):
                setattr(flags, flag, True)
                return CascadeResult(pred=opposite(side), score=80,
                                     reason=f'⚠️ Bệt {name} ≥5 chưa có xx{face} → Bẻ thử')
            return CascadeResult(pred=side, score=90, reason=f'Ôm tiếp bệt {name} chờ xx{face}')
        if face in c.inp.dice:
            setattr(flags, flag, False)
            return CascadeResult(pred=opposite(side), score=95, reason=f'Bệt {name} + Xí ngầu {face} → Bẻ')
        return CascadeResult(pred=side, score=93, reason=f'Bệt {side} ({c.run} tay)')

    # 10
    def _cadence_templates(self, c: _Ctx):
        for mau in CAU_MAU["1-1"]:
            if c.pattern.endswith(mau) and len(mau) == 4:
                n = len(c.labels)
                if n == 5:
                    return CascadeResult(pred=c.reverse, score=85, reason=f'Bẻ nhẹ cầu 1-1 tại tay 5 ({mau})')
                if n == 6:
                    return CascadeResult(pred=c.reverse, score=90, reason=f'Ôm thêm tay 6 rồi bẻ cầu 1-1 ({mau})')
                return self._follow_last(c)
        for loai, arr in CAU_MAU.items():
            if any(c.pattern.endswith(a) for a in arr):
                return CascadeResult(pred=c.reverse, score=90, reason=f'Phát hiện cầu {loai}')
        return None

    # 11
    def _alternating_blocks(self, c: _Ctx):
        if len(c.labels) < 6:
            return None
        last6 = ''.join(c.labels[-6:])
        for i in range(2, 6):
            if i * 2 > len(last6):
                break
            seg = last6[-i * 2:]
            if seg in (alternating(i * 2, TAI), alternating(i * 2, XIU)):
                return CascadeResult(pred=c.reverse, score=90, reason=f'Bẻ cầu 1-1 ({i * 2} tay)')
        return None

    # 12
    def _fallback_misses(self, c: _Ctx):
        if c.inp.miss_streak >= 3:
            return CascadeResult(pred=c.reverse, score=88, reason='Sai 3 lần → Đổi chiều')
        if len(c.labels) >= 3 and error_key(c.labels) in c.inp.error_memory:
            return CascadeResult(pred=c.reverse, score=86, reason='Mẫu sai cũ')
        return None

    # 13
    def _imbalance(self, c: _Ctx):
        n = counts(c.labels)
        chenh = abs(n[TAI] - n[XIU])
        if chenh >= 3:
            uu = TAI if n[TAI] > n[XIU] else XIU
            return CascadeResult(pred=uu, score=84, reason=f'Lệch {chenh} cầu → Ưu tiên {uu}')
        return None

    # 14
    def _follow_last(self, c: _Ctx):
        return CascadeResult(pred=c.last or TAI, score=72, reason='Không rõ mẫu → Theo tay gần nhất')
