from typing import Iterable, Sequence

from taixiu.models import Round

TAI = 'T'
XIU = 'X'
LABELS = {TAI: 'Tài', XIU: 'Xỉu'}


def encode_result(result: str | None) -> str:
    # unknown or missing outcomes count as Xỉu
    return TAI if result in ('Tài', 'Tai', 'T') else XIU


def encode(history: Iterable[Round]) -> list[str]:
    return [encode_result(r.result) for r in history]


def known_labels(history: Iterable[Round]) -> list[str]:
    """Symbols of rounds whose outcome is actually known."""
    return [encode_result(r.result) for r in history if r.result]


def opposite(y: str | None) -> str:
    return XIU if y == TAI else TAI


def tail(seq: Sequence, n: int) -> list:
    return list(seq[max(len(seq) - n, 0):])


def counts(seq: Iterable[str]) -> dict[str, int]:
    c = {TAI: 0, XIU: 0}
    for s in seq:
        if s == TAI:
            c[TAI] += 1
        else:
            c[XIU] += 1
    return c


def current_run(seq: Sequence[str]) -> tuple[str | None, int]:
    if not seq:
        return None, 0
    last = seq[-1]
    run = 1
    for i in range(len(seq) - 2, -1, -1):
        if seq[i] == last:
            run += 1
        else:
            break
    return last, run


def alternating(n: int, first: str = TAI) -> str:
    other = opposite(first)
    return ''.join(first if i % 2 == 0 else other for i in range(n))
