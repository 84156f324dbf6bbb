import math
from typing import Iterable

EPS = 1e-9


def entropy(ps: Iterable[float]) -> float:
    # bits; EPS keeps log2 defined at p == 0
    return -sum(p * math.log2(p + EPS) for p in ps)


def weight_concentration(weights: dict[str, float]) -> float:
    """1 - normalised Shannon entropy of the weights: 0 uniform, 1 all on one model."""
    n = len(weights)
    if n < 2:
        return 1.0
    return 1 - entropy(weights.values()) / math.log2(n)

