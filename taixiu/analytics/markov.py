from taixiu.config import settings
from taixiu.core.symbols import TAI, XIU, counts


def frequency(seq: list[str]) -> dict[str, float]:
    c = counts(seq)
    tot = (c[TAI] + c[XIU]) or 1
    return {TAI: c[TAI] / tot, XIU: c[XIU] / tot}


class MarkovModel:
    """Order-k context table over the T/X sequence.

    Unseen contexts back off to shorter suffixes of the same table, down to
    plain symbol frequency.
    """

    def __init__(self, order: int = settings.markov_order):
        self.order = order
        self.table: dict[str, dict[str, int]] = {}

    def reset(self):
        self.table = {}

    def train(self, seq: list[str]):
        self.reset()
        k = self.order
        for i in range(len(seq) - k):
            ctx = ''.join(seq[i:i + k])
            nxt = seq[i + k]
            row = self.table.setdefault(ctx, {TAI: 0, XIU: 0})
            row[nxt] += 1

    def lookup(self, ctx: str) -> dict[str, int] | None:
        return self.table.get(ctx)

    def predict_proba(self, seq: list[str]) -> dict[str, float]:
        if len(seq) < self.order:
            return frequency(seq)
        for k in range(self.order, 0, -1):
            row = self.lookup(''.join(seq[-k:]))
            if row:
                tot = (row[TAI] + row[XIU]) or 1
                return {TAI: row[TAI] / tot, XIU: row[XIU] / tot}
        return frequency(seq)
