from typing import Sequence

from taixiu.engine.templates import MANUAL_PATTERNS
from taixiu.models import ManualMatch


class ManualPatternMatcher:
    """Suffix lookup of the recent totals against a fixed table."""

    def __init__(self, patterns: Sequence[dict] = MANUAL_PATTERNS):
        self.patterns = tuple(patterns)

    def match(self, totals: Sequence[int]) -> ManualMatch | None:
        totals = list(totals)
        for pat in self.patterns:
            p = list(pat["pair"])
            if not p or len(p) > len(totals):
                continue
            if totals[-len(p):] == p:
                return ManualMatch(pred=pat["pred"], note=pat["note"], pattern=p)
        return None
