# Hand-curated lookup tables. Bump the version whenever an entry changes so
# predictions can be traced back to the table that produced them.

CAU_MAU_VERSION = '2024.1'

# Named cadences ("cầu") -> literal T/X suffixes. A match predicts reversal.
CAU_MAU: dict[str, tuple[str, ...]] = {
    "1-1": ("TXTX", "XTXT", "TXTXT", "XTXTX"),
    "2-2": ("TTXXTT", "XXTTXX"),
    "3-3": ("TTTXXX", "XXXTTT"),
    "1-2-3": ("TXXTTT", "XTTXXX"),
    "3-2-1": ("TTTXXT", "XXXTTX"),
    "1-2-1": ("TXXT", "XTTX"),
    "2-1-1-2": ("TTXTXX", "XXTXTT"),
    "2-1-2": ("TTXTT", "XXTXX"),
    "3-1-3": ("TTTXTTT", "XXXTXXX"),
    "1-2": ("TXX", "XTT"),
    "2-1": ("TTX", "XXT"),
    "1-3-2": ("TXXXTT", "XTTTXX"),
    "1-2-4": ("TXXTTTT", "XTTXXXX"),
    "1-5-3": ("TXXXXXTTT", "XTTTTXXX"),
    "7-4-2": ("TTTTTTTXXXXTT", "XXXXXXXTTTTXX"),
    "4-2-1-3": ("TTTTXXTXXX", "XXXXTTXTTT"),
    "1-4-2": ("TXXXXTT", "XTTTTXX"),
    "5-1-3": ("TTTTXTTT", "XXXXXTXXX"),
}

MANUAL_PATTERNS_VERSION = '2024.1'

# Trailing totals -> predicted symbol. First match in list order wins, so
# longer patterns come before their own suffixes.
MANUAL_PATTERNS: tuple[dict, ...] = (
    {"pair": (10, 11, 10, 11), "pred": "X", "note": "Nhịp 10-11 lặp → Xỉu"},
    {"pair": (11, 10, 11, 10), "pred": "T", "note": "Nhịp 11-10 lặp → Tài"},
    {"pair": (17, 16, 15), "pred": "X", "note": "Tổng giảm dần từ 17 → Xỉu"},
    {"pair": (4, 5, 6), "pred": "T", "note": "Tổng tăng dần từ 4 → Tài"},
    {"pair": (3, 18), "pred": "X", "note": "Bão 3 rồi bão 18 → Xỉu"},
    {"pair": (18, 3), "pred": "T", "note": "Bão 18 rồi bão 3 → Tài"},
    {"pair": (9, 12, 9), "pred": "T", "note": "Kẹp 9-12-9 → Tài"},
    {"pair": (12, 9, 12), "pred": "X", "note": "Kẹp 12-9-12 → Xỉu"},
    {"pair": (10, 10, 10), "pred": "T", "note": "Ba lần 10 → Tài"},
    {"pair": (11, 11, 11), "pred": "X", "note": "Ba lần 11 → Xỉu"},
    {"pair": (5, 16), "pred": "X", "note": "Nhảy 5 → 16 → Xỉu"},
    {"pair": (16, 5), "pred": "T", "note": "Nhảy 16 → 5 → Tài"},
)
