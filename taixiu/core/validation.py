TAI_ALIASES = ('Tài', 'Tai', 'T', 'TAI')
XIU_ALIASES = ('Xỉu', 'Xiu', 'X', 'XIU')


def is_valid_dice(d) -> bool:
    return isinstance(d, int) and not isinstance(d, bool) and 1 <= d <= 6


def coerce_dice(d) -> int | None:
    # upstream feeds send dice as ints or numeric strings
    if isinstance(d, str) and d.strip().isdigit():
        d = int(d.strip())
    return d if is_valid_dice(d) else None


def coerce_total(t) -> int | None:
    if isinstance(t, str) and t.strip().isdigit():
        t = int(t.strip())
    if isinstance(t, int) and not isinstance(t, bool) and 3 <= t <= 18:
        return t
    return None


def is_valid_result(r) -> bool:
    return r in TAI_ALIASES or r in XIU_ALIASES


def normalize_result(r) -> str | None:
    if not r:
        return None
    if r in TAI_ALIASES:
        return 'Tài'
    return 'Xỉu'
