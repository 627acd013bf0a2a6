"""
Number formatting helpers for dashboard output.
"""

_COMPACT_UNITS = [
    (1_000, "K"),
    (1_000_000, "M"),
    (1_000_000_000, "B"),
    (1_000_000_000_000, "T"),
]


def format_compact(number: int) -> str:
    """
    Format a count in compact notation with at most one fraction digit.

    Examples: 950 -> "950", 1234 -> "1.2K", 1500000 -> "1.5M", 2000 -> "2K".
    """
    sign = "-" if number < 0 else ""
    value = abs(number)

    if value < _COMPACT_UNITS[0][0]:
        return f"{sign}{value}"

    index = max(i for i, (threshold, _) in enumerate(_COMPACT_UNITS) if value >= threshold)
    threshold, suffix = _COMPACT_UNITS[index]
    scaled = f"{value / threshold:.1f}".rstrip("0").rstrip(".")

    # 999_999 rounds to "1000K"; promote to the next unit
    if scaled == "1000" and index + 1 < len(_COMPACT_UNITS):
        return f"{sign}1{_COMPACT_UNITS[index + 1][1]}"

    return f"{sign}{scaled}{suffix}"
