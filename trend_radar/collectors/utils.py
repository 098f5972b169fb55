"""
Helpers shared by the collectors.
"""

import re
from typing import Optional

_COMPACT_NUMBER = re.compile(r"([0-9][0-9,]*(?:\.[0-9]+)?)\s*([KMB])?", re.IGNORECASE)
_MULTIPLIERS = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}


def parse_compact_number(text: Optional[str]) -> int:
    """
    Parse counts such as "12.5K", "200K+", "1M+" or "2,000+".

    Args:
        text: Count as displayed by the source

    Returns:
        Integer value, 0 if nothing parseable was found
    """
    if not text:
        return 0

    match = _COMPACT_NUMBER.search(str(text))
    if not match:
        return 0

    number = float(match.group(1).replace(",", ""))
    suffix = (match.group(2) or "").upper()
    return int(number * _MULTIPLIERS.get(suffix, 1))


def rank_growth_estimate(rank: int, total: int, scale: float) -> float:
    """
    Estimate growth for ranked sources that publish no growth figure.

    The estimate is the distance from the bottom of the ranking times a
    configurable scale (RANK_GROWTH_SCALE).

    Args:
        rank: 1-based position
        total: Number of ranked entries
        scale: Scale factor

    Returns:
        Growth estimate, never negative
    """
    return max(0, total - rank + 1) * scale
