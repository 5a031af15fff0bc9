"""Map a cached rank score to its tier name.

Tier names double as the names of the guild emojis shown next to a
member's score.
"""

from __future__ import annotations

import math

UNRANKED = "unranked"

# low <= score < high -> tier
TIER_TABLE: tuple[tuple[float, float, str], ...] = (
    (0, 1600, "copper1"),
    (1600, 1700, "bronze5"),
    (1700, 1800, "bronze4"),
    (1800, 1900, "bronze3"),
    (1900, 2000, "bronze2"),
    (2000, 2100, "bronze1"),
    (2100, 2200, "silver5"),
    (2200, 2300, "silver4"),
    (2300, 2400, "silver3"),
    (2400, 2500, "silver2"),
    (2500, 2600, "silver1"),
    (2600, 2800, "gold3"),
    (2800, 3000, "gold2"),
    (3000, 3200, "gold1"),
    (3200, 3500, "platinum3"),
    (3500, 3800, "platinum2"),
    (3800, 4100, "platinum1"),
    (4100, 4400, "diamond3"),
    (4400, 4700, "diamond2"),
    (4700, 5000, "diamond1"),
    (5000, math.inf, "champions"),
)


def classify(
    score: float | None,
    unranked: bool = False,
    table: tuple[tuple[float, float, str], ...] = TIER_TABLE,
) -> str:
    """Return the tier whose half-open interval contains ``score``.

    Scores outside the table (negative ones) fall back to ``"unranked"``.
    """
    if unranked or score is None:
        return UNRANKED
    for low, high, tier in table:
        if low <= score < high:
            return tier
    return UNRANKED
