"""User level computation.

    level = floor(0.4 * avg_quiz_score + 0.3 * completed_lessons + 0.3 * completed_scenarios)

The level has no upper bound and is never clamped. The sum is evaluated in
decimal arithmetic: in binary floating point 0.3 * 7 + 0.3 * 3 comes out just
under 3 and would floor to 2.
"""

from __future__ import annotations

import math
from decimal import Decimal

from slp.progress.service import AggregatedStats

QUIZ_WEIGHT = Decimal("0.4")
LESSON_WEIGHT = Decimal("0.3")
SCENARIO_WEIGHT = Decimal("0.3")


def _dec(value: float | int) -> Decimal:
    return Decimal(str(value))


def compute_level(stats: AggregatedStats) -> int:
    """Reduce aggregated statistics to a single integer level. Pure."""
    total = (
        QUIZ_WEIGHT * _dec(stats.avg_quiz_score)
        + LESSON_WEIGHT * _dec(stats.completed_lessons)
        + SCENARIO_WEIGHT * _dec(stats.completed_scenarios)
    )
    return math.floor(total)


def difficulty_ceiling(level: int) -> int:
    """Highest content difficulty a user at this level is offered."""
    return level + 1
