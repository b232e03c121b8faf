"""Activity progress counts and the graded (four-level) project health."""

from typing import Sequence

from xer_evm.models import Activity, ActivitySummary, HealthGrade, KPISet
from xer_evm.utils.helpers import round_half_away

# (status, colour, score, minimum SPI and CPI), checked top to bottom
HEALTH_GRADES = [
    ('On Track', '#10b981', 100, 0.95),
    ('Warning', '#f59e0b', 75, 0.90),
    ('At Risk', '#ef4444', 50, 0.80),
]
CRITICAL = HealthGrade(status='Critical', color='#7f1d1d', score=25)


def summarize_activities(activities: Sequence[Activity]) -> ActivitySummary:
    """
    Count completed, in-progress and not-started activities.

    Args:
        activities: Project activities

    Returns:
        ActivitySummary; completion_rate is a whole percent
    """
    total = len(activities)
    completed = sum(1 for a in activities if a.is_completed())
    in_progress = sum(1 for a in activities if a.is_in_progress())
    not_started = sum(1 for a in activities if a.is_not_started())

    rate = int(round_half_away(completed / total * 100, 0)) if total else 0

    return ActivitySummary(
        total=total,
        completed=completed,
        in_progress=in_progress,
        not_started=not_started,
        completion_rate=rate,
    )


def grade_health(kpis: KPISet) -> HealthGrade:
    """
    Grade project health from the rounded SPI and CPI.

    Args:
        kpis: Output of compute_kpis

    Returns:
        HealthGrade for the first band both indices reach, else Critical
    """
    spi = kpis.schedule_performance_index
    cpi = kpis.cost_performance_index
    for status, color, score, minimum in HEALTH_GRADES:
        if spi >= minimum and cpi >= minimum:
            return HealthGrade(status=status, color=color, score=score)
    return CRITICAL
