"""
Aggregate earned-value KPIs.

All divisions are zero-guarded so the result is always finite:
SPI = EV / (PV or 1), CPI = EV / (AC or 1), EAC = AC / (CPI or 1).
With PV == 0 this gives SPI == EV; downstream report text relies on it.
Running totals saturate at the largest float instead of overflowing.
"""

import logging

from xer_evm.models import KPISet, ProjectModel
from xer_evm.utils.helpers import clamp_finite, round_half_away

logger = logging.getLogger(__name__)

MONEY_DIGITS = 2
INDEX_DIGITS = 4

ON_TRACK_THRESHOLD = 0.95
AT_RISK_THRESHOLD = 0.90

ON_TRACK = 'On Track'
WARNING = 'Warning'
AT_RISK = 'At Risk'


def classify_health(spi: float, cpi: float) -> str:
    """
    Three-tier health label.

    On Track is checked first; At Risk only after it fails, so the
    0.90-0.95 band falls to Warning unless either index drops below 0.90.

    Args:
        spi: Schedule performance index
        cpi: Cost performance index

    Returns:
        'On Track', 'Warning' or 'At Risk'
    """
    if spi >= ON_TRACK_THRESHOLD and cpi >= ON_TRACK_THRESHOLD:
        return ON_TRACK
    if spi < AT_RISK_THRESHOLD or cpi < AT_RISK_THRESHOLD:
        return AT_RISK
    return WARNING


def compute_kpis(model: ProjectModel) -> KPISet:
    """
    Compute aggregate KPIs across all activities.

    Args:
        model: Parsed project

    Returns:
        KPISet with money rounded to 2 places and indices to 4
    """
    total_pv = 0.0
    total_ev = 0.0
    total_ac = 0.0
    for activity in model.activities:
        total_pv = clamp_finite(total_pv + activity.planned_value)
        total_ev = clamp_finite(total_ev + activity.earned_value)
        total_ac = clamp_finite(total_ac + activity.actual_cost)

    percent_complete = total_ev / total_pv * 100 if total_pv > 0 else 0.0

    spi = total_ev / (total_pv or 1)
    cpi = total_ev / (total_ac or 1)

    eac = total_ac / (cpi or 1)
    vac = clamp_finite(total_pv - total_ev)
    sv = clamp_finite(total_ev - total_pv)
    cv = clamp_finite(total_ev - total_ac)

    health = classify_health(spi, cpi)
    logger.debug(f"KPIs: PV={total_pv} EV={total_ev} AC={total_ac} SPI={spi} CPI={cpi} -> {health}")

    return KPISet(
        total_planned_value=round_half_away(total_pv, MONEY_DIGITS),
        total_earned_value=round_half_away(total_ev, MONEY_DIGITS),
        total_actual_cost=round_half_away(total_ac, MONEY_DIGITS),
        percent_complete=round_half_away(percent_complete, MONEY_DIGITS),
        schedule_performance_index=round_half_away(spi, INDEX_DIGITS),
        cost_performance_index=round_half_away(cpi, INDEX_DIGITS),
        schedule_variance=round_half_away(sv, MONEY_DIGITS),
        cost_variance=round_half_away(cv, MONEY_DIGITS),
        estimate_at_completion=round_half_away(eac, MONEY_DIGITS),
        variance_at_completion=round_half_away(vac, MONEY_DIGITS),
        budget=round_half_away(total_pv, MONEY_DIGITS),
        health=health,
    )
