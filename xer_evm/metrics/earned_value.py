"""
Monthly cumulative earned-value time series.

Activities are bucketed by the calendar month of their start date, then the
buckets are walked in ascending month order with running totals. Unlike the
aggregate KPIs, per-point SPI/CPI are 0 when the cumulative denominator is 0.
"""

import logging
from typing import Iterable

import pandas as pd

from xer_evm.models import Activity, EVPoint, ProjectModel
from xer_evm.utils.helpers import clamp_finite, month_key, parse_date, round_half_away

logger = logging.getLogger(__name__)

TIME_SERIES_COLUMNS = ['month', 'pv', 'ev', 'ac', 'spi', 'cpi']


def _bucket_by_month(activities: Iterable[Activity]) -> dict[str, list[float]]:
    buckets: dict[str, list[float]] = {}
    skipped = 0
    for activity in activities:
        start = parse_date(activity.start_date)
        if start is None:
            skipped += 1
            continue
        bucket = buckets.setdefault(month_key(start), [0.0, 0.0, 0.0])
        bucket[0] = clamp_finite(bucket[0] + activity.planned_value)
        bucket[1] = clamp_finite(bucket[1] + activity.earned_value)
        bucket[2] = clamp_finite(bucket[2] + activity.actual_cost)

    if skipped:
        logger.debug(f"{skipped} activities without a usable start date left out of the time series")
    return buckets


def compute_time_series(model: ProjectModel) -> list[EVPoint]:
    """
    Compute the cumulative EV curve, one point per month with activity starts.

    Args:
        model: Parsed project

    Returns:
        EVPoints ordered by month ascending; empty when no activity has a start date
    """
    buckets = _bucket_by_month(model.activities)

    points = []
    cum_pv = cum_ev = cum_ac = 0.0
    # Zero-padded keys sort chronologically
    for month in sorted(buckets):
        pv, ev, ac = buckets[month]
        cum_pv = clamp_finite(cum_pv + pv)
        cum_ev = clamp_finite(cum_ev + ev)
        cum_ac = clamp_finite(cum_ac + ac)

        points.append(EVPoint(
            month=month,
            pv=round_half_away(cum_pv, 2),
            ev=round_half_away(cum_ev, 2),
            ac=round_half_away(cum_ac, 2),
            spi=round_half_away(cum_ev / cum_pv, 4) if cum_pv > 0 else 0.0,
            cpi=round_half_away(cum_ev / cum_ac, 4) if cum_ac > 0 else 0.0,
        ))

    return points


def time_series_to_dataframe(points: Iterable[EVPoint]) -> pd.DataFrame:
    """
    Tabulate EV points for export.

    Args:
        points: Output of compute_time_series

    Returns:
        DataFrame with columns month, pv, ev, ac, spi, cpi
    """
    rows = [
        {
            'month': p.month,
            'pv': p.pv,
            'ev': p.ev,
            'ac': p.ac,
            'spi': p.spi,
            'cpi': p.cpi,
        }
        for p in points
    ]
    return pd.DataFrame(rows, columns=TIME_SERIES_COLUMNS)
