"""
Earned-value metrics engine.

Pure functions over a ProjectModel: aggregate KPIs, the monthly cumulative
EV curve, activity progress counts and the graded health.
"""

from .kpi import compute_kpis, classify_health
from .earned_value import compute_time_series, time_series_to_dataframe
from .activity_summary import summarize_activities, grade_health

__all__ = [
    'compute_kpis',
    'classify_health',
    'compute_time_series',
    'time_series_to_dataframe',
    'summarize_activities',
    'grade_health',
]
