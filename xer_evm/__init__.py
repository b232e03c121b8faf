"""
XER earned-value analytics.

Parses Primavera P6 XER exports into a typed project model and derives
earned-value KPIs and a monthly cumulative EV curve.
"""

from .models import (
    Activity,
    Resource,
    ProjectSummary,
    ProjectModel,
    ParseFailure,
    KPISet,
    EVPoint,
    ActivitySummary,
    HealthGrade,
)
from .parsers import XERParser, parse, parse_bytes, parse_file
from .metrics import (
    compute_kpis,
    compute_time_series,
    summarize_activities,
    grade_health,
)
from .pipeline import ProjectAnalysis, analyze, analyze_model, attach_summary
from .store import ProjectStore

__all__ = [
    # Models
    'Activity',
    'Resource',
    'ProjectSummary',
    'ProjectModel',
    'ParseFailure',
    'KPISet',
    'EVPoint',
    'ActivitySummary',
    'HealthGrade',
    # Parsing
    'XERParser',
    'parse',
    'parse_bytes',
    'parse_file',
    # Metrics
    'compute_kpis',
    'compute_time_series',
    'summarize_activities',
    'grade_health',
    # Pipeline
    'ProjectAnalysis',
    'analyze',
    'analyze_model',
    'attach_summary',
    'ProjectStore',
]
