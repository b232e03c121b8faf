"""
Data models for XER projects and earned-value results.

Defines dataclasses for the normalized project model produced by the parser
and the KPI / time-series values produced by the metrics engine.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

# Table name -> records; record = field name -> raw text or None
Record = Mapping[str, Optional[str]]
RawTables = Mapping[str, tuple[Record, ...]]

EMPTY_TABLES: RawTables = MappingProxyType({})


@dataclass(frozen=True)
class Activity:
    """Represents a schedule activity (one TASK record)."""

    id: Optional[str]
    name: Optional[str]
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    actual_start: Optional[str] = None
    actual_finish: Optional[str] = None
    duration: int = 0
    percent_complete: float = 0.0   # not clamped to [0, 100]
    planned_value: float = 0.0
    earned_value: float = 0.0
    actual_cost: float = 0.0
    status: str = 'Not Started'

    def is_completed(self) -> bool:
        """Check if activity is fully progressed."""
        return self.percent_complete >= 100

    def is_in_progress(self) -> bool:
        """Check if activity has partial progress."""
        return 0 < self.percent_complete < 100

    def is_not_started(self) -> bool:
        """Check if activity has no progress."""
        return self.percent_complete == 0


@dataclass(frozen=True)
class Resource:
    """Represents a resource (one RSRC record)."""

    id: Optional[str]
    name: Optional[str]
    type: str = 'Material'
    max_units: float = 0.0
    rate: float = 0.0


@dataclass(frozen=True)
class ProjectSummary:
    """Project header taken from the first PROJNODE record."""

    id: Optional[str] = None
    name: str = 'Unnamed Project'
    status: str = 'Not Started'
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    manager: str = 'N/A'


@dataclass(frozen=True)
class ProjectModel:
    """Normalized project: summary, activities, resources and raw assignments."""

    project: ProjectSummary = field(default_factory=ProjectSummary)
    activities: tuple[Activity, ...] = ()
    resources: tuple[Resource, ...] = ()
    task_resources: tuple[Record, ...] = ()
    tables: RawTables = field(default_factory=lambda: EMPTY_TABLES)

    @property
    def activity_count(self) -> int:
        return len(self.activities)

    @property
    def resource_count(self) -> int:
        return len(self.resources)


@dataclass(frozen=True)
class ParseFailure:
    """Result of a parse that could not complete. Carries no partial model."""

    message: str
    error_type: Optional[str] = None

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class KPISet:
    """Aggregate earned-value KPIs (already rounded)."""

    total_planned_value: float
    total_earned_value: float
    total_actual_cost: float
    percent_complete: float
    schedule_performance_index: float
    cost_performance_index: float
    schedule_variance: float
    cost_variance: float
    estimate_at_completion: float
    variance_at_completion: float
    budget: float
    health: str


@dataclass(frozen=True)
class EVPoint:
    """Cumulative earned-value values up to and including one month."""

    month: str      # YYYY-MM
    pv: float
    ev: float
    ac: float
    spi: float
    cpi: float


@dataclass(frozen=True)
class ActivitySummary:
    """Progress counts across activities."""

    total: int
    completed: int
    in_progress: int
    not_started: int
    completion_rate: int    # percent of activities completed


@dataclass(frozen=True)
class HealthGrade:
    """Four-level health grade with display colour and score."""

    status: str
    color: str
    score: int
