"""
Earned-value output schemas.

The JSON hand-off mirrors the dashboard payload: camelCase keys for the
project, KPIs, time series and progress counts.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .primavera import CAMEL_OUTPUT, ActivityRow, ProjectHeader, ResourceRow


class KPISetOut(BaseModel):
    """Aggregate KPIs, already rounded by the metrics engine."""
    model_config = CAMEL_OUTPUT

    total_planned_value: float = Field(description="Sum of PV, 2 dp")
    total_earned_value: float = Field(description="Sum of EV, 2 dp")
    total_actual_cost: float = Field(description="Sum of AC, 2 dp")
    percent_complete: float = Field(description="EV / PV * 100, 2 dp")
    schedule_performance_index: float = Field(description="SPI, 4 dp")
    cost_performance_index: float = Field(description="CPI, 4 dp")
    schedule_variance: float = Field(description="SV = EV - PV, 2 dp")
    cost_variance: float = Field(description="CV = EV - AC, 2 dp")
    estimate_at_completion: float = Field(description="EAC, 2 dp")
    variance_at_completion: float = Field(description="VAC = PV - EV, 2 dp")
    budget: float = Field(description="Budget (total PV), 2 dp")
    health: str = Field(description="On Track, Warning or At Risk")


class EVPointRow(BaseModel):
    """
    Cumulative earned value at one month.

    File: time_series.csv
    """
    model_config = CAMEL_OUTPUT

    month: str = Field(description="Calendar month, YYYY-MM")
    pv: float = Field(description="Cumulative planned value")
    ev: float = Field(description="Cumulative earned value")
    ac: float = Field(description="Cumulative actual cost")
    spi: float = Field(description="Cumulative SPI, 0 when PV is 0")
    cpi: float = Field(description="Cumulative CPI, 0 when AC is 0")


class ActivitySummaryOut(BaseModel):
    """Progress counts across activities."""
    model_config = CAMEL_OUTPUT

    total: int
    completed: int
    in_progress: int
    not_started: int
    completion_rate: int


class HealthGradeOut(BaseModel):
    """Graded health with display colour."""
    model_config = CAMEL_OUTPUT

    status: str
    color: str
    score: int


class ProjectAnalysisOut(BaseModel):
    """Complete analysis payload for downstream consumers."""
    model_config = CAMEL_OUTPUT

    project_id: str = Field(description="Store key: proj_id, or generated when absent")
    project: ProjectHeader
    kpis: KPISetOut
    earned_value: list[EVPointRow]
    activity_summary: ActivitySummaryOut
    health_grade: HealthGradeOut
    activities: list[ActivityRow]
    resources: list[ResourceRow]
    activity_count: int
    resource_count: int
    executive_summary: Optional[str] = None
