"""
Primavera P6 project output schemas.

Field names are the CSV column names; JSON output uses camelCase keys
(model_dump(by_alias=True)).
"""

from typing import Optional
from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CAMEL_OUTPUT = ConfigDict(
    alias_generator=AliasGenerator(serialization_alias=to_camel),
    from_attributes=True,
)


class ActivityRow(BaseModel):
    """
    One schedule activity (TASK record).

    File: activities.csv
    """
    model_config = CAMEL_OUTPUT

    id: Optional[str] = Field(default=None, description="P6 task_id")
    name: Optional[str] = Field(default=None, description="Task name")
    start_date: Optional[str] = Field(default=None, description="Scheduled start")
    end_date: Optional[str] = Field(default=None, description="Scheduled finish")
    actual_start: Optional[str] = Field(default=None, description="Actual start")
    actual_finish: Optional[str] = Field(default=None, description="Actual finish")
    duration: int = Field(default=0, description="Duration, 0 when missing or malformed")
    percent_complete: float = Field(default=0.0, description="Percent complete, not clamped")
    planned_value: float = Field(default=0.0, description="Planned value (PV)")
    earned_value: float = Field(default=0.0, description="Earned value (EV)")
    actual_cost: float = Field(default=0.0, description="Actual cost (AC)")
    status: str = Field(default="Not Started", description="P6 status code")


class ResourceRow(BaseModel):
    """
    One resource (RSRC record).

    File: resources.csv
    """
    model_config = CAMEL_OUTPUT

    id: Optional[str] = Field(default=None, description="P6 rsrc_id")
    name: Optional[str] = Field(default=None, description="Resource name")
    type: str = Field(default="Material", description="Resource type")
    max_units: float = Field(default=0.0, description="Maximum units")
    rate: float = Field(default=0.0, description="Hourly/unit rate")


class ProjectHeader(BaseModel):
    """Project header taken from the first PROJNODE record."""
    model_config = CAMEL_OUTPUT

    id: Optional[str] = Field(default=None, description="P6 proj_id")
    name: str = Field(default="Unnamed Project", description="Project short name")
    status: str = Field(default="Not Started", description="Project status code")
    start_date: Optional[str] = Field(default=None, description="Project start")
    end_date: Optional[str] = Field(default=None, description="Project finish")
    manager: str = Field(default="N/A", description="Project manager")
