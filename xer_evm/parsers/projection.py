"""
Typed projections from raw XER records to the normalized project model.

Each projection reads one record and applies the field defaults; none of them
raise on missing or malformed field values.
"""

import logging
from typing import Optional

from xer_evm.models import Activity, ProjectModel, ProjectSummary, RawTables, Record, Resource
from xer_evm.utils.helpers import parse_float, parse_int, safe_get

logger = logging.getLogger(__name__)

PROJECT_TABLE = 'PROJNODE'
TASK_TABLE = 'TASK'
RESOURCE_TABLE = 'RSRC'
ASSIGNMENT_TABLE = 'TASKRSRC'


def project_activity(record: Record) -> Activity:
    """Map a TASK record to an Activity."""
    duration = parse_int(record.get('duration'))
    if duration < 0:
        logger.debug(f"Negative duration on task {record.get('task_id')!r}, using 0")
        duration = 0

    return Activity(
        id=record.get('task_id'),
        name=record.get('task_name'),
        start_date=record.get('start_date'),
        end_date=record.get('end_date'),
        actual_start=record.get('actual_start_date'),
        actual_finish=record.get('actual_finish_date'),
        duration=duration,
        percent_complete=parse_float(record.get('percent_complete')),
        planned_value=parse_float(record.get('planned_value')),
        earned_value=parse_float(record.get('earned_value')),
        actual_cost=parse_float(record.get('actual_cost')),
        status=safe_get(record, 'status_code', 'Not Started'),
    )


def project_resource(record: Record) -> Resource:
    """Map an RSRC record to a Resource."""
    return Resource(
        id=record.get('rsrc_id'),
        name=record.get('rsrc_name'),
        type=safe_get(record, 'rsrc_type', 'Material'),
        max_units=parse_float(record.get('max_units')),
        rate=parse_float(record.get('rate')),
    )


def project_summary(record: Optional[Record]) -> ProjectSummary:
    """
    Map a PROJNODE record to the project summary.

    Only the first PROJNODE record of a file is used; multi-project files are
    not distinguished.
    """
    record = record or {}
    return ProjectSummary(
        id=record.get('proj_id'),
        name=safe_get(record, 'proj_short_name', 'Unnamed Project'),
        status=safe_get(record, 'status_code', 'Not Started'),
        start_date=record.get('start_date'),
        end_date=record.get('end_date'),
        manager=safe_get(record, 'project_manager', 'N/A'),
    )


def build_project_model(tables: RawTables) -> ProjectModel:
    """
    Project the known tables into a ProjectModel.

    Args:
        tables: Raw table store from the table pass

    Returns:
        ProjectModel; absent tables yield empty sequences
    """
    projects = tables.get(PROJECT_TABLE, ())
    if len(projects) > 1:
        logger.debug(f"{len(projects)} PROJNODE records found, using the first")

    return ProjectModel(
        project=project_summary(projects[0] if projects else None),
        activities=tuple(project_activity(r) for r in tables.get(TASK_TABLE, ())),
        resources=tuple(project_resource(r) for r in tables.get(RESOURCE_TABLE, ())),
        task_resources=tables.get(ASSIGNMENT_TABLE, ()),
        tables=tables,
    )
