"""Pytest configuration and fixtures."""
import pytest
from pathlib import Path
from typing import Callable, Iterable, Sequence


def xer_text(rows: Iterable[Sequence[str]]) -> str:
    """Join (tag, value, ...) rows into tab-delimited XER text."""
    return '\n'.join('\t'.join(row) for row in rows) + '\n'


TASK_FIELDS = (
    'task_id', 'task_name', 'start_date', 'end_date', 'duration',
    'percent_complete', 'actual_start_date', 'actual_finish_date',
    'planned_value', 'earned_value', 'actual_cost', 'status_code',
)


@pytest.fixture
def make_xer() -> Callable[[Iterable[Sequence[str]]], str]:
    """Builder for ad-hoc XER text."""
    return xer_text


@pytest.fixture
def sample_xer_text() -> str:
    """A small multi-table XER export.

    Totals: PV 5000, EV 1900, AC 2100. T4 has no start date.
    """
    return xer_text([
        ('ERMHDR', '19.12', '2024-06-01', 'Project', 'admin'),
        ('%T', 'PROJNODE'),
        ('%F', 'proj_id', 'proj_short_name', 'status_code', 'start_date', 'end_date', 'project_manager'),
        ('%R', 'P100', 'Tower A', 'Active', '2024-01-01', '2024-12-31', 'J. Smith'),
        ('%R', 'P200', 'Tower B', 'Planned', '2025-01-01', '2025-12-31', 'A. Jones'),
        ('%T', 'CALENDAR'),
        ('%F', 'clndr_id', 'clndr_name'),
        ('%R', 'C1', 'Standard 5 Day'),
        ('%T', 'TASK'),
        ('%F',) + TASK_FIELDS,
        ('%R', 'T1', 'Foundation', '2024-01-10 08:00', '2024-02-10 17:00', '30', '100',
         '2024-01-10 08:00', '2024-02-12 17:00', '1000', '1000', '1100', 'Complete'),
        ('%R', 'T2', 'Framing', '2024-02-20 08:00', '2024-04-01 17:00', '40', '50',
         '2024-02-21 08:00', '', '2000', '900', '1000', 'Active'),
        ('%R', 'T3', 'Roofing', '2024-03-15 08:00', '2024-05-01 17:00', '45', '0',
         '', '', '1500', '0', '0'),
        ('%R', 'T4', 'Punch list', '', '', '', '', '', '', '500', '', '', ''),
        ('%T', 'RSRC'),
        ('%F', 'rsrc_id', 'rsrc_name', 'rsrc_type', 'max_units', 'rate'),
        ('%R', 'R1', 'Crane', 'Equipment', '2', '150.5'),
        ('%R', 'R2', 'Concrete', '', 'abc', '95'),
        ('%T', 'TASKRSRC'),
        ('%F', 'taskrsrc_id', 'task_id', 'rsrc_id', 'target_qty'),
        ('%R', 'A1', 'T1', 'R1', '10'),
        ('%E',),
        ('%T', 'IGNORED'),
        ('%F', 'x'),
        ('%R', '1'),
    ])


@pytest.fixture
def minimal_xer_text() -> str:
    """A single TASK record with three fields."""
    return xer_text([
        ('%T', 'TASK'),
        ('%F', 'task_id', 'task_name', 'planned_value'),
        ('%R', '1', 'Foundation', '5000'),
    ])


@pytest.fixture
def sample_xer_file(tmp_path, sample_xer_text) -> Path:
    """The sample export written to disk as UTF-8."""
    path = tmp_path / 'sample_project.xer'
    path.write_bytes(sample_xer_text.encode('utf-8'))
    return path


@pytest.fixture
def sample_model(sample_xer_text):
    """ProjectModel parsed from the sample export."""
    from xer_evm.parsers import parse

    return parse(sample_xer_text)
