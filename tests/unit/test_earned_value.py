"""Unit tests for the monthly cumulative EV curve."""

import math
import sys

from xer_evm.metrics import compute_time_series, time_series_to_dataframe
from xer_evm.models import Activity, EVPoint, ProjectModel


def activity(start, pv=100.0, ev=0.0, ac=0.0, task_id='A'):
    return Activity(
        id=task_id, name=task_id, start_date=start,
        planned_value=pv, earned_value=ev, actual_cost=ac,
    )


class TestComputeTimeSeries:
    """Test bucketing, ordering and cumulative sums."""

    def test_months_ascending_with_cumulative_pv(self):
        model = ProjectModel(activities=(
            activity('2024-03-15'),
            activity('2024-01-10'),
            activity('2024-02-20'),
        ))
        points = compute_time_series(model)
        assert [p.month for p in points] == ['2024-01', '2024-02', '2024-03']
        assert [p.pv for p in points] == [100, 200, 300]

    def test_zero_cost_gives_zero_cpi(self):
        points = compute_time_series(ProjectModel(activities=(activity('2024-01-10', ev=50),)))
        assert points[0].spi == 0.5
        assert points[0].cpi == 0

    def test_zero_planned_value_gives_zero_spi(self):
        points = compute_time_series(ProjectModel(activities=(activity('2024-01-10', pv=0, ev=10, ac=5),)))
        assert points[0].spi == 0
        assert points[0].cpi == 2.0

    def test_activities_without_start_are_excluded(self):
        model = ProjectModel(activities=(
            activity(None, pv=999),
            activity('garbage', pv=999),
            activity('2024-05-01', pv=10),
        ))
        points = compute_time_series(model)
        assert points == [EVPoint(month='2024-05', pv=10, ev=0, ac=0, spi=0, cpi=0)]

    def test_same_month_is_one_bucket(self):
        model = ProjectModel(activities=(
            activity('2024-01-02', pv=10, ev=5, ac=4),
            activity('2024-01-31 17:00', pv=20, ev=10, ac=6),
        ))
        points = compute_time_series(model)
        assert len(points) == 1
        assert (points[0].pv, points[0].ev, points[0].ac) == (30, 15, 10)
        assert points[0].spi == 0.5
        assert points[0].cpi == 1.5

    def test_year_boundary_ordering(self):
        model = ProjectModel(activities=(activity('2025-01-05'), activity('2024-12-20')))
        assert [p.month for p in compute_time_series(model)] == ['2024-12', '2025-01']

    def test_empty_model(self):
        assert compute_time_series(ProjectModel()) == []

    def test_sample_project(self, sample_model):
        points = compute_time_series(sample_model)
        assert [p.month for p in points] == ['2024-01', '2024-02', '2024-03']
        assert [p.pv for p in points] == [1000, 3000, 4500]
        assert [p.ev for p in points] == [1000, 1900, 1900]
        assert [p.ac for p in points] == [1100, 2100, 2100]
        assert [p.spi for p in points] == [1.0, 0.6333, 0.4222]
        assert [p.cpi for p in points] == [0.9091, 0.9048, 0.9048]

    def test_deterministic(self, sample_model):
        assert compute_time_series(sample_model) == compute_time_series(sample_model)


class TestTimeSeriesDataFrame:
    def test_columns_and_rows(self, sample_model):
        df = time_series_to_dataframe(compute_time_series(sample_model))
        assert list(df.columns) == ['month', 'pv', 'ev', 'ac', 'spi', 'cpi']
        assert len(df) == 3
        assert df.iloc[-1]['pv'] == 4500

    def test_empty(self):
        df = time_series_to_dataframe([])
        assert df.empty
        assert list(df.columns) == ['month', 'pv', 'ev', 'ac', 'spi', 'cpi']


class TestLargeValues:
    def test_cumulative_totals_saturate(self):
        model = ProjectModel(activities=(
            activity('2024-01-05', pv=1e308, ev=1e308, ac=1.0, task_id='A'),
            activity('2024-01-20', pv=1e308, ev=1e308, ac=1.0, task_id='B'),
            activity('2024-02-01', pv=1e308, task_id='C'),
        ))
        points = compute_time_series(model)
        assert [p.month for p in points] == ['2024-01', '2024-02']
        for point in points:
            for value in (point.pv, point.ev, point.ac, point.spi, point.cpi):
                assert math.isfinite(value)
        assert points[-1].pv == sys.float_info.max
