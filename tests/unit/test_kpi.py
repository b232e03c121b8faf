"""Unit tests for aggregate KPIs and the three-tier health label."""

import math
import sys

import pytest

from xer_evm.metrics import classify_health, compute_kpis
from xer_evm.models import Activity, ProjectModel


def model_with(*values):
    """ProjectModel with one activity per (pv, ev, ac) tuple."""
    return ProjectModel(activities=tuple(
        Activity(id=str(i), name=f'A{i}', planned_value=pv, earned_value=ev, actual_cost=ac)
        for i, (pv, ev, ac) in enumerate(values)
    ))


class TestClassifyHealth:
    """Test evaluation order of the health thresholds."""

    @pytest.mark.parametrize("spi,cpi,expected", [
        (0.95, 0.95, 'On Track'),
        (1.2, 1.0, 'On Track'),
        (0.94, 0.96, 'Warning'),
        (0.90, 0.90, 'Warning'),
        (0.96, 0.91, 'Warning'),
        (0.89, 0.99, 'At Risk'),
        (0.99, 0.8999, 'At Risk'),
        (0.0, 0.0, 'At Risk'),
    ])
    def test_boundaries(self, spi, cpi, expected):
        assert classify_health(spi, cpi) == expected


class TestComputeKpis:
    """Test KPI aggregation over a model."""

    def test_empty_project(self):
        """No activities: everything is zero and the project is At Risk."""
        kpis = compute_kpis(ProjectModel())
        assert kpis.total_planned_value == 0
        assert kpis.total_earned_value == 0
        assert kpis.total_actual_cost == 0
        assert kpis.percent_complete == 0
        assert kpis.schedule_performance_index == 0
        assert kpis.cost_performance_index == 0
        assert kpis.estimate_at_completion == 0
        assert kpis.variance_at_completion == 0
        assert kpis.health == 'At Risk'

    def test_sample_project(self, sample_model):
        kpis = compute_kpis(sample_model)
        assert kpis.total_planned_value == 5000
        assert kpis.total_earned_value == 1900
        assert kpis.total_actual_cost == 2100
        assert kpis.percent_complete == 38.0
        assert kpis.schedule_performance_index == 0.38
        assert kpis.cost_performance_index == 0.9048
        assert kpis.schedule_variance == -3100
        assert kpis.cost_variance == -200
        assert kpis.estimate_at_completion == 2321.05
        assert kpis.variance_at_completion == 3100
        assert kpis.budget == 5000
        assert kpis.health == 'At Risk'

    def test_on_track_at_exact_threshold(self):
        kpis = compute_kpis(model_with((100, 95, 100)))
        assert kpis.schedule_performance_index == 0.95
        assert kpis.cost_performance_index == 0.95
        assert kpis.health == 'On Track'

    def test_warning_band(self):
        kpis = compute_kpis(model_with((100, 94, 97)))
        assert kpis.health == 'Warning'

    def test_at_risk_band(self):
        kpis = compute_kpis(model_with((100, 89, 89)))
        assert kpis.cost_performance_index == 1.0
        assert kpis.health == 'At Risk'

    def test_zero_planned_value_guard(self):
        """With PV == 0 the guarded SPI equals EV."""
        kpis = compute_kpis(model_with((0, 50, 25)))
        assert kpis.schedule_performance_index == 50
        assert kpis.cost_performance_index == 2.0
        assert kpis.estimate_at_completion == 12.5
        assert kpis.percent_complete == 0

    def test_zero_actual_cost_guard(self):
        kpis = compute_kpis(model_with((100, 40, 0)))
        assert kpis.cost_performance_index == 40
        assert kpis.estimate_at_completion == 0

    def test_all_outputs_finite(self, sample_model):
        kpis = compute_kpis(sample_model)
        for name, value in vars(kpis).items():
            if name != 'health':
                assert math.isfinite(value), name

    def test_money_rounded_to_cents(self):
        kpis = compute_kpis(model_with((0.125, 0.0, 0.0), (-0.25, 0.0, 0.0)))
        assert kpis.total_planned_value == -0.13

    def test_huge_values_stay_finite(self):
        kpis = compute_kpis(model_with((1e306, 1e306, 1.0)))
        assert kpis.total_planned_value == pytest.approx(1e306)
        assert kpis.schedule_performance_index == 1.0
        for name, value in vars(kpis).items():
            if name != 'health':
                assert math.isfinite(value), name

    def test_overflowing_totals_saturate(self, make_xer):
        from xer_evm.parsers import parse

        model = parse(make_xer([
            ('%T', 'TASK'),
            ('%F', 'task_id', 'planned_value'),
            ('%R', 'T1', '1e308'),
            ('%R', 'T2', '1e308'),
        ]))
        kpis = compute_kpis(model)
        assert kpis.total_planned_value == sys.float_info.max
        for name, value in vars(kpis).items():
            if name != 'health':
                assert math.isfinite(value), name
