"""Unit tests for progress counts and graded health."""

import pytest

from xer_evm.metrics import compute_kpis, grade_health, summarize_activities
from xer_evm.models import Activity, KPISet


def kpis_with(spi, cpi):
    return KPISet(
        total_planned_value=0, total_earned_value=0, total_actual_cost=0,
        percent_complete=0, schedule_performance_index=spi, cost_performance_index=cpi,
        schedule_variance=0, cost_variance=0, estimate_at_completion=0,
        variance_at_completion=0, budget=0, health='',
    )


class TestSummarizeActivities:
    """Test completed / in progress / not started counts."""

    def test_sample_project(self, sample_model):
        summary = summarize_activities(sample_model.activities)
        assert summary.total == 4
        assert summary.completed == 1
        assert summary.in_progress == 1
        assert summary.not_started == 2
        assert summary.completion_rate == 25

    def test_no_activities(self):
        summary = summarize_activities(())
        assert summary.total == 0
        assert summary.completion_rate == 0

    def test_rate_rounds_half_away(self):
        activities = [Activity(id=str(i), name='a', percent_complete=100 if i == 0 else 0) for i in range(8)]
        assert summarize_activities(activities).completion_rate == 13

    def test_over_complete_counts_as_completed(self):
        summary = summarize_activities([Activity(id='1', name='a', percent_complete=150)])
        assert summary.completed == 1
        assert summary.in_progress == 0

    def test_negative_progress_is_not_counted(self):
        summary = summarize_activities([Activity(id='1', name='a', percent_complete=-5)])
        assert (summary.completed, summary.in_progress, summary.not_started) == (0, 0, 0)


class TestGradeHealth:
    """Test the four-level health grade."""

    @pytest.mark.parametrize("spi,cpi,status,score", [
        (1.0, 0.95, 'On Track', 100),
        (0.95, 0.94, 'Warning', 75),
        (0.90, 0.90, 'Warning', 75),
        (0.89, 1.2, 'At Risk', 50),
        (0.80, 0.80, 'At Risk', 50),
        (0.79, 1.0, 'Critical', 25),
    ])
    def test_bands(self, spi, cpi, status, score):
        grade = grade_health(kpis_with(spi, cpi))
        assert grade.status == status
        assert grade.score == score
        assert grade.color.startswith('#')

    def test_sample_project_is_critical(self, sample_model):
        assert grade_health(compute_kpis(sample_model)).status == 'Critical'
