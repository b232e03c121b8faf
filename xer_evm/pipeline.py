"""
XER analysis pipeline.

raw XER text or bytes -> ProjectModel -> KPIs, EV time series, progress counts.
The optional narrative summary is attached afterwards and never changes the
computed metrics.
"""

import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional, Union

import pandas as pd

from schemas.evm import ProjectAnalysisOut
from schemas.primavera import ActivityRow, ResourceRow
from schemas.validator import validated_df_to_csv
from xer_evm.metrics import (
    compute_kpis,
    compute_time_series,
    grade_health,
    summarize_activities,
    time_series_to_dataframe,
)
from xer_evm.models import ActivitySummary, EVPoint, HealthGrade, KPISet, ParseFailure, ProjectModel
from xer_evm.parsers import parse, parse_bytes

logger = logging.getLogger(__name__)

SummaryGenerator = Callable[[ProjectModel, KPISet], str]


@dataclass(frozen=True)
class ProjectAnalysis:
    """Parsed project together with everything derived from it."""

    model: ProjectModel
    kpis: KPISet
    time_series: tuple[EVPoint, ...]
    activity_summary: ActivitySummary
    health_grade: HealthGrade
    project_id: str
    executive_summary: Optional[str] = None

    def to_output(self) -> ProjectAnalysisOut:
        """Validated output model for the JSON hand-off."""
        return ProjectAnalysisOut.model_validate({
            'project_id': self.project_id,
            'project': self.model.project,
            'kpis': self.kpis,
            'earned_value': list(self.time_series),
            'activity_summary': self.activity_summary,
            'health_grade': self.health_grade,
            'activities': list(self.model.activities),
            'resources': list(self.model.resources),
            'activity_count': self.model.activity_count,
            'resource_count': self.model.resource_count,
            'executive_summary': self.executive_summary,
        }, from_attributes=True)

    def to_dict(self) -> dict:
        """JSON-ready payload with camelCase keys."""
        return self.to_output().model_dump(by_alias=True, mode='json')

    def time_series_frame(self) -> pd.DataFrame:
        return time_series_to_dataframe(self.time_series)

    def activities_frame(self) -> pd.DataFrame:
        rows = [ActivityRow.model_validate(a).model_dump() for a in self.model.activities]
        return pd.DataFrame(rows, columns=list(ActivityRow.model_fields))

    def resources_frame(self) -> pd.DataFrame:
        rows = [ResourceRow.model_validate(r).model_dump() for r in self.model.resources]
        return pd.DataFrame(rows, columns=list(ResourceRow.model_fields))

    def export_csv(self, output_dir: Union[str, Path]) -> list[Path]:
        """
        Write activities.csv, resources.csv and time_series.csv.

        Args:
            output_dir: Target directory (created if missing)

        Returns:
            Paths of the written files

        Raises:
            SchemaValidationError: If a frame does not match its schema
        """
        output_dir = Path(output_dir)
        return [
            validated_df_to_csv(self.activities_frame(), output_dir / 'activities.csv'),
            validated_df_to_csv(self.resources_frame(), output_dir / 'resources.csv'),
            validated_df_to_csv(self.time_series_frame(), output_dir / 'time_series.csv'),
        ]


def analyze_model(model: ProjectModel) -> ProjectAnalysis:
    """
    Run the metrics engine over an already parsed project.

    Args:
        model: Parsed project

    Returns:
        ProjectAnalysis (never raises for a well-formed model)
    """
    kpis = compute_kpis(model)
    return ProjectAnalysis(
        model=model,
        kpis=kpis,
        time_series=tuple(compute_time_series(model)),
        activity_summary=summarize_activities(model.activities),
        health_grade=grade_health(kpis),
        project_id=model.project.id or f"proj_{int(time.time() * 1000)}",
    )


def analyze(raw: Union[str, bytes]) -> Union[ProjectAnalysis, ParseFailure]:
    """
    Parse one XER file's content and compute all metrics.

    Args:
        raw: Decoded text or raw bytes of the file

    Returns:
        ProjectAnalysis, or the ParseFailure when the file could not be parsed
    """
    result = parse_bytes(raw) if isinstance(raw, (bytes, bytearray)) else parse(raw)
    if isinstance(result, ParseFailure):
        return result
    return analyze_model(result)


def attach_summary(
    analysis: ProjectAnalysis,
    generator: Optional[SummaryGenerator] = None,
) -> ProjectAnalysis:
    """
    Add a narrative executive summary to an analysis.

    Any failure of the generator leaves the summary empty; the KPIs and time
    series are returned unchanged either way.

    Args:
        analysis: Result of analyze()
        generator: Callable (model, kpis) -> text (default: Gemini client)

    Returns:
        Copy of the analysis with executive_summary set
    """
    if generator is None:
        generator = _gemini_summary

    try:
        text = generator(analysis.model, analysis.kpis) or ''
    except Exception as e:
        logger.error(f"Summary generation failed: {e}")
        text = ''

    return replace(analysis, executive_summary=text)


def _gemini_summary(model: ProjectModel, kpis: KPISet) -> str:
    from xer_evm.clients.gemini_client import generate_project_summary, summary_text

    response = generate_project_summary(model, kpis)
    if not response.success:
        logger.warning(f"Gemini summary unavailable: {response.error}")
    return summary_text(response)
