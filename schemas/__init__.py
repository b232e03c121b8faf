"""
Output data schemas for validation.

Pydantic models for the analysis JSON payload and the exported CSV files.

Usage:
    from schemas import validated_df_to_csv
    from schemas.evm import ProjectAnalysisOut, EVPointRow

    # Validate and write an export
    validated_df_to_csv(df, output_dir / 'time_series.csv')

    # Or use the registry
    from schemas import SCHEMA_REGISTRY
    schema = SCHEMA_REGISTRY['time_series.csv']
"""

from .validator import (
    validate_output_file,
    validate_dataframe,
    validated_df_to_csv,
    SchemaValidationError,
)
from .registry import SCHEMA_REGISTRY, get_schema_for_file

__all__ = [
    'validate_output_file',
    'validate_dataframe',
    'validated_df_to_csv',
    'SchemaValidationError',
    'SCHEMA_REGISTRY',
    'get_schema_for_file',
]
