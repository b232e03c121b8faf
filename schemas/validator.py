"""
Column checks for exported CSV files.

Before a frame is written, its columns and column types are compared with the
Pydantic schema registered for the file name, so activities, resources and
time series exports keep a stable layout for whatever reads them next.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Type, Union
import logging
import pandas as pd
from pydantic import BaseModel

logger = logging.getLogger(__name__)

# (type found in the frame, type the schema declares)
_COMPATIBLE_TYPES = {
    ('int', 'float'),
    ('float', 'int'),
    # NaN-only columns load as float64
    ('float', 'str'),
    # None-only columns load as object
    ('str', 'int'),
    ('str', 'float'),
}

_TYPE_NAMES = ('int', 'float', 'str', 'bool', 'datetime')


class SchemaValidationError(Exception):
    """A frame does not match the schema registered for its file."""

    def __init__(
        self,
        message: str,
        missing_columns: Optional[List[str]] = None,
        type_mismatches: Optional[Dict[str, Tuple[str, str]]] = None,
    ):
        super().__init__(message)
        self.missing_columns = missing_columns or []
        self.type_mismatches = type_mismatches or {}


def pandas_dtype_to_python_type(dtype) -> str:
    """Collapse a pandas dtype to int / float / str / bool / datetime."""
    name = str(dtype)
    if name in ('object', 'string', 'str'):
        return 'str'
    if name == 'bool':
        return 'bool'
    for prefix in ('int', 'float', 'datetime'):
        if name.startswith(prefix):
            return prefix
    return name


def pydantic_type_to_string(annotation) -> str:
    """Collapse a field annotation (Optional included) to the same names."""
    text = str(annotation).lower()
    return next((name for name in _TYPE_NAMES if name in text), text)


def types_compatible(pandas_type: str, pydantic_type: str) -> bool:
    return pandas_type == pydantic_type or (pandas_type, pydantic_type) in _COMPATIBLE_TYPES


def get_column_name(field_name: str, field_info) -> str:
    """CSV column for a field: its validation alias, else the field name."""
    return getattr(field_info, 'alias', None) or field_name


def schema_columns(schema: Type[BaseModel]) -> Dict[str, str]:
    """
    Expected CSV columns of a schema.

    Args:
        schema: Pydantic model class

    Returns:
        Column name -> simplified type name, in field order
    """
    return {
        get_column_name(name, info): pydantic_type_to_string(info.annotation)
        for name, info in schema.model_fields.items()
    }


def validate_dataframe(
    df: pd.DataFrame,
    schema: Type[BaseModel],
    strict: bool = False,
) -> List[str]:
    """
    Compare a DataFrame's columns with a schema.

    Only column presence and column types are checked, not row values. An
    empty frame has no usable dtypes, so only its columns are checked.

    Args:
        df: Frame about to be written
        schema: Registered Pydantic model for the file
        strict: Also report columns the schema does not declare

    Returns:
        Error messages, empty when the frame matches
    """
    expected = schema_columns(schema)
    errors = []

    missing = [col for col in expected if col not in df.columns]
    if missing:
        errors.append(f"Missing required columns: {sorted(missing)}")

    if strict:
        extra = [col for col in df.columns if col not in expected]
        if extra:
            errors.append(f"Unexpected columns (strict mode): {sorted(extra)}")

    if df.empty:
        return errors

    mismatches = []
    for col, declared in expected.items():
        if col not in df.columns:
            continue
        found = pandas_dtype_to_python_type(df[col].dtype)
        if not types_compatible(found, declared):
            mismatches.append(f"{col}: got {found}, expected {declared}")

    if mismatches:
        errors.append(f"Type mismatches: {'; '.join(sorted(mismatches))}")

    return errors


def validate_output_file(
    file_path: Union[str, Path],
    schema: Type[BaseModel],
    strict: bool = False,
    sample_rows: int = 100,
) -> List[str]:
    """
    Check an already written CSV against a schema.

    Args:
        file_path: CSV to check
        schema: Pydantic model class
        strict: Also report undeclared columns
        sample_rows: Rows read for dtype inference

    Returns:
        Error messages, empty when the file matches

    Raises:
        FileNotFoundError: If the file does not exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    return validate_dataframe(pd.read_csv(file_path, nrows=sample_rows), schema, strict=strict)


def validated_df_to_csv(
    df: pd.DataFrame,
    file_path: Union[str, Path],
    strict: bool = False,
    **to_csv_kwargs,
) -> Path:
    """
    Check a frame against the schema registered for its file name, then write it.

    Args:
        df: Frame to write
        file_path: Output path; the file name selects the schema
        strict: Also reject undeclared columns
        **to_csv_kwargs: Passed to DataFrame.to_csv (index defaults to False)

    Returns:
        Path of the written file

    Raises:
        KeyError: If no schema is registered for the file name
        SchemaValidationError: If the frame does not match; nothing is written
    """
    from .registry import get_schema_for_file

    file_path = Path(file_path)
    schema = get_schema_for_file(file_path.name)
    if schema is None:
        raise KeyError(f"No schema registered for '{file_path.name}'")

    errors = validate_dataframe(df, schema, strict=strict)
    if errors:
        raise SchemaValidationError(
            f"Schema validation failed for '{file_path.name}':\n"
            + "\n".join(f"  - {e}" for e in errors),
            missing_columns=[c for c in schema_columns(schema) if c not in df.columns],
        )

    file_path.parent.mkdir(parents=True, exist_ok=True)
    to_csv_kwargs.setdefault('index', False)
    df.to_csv(file_path, **to_csv_kwargs)
    logger.info(f"Wrote {len(df)} rows to {file_path}")
    return file_path
