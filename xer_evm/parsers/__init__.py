"""
Primavera P6 XER parsing.

Decodes XER text into a read-only table store and projects PROJNODE, TASK,
RSRC and TASKRSRC into a normalized ProjectModel.
"""

from .xer_parser import (
    XERParser,
    XERFileError,
    zip_record,
    decode_xer_bytes,
    parse,
    parse_bytes,
    parse_file,
)
from .projection import (
    project_activity,
    project_resource,
    project_summary,
    build_project_model,
)

__all__ = [
    'XERParser',
    'XERFileError',
    'zip_record',
    'decode_xer_bytes',
    'parse',
    'parse_bytes',
    'parse_file',
    'project_activity',
    'project_resource',
    'project_summary',
    'build_project_model',
]
