"""
XER File Parser for Primavera P6 Schedule Data

This module decodes Primavera P6 XER exports into a read-only table store and
projects the known tables into a normalized ProjectModel.

XER Format:
- Tab-delimited text files
- Structure: ERMHDR (header) followed by %T (table), %F (fields), %R (rows)
- %E marks the end of the file; anything after it is ignored
- Each table represents a different entity (tasks, resources, projects, etc.)
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from xer_evm.config.settings import settings
from xer_evm.models import ParseFailure, ProjectModel, RawTables, Record
from xer_evm.parsers.projection import build_project_model

logger = logging.getLogger(__name__)

TABLE_TAG = '%T'
FIELDS_TAG = '%F'
RECORD_TAG = '%R'
END_TAG = '%E'
HEADER_TAG = 'ERMHDR'


class XERFileError(Exception):
    """Raised when an XER file cannot be read from disk."""


def zip_record(field_names: Sequence[str], raw_values: Sequence[str]) -> Record:
    """
    Pair declared field names with one row of raw values.

    Missing or empty values become None; values beyond the declared fields
    are dropped.

    Args:
        field_names: Ordered field names from the %F line
        raw_values: Ordered raw values from the %R line

    Returns:
        Read-only mapping of field name to raw text or None
    """
    record = {}
    for index, field_name in enumerate(field_names):
        value = raw_values[index] if index < len(raw_values) else None
        record[field_name] = value or None
    return MappingProxyType(record)


def _payload(line: str) -> str:
    """Text after the 2-char tag, minus the single separator that follows it."""
    rest = line[2:]
    if rest[:1] in ('\t', ' '):
        rest = rest[1:]
    return rest


def _field_names(line: str) -> List[str]:
    payload = _payload(line)
    names = payload.split('\t') if '\t' in payload else payload.split()
    return [name.strip() for name in names if name.strip()]


class XERParser:
    """Parse Primavera P6 XER content into structured data"""

    def __init__(self, content: str, source: Optional[str] = None):
        """
        Initialize the parser with decoded XER text

        Args:
            content: Complete text of one XER file
            source: Optional label (usually the file path) used in log messages
        """
        self.content = content
        self.source = source or '<text>'
        self.tables: RawTables = MappingProxyType({})
        self.fields: Dict[str, tuple] = {}
        self.header: Dict[str, object] = {}

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'XERParser':
        """
        Build a parser from an XER file on disk

        Args:
            file_path: Path to the XER file

        Returns:
            XERParser holding the decoded file content

        Raises:
            XERFileError: If the file is missing, unreadable or too large
        """
        path = Path(file_path)
        if not path.is_file():
            raise XERFileError(f"XER file not found: {path}")

        size = path.stat().st_size
        if size > settings.max_upload_bytes():
            raise XERFileError(
                f"XER file {path.name} is {size / (1024 * 1024):.1f}MB, "
                f"limit is {settings.MAX_UPLOAD_MB}MB"
            )

        try:
            raw = path.read_bytes()
        except OSError as e:
            raise XERFileError(f"Could not read {path}: {e}") from e

        return cls(decode_xer_bytes(raw), source=str(path))

    def parse_tables(self) -> RawTables:
        """
        Run the table pass and return all tables as read-only records

        Returns:
            Mapping of table name to a tuple of records
        """
        data: Dict[str, List[Record]] = {}
        fields: Dict[str, tuple] = {}
        current_table = None
        current_fields: List[str] = []
        dropped = 0

        for line in self.content.split('\n'):
            line = line.strip()

            if not line:
                continue

            tag = line[:2]

            if line.startswith(HEADER_TAG):
                parts = line.split('\t')
                self.header['raw'] = line
                self.header['data'] = parts[1:]

            elif tag == TABLE_TAG:
                # A repeated table name starts that table over
                names = _field_names(line)
                current_table = names[0] if names else None
                current_fields = []
                if current_table:
                    data[current_table] = []
                    fields[current_table] = ()

            elif tag == FIELDS_TAG:
                current_fields = _field_names(line)
                if current_table:
                    fields[current_table] = tuple(current_fields)

            elif tag == RECORD_TAG:
                if not current_table or not current_fields:
                    dropped += 1
                    continue
                values = _payload(line).split('\t')
                data[current_table].append(zip_record(current_fields, values))

            elif tag == END_TAG:
                break

        if dropped:
            logger.debug(f"{self.source}: dropped {dropped} records outside a declared table")

        self.fields = fields
        self.tables = MappingProxyType(
            {name: tuple(records) for name, records in data.items()}
        )
        return self.tables

    def parse(self) -> Union[ProjectModel, ParseFailure]:
        """
        Parse the content into a ProjectModel

        Returns:
            ProjectModel, or ParseFailure if the content could not be scanned.
            A failure never carries a partially built model.
        """
        try:
            tables = self.parse_tables()
            model = build_project_model(tables)
        except Exception as e:
            logger.exception(f"XER parse error in {self.source}")
            self.tables = MappingProxyType({})
            self.fields = {}
            return ParseFailure(
                message=f"Could not parse file: {e}",
                error_type=type(e).__name__,
            )

        logger.info(
            f"Parsed {self.source}: {len(tables)} tables, "
            f"{model.activity_count} activities, {model.resource_count} resources"
        )
        return model

    def get_table(self, table_name: str) -> Optional[tuple]:
        """
        Get a specific table by name

        Args:
            table_name: Name of the table to retrieve

        Returns:
            Tuple of records or None if table doesn't exist
        """
        return self.tables.get(table_name)

    def list_tables(self) -> List[str]:
        """
        Get list of all available table names

        Returns:
            List of table names in file order
        """
        return list(self.tables.keys())

    def to_dataframe(self, table_name: str) -> pd.DataFrame:
        """
        Get a table as a DataFrame with its declared columns

        Args:
            table_name: Name of the table to convert

        Returns:
            DataFrame, one row per record
        """
        if table_name not in self.tables:
            raise ValueError(f"Table '{table_name}' not found in XER file")

        columns = list(self.fields.get(table_name, ()))
        rows = [dict(record) for record in self.tables[table_name]]
        return pd.DataFrame(rows, columns=columns)

    def export_table_to_csv(self, table_name: str, output_path: Union[str, Path]) -> Path:
        """
        Export a specific table to CSV

        Args:
            table_name: Name of the table to export
            output_path: Path for the output CSV file

        Returns:
            Path of the written file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        df = self.to_dataframe(table_name)
        df.to_csv(output_path, index=False)
        logger.info(f"Exported {len(df)} rows to {output_path}")
        return output_path

    def export_all_to_csv(self, output_dir: Union[str, Path]) -> List[Path]:
        """
        Export all tables to separate CSV files

        Args:
            output_dir: Directory to save CSV files

        Returns:
            Paths of the written files
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        written = []
        for table_name in self.tables:
            written.append(self.export_table_to_csv(table_name, output_path / f"{table_name}.csv"))
        return written

    def summary(self) -> Dict:
        """
        Get a summary of the XER file contents

        Returns:
            Dictionary with summary statistics
        """
        summary = {
            'source': self.source,
            'total_tables': len(self.tables),
            'tables': {}
        }

        for table_name, records in self.tables.items():
            columns = self.fields.get(table_name, ())
            summary['tables'][table_name] = {
                'rows': len(records),
                'columns': len(columns),
                'column_names': list(columns)
            }

        return summary


def decode_xer_bytes(raw: bytes, encoding: Optional[str] = None) -> str:
    """
    Decode raw XER bytes; undecodable bytes are dropped, a BOM is removed.

    Args:
        raw: File content
        encoding: Text encoding (default: settings.XER_ENCODING)

    Returns:
        Decoded text
    """
    text = raw.decode(encoding or settings.XER_ENCODING, errors='ignore')
    return text.lstrip('\ufeff')


def parse(raw_text: str) -> Union[ProjectModel, ParseFailure]:
    """
    Parse decoded XER text into a ProjectModel

    Args:
        raw_text: Complete text of one XER file

    Returns:
        ProjectModel or ParseFailure
    """
    return XERParser(raw_text).parse()


def parse_bytes(raw: bytes, encoding: Optional[str] = None) -> Union[ProjectModel, ParseFailure]:
    """
    Parse raw XER file bytes into a ProjectModel

    Args:
        raw: File content
        encoding: Text encoding (default: settings.XER_ENCODING)

    Returns:
        ProjectModel or ParseFailure
    """
    try:
        text = decode_xer_bytes(raw, encoding)
    except (LookupError, AttributeError) as e:
        logger.error(f"Could not decode XER content: {e}")
        return ParseFailure(message=f"Could not parse file: {e}", error_type=type(e).__name__)
    return XERParser(text).parse()


def parse_file(file_path: Union[str, Path]) -> Union[ProjectModel, ParseFailure]:
    """
    Quick utility function to parse an XER file

    Args:
        file_path: Path to the XER file

    Returns:
        ProjectModel or ParseFailure

    Raises:
        XERFileError: If the file cannot be read
    """
    return XERParser.from_file(file_path).parse()
