"""Unit tests for the xer-evm command line."""

import json
import logging

import pytest

from schemas.validator import SchemaValidationError
from xer_evm import cli
from xer_evm.config.settings import Settings
from xer_evm.models import ParseFailure
from xer_evm.pipeline import ProjectAnalysis


@pytest.fixture(autouse=True)
def reset_package_logger():
    """main() attaches handlers to the package logger; drop them after each test."""
    yield
    package_logger = logging.getLogger('xer_evm')
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)


class TestAnalyzeCommand:
    """Test `xer-evm analyze`."""

    def test_prints_report(self, sample_xer_file, capsys):
        assert cli.main(['analyze', str(sample_xer_file)]) == 0
        out = capsys.readouterr().out
        assert 'Tower A (P100)' in out
        assert 'SPI:  0.3800' in out
        assert 'Health: At Risk (grade: Critical)' in out
        assert '2024-03' in out

    def test_writes_json(self, sample_xer_file, tmp_path):
        output = tmp_path / 'out' / 'analysis.json'
        assert cli.main(['analyze', str(sample_xer_file), '--output', str(output)]) == 0
        payload = json.loads(output.read_text(encoding='utf-8'))
        assert payload['projectId'] == 'P100'
        assert payload['kpis']['health'] == 'At Risk'

    def test_exports_csv(self, sample_xer_file, tmp_path):
        csv_dir = tmp_path / 'csv'
        assert cli.main(['analyze', str(sample_xer_file), '--csv-dir', str(csv_dir)]) == 0
        assert sorted(p.name for p in csv_dir.iterdir()) == [
            'activities.csv', 'resources.csv', 'time_series.csv',
        ]

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main(['analyze', str(tmp_path / 'missing.xer')]) == 1
        assert 'ERROR' in capsys.readouterr().err

    def test_parse_failure(self, sample_xer_file, capsys, monkeypatch):
        monkeypatch.setattr(cli.XERParser, 'parse', lambda self: ParseFailure('boom'))
        assert cli.main(['analyze', str(sample_xer_file)]) == 1
        assert 'Could not parse file' in capsys.readouterr().err

    def test_schema_error_on_export(self, sample_xer_file, tmp_path, capsys, monkeypatch):
        def failing_export(self, output_dir):
            raise SchemaValidationError("Schema validation failed for 'activities.csv'")

        monkeypatch.setattr(ProjectAnalysis, 'export_csv', failing_export)
        assert cli.main(['analyze', str(sample_xer_file), '--csv-dir', str(tmp_path)]) == 1
        assert 'Schema validation failed' in capsys.readouterr().err

    def test_summary_skipped_without_api_key(self, sample_xer_file, capsys, monkeypatch):
        monkeypatch.setattr(Settings, 'GEMINI_API_KEY', '')
        assert cli.main(['analyze', str(sample_xer_file), '--summary']) == 0
        assert 'Executive Summary' not in capsys.readouterr().out

    def test_summary_with_generator(self, sample_xer_file, capsys, monkeypatch):
        monkeypatch.setattr(Settings, 'GEMINI_API_KEY', 'test-key')
        monkeypatch.setattr(
            'xer_evm.clients.gemini_client.generate_project_summary',
            lambda project, kpis, model=None: None,
        )
        monkeypatch.setattr('xer_evm.clients.gemini_client.summary_text', lambda response: 'Behind plan.')
        assert cli.main(['analyze', str(sample_xer_file), '--summary']) == 0
        out = capsys.readouterr().out
        assert '--- Executive Summary ---' in out
        assert 'Behind plan.' in out


class TestTablesCommand:
    """Test `xer-evm tables`."""

    def test_lists_tables(self, sample_xer_file, capsys):
        assert cli.main(['tables', str(sample_xer_file)]) == 0
        out = capsys.readouterr().out
        assert '5 tables' in out
        for name in ('PROJNODE', 'CALENDAR', 'TASK', 'RSRC', 'TASKRSRC'):
            assert name in out

    def test_exports_tables(self, sample_xer_file, tmp_path):
        export_dir = tmp_path / 'tables'
        assert cli.main(['tables', str(sample_xer_file), '--export-dir', str(export_dir)]) == 0
        assert (export_dir / 'TASK.csv').exists()
        assert len(list(export_dir.glob('*.csv'))) == 5

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            cli.main([])
