"""Tests for the import command line."""
import json

from buildtrack.config.settings import Settings
from buildtrack.importer import cli


class TestMain:
    """cli.main"""

    def test_local_import_to_json_file(self, tmp_path, sample_csv_bytes):
        source = tmp_path / 'plan.csv'
        source.write_bytes(sample_csv_bytes)
        output = tmp_path / 'items.json'

        code = cli.main([str(source), '--project-id', 'p1', '--no-upload', '--output', str(output)])

        assert code == 0
        records = json.loads(output.read_text())
        assert records == [{
            'projectId': 'p1',
            'task': 'Demolition',
            'plannedStart': '2024-01-01T00:00:00.000Z',
            'plannedEnd': '2024-01-10T00:00:00.000Z',
        }]

    def test_prints_response_without_output(self, tmp_path, sample_csv_bytes, capsys):
        source = tmp_path / 'plan.csv'
        source.write_bytes(sample_csv_bytes)

        assert cli.main([str(source), '--project-id', 'p1', '--no-upload']) == 0
        body = json.loads(capsys.readouterr().out)
        assert body['items'][0]['task'] == 'Demolition'

    def test_missing_file(self, tmp_path):
        assert cli.main([str(tmp_path / 'nope.csv'), '--project-id', 'p1', '--no-upload']) == 1

    def test_unsupported_file(self, tmp_path, capsys):
        source = tmp_path / 'plan.docx'
        source.write_bytes(b'data')
        assert cli.main([str(source), '--project-id', 'p1', '--no-upload']) == 1
        assert 'Unsupported file type' in capsys.readouterr().err

    def test_no_fallback_flag(self, tmp_path, capsys):
        source = tmp_path / 'plan.csv'
        source.write_bytes(b'Task,Start,End\nFraming,,\n')
        assert cli.main([str(source), '--project-id', 'p1', '--no-upload', '--no-fallback']) == 1
        assert 'No schedule items' in capsys.readouterr().err

    def test_upload_requires_backend_settings(self, tmp_path, sample_csv_bytes, monkeypatch):
        monkeypatch.setattr(Settings, 'SUPABASE_URL', '')
        monkeypatch.setattr(Settings, 'SUPABASE_KEY', '')
        source = tmp_path / 'plan.csv'
        source.write_bytes(sample_csv_bytes)
        assert cli.main([str(source), '--project-id', 'p1']) == 1
