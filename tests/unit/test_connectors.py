"""Tests for the storage and table connectors using a mocked requests session."""
import pytest
import requests

from buildtrack.connectors.storage_connector import StorageConnector
from buildtrack.connectors.table_connector import TableConnector, eq_filters
from buildtrack.importer.errors import PersistenceError, UploadError

BASE = 'https://demo.backend.test'


@pytest.fixture
def storage(mock_session):
    return StorageConnector(
        f'{BASE}/storage/v1',
        api_key='service-key',
        bucket='project_files',
        session=mock_session,
    )


@pytest.fixture
def tables(mock_session):
    return TableConnector(f'{BASE}/rest/v1', api_key='service-key', session=mock_session)


class TestStorageConnector:
    """Blob uploads and downloads."""

    def test_upload_posts_to_bucket_path(self, storage, mock_session):
        url = storage.upload('p1/schedules/schedule_1.csv', b'a,b\n')

        assert url == f'{BASE}/storage/v1/object/public/project_files/p1/schedules/schedule_1.csv'
        args, kwargs = mock_session.request.call_args
        assert args == ('POST', f'{BASE}/storage/v1/object/project_files/p1/schedules/schedule_1.csv')
        assert kwargs['data'] == b'a,b\n'
        assert kwargs['headers']['Content-Type'] == 'text/csv'
        assert kwargs['headers']['x-upsert'] == 'true'
        assert kwargs['headers']['apikey'] == 'service-key'
        assert kwargs['headers']['Authorization'] == 'Bearer service-key'

    def test_upload_content_type_for_pdf(self, storage, mock_session):
        storage.upload('p1/schedules/schedule_1.pdf', b'%PDF')
        assert mock_session.request.call_args.kwargs['headers']['Content-Type'] == 'application/pdf'

    def test_unreachable_storage(self, storage, mock_session):
        mock_session.request.side_effect = requests.ConnectionError('refused')
        with pytest.raises(UploadError):
            storage.upload('p1/schedules/schedule_1.csv', b'a,b\n')

    def test_rejected_upload(self, storage, mock_session):
        response = mock_session.request.return_value
        response.raise_for_status.side_effect = requests.HTTPError('413 Payload Too Large')
        with pytest.raises(UploadError):
            storage.upload('p1/schedules/schedule_1.csv', b'a,b\n')

    def test_download(self, storage, mock_session):
        mock_session.get.return_value.content = b'Task,Start,End\n'
        assert storage.download('https://files.test/a.csv') == b'Task,Start,End\n'

    def test_download_failure(self, storage, mock_session):
        mock_session.get.side_effect = requests.Timeout('slow')
        with pytest.raises(UploadError):
            storage.download('https://files.test/a.csv')


class TestTableConnector:
    """REST table calls."""

    def test_eq_filters(self):
        assert eq_filters({'id': 5, 'project_id': 'p1'}) == {'id': 'eq.5', 'project_id': 'eq.p1'}

    def test_select(self, tables, mock_session):
        mock_session.request.return_value.content = b'[{"id": 1}]'
        mock_session.request.return_value.json.return_value = [{'id': 1}]

        rows = tables.select('schedule_items', filters={'project_id': 'p1'}, order='planned_start.asc')

        assert rows == [{'id': 1}]
        args, kwargs = mock_session.request.call_args
        assert args == ('GET', f'{BASE}/rest/v1/schedule_items')
        assert kwargs['params'] == {
            'select': '*',
            'project_id': 'eq.p1',
            'order': 'planned_start.asc',
        }

    def test_insert_asks_for_representation(self, tables, mock_session):
        tables.insert('schedule_items', [{'task': 'Framing'}])
        kwargs = mock_session.request.call_args.kwargs
        assert kwargs['json'] == [{'task': 'Framing'}]
        assert kwargs['headers']['Prefer'] == 'return=representation'

    def test_update_uses_patch(self, tables, mock_session):
        tables.update('schedule_items', {'delay_days': 2}, filters={'id': '7'})
        args, kwargs = mock_session.request.call_args
        assert args[0] == 'PATCH'
        assert kwargs['params'] == {'id': 'eq.7'}

    def test_delete_counts_rows(self, tables, mock_session):
        mock_session.request.return_value.content = b'[{"id": 7}]'
        mock_session.request.return_value.json.return_value = [{'id': 7}]
        assert tables.delete('schedule_items', filters={'id': '7'}) == 1

    def test_empty_body(self, tables, mock_session):
        mock_session.request.return_value.content = b''
        assert tables.select('schedule_items') == []

    def test_failure(self, tables, mock_session):
        mock_session.request.side_effect = requests.ConnectionError('refused')
        with pytest.raises(PersistenceError):
            tables.select('schedule_items')

    def test_context_manager_closes_session(self, mock_session):
        with TableConnector(f'{BASE}/rest/v1', session=mock_session):
            pass
        mock_session.close.assert_called_once()
