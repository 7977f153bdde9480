"""Pytest configuration and fixtures."""
import io
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import fitz
import pandas as pd
import pytest

from buildtrack.importer.errors import UploadError


FIXED_TODAY = datetime(2024, 3, 1, tzinfo=timezone.utc)


class FakeStorage:
    """In-memory stand-in for StorageConnector."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}

    def upload(self, path: str, content: bytes, content_type=None, upsert=True) -> str:
        self.objects[path] = content
        return f'https://storage.test/object/public/project_files/{path}'

    def download(self, url: str) -> bytes:
        path = url.split('/project_files/', 1)[-1]
        if path not in self.objects:
            raise UploadError(f'Could not retrieve uploaded file: {url}')
        return self.objects[path]


class FakeTableConnector:
    """In-memory stand-in for TableConnector."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self._next_id = 1

    def _matches(self, row, filters):
        return all(str(row.get(column)) == str(value) for column, value in (filters or {}).items())

    def insert(self, table, rows):
        stored = []
        for row in rows:
            record = {**row, 'id': str(self._next_id), 'created_at': '2024-03-01T00:00:00.000Z'}
            self._next_id += 1
            self.tables.setdefault(table, []).append(record)
            stored.append(dict(record))
        return stored

    def select(self, table, filters=None, order: Optional[str] = None):
        rows = [dict(row) for row in self.tables.get(table, []) if self._matches(row, filters)]
        if order:
            column, _, direction = order.partition('.')
            rows.sort(key=lambda row: row.get(column) or '', reverse=direction == 'desc')
        return rows

    def update(self, table, values, filters):
        updated = []
        for row in self.tables.get(table, []):
            if self._matches(row, filters):
                row.update(values)
                updated.append(dict(row))
        return updated

    def delete(self, table, filters):
        before = self.tables.get(table, [])
        kept = [row for row in before if not self._matches(row, filters)]
        self.tables[table] = kept
        return len(before) - len(kept)


@pytest.fixture
def fixed_today() -> datetime:
    """A fixed 'today' for synthesized windows."""
    return FIXED_TODAY


@pytest.fixture
def fixed_clock():
    """Clock returning FIXED_TODAY."""
    return lambda: FIXED_TODAY


@pytest.fixture
def fake_storage() -> FakeStorage:
    """In-memory blob storage."""
    return FakeStorage()


@pytest.fixture
def fake_tables() -> FakeTableConnector:
    """In-memory table API."""
    return FakeTableConnector()


@pytest.fixture
def mock_session():
    """Mock requests session returning an empty JSON list."""
    session = MagicMock()
    session.headers = {}
    response = MagicMock()
    response.content = b'[]'
    response.json.return_value = []
    response.raise_for_status.return_value = None
    session.request.return_value = response
    session.get.return_value = response
    return session


@pytest.fixture
def sample_csv_bytes() -> bytes:
    """CSV with named activity/from/to columns."""
    return b'Activity,From,To\n"Demolition","2024-01-01","2024-01-10"\n'


def build_xlsx(data: Dict[str, list]) -> bytes:
    """Workbook bytes with one sheet built from column data."""
    buffer = io.BytesIO()
    pd.DataFrame(data).to_excel(buffer, index=False, engine='openpyxl')
    return buffer.getvalue()


def build_pdf(lines: List[str]) -> bytes:
    """Single-page PDF with one text line per entry."""
    doc = fitz.open()
    page = doc.new_page()
    y = 72
    for line in lines:
        page.insert_text((72, y), line, fontsize=10)
        y += 16
    content = doc.tobytes()
    doc.close()
    return content


@pytest.fixture
def xlsx_builder():
    """Factory for workbook bytes."""
    return build_xlsx


@pytest.fixture
def pdf_builder():
    """Factory for PDF bytes."""
    return build_pdf
