"""
Schedule import orchestration.

Checks the file type, stores the upload, dispatches to the matching reader,
runs the column/text heuristics and applies the placeholder fallback.
Nothing here writes to the database; callers persist accepted candidates.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from buildtrack.config.settings import settings
from buildtrack.connectors.storage_connector import StorageConnector
from buildtrack.extractors.format_specific.delimited_extractor import DelimitedExtractor
from buildtrack.extractors.format_specific.pdf_extractor import PdfExtractor
from buildtrack.extractors.format_specific.spreadsheet_extractor import SpreadsheetExtractor
from buildtrack.importer.errors import (
    NoScheduleItemsError,
    ParseInternalError,
    ScheduleImportError,
    UnsupportedFormatError,
    UploadError,
)
from buildtrack.transformers.base_transformer import BaseTransformer, Clock
from buildtrack.transformers.phases import placeholder_phases
from buildtrack.transformers.tabular_transformer import TabularTransformer
from buildtrack.transformers.text_transformer import TextTransformer
from buildtrack.utils.dates import utc_today
from buildtrack.utils.helpers import get_file_extension
from schemas.schedule import ImportResult, ParsedCandidate

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = ('xlsx', 'xls', 'csv', 'pdf')
TABULAR_TYPES = ('xlsx', 'xls', 'csv')
MOCK_PDF_SUFFIX = ' (Mock PDF Data)'


def schedule_path(project_id: str, extension: str, timestamp_ms: int) -> str:
    """Storage path for an uploaded schedule file."""
    return f'{project_id}/schedules/schedule_{timestamp_ms}.{extension}'


def _now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class ScheduleImporter:
    """
    Import schedule files into reviewable candidates.

    Storage is injected so tests can pass a fake; from_settings() builds
    the real connector for the CLI.
    """

    def __init__(
        self,
        storage: Optional[StorageConnector] = None,
        synthesize_fallback: Optional[bool] = None,
        clock: Optional[Clock] = None,
        timestamp: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the importer.

        Args:
            storage: Blob storage connector (required for import_schedule)
            synthesize_fallback: Offer placeholder items when a file yields
                nothing (defaults to SCHEDULE_FALLBACK_ENABLED)
            clock: Returns "today" (UTC midnight) for synthesized windows
            timestamp: Returns epoch milliseconds for upload paths
        """
        self.storage = storage
        self.synthesize_fallback = (
            settings.SCHEDULE_FALLBACK_ENABLED
            if synthesize_fallback is None else synthesize_fallback
        )
        self.clock = clock or utc_today
        self.timestamp = timestamp or _now_ms
        self.logger = logging.getLogger(f'{__name__}.ScheduleImporter')

    @classmethod
    def from_settings(cls, **kwargs) -> 'ScheduleImporter':
        """Importer wired to the configured storage bucket."""
        return cls(storage=StorageConnector.from_settings(), **kwargs)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _transformer_for(self, file_type: str, project_id: str) -> BaseTransformer:
        if file_type == 'pdf':
            return TextTransformer(
                project_id,
                clock=self.clock,
                synthesize_fallback=self.synthesize_fallback,
            )
        return TabularTransformer(project_id, clock=self.clock)

    def _read(self, file_type: str, content: bytes):
        readers = {
            'xlsx': lambda: SpreadsheetExtractor('xlsx'),
            'xls': lambda: SpreadsheetExtractor('xls'),
            'csv': DelimitedExtractor,
            'pdf': PdfExtractor,
        }
        return readers[file_type]().extract(content)

    def placeholder_items(self, project_id: str, suffix: str = '') -> List[ParsedCandidate]:
        """Fixed placeholder candidates anchored to today."""
        transformer = TabularTransformer(project_id, clock=self.clock)
        return transformer.to_candidates(placeholder_phases(self.clock(), suffix))

    def parse_content(
        self,
        project_id: str,
        file_type: str,
        content: bytes,
    ) -> List[ParsedCandidate]:
        """
        Parse file bytes into candidates without uploading.

        Args:
            project_id: Owning project
            file_type: One of xlsx, xls, csv, pdf
            content: File bytes

        Returns:
            Candidates, never empty while fallback synthesis is enabled

        Raises:
            UnsupportedFormatError: Unknown file type
            EmptyFileError: CSV without data rows
            MissingColumnsError: Tabular columns not identifiable
            NoScheduleItemsError: Nothing found and fallback disabled
            ParseInternalError: Any unexpected reader/heuristic failure
        """
        file_type = file_type.lower().lstrip('.')
        if file_type not in SUPPORTED_TYPES:
            raise UnsupportedFormatError(file_type)

        transformer = self._transformer_for(file_type, project_id)
        try:
            raw = self._read(file_type, content)
            candidates = transformer.transform(raw)
        except ScheduleImportError:
            raise
        except Exception as e:
            self.logger.error(f'Failed to parse {file_type} file: {str(e)}')
            raise ParseInternalError(f'Failed to process {file_type} file: {str(e)}') from e

        if candidates and not transformer.validate_transformation(candidates):
            self.logger.warning('Some parsed candidates failed validation')

        if not candidates:
            if not self.synthesize_fallback:
                raise NoScheduleItemsError(
                    f'No schedule items could be found in the {file_type} file.'
                )
            self.logger.warning(
                f'No schedule items found in {file_type} file, '
                f'returning placeholder items for review'
            )
            candidates = self.placeholder_items(project_id)

        self.logger.info(f'Parsed {len(candidates)} schedule items for project {project_id}')
        return candidates

    # ------------------------------------------------------------------
    # Full import
    # ------------------------------------------------------------------

    def upload(self, project_id: str, extension: str, content: bytes) -> str:
        """
        Store the raw file under the project namespace.

        Returns:
            Public URL of the stored file

        Raises:
            UploadError: If storage fails or no connector is configured
        """
        if self.storage is None:
            raise UploadError('No storage connector configured for uploads')
        path = schedule_path(project_id, extension, self.timestamp())
        return self.storage.upload(path, content)

    def import_schedule(
        self,
        project_id: str,
        file_name: str,
        content: bytes,
        upload: bool = True,
    ) -> ImportResult:
        """
        Upload and parse one schedule file.

        Args:
            project_id: Owning project (existence is the caller's concern)
            file_name: Original file name; its extension selects the reader
            content: File bytes
            upload: Store the file before parsing

        Returns:
            ImportResult with items, or with an error message
        """
        extension = get_file_extension(file_name)
        if extension not in SUPPORTED_TYPES:
            error = UnsupportedFormatError(extension)
            self.logger.error(str(error))
            return ImportResult(error=str(error))

        file_url = None
        try:
            if upload:
                file_url = self.upload(project_id, extension, content)
            items = self.parse_content(project_id, extension, content)
        except ParseInternalError as e:
            if extension == 'pdf':
                return ImportResult(
                    error=str(e),
                    details=str(e.__cause__) if e.__cause__ else None,
                    mock_items=self.placeholder_items(project_id, MOCK_PDF_SUFFIX),
                    file_url=file_url,
                )
            return ImportResult(error=str(e), file_url=file_url)
        except ScheduleImportError as e:
            self.logger.error(f'Import of {file_name} failed: {str(e)}')
            return ImportResult(error=str(e), file_url=file_url)
        except Exception as e:
            self.logger.exception(f'Unexpected failure importing {file_name}')
            error = ParseInternalError(f'Failed to import {file_name}: {str(e)}')
            return ImportResult(error=str(error), details=str(e), file_url=file_url)

        return ImportResult(
            items=items,
            file_url=file_url,
            message=f'Parsed {len(items)} schedule items from {file_name}',
        )
