"""
Parse-schedule-file invocation handler.

Request body:  {"fileUrl": str, "projectId": str, "fileType": "csv"|"xlsx"|"xls"|"pdf"}
Success (200): {"items": [...], "message": str}
Errors:        {"error": str, "details"?: str, "mockItems"?: [...]}

A PDF that cannot be processed still answers 200, with the error and two
mock items the caller can offer instead.
"""
import logging
from typing import Any, Dict, Tuple

from pydantic import ValidationError

from buildtrack.importer.errors import (
    ParseInternalError,
    ScheduleImportError,
    UnsupportedFormatError,
    UploadError,
)
from buildtrack.importer.orchestrator import (
    MOCK_PDF_SUFFIX,
    SUPPORTED_TYPES,
    ScheduleImporter,
)
from schemas.schedule import ImportResult, ParseRequest

logger = logging.getLogger(__name__)

Response = Tuple[int, Dict[str, Any]]


def handle_parse_request(payload: Dict[str, Any], importer: ScheduleImporter) -> Response:
    """
    Download the referenced file, parse it and build the response body.

    Args:
        payload: Decoded JSON request body
        importer: Importer whose storage connector can download fileUrl

    Returns:
        Tuple of (HTTP status, response body)
    """
    try:
        request = ParseRequest.model_validate(payload or {})
    except ValidationError:
        return 400, {'error': 'Missing required parameters'}

    file_type = request.file_type.lower().lstrip('.')
    if file_type not in SUPPORTED_TYPES:
        return 400, {'error': 'Unsupported file type'}

    try:
        content = importer.storage.download(request.file_url)
        items = importer.parse_content(request.project_id, file_type, content)
    except ParseInternalError as e:
        if file_type == 'pdf':
            result = ImportResult(
                error=str(e),
                details=str(e.__cause__) if e.__cause__ else None,
                mock_items=importer.placeholder_items(request.project_id, MOCK_PDF_SUFFIX),
            )
            return 200, result.to_response()
        return 500, {'error': 'Failed to process file', 'details': str(e)}
    except UnsupportedFormatError:
        return 400, {'error': 'Unsupported file type'}
    except UploadError as e:
        logger.error(f'Could not fetch {request.file_url}: {str(e)}')
        return 500, {'error': 'Failed to process file', 'details': str(e)}
    except ScheduleImportError as e:
        return 400, {'error': str(e)}
    except Exception as e:
        logger.exception('Error processing file')
        return 500, {'error': 'Failed to process file', 'details': str(e)}

    result = ImportResult(
        items=items,
        message=f'Parsed {len(items)} schedule items',
    )
    return 200, result.to_response()
