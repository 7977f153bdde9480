"""Exceptions raised while importing schedule files."""


class ScheduleImportError(Exception):
    """Base class for all import failures. The message is user-readable."""


class UploadError(ScheduleImportError):
    """Raised when blob storage is unreachable or rejects the file."""


class UnsupportedFormatError(ScheduleImportError):
    """Raised for extensions outside xlsx, xls, csv and pdf."""

    def __init__(self, extension: str):
        shown = f'.{extension}' if extension else '(none)'
        super().__init__(
            f'Unsupported file type {shown}. Upload a .csv, .xlsx, .xls or .pdf file.'
        )
        self.extension = extension


class EmptyFileError(ScheduleImportError):
    """Raised when a CSV has no header line plus at least one data line."""


class MissingColumnsError(ScheduleImportError):
    """Raised when no task/start/end columns can be identified."""

    def __init__(self, message: str, columns=None):
        super().__init__(message)
        self.columns = list(columns or [])


class ParseInternalError(ScheduleImportError):
    """Raised when a reader or heuristic fails unexpectedly."""


class NoScheduleItemsError(ScheduleImportError):
    """Raised when nothing was extracted and placeholder synthesis is off."""


class PersistenceError(Exception):
    """Raised when the table API rejects or fails a request."""
