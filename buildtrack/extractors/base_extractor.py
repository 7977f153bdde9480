"""Base extractor class for all schedule file formats."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
import logging

import numpy as np
import pandas as pd

from buildtrack.utils.helpers import is_blank

logger = logging.getLogger(__name__)

CellValue = Union[str, int, float, datetime, None]
RawRow = Dict[str, CellValue]


@dataclass
class RawTable:
    """Tabular reader output: column names in file order plus rows."""
    columns: List[str]
    rows: List[RawRow] = field(default_factory=list)


def normalize_cell(value: Any) -> CellValue:
    """
    Reduce a pandas/numpy cell to the RawRow value types.

    Blank cells become None, numpy scalars become Python numbers and
    strings are stripped.
    """
    if is_blank(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.generic):
        value = value.item()
        if is_blank(value):
            return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float, datetime)):
        return value
    return str(value).strip()


def dataframe_to_table(df: pd.DataFrame) -> RawTable:
    """Convert a DataFrame into a RawTable, dropping fully empty rows."""
    columns = [str(column).strip() for column in df.columns]
    rows = []
    for record in df.itertuples(index=False, name=None):
        row = {column: normalize_cell(value) for column, value in zip(columns, record)}
        if all(value is None for value in row.values()):
            continue
        rows.append(row)
    return RawTable(columns=columns, rows=rows)


class BaseExtractor(ABC):
    """
    Abstract base class for all format-specific readers.
    Defines the interface that all readers must implement.
    """

    def __init__(self, name: str):
        """
        Initialize the extractor.

        Args:
            name: Name of the extractor (for logging)
        """
        self.name = name
        self.logger = logging.getLogger(f'{__name__}.{name}')
        self.extracted_at: Optional[datetime] = None
        self.record_count = 0

    @abstractmethod
    def extract(self, content: bytes, **kwargs) -> Any:
        """
        Read raw records from file bytes.

        Returns:
            RawTable for tabular formats, list of text lines for documents
        """
        pass

    def log_extraction(self, record_count: int) -> None:
        """Log extraction completion details."""
        self.extracted_at = datetime.now()
        self.record_count = record_count
        self.logger.info(
            f'Extraction completed: {record_count} records extracted at '
            f'{self.extracted_at.isoformat()}'
        )

    def get_metadata(self) -> Dict[str, Any]:
        """Get metadata about the extraction."""
        return {
            'extractor': self.name,
            'extracted_at': self.extracted_at.isoformat() if self.extracted_at else None,
            'record_count': self.record_count,
        }
