"""Reader for Excel workbooks (.xlsx and .xls)."""
import io
import logging

import pandas as pd

from buildtrack.extractors.base_extractor import BaseExtractor, RawTable, dataframe_to_table

logger = logging.getLogger(__name__)

ENGINES = {
    'xlsx': 'openpyxl',
    'xls': 'xlrd',
}


class SpreadsheetExtractor(BaseExtractor):
    """
    Read the first worksheet of a workbook into a RawTable.

    The first row is the header. Date-formatted cells arrive as datetimes,
    unformatted date cells stay numeric (serial dates) and are decoded later.
    """

    def __init__(self, file_type: str = 'xlsx'):
        """
        Initialize spreadsheet extractor.

        Args:
            file_type: 'xlsx' or 'xls', selects the pandas engine
        """
        super().__init__('spreadsheet')
        if file_type not in ENGINES:
            raise ValueError(f'Unsupported spreadsheet type: {file_type}')
        self.file_type = file_type

    def extract(self, content: bytes, **kwargs) -> RawTable:
        """
        Read workbook bytes.

        Args:
            content: Workbook file bytes

        Returns:
            RawTable for the first sheet
        """
        df = pd.read_excel(
            io.BytesIO(content),
            sheet_name=0,
            engine=ENGINES[self.file_type],
        )
        table = dataframe_to_table(df)
        self.log_extraction(len(table.rows))
        return table
