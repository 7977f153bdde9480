"""Reader for comma-separated schedule exports."""
import io
import logging

import pandas as pd

from buildtrack.extractors.base_extractor import BaseExtractor, RawTable, dataframe_to_table
from buildtrack.importer.errors import EmptyFileError

logger = logging.getLogger(__name__)


class DelimitedExtractor(BaseExtractor):
    """
    Read CSV bytes into a RawTable.

    All cells are kept as text; date coercion happens in the heuristics.
    A file needs a header line and at least one data line.
    """

    def __init__(self, encoding: str = 'utf-8-sig'):
        super().__init__('delimited')
        self.encoding = encoding

    def extract(self, content: bytes, **kwargs) -> RawTable:
        """
        Read CSV bytes.

        Raises:
            EmptyFileError: If the file has fewer than two non-blank lines
        """
        text = content.decode(self.encoding, errors='replace')
        lines = [line for line in text.splitlines() if line.strip()]
        if len(lines) < 2:
            raise EmptyFileError(
                'The CSV file is empty or has no data rows below the header.'
            )

        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
        table = dataframe_to_table(df)
        self.log_extraction(len(table.rows))
        return table
