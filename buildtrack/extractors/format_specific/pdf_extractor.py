"""PDF schedule reader using PyMuPDF."""
import logging
from typing import List

import fitz  # PyMuPDF

from buildtrack.extractors.base_extractor import BaseExtractor

logger = logging.getLogger(__name__)


class PdfExtractor(BaseExtractor):
    """Extract the text of every page as a flat list of lines."""

    def __init__(self):
        super().__init__('pdf')
        self.page_count = 0

    def extract(self, content: bytes, **kwargs) -> List[str]:
        """
        Extract text lines from PDF bytes.

        Args:
            content: PDF file bytes

        Returns:
            Lines in reading order, pages concatenated

        Raises:
            Exception: If PyMuPDF cannot open the document
        """
        lines: List[str] = []

        doc = fitz.open(stream=content, filetype='pdf')
        try:
            self.page_count = doc.page_count
            for page_num, page in enumerate(doc, 1):
                page_text = page.get_text()
                if page_text.strip():
                    lines.extend(page_text.splitlines())
                else:
                    self.logger.debug(f'No text extracted from page {page_num}')
        finally:
            doc.close()

        self.log_extraction(len(lines))
        return lines
