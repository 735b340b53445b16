"""Spatially ordered text extraction from PDFs using pdfplumber."""

import io
from collections import defaultdict
from typing import Dict, List, Tuple

import pdfplumber

from .logging import get_logger


class PDFTextExtractor:
    """Rebuilds visual lines from positioned PDF word fragments."""

    def __init__(self, row_tolerance: float = 5.0, logger=None):
        """
        Args:
            row_tolerance: Vertical bucket size (PDF units) for fragments sharing a row
            logger: Structured logger receiving diagnostics
        """
        self.row_tolerance = row_tolerance
        self.log = logger or get_logger(__name__)

    def group_rows(self, fragments: List[Tuple[float, float, str]]) -> List[str]:
        """
        Merge fragments into lines.

        Args:
            fragments: (x, y, text) with y measured up from the page bottom

        Returns:
            Lines top to bottom, fragments left to right joined by one space
        """
        rows: Dict[float, List[Tuple[float, str]]] = defaultdict(list)
        for x, y, text in fragments:
            bucket = round(y / self.row_tolerance) * self.row_tolerance
            rows[bucket].append((round(x), text))

        lines = []
        for bucket in sorted(rows, reverse=True):
            items = sorted(rows[bucket], key=lambda item: item[0])
            lines.append(' '.join(text for _, text in items))
        return lines

    def page_fragments(self, page) -> List[Tuple[float, float, str]]:
        """Read a page's words with PDF-style (bottom-left origin) anchors."""
        fragments = []
        for word in page.extract_words(keep_blank_chars=False, use_text_flow=False):
            # pdfplumber measures from the top; the baseline sits at 'bottom'
            y = float(page.height) - float(word['bottom'])
            fragments.append((float(word['x0']), y, word['text']))
        return fragments

    def extract_text(self, data: bytes) -> str:
        """
        Extract newline-delimited text from PDF bytes.

        Args:
            data: Raw PDF bytes

        Returns:
            Extracted text (possibly empty)
        """
        lines: List[str] = []

        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page_number, page in enumerate(pdf.pages, 1):
                page_lines = self.group_rows(self.page_fragments(page))
                self.log.debug("pdf_page_extracted", page=page_number, lines=len(page_lines))
                lines.extend(page_lines)

        text = '\n'.join(lines)
        self.log.info("pdf_extraction_completed", lines=len(lines), chars=len(text))
        return text
