"""Text extraction dispatch for uploaded schedule documents."""

from typing import Optional

from .config import ParserSettings, get_settings
from .errors import ExtractionError
from .logging import get_logger
from .models import Upload
from .ocr_extractor import OCRExtractor
from .pdf_extractor import PDFTextExtractor
from .preprocessor import IMAGE_KIND, DocumentPreprocessor


class TextExtractor:
    """Turns an upload into a text blob via OCR (images) or PDF text."""

    def __init__(
        self,
        settings: Optional[ParserSettings] = None,
        ocr: Optional[OCRExtractor] = None,
        pdf: Optional[PDFTextExtractor] = None,
        preprocessor: Optional[DocumentPreprocessor] = None,
        logger=None,
    ):
        self.settings = settings or get_settings()
        self.log = logger or get_logger(__name__)
        self.preprocessor = preprocessor or DocumentPreprocessor(
            enhance=self.settings.preprocess_images, logger=self.log
        )
        self.ocr = ocr or OCRExtractor(
            use_gpu=self.settings.use_gpu, lang=self.settings.ocr_lang, logger=self.log
        )
        self.pdf = pdf or PDFTextExtractor(row_tolerance=self.settings.row_tolerance, logger=self.log)

    def extract(self, upload: Upload) -> str:
        """
        Extract text from one upload.

        An empty result is valid; only undecodable or unreadable files fail.

        Args:
            upload: Uploaded document

        Returns:
            Newline-delimited text

        Raises:
            ExtractionError: Tagged with the upload's file name
        """
        kind = self.preprocessor.document_kind(upload)
        self.log.info("extracting_text", file=upload.file_name, kind=kind)

        try:
            if kind == IMAGE_KIND:
                image = self.preprocessor.load_image(upload)
                text = self.ocr.extract_text(image)
            else:
                text = self.pdf.extract_text(upload.data)
        except ExtractionError:
            raise
        except Exception as e:
            self.log.error("extraction_failed", file=upload.file_name, error=str(e))
            raise ExtractionError(upload.file_name, f"Failed to extract text: {e}") from e

        self.log.info("text_extracted", file=upload.file_name, chars=len(text))
        return text
