"""OCR extraction using PaddleOCR."""

import threading
from typing import Any, Dict, List, Optional

import numpy as np

from .logging import get_logger
from .utils import sanitize_text


class OCRExtractor:
    """Handles OCR extraction from images using PaddleOCR."""

    def __init__(self, use_gpu: bool = False, lang: str = 'en', engine=None, logger=None):
        """
        Initialize OCR extractor.

        Args:
            use_gpu: Whether to use GPU acceleration (note: gpu support requires paddlepaddle-gpu)
            lang: Language code for OCR (default: 'en')
            engine: Object with an ``ocr(image)`` method; a PaddleOCR instance is
                created on first use when omitted
            logger: Structured logger receiving diagnostics
        """
        self.use_gpu = use_gpu
        self.lang = lang
        self._engine = engine
        # One engine per extractor, shared by worker threads; PaddleOCR is not thread-safe
        self._lock = threading.RLock()
        self.log = logger or get_logger(__name__)

    @property
    def engine(self):
        with self._lock:
            if self._engine is None:
                from paddleocr import PaddleOCR

                self._engine = PaddleOCR(
                    use_angle_cls=True,  # Enable angle classification for rotated text
                    lang=self.lang,
                    det_db_box_thresh=0.3,  # Lower threshold for better detection of faint text
                    det_db_unclip_ratio=2.0,  # Expand detected boxes slightly
                )
            return self._engine

    def extract_items(self, image: np.ndarray) -> List[Dict[str, Any]]:
        """
        Extract positioned text items from an image.

        Args:
            image: Input image as numpy array (BGR format from OpenCV)

        Returns:
            List of dictionaries containing:
                - text: Extracted text
                - confidence: Confidence score (0-1)
                - center: Pixel center (x, y)
                - height: Box height in pixels
        """
        if image is None or not isinstance(image, np.ndarray) or image.size == 0:
            raise ValueError("Image is empty or not a numpy array")

        with self._lock:
            result = self.engine.ocr(image)
        if not result or result[0] is None:
            return []

        # PaddleOCR has had API changes: older versions return a list of
        # (bbox, (text, confidence)) tuples. Newer pipeline returns a single
        # dict inside a list with keys like 'rec_texts', 'rec_polys',
        # 'rec_scores' or 'rec_boxes'. Handle both.
        first = result[0]
        if isinstance(first, dict) and 'rec_texts' in first:
            items = self._parse_pipeline_result(first)
        else:
            items = self._parse_legacy_result(first if isinstance(first, list) else result)

        # Sort by vertical position (top to bottom), then horizontal (left to right)
        items.sort(key=lambda x: (x['center'][1], x['center'][0]))
        return items

    def _parse_pipeline_result(self, page: Dict[str, Any]) -> List[Dict[str, Any]]:
        rec_texts = page.get('rec_texts', [])
        rec_scores = page.get('rec_scores', [])
        rec_polys = page.get('rec_polys')
        if rec_polys is None:
            rec_polys = page.get('rec_boxes')

        items = []
        for idx, text in enumerate(rec_texts):
            text = str(text).strip()
            if not text:
                continue

            confidence = float(rec_scores[idx]) if idx < len(rec_scores) else 0.0
            bbox = None
            if rec_polys is not None and idx < len(rec_polys):
                bbox = self._to_points(rec_polys[idx])

            items.append(self._make_item(text, confidence, bbox))

        return items

    def _parse_legacy_result(self, lines) -> List[Dict[str, Any]]:
        items = []
        for line in lines:
            try:
                bbox, (text, confidence) = line[0], line[1]
            except (IndexError, ValueError, TypeError) as line_error:
                self.log.debug("ocr_item_skipped", error=str(line_error))
                continue

            text = str(text).strip() if text else ""
            if not text:
                continue

            items.append(self._make_item(text, float(confidence), self._to_points(bbox)))

        return items

    @staticmethod
    def _to_points(poly) -> Optional[List[List[float]]]:
        """Convert a 4-point polygon or an (x1, y1, x2, y2) box to points."""
        try:
            flat = np.asarray(poly, dtype=float)
        except (TypeError, ValueError):
            return None

        if flat.shape == (4,):
            x1, y1, x2, y2 = flat.tolist()
            return [[x1, y1], [x2, y1], [x2, y2], [x1, y2]]
        if flat.ndim == 2 and flat.shape[0] >= 4 and flat.shape[1] >= 2:
            return [[float(p[0]), float(p[1])] for p in flat[:4]]
        return None

    @staticmethod
    def _make_item(text: str, confidence: float, bbox) -> Dict[str, Any]:
        if bbox:
            xs = [p[0] for p in bbox]
            ys = [p[1] for p in bbox]
            center = (sum(xs) / 4, sum(ys) / 4)
            height = max(ys) - min(ys)
        else:
            center, height = (0.0, 0.0), 0.0

        return {
            'text': text,
            'confidence': confidence,
            'center': center,
            'height': height,
        }

    def group_text_by_rows(
        self,
        text_data: List[Dict[str, Any]],
        row_threshold: float = 0.5,
    ) -> List[List[Dict[str, Any]]]:
        """
        Group text elements into rows based on vertical position.

        Args:
            text_data: Items from extract_items(), sorted top to bottom
            row_threshold: Maximum vertical distance, as a fraction of the
                current row's box height, to be in the same row

        Returns:
            List of rows, each sorted left to right
        """
        if not text_data:
            return []

        rows = []
        current_row = [text_data[0]]
        current_y = text_data[0]['center'][1]
        current_h = max(text_data[0]['height'], 1.0)

        for item in text_data[1:]:
            y = item['center'][1]

            if abs(y - current_y) <= current_h * row_threshold:
                current_row.append(item)
            else:
                current_row.sort(key=lambda x: x['center'][0])
                rows.append(current_row)

                current_row = [item]
                current_y = y
                current_h = max(item['height'], 1.0)

        current_row.sort(key=lambda x: x['center'][0])
        rows.append(current_row)

        return rows

    def extract_text(self, image: np.ndarray) -> str:
        """
        Run OCR and return newline-delimited text in reading order.

        Args:
            image: Input image as numpy array

        Returns:
            Extracted text (possibly empty)
        """
        items = self.extract_items(image)
        rows = self.group_text_by_rows(items)
        lines = [sanitize_text(' '.join(item['text'] for item in row)) for row in rows]

        self.log.info(
            "ocr_completed",
            items=len(items),
            lines=len(lines),
            avg_confidence=round(self.calculate_confidence_score(items), 3),
        )
        return '\n'.join(line for line in lines if line)

    @staticmethod
    def calculate_confidence_score(text_data: List[Dict[str, Any]]) -> float:
        """
        Calculate average confidence score for extracted text.

        Args:
            text_data: Extracted text data

        Returns:
            Average confidence score (0-1)
        """
        if not text_data:
            return 0.0

        total = sum(item['confidence'] for item in text_data)
        return total / len(text_data)
