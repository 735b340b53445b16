"""Upload classification and image preprocessing."""

from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from .errors import ExtractionError, UnsupportedFileError
from .logging import get_logger
from .models import Upload
from .utils import SUPPORTED_IMAGE_EXTENSIONS, guess_mime_type

IMAGE_KIND = 'image'
PDF_KIND = 'pdf'


class DocumentPreprocessor:
    """Classifies uploads and prepares images for OCR."""

    def __init__(self, enhance: bool = True, max_dimension: int = 3000, logger=None):
        """
        Initialize the document preprocessor.

        Args:
            enhance: Apply denoising and contrast enhancement before OCR
            max_dimension: Images larger than this on either side are scaled down
            logger: Structured logger receiving diagnostics
        """
        self.enhance = enhance
        self.max_dimension = max_dimension
        self.log = logger or get_logger(__name__)

    @staticmethod
    def document_kind(upload: Upload) -> str:
        """
        Decide whether an upload is an image or a PDF.

        The declared MIME type wins; the file name is used when none is declared.

        Raises:
            UnsupportedFileError: If the upload is neither
        """
        mime_type = (upload.mime_type or guess_mime_type(upload.file_name) or '').lower()

        if mime_type.startswith('image/'):
            return IMAGE_KIND
        if mime_type == 'application/pdf':
            return PDF_KIND
        if not mime_type and Path(upload.file_name).suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS:
            return IMAGE_KIND

        raise UnsupportedFileError(upload.file_name, f"Unsupported file type: {mime_type or 'unknown'}")

    def load_image(self, upload: Upload) -> np.ndarray:
        """
        Decode image bytes and preprocess them.

        Args:
            upload: Image upload

        Returns:
            Image as numpy array (BGR format, which PaddleOCR expects)

        Raises:
            ExtractionError: If the bytes are not a decodable image
        """
        buffer = np.frombuffer(upload.data, dtype=np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None

        if image is None:
            raise ExtractionError(upload.file_name, "Failed to decode image")

        self.log.debug("image_loaded", file=upload.file_name, shape=image.shape)

        image = self.resize_for_ocr(image, self.max_dimension)
        if self.enhance:
            image = self._preprocess_image(image)

        return image

    def _preprocess_image(self, image: np.ndarray) -> np.ndarray:
        """
        Apply preprocessing to improve OCR accuracy.

        Args:
            image: Input image as numpy array (BGR format from OpenCV)

        Returns:
            Preprocessed image (BGR format)
        """
        denoised = cv2.fastNlMeansDenoisingColored(image, None, 10, 10, 7, 21)

        # Enhance contrast using CLAHE on LAB color space
        lab = cv2.cvtColor(denoised, cv2.COLOR_BGR2LAB)
        l, a, b = cv2.split(lab)
        clahe = cv2.createCLAHE(clipLimit=3.0, tileGridSize=(8, 8))
        l = clahe.apply(l)
        enhanced = cv2.merge([l, a, b])
        return cv2.cvtColor(enhanced, cv2.COLOR_LAB2BGR)

    @staticmethod
    def resize_for_ocr(image: np.ndarray, max_dimension: Optional[int] = 3000) -> np.ndarray:
        """
        Resize image if too large, maintaining aspect ratio.

        Args:
            image: Input image
            max_dimension: Maximum width or height

        Returns:
            Resized image
        """
        h, w = image.shape[:2]

        if max_dimension and max(h, w) > max_dimension:
            scale = max_dimension / max(h, w)
            return cv2.resize(image, (int(w * scale), int(h * scale)), interpolation=cv2.INTER_LANCZOS4)

        return image
