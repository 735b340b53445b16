"""Tests for OCR, PDF and upload text extraction."""

import asyncio
import sys
import threading
import time
import types

import cv2
import numpy as np
import pytest

from freeslot_engine import pdf_extractor
from freeslot_engine.config import ParserSettings
from freeslot_engine.errors import ExtractionError, UnsupportedFileError
from freeslot_engine.main import analyze_documents_async
from freeslot_engine.models import Upload
from freeslot_engine.ocr_extractor import OCRExtractor
from freeslot_engine.pdf_extractor import PDFTextExtractor
from freeslot_engine.preprocessor import IMAGE_KIND, PDF_KIND, DocumentPreprocessor
from freeslot_engine.text_extractor import TextExtractor


def box(x, y, w=40, h=10):
    return [[x, y], [x + w, y], [x + w, y + h], [x, y + h]]


class LegacyEngine:
    """Mimics PaddleOCR 2.x output: [[ [bbox, (text, score)], ... ]]."""

    def __init__(self, items):
        self.items = items
        self.calls = 0

    def ocr(self, image):
        self.calls += 1
        return [[[box(x, y), (text, 0.9)] for text, x, y in self.items]]


class PipelineEngine:
    """Mimics PaddleOCR 3.x output: [{'rec_texts': ..., 'rec_polys': ...}]."""

    def __init__(self, items):
        self.items = items

    def ocr(self, image):
        return [{
            'rec_texts': [text for text, _, _ in self.items],
            'rec_scores': [0.8 for _ in self.items],
            'rec_boxes': np.array([[x, y, x + 40, y + 10] for _, x, y in self.items]),
        }]


class FakePage:
    def __init__(self, words, height=800):
        self.words = words
        self.height = height

    def extract_words(self, **kwargs):
        return self.words


class FakePDF:
    def __init__(self, pages):
        self.pages = pages

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def word(text, x0, top):
    return {'text': text, 'x0': x0, 'top': top, 'bottom': top + 10}


IMAGE = np.zeros((200, 300, 3), dtype=np.uint8)

OCR_ITEMS = [
    ("Tuesday", 120, 11),
    ("Monday", 60, 10),
    ("Time", 0, 12),
    ("CSE421", 60, 42),
    ("8:00 AM", 0, 40),
]


@pytest.mark.parametrize("engine_cls", [LegacyEngine, PipelineEngine])
def test_ocr_lines_in_reading_order(engine_cls, capture):
    ocr = OCRExtractor(engine=engine_cls(OCR_ITEMS), logger=capture)

    assert ocr.extract_text(IMAGE) == "Time Monday Tuesday\n8:00 AM CSE421"


def test_ocr_empty_result(capture):
    ocr = OCRExtractor(engine=LegacyEngine([]), logger=capture)

    assert ocr.extract_text(IMAGE) == ""


def test_ocr_rejects_empty_image(capture):
    ocr = OCRExtractor(engine=LegacyEngine(OCR_ITEMS), logger=capture)

    with pytest.raises(ValueError):
        ocr.extract_text(np.zeros((0, 0, 3), dtype=np.uint8))


def test_confidence_score():
    assert OCRExtractor.calculate_confidence_score([]) == 0.0
    assert OCRExtractor.calculate_confidence_score([{'confidence': 0.5}, {'confidence': 1.0}]) == 0.75


def test_pdf_rows_group_by_tolerance(capture):
    extractor = PDFTextExtractor(row_tolerance=5, logger=capture)

    lines = extractor.group_rows([
        (200, 700.4, "Tuesday"),
        (100, 699.0, "Monday"),
        (10, 650.0, "8:00"),
        (40, 651.0, "AM"),
    ])

    assert lines == ["Monday Tuesday", "8:00 AM"]


def test_pdf_extract_text_orders_pages_and_rows(monkeypatch, capture):
    pages = [
        FakePage([word("CSE421", 80, 100), word("Monday", 80, 50), word("Time", 10, 51)]),
        FakePage([word("page", 10, 20), word("two", 60, 20)]),
    ]
    opened = []

    def fake_open(stream):
        opened.append(stream.read())
        return FakePDF(pages)

    monkeypatch.setattr(pdf_extractor.pdfplumber, "open", fake_open)

    text = PDFTextExtractor(logger=capture).extract_text(b"%PDF-fake")

    assert opened == [b"%PDF-fake"]
    assert text == "Time Monday\nCSE421\npage two"


def test_pdf_without_words_is_empty(monkeypatch, capture):
    monkeypatch.setattr(pdf_extractor.pdfplumber, "open", lambda stream: FakePDF([FakePage([])]))

    assert PDFTextExtractor(logger=capture).extract_text(b"%PDF-fake") == ""


@pytest.mark.parametrize("upload, kind", [
    (Upload("a.png", b"", "image/png"), IMAGE_KIND),
    (Upload("a.bin", b"", "image/jpeg"), IMAGE_KIND),
    (Upload("a.pdf", b""), PDF_KIND),
    (Upload("scan.JPG", b""), IMAGE_KIND),
])
def test_document_kind(upload, kind):
    assert DocumentPreprocessor.document_kind(upload) == kind


def test_document_kind_unsupported():
    with pytest.raises(UnsupportedFileError) as exc:
        DocumentPreprocessor.document_kind(Upload("notes.txt", b"hi", "text/plain"))
    assert exc.value.file_name == "notes.txt"


def test_resize_for_ocr():
    big = np.zeros((100, 400, 3), dtype=np.uint8)

    assert DocumentPreprocessor.resize_for_ocr(big, 200).shape[:2] == (50, 200)
    assert DocumentPreprocessor.resize_for_ocr(IMAGE, 3000) is IMAGE


@pytest.fixture
def plain_settings():
    return ParserSettings(_env_file=None, preprocess_images=False)


def test_text_extractor_image(plain_settings, capture):
    ok, encoded = cv2.imencode(".png", IMAGE)
    assert ok
    engine = LegacyEngine(OCR_ITEMS)
    extractor = TextExtractor(
        settings=plain_settings,
        ocr=OCRExtractor(engine=engine, logger=capture),
        logger=capture,
    )

    text = extractor.extract(Upload("week.png", encoded.tobytes(), "image/png"))

    assert text.splitlines()[0] == "Time Monday Tuesday"
    assert engine.calls == 1


def test_text_extractor_corrupt_image(plain_settings, capture):
    extractor = TextExtractor(
        settings=plain_settings,
        ocr=OCRExtractor(engine=LegacyEngine(OCR_ITEMS), logger=capture),
        logger=capture,
    )

    with pytest.raises(ExtractionError) as exc:
        extractor.extract(Upload("broken.png", b"not an image", "image/png"))
    assert exc.value.file_name == "broken.png"


def test_text_extractor_corrupt_pdf_is_tagged(monkeypatch, plain_settings, capture, events):
    def fail(stream):
        raise RuntimeError("bad xref")

    monkeypatch.setattr(pdf_extractor.pdfplumber, "open", fail)
    extractor = TextExtractor(settings=plain_settings, logger=capture)

    with pytest.raises(ExtractionError) as exc:
        extractor.extract(Upload("week.pdf", b"%PDF", "application/pdf"))

    assert exc.value.file_name == "week.pdf"
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert "extraction_failed" in events(capture)


class SlowPaddleOCR:
    """Stands in for paddleocr.PaddleOCR, recording construction and overlap."""

    inits = 0
    active = 0
    max_active = 0
    guard = threading.Lock()

    def __init__(self, **kwargs):
        type(self).inits += 1
        time.sleep(0.05)

    def ocr(self, image):
        cls = type(self)
        with cls.guard:
            cls.active += 1
            cls.max_active = max(cls.max_active, cls.active)
        time.sleep(0.05)
        with cls.guard:
            cls.active -= 1
        return [[[box(x, y), (text, 0.9)] for text, x, y in OCR_ITEMS]]


def test_shared_ocr_engine_is_built_once_and_used_serially(monkeypatch, plain_settings, capture):
    monkeypatch.setitem(sys.modules, "paddleocr", types.SimpleNamespace(PaddleOCR=SlowPaddleOCR))
    ok, encoded = cv2.imencode(".png", IMAGE)
    assert ok
    uploads = [Upload(f"week{i}.png", encoded.tobytes(), "image/png") for i in range(3)]
    extractor = TextExtractor(settings=plain_settings, logger=capture)

    result = asyncio.run(
        analyze_documents_async(uploads, settings=plain_settings, extractor=extractor, logger=capture)
    )

    assert [source.name for source in result.sources] == ["week0.png", "week1.png", "week2.png"]
    assert SlowPaddleOCR.inits == 1
    assert SlowPaddleOCR.max_active == 1
