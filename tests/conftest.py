"""
Shared fixtures for the packing-list test suite.

Text fixtures live in ``tests/fixtures``. PDF and OCR collaborators are
replaced with in-memory fakes so the suite runs without PDF files or a
Tesseract binary.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pytest
from PIL import Image

from config import ConfigurationManager
from packlist.inventory import InventoryLookup
from packlist.ocr_engine import OCREngine, OCRResult
from packlist.pipeline import PackingListPipeline

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakePDFProcessor:
    """PDF provider serving fixed page texts and blank page images."""

    def __init__(self, pages: Sequence[str], min_text_chars: int = 50) -> None:
        self.pages = list(pages)
        self.min_text_chars = min_text_chars

    def page_texts(self, data: bytes, filename: str = "document.pdf") -> List[str]:
        return list(self.pages)

    def has_native_text(self, texts: List[str]) -> bool:
        return any(len(text.strip()) > self.min_text_chars for text in texts)

    def page_count(self, data: bytes, filename: str = "document.pdf") -> int:
        return len(self.pages)

    def render_pages(self, data: bytes, scale: Optional[float] = None, filename: str = "document.pdf"):
        for _ in self.pages:
            yield Image.new("RGB", (60, 30), "white")


class FakeOCRBackend:
    """OCR backend returning canned text and confidence per page."""

    name = "fake"

    def __init__(self, texts: Sequence[str], confidences: Optional[Sequence[float]] = None) -> None:
        self.texts = list(texts)
        self.confidences = list(confidences) if confidences else [90.0] * len(self.texts)
        self.calls: List[int] = []

    def recognize(self, image, page_index: int = 0, on_progress: Optional[Callable] = None) -> OCRResult:
        self.calls.append(page_index)
        if on_progress:
            on_progress(0.0)
        result = OCRResult(
            page_index=page_index,
            text=self.texts[page_index],
            confidence=self.confidences[page_index],
            image_width=image.width,
            image_height=image.height,
            engine=self.name,
        )
        if on_progress:
            on_progress(1.0)
        return result


@pytest.fixture(autouse=True)
def reset_configuration():
    """Every test starts from the shipped settings.yaml."""
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("packlist")
    package_logger.handlers.clear()
    package_logger.propagate = True


@pytest.fixture
def load_fixture() -> Callable[[str], str]:
    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")
    return _load


@pytest.fixture
def empty_inventory() -> InventoryLookup:
    return InventoryLookup(mappings={}, thickness_display={}, inventory_ids=[])


@pytest.fixture
def make_pipeline(empty_inventory):
    """
    Factory for a pipeline over fake PDF pages.

    ``ocr_texts`` switches on a fake OCR engine whose pages are those
    texts; ``pages`` then only fixes the page count for rasterization.
    """
    def _make(
        pages: Sequence[str],
        ocr_texts: Optional[Sequence[str]] = None,
        confidences: Optional[Sequence[float]] = None,
        inventory: Optional[InventoryLookup] = None
    ) -> PackingListPipeline:
        pdf = FakePDFProcessor(pages)
        engine = None
        if ocr_texts is not None:
            engine = OCREngine(
                backend=FakeOCRBackend(ocr_texts, confidences),
                rasterizer=pdf,
            )
        return PackingListPipeline(
            inventory=inventory if inventory is not None else empty_inventory,
            pdf_processor=pdf,
            ocr_engine=engine,
        )
    return _make
