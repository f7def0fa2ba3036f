"""
OCR Result Data Classes.

Standardized OCR output for one rasterized page, the progress events
emitted while a document is recognized, and the accuracy summary used to
decide whether to warn the caller.

Classes:
    OCRWord: Individual word with bounding box
    OCRLine: Line of text containing multiple words
    OCRResult: Recognized text and confidence for one page
    OCRProgress: Progress event for a multi-page job
    OCRAccuracy: Aggregate confidence check over all pages
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class OCRWord:
    """
    Represents a single word extracted by OCR.

    Attributes:
        text: The recognized text content
        bbox: Bounding box as (x1, y1, x2, y2) in pixels
        confidence: OCR confidence score (0-100)
        line_key: (block, paragraph, line) numbers assigned by the engine

    Example:
        >>> word = OCRWord(text="001837-01", bbox=(100, 50, 260, 80), confidence=91.0)
    """
    text: str
    bbox: Tuple[int, int, int, int]
    confidence: float = 0.0
    line_key: Tuple[int, int, int] = (0, 0, 0)

    @property
    def x1(self) -> int:
        return self.bbox[0]


@dataclass
class OCRLine:
    """
    A line of text containing multiple words, ordered left to right.

    Example:
        >>> line = OCRLine(words=[word1, word2, word3])
        >>> line.text
        '1 9.53*1525MM*3050MM 6 001837-01'
    """
    words: List[OCRWord] = field(default_factory=list)

    @property
    def text(self) -> str:
        return ' '.join(word.text for word in self.words)


@dataclass
class OCRResult:
    """
    OCR output for a single rasterized page.

    Attributes:
        page_index: Zero-based page position in the document
        text: Recognized text, one line per OCR line
        confidence: Engine confidence for the page (0-100)
        lines: Recognized lines with word boxes, when the backend provides them
        image_width: Width of the rasterized page in pixels
        image_height: Height of the rasterized page in pixels
        engine: OCR engine name
        processing_time: Time taken for OCR in seconds

    Example:
        >>> result = OCRResult(page_index=0, text="PACKING LIST ...", confidence=86.4)
        >>> result.page_number
        1
    """
    page_index: int = 0
    text: str = ""
    confidence: float = 0.0
    lines: List[OCRLine] = field(default_factory=list)
    image_width: int = 0
    image_height: int = 0
    engine: str = "unknown"
    processing_time: float = 0.0

    @property
    def page_number(self) -> int:
        return self.page_index + 1

    @property
    def word_count(self) -> int:
        return sum(len(line.words) for line in self.lines)

    def has_content(self, min_chars: int) -> bool:
        """Whether the page holds more than ``min_chars`` non-blank characters."""
        return len(self.text.strip()) > min_chars

    def __repr__(self) -> str:
        return (
            f"OCRResult(page={self.page_number}, chars={len(self.text)}, "
            f"confidence={self.confidence:.1f}%)"
        )


@dataclass
class OCRProgress:
    """
    Progress event for a multi-page OCR job.

    Attributes:
        status: Human-readable stage description
        progress: Overall completion, 0-100
        page: One-based page being processed, if any
        total_pages: Number of pages in the job
    """
    status: str
    progress: float
    page: Optional[int] = None
    total_pages: Optional[int] = None


@dataclass
class OCRAccuracy:
    """
    Confidence summary across all OCR pages.

    Attributes:
        is_acceptable: Average confidence reaches the threshold
        average_confidence: Mean page confidence (0-100)
        low_confidence_pages: One-based numbers of pages below the threshold
        threshold: Threshold used for the check
    """
    is_acceptable: bool
    average_confidence: float
    low_confidence_pages: List[int] = field(default_factory=list)
    threshold: float = 70.0

    def warning(self) -> Optional[str]:
        """
        Warning to attach to the parse result, or None.

        An unacceptable average wins over per-page warnings.
        """
        if not self.is_acceptable:
            return (
                f"Low OCR confidence ({round(self.average_confidence)}%). "
                f"Please verify the extracted data."
            )
        if self.low_confidence_pages:
            pages = ', '.join(str(p) for p in self.low_confidence_pages)
            return f"Pages {pages} had low OCR confidence. Please verify."
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_acceptable': self.is_acceptable,
            'average_confidence': round(self.average_confidence, 1),
            'low_confidence_pages': list(self.low_confidence_pages),
            'threshold': self.threshold,
        }
