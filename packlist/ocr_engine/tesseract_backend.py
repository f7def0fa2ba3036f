"""
Tesseract OCR Backend.

Recognizes one preprocessed page image with pytesseract and returns the
page text (one line per Tesseract line) with the mean word confidence.

Requirements:
    - Tesseract OCR installed on the system
    - pytesseract Python package
"""

import time
from typing import Callable, Dict, List, Optional, Tuple

import pytesseract
from PIL import Image

from config import get_config
from packlist.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError
from packlist.utils.logger import get_logger
from .ocr_result import OCRLine, OCRResult, OCRWord

# Initialize module logger
logger = get_logger(__name__)

# Receives the fraction (0.0-1.0) of the current page already recognized
PageProgressCallback = Callable[[float], None]


class TesseractBackend:
    """
    Tesseract OCR backend implementation.

    Tesseract must be installed on the system for this to work.

    Attributes:
        language: Tesseract language code (e.g., "eng")
        psm: Page Segmentation Mode (1-13)
        oem: OCR Engine Mode (0-3)

    Example:
        >>> backend = TesseractBackend()
        >>> result = backend.recognize(image, page_index=0)
        >>> print(f"{result.confidence:.1f}%")
    """

    name = "tesseract"

    def __init__(
        self,
        language: Optional[str] = None,
        psm: Optional[int] = None,
        oem: Optional[int] = None
    ) -> None:
        self.language = language or get_config("ocr.language", "eng")
        self.psm = psm if psm is not None else get_config("ocr.tesseract.psm", 6)
        self.oem = oem if oem is not None else get_config("ocr.tesseract.oem", 3)
        self.extra_config = get_config("ocr.tesseract.config", "")

        self._check_dependencies()

        logger.debug(
            f"TesseractBackend initialized (lang={self.language}, "
            f"psm={self.psm}, oem={self.oem})"
        )

    def _check_dependencies(self) -> None:
        """
        Check if the Tesseract binary is reachable.

        Raises:
            OCREngineNotAvailableError: If Tesseract is not installed.
        """
        try:
            version = pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError) as e:
            raise OCREngineNotAvailableError(
                "Tesseract OCR", f"not installed or not in PATH: {e}"
            ) from e
        logger.info(f"Tesseract version: {version}")

    def _build_config(self) -> str:
        config_parts = [f"--psm {self.psm}", f"--oem {self.oem}"]
        if self.extra_config:
            config_parts.append(self.extra_config)
        return ' '.join(config_parts)

    def recognize(
        self,
        image: Image.Image,
        page_index: int = 0,
        on_progress: Optional[PageProgressCallback] = None
    ) -> OCRResult:
        """
        Recognize text on one page image.

        Args:
            image: Preprocessed page image.
            page_index: Zero-based page position, recorded on the result.
            on_progress: Called with 0.0 before and 1.0 after recognition.

        Returns:
            OCRResult with text, lines and page confidence.

        Raises:
            OCRProcessingError: If Tesseract fails on this page.
        """
        start_time = time.time()
        if on_progress:
            on_progress(0.0)

        config = self._build_config()
        logger.debug(f"Running Tesseract OCR on page {page_index + 1} (config: {config})")
        try:
            data = pytesseract.image_to_data(
                image,
                lang=self.language,
                config=config,
                output_type=pytesseract.Output.DICT
            )
        except (pytesseract.TesseractError, RuntimeError) as e:
            logger.error(f"OCR processing failed on page {page_index + 1}: {e}")
            raise OCRProcessingError(page_index, str(e)) from e

        words = self._parse_tesseract_output(data)
        lines = self._group_into_lines(words)
        confidence = sum(w.confidence for w in words) / len(words) if words else 0.0
        processing_time = time.time() - start_time

        if on_progress:
            on_progress(1.0)

        result = OCRResult(
            page_index=page_index,
            text='\n'.join(line.text for line in lines),
            confidence=confidence,
            lines=lines,
            image_width=image.width,
            image_height=image.height,
            engine=self.name,
            processing_time=processing_time,
        )
        logger.info(
            f"OCR page {page_index + 1}: {len(words)} words, {len(lines)} lines, "
            f"confidence {confidence:.1f}% ({processing_time:.2f}s)"
        )
        return result

    def _parse_tesseract_output(self, data: Dict[str, List]) -> List[OCRWord]:
        """
        Parse Tesseract output into OCRWord objects.

        Entries with empty text or negative confidence (layout rows) are
        skipped.
        """
        words = []
        for i in range(len(data['text'])):
            text = (data['text'][i] or '').strip()
            if not text:
                continue

            conf = float(data['conf'][i])
            if conf < 0:
                continue

            x, y = data['left'][i], data['top'][i]
            w, h = data['width'][i], data['height'][i]
            words.append(OCRWord(
                text=text,
                bbox=(x, y, x + w, y + h),
                confidence=conf,
                line_key=(data['block_num'][i], data['par_num'][i], data['line_num'][i]),
            ))
        return words

    def _group_into_lines(self, words: List[OCRWord]) -> List[OCRLine]:
        """Group words by Tesseract's (block, paragraph, line) numbers in reading order."""
        line_groups: Dict[Tuple[int, int, int], List[OCRWord]] = {}
        for word in words:
            line_groups.setdefault(word.line_key, []).append(word)

        lines = []
        for line_words in line_groups.values():
            line_words.sort(key=lambda w: w.x1)
            lines.append(OCRLine(words=line_words))
        return lines
