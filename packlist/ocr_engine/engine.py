"""
Main OCR Engine Module.

Runs OCR over every page of a PDF, strictly in page order: page N+1 is
not rendered until page N has been recognized. Rasterization reuses one
document handle, and progress is reported as
(page_index + within_page_fraction) / total_pages * 100.

Usage:
    from packlist.ocr_engine import OCREngine

    engine = OCREngine()
    results = engine.run_ocr(pdf_bytes, on_progress=print)
    accuracy = engine.check_accuracy(results)
    if accuracy.warning():
        print(accuracy.warning())
"""

from typing import Callable, List, Optional

from config import get_config
from packlist.input_handler.pdf_processor import PDFProcessor
from packlist.utils.logger import get_logger
from .ocr_result import OCRAccuracy, OCRProgress, OCRResult
from .preprocessing import ImagePreprocessor
from .tesseract_backend import TesseractBackend

# Initialize module logger
logger = get_logger(__name__)

ProgressCallback = Callable[[OCRProgress], None]


class OCREngine:
    """
    Per-page sequential OCR with preprocessing and accuracy checks.

    Every collaborator can be injected, so tests can run without a
    Tesseract binary.

    Attributes:
        backend: Recognizer with ``recognize(image, page_index, on_progress)``.
        preprocessor: Image preprocessor applied before recognition.
        rasterizer: PDF renderer with ``page_count`` and ``render_pages``.
        confidence_threshold: Minimum acceptable average confidence.
        min_content_chars: Characters a page needs to count as content.
        render_scale: Rasterization scale factor.

    Example:
        >>> engine = OCREngine()
        >>> results = engine.run_ocr(pdf_bytes)
        >>> engine.best_page(results).page_number
        2
    """

    def __init__(
        self,
        backend: Optional[object] = None,
        preprocessor: Optional[ImagePreprocessor] = None,
        rasterizer: Optional[PDFProcessor] = None,
        confidence_threshold: Optional[float] = None,
        min_content_chars: Optional[int] = None,
        render_scale: Optional[float] = None
    ) -> None:
        self.backend = backend if backend is not None else self._initialize_backend()
        self.preprocessor = preprocessor or ImagePreprocessor()
        self.rasterizer = rasterizer or PDFProcessor()
        self.confidence_threshold = (
            confidence_threshold if confidence_threshold is not None
            else get_config("ocr.confidence_threshold", 70)
        )
        self.min_content_chars = (
            min_content_chars if min_content_chars is not None
            else get_config("ocr.min_content_chars", 100)
        )
        self.render_scale = (
            render_scale if render_scale is not None
            else get_config("input.pdf.render_scale", 3.0)
        )

        logger.info(
            f"OCR Engine initialized (backend: {getattr(self.backend, 'name', type(self.backend).__name__)}, "
            f"threshold: {self.confidence_threshold})"
        )

    @staticmethod
    def _initialize_backend() -> TesseractBackend:
        engine_name = get_config("ocr.engine", "tesseract")
        if engine_name not in ("tesseract", "pytesseract"):
            logger.warning(f"Unknown OCR engine '{engine_name}', falling back to tesseract")
        return TesseractBackend()

    def run_ocr(self, data: bytes, on_progress: Optional[ProgressCallback] = None) -> List[OCRResult]:
        """
        Rasterize, preprocess and recognize every page in order.

        Args:
            data: PDF file bytes.
            on_progress: Receives OCRProgress events, progress 0-100.

        Returns:
            One OCRResult per page, in page order.

        Raises:
            CorruptedFileError: If the PDF cannot be opened.
            OCRProcessingError: If recognition fails on a page.
        """
        def emit(status: str, progress: float, page: Optional[int] = None) -> None:
            if on_progress:
                on_progress(OCRProgress(status, min(100.0, progress), page, total))

        total = self.rasterizer.page_count(data)
        results: List[OCRResult] = []
        emit("Starting OCR...", 0.0)

        for index, image in enumerate(self.rasterizer.render_pages(data, self.render_scale)):
            page = index + 1
            emit(f"Running OCR on page {page}/{total}...", index / total * 100, page)

            processed = self.preprocessor.preprocess(image)
            result = self.backend.recognize(
                processed,
                page_index=index,
                on_progress=lambda fraction: emit(
                    f"OCR page {page}/{total}: {round(fraction * 100)}%",
                    (index + fraction) / total * 100,
                    page,
                ),
            )
            results.append(result)

        emit("OCR complete", 100.0)
        logger.info(f"OCR finished: {len(results)} pages")
        return results

    def check_accuracy(self, results: List[OCRResult]) -> OCRAccuracy:
        """
        Average page confidence against the threshold.

        An empty result list is never acceptable.
        """
        if not results:
            return OCRAccuracy(False, 0.0, [], self.confidence_threshold)

        average = sum(r.confidence for r in results) / len(results)
        low_pages = [r.page_number for r in results if r.confidence < self.confidence_threshold]
        accuracy = OCRAccuracy(
            is_acceptable=average >= self.confidence_threshold,
            average_confidence=average,
            low_confidence_pages=low_pages,
            threshold=self.confidence_threshold,
        )
        if not accuracy.is_acceptable:
            logger.warning(f"Low OCR confidence: {average:.1f}%")
        elif low_pages:
            logger.warning(f"Low OCR confidence on pages {low_pages}")
        return accuracy

    def best_page(self, results: List[OCRResult]) -> Optional[OCRResult]:
        """
        Most confident page with real content.

        Falls back to the first page when no page has more than
        ``min_content_chars`` characters.
        """
        with_content = [r for r in results if r.has_content(self.min_content_chars)]
        if not with_content:
            return results[0] if results else None
        return max(with_content, key=lambda r: r.confidence)
