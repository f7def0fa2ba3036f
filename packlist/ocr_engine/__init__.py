"""
OCR Engine Module.

Rasterized-page OCR for image-only PDFs:
    - contrast stretch and two-sided threshold preprocessing
    - per-page Tesseract recognition with page confidence
    - sequential multi-page runs with progress aggregation
    - accuracy checks and best-page selection
"""

from .engine import OCREngine
from .preprocessing import ImagePreprocessor
from .tesseract_backend import TesseractBackend
from .ocr_result import OCRAccuracy, OCRLine, OCRProgress, OCRResult, OCRWord

__all__ = [
    'OCREngine',
    'ImagePreprocessor',
    'TesseractBackend',
    'OCRAccuracy',
    'OCRLine',
    'OCRProgress',
    'OCRResult',
    'OCRWord',
]
