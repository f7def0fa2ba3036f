"""
PDF Processor Module.

Handles PDF input:
    - Native per-page text with pdfplumber
    - Page rasterization with PyMuPDF for OCR
    - Page counting

Rasterization walks one open document handle page by page, so callers
receive each image before the next page is rendered.
"""

import io
from typing import Iterator, List, Optional

import fitz  # PyMuPDF
import pdfplumber
from PIL import Image

from config import get_config
from packlist.utils.exceptions import CorruptedFileError
from packlist.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class PDFProcessor:
    """
    PDF text and raster provider.

    Attributes:
        render_scale: Default rasterization scale (3.0 is 216 DPI).
        min_text_chars: Characters a page needs to count as native text.

    Example:
        >>> processor = PDFProcessor()
        >>> texts = processor.page_texts(pdf_bytes)
        >>> processor.has_native_text(texts)
        True
    """

    def __init__(
        self,
        render_scale: Optional[float] = None,
        min_text_chars: Optional[int] = None
    ) -> None:
        self.render_scale = render_scale if render_scale is not None else get_config("input.pdf.render_scale", 3.0)
        self.min_text_chars = min_text_chars if min_text_chars is not None else get_config("input.pdf.min_text_chars", 50)

        logger.debug(
            f"PDFProcessor initialized (scale={self.render_scale}, "
            f"min_text_chars={self.min_text_chars})"
        )

    def page_texts(self, data: bytes, filename: str = "document.pdf") -> List[str]:
        """
        Native text of every page, in page order.

        Args:
            data: PDF file bytes.
            filename: Name used in error messages.

        Returns:
            One string per page ("" for pages without a text layer).

        Raises:
            CorruptedFileError: If the PDF cannot be parsed.
        """
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                texts = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            logger.error(f"PDF text extraction failed for {filename}: {e}")
            raise CorruptedFileError(filename, str(e)) from e

        logger.debug(f"Extracted native text from {len(texts)} page(s) of {filename}")
        return texts

    def has_native_text(self, texts: List[str]) -> bool:
        """Whether any page holds more than ``min_text_chars`` characters."""
        return any(len(text.strip()) > self.min_text_chars for text in texts)

    def page_count(self, data: bytes, filename: str = "document.pdf") -> int:
        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                return doc.page_count
        except Exception as e:
            raise CorruptedFileError(filename, str(e)) from e

    def render_pages(
        self,
        data: bytes,
        scale: Optional[float] = None,
        filename: str = "document.pdf"
    ) -> Iterator[Image.Image]:
        """
        Rasterize pages one at a time onto a white background.

        Args:
            data: PDF file bytes.
            scale: Zoom factor; defaults to ``render_scale``.
            filename: Name used in error messages.

        Yields:
            RGB PIL images in page order.

        Raises:
            CorruptedFileError: If the PDF cannot be opened or rendered.
        """
        scale = scale or self.render_scale
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.error(f"PyMuPDF could not open {filename}: {e}")
            raise CorruptedFileError(filename, str(e)) from e

        with doc:
            matrix = fitz.Matrix(scale, scale)
            for page_index in range(doc.page_count):
                yield self._render(doc, page_index, matrix, filename)

    @staticmethod
    def _render(doc: "fitz.Document", page_index: int, matrix: "fitz.Matrix", filename: str) -> Image.Image:
        try:
            pix = doc.load_page(page_index).get_pixmap(matrix=matrix, alpha=False)
            image = Image.open(io.BytesIO(pix.tobytes("png")))
        except Exception as e:
            logger.error(f"Rendering page {page_index + 1} of {filename} failed: {e}")
            raise CorruptedFileError(filename, f"page {page_index + 1}: {e}") from e

        if image.mode != 'RGB':
            image = image.convert('RGB')
        logger.debug(f"Rendered page {page_index + 1} at {image.width}x{image.height}")
        return image
