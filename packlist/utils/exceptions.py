"""
Custom Exceptions Module.

Typed failures raised by the providers and components of the packing-list
pipeline. The orchestrator turns these into error values on its result, so
none of them escape ``PackingListPipeline.parse_file``.

Exception Hierarchy:
    PackingListError (base)
    ├── InputError
    │   ├── UnsupportedFileTypeError
    │   ├── CorruptedFileError
    │   └── FileSizeError
    ├── OCRError
    │   ├── OCREngineNotAvailableError
    │   └── OCRProcessingError
    ├── ExtractionError
    │   ├── OCRRequiredError
    │   └── NoItemsExtractedError
    ├── InvoiceParsingError
    ├── InventoryLoadError
    └── ConfigurationError
"""

from typing import Optional


class PackingListError(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error message.
        details: Dictionary with additional error context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(PackingListError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFileTypeError(InputError):
    """
    Raised when a file type has no provider.

    Example:
        >>> raise UnsupportedFileTypeError(".doc", [".pdf", ".xlsx"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: '{file_type}'"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class CorruptedFileError(InputError):
    """Raised when a PDF or workbook cannot be opened or read."""

    def __init__(self, filename: str, reason: Optional[str] = None):
        message = f"Corrupted or unreadable file: {filename}"
        details = {"filename": filename, "reason": reason}
        super().__init__(message, details)


class FileSizeError(InputError):
    """Raised when an input is empty or exceeds the configured size limit."""

    def __init__(self, filename: str, size_bytes: int, limit_bytes: int):
        message = f"File size not accepted: {filename} ({size_bytes} bytes)"
        details = {"size_bytes": size_bytes, "limit_bytes": limit_bytes}
        super().__init__(message, details)


# =============================================================================
# OCR ERRORS
# =============================================================================

class OCRError(PackingListError):
    """Base exception for OCR-related errors."""
    pass


class OCREngineNotAvailableError(OCRError):
    """Raised when the OCR engine binary or binding is missing."""

    def __init__(self, engine_name: str, reason: Optional[str] = None):
        message = f"OCR engine not available: {engine_name}"
        details = {"engine": engine_name, "reason": reason}
        super().__init__(message, details)


class OCRProcessingError(OCRError):
    """Raised when rendering or recognizing a page fails."""

    def __init__(self, page_index: int, reason: Optional[str] = None):
        message = f"OCR processing failed on page {page_index + 1}"
        details = {"page_index": page_index, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# EXTRACTION ERRORS
# =============================================================================

class ExtractionError(PackingListError):
    """Base exception for extraction failures."""
    pass


class OCRRequiredError(ExtractionError):
    """
    Raised when no page of a PDF carries enough native text.

    This is a signal, not a failure: the caller may retry with OCR.
    """

    def __init__(self, page_count: int, min_chars: int):
        message = "OCR needed: PDF appears to contain only images"
        details = {"page_count": page_count, "min_chars": min_chars}
        super().__init__(message, details)


class NoItemsExtractedError(ExtractionError):
    """
    Raised when every strategy of the chain produced zero items.

    Attributes:
        supplier: Supplier value detected for the text.
        preview: Leading slice of the text that was searched.
    """

    def __init__(self, supplier: str, preview: str):
        self.supplier = supplier
        self.preview = preview
        message = f'Could not parse items. Supplier: {supplier}. Preview: "{preview}..."'
        super().__init__(message)


# =============================================================================
# OTHER ERRORS
# =============================================================================

class InvoiceParsingError(PackingListError):
    """Raised when a page classified as an invoice yields no priced lines."""
    pass


class InventoryLoadError(PackingListError):
    """Raised when an inventory-ID workbook or store cannot be read."""

    def __init__(self, source: str, reason: Optional[str] = None):
        message = f"Could not load inventory IDs from: {source}"
        details = {"source": source, "reason": reason}
        super().__init__(message, details)


class ConfigurationError(PackingListError):
    """Raised when a configuration value is invalid."""

    def __init__(self, key: str, reason: str):
        message = f"Invalid configuration for '{key}': {reason}"
        details = {"key": key}
        super().__init__(message, details)


__all__ = [
    'PackingListError',
    'InputError',
    'UnsupportedFileTypeError',
    'CorruptedFileError',
    'FileSizeError',
    'OCRError',
    'OCREngineNotAvailableError',
    'OCRProcessingError',
    'ExtractionError',
    'OCRRequiredError',
    'NoItemsExtractedError',
    'InvoiceParsingError',
    'InventoryLoadError',
    'ConfigurationError',
]
