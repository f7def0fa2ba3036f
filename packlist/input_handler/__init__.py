"""
Input Handler Module.

This module provides functionality for:
    - Detecting file types (PDF vs spreadsheet)
    - Validating uploads (size, emptiness, type)
    - Native PDF text and page rasterization
    - Reading every sheet of a workbook as a grid

Supported formats:
    - PDF (digital and scanned)
    - Spreadsheets: XLSX, XLSM
"""

from .handler import InputFile, InputHandler
from .pdf_processor import PDFProcessor
from .spreadsheet_processor import SpreadsheetProcessor

__all__ = ['InputFile', 'InputHandler', 'PDFProcessor', 'SpreadsheetProcessor']
