"""
Pipeline Module.

Orchestrates one file from bytes to a validated packing list:
    - PackingListPipeline: parse_file / parse_files entry points
    - ParseOutcome: per-file result with error and OCR signals
    - DocumentProcessor: weight checks and data-quality warnings
"""

from .document_processor import DocumentProcessor
from .parse_result import ParseOutcome
from .orchestrator import PackingListPipeline

__all__ = ['DocumentProcessor', 'ParseOutcome', 'PackingListPipeline']
