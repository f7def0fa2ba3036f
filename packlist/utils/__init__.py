"""
Utility Module for the Packing-List Pipeline.

Provides logging configuration, the exception hierarchy and small helpers
used across all other modules.
"""

from .logger import setup_logger, setup_logger_from_config, get_logger
from .helpers import (
    ensure_directory,
    get_file_extension,
    parse_number,
    format_number,
    cell_to_text,
    rows_to_text,
    text_preview,
)

__all__ = [
    'setup_logger',
    'setup_logger_from_config',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'parse_number',
    'format_number',
    'cell_to_text',
    'rows_to_text',
    'text_preview',
]
