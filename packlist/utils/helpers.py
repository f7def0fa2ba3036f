"""
Helper Utilities Module.

Small, generic functions shared by the providers, extractors and the
orchestrator.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - parse_number: Read a numeric token such as "3,730.22"
    - format_number: Render a dimension without a trailing ".0"
    - cell_to_text: Turn a spreadsheet cell value into text
    - rows_to_text: Flatten a cell grid into searchable text
    - text_preview: Collapse and truncate text for error messages
"""

import re
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it and its parents if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("output/json")
        PosixPath('output/json')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Lowercase file extension including the dot, or "" when there is none.

    Example:
        >>> get_file_extension("PL_1837.PDF")
        '.pdf'
    """
    return Path(filepath).suffix.lower()


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a numeric token, tolerating thousands separators and stray spaces.

    Args:
        value: A number, or text like "3,730.22" or " 6 ".

    Returns:
        The float value, or None when the token is not numeric.

    Example:
        >>> parse_number("3,730.22")
        3730.22
        >>> parse_number("N/A") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = re.sub(r'[,\s]', '', str(value))
    cleaned = cleaned.lstrip('$')
    if not re.fullmatch(r'-?\d+(?:\.\d+)?|-?\.\d+', cleaned):
        return None
    return float(cleaned)


def format_number(value: float) -> str:
    """
    Render a dimension the way it appears in identifiers ("60", "60.5").

    Example:
        >>> format_number(120.0)
        '120'
    """
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def cell_to_text(value: Any) -> str:
    """
    Convert a spreadsheet cell to text.

    Whole floats lose their ".0" so piece counts and bundle numbers read
    like they do on the printed sheet.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def rows_to_text(rows: Sequence[Sequence[Any]]) -> str:
    """
    Join a grid into text, one line per row and cells separated by spaces.
    """
    lines: List[str] = []
    for row in rows:
        cells = [cell_to_text(cell) for cell in row]
        line = " ".join(cell for cell in cells if cell)
        if line:
            lines.append(line)
    return "\n".join(lines)


def text_preview(text: str, length: int = 200) -> str:
    """Collapse whitespace and keep the first ``length`` characters."""
    return re.sub(r'\s+', ' ', text or '').strip()[:length]
