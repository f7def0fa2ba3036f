"""
Main Input Handler Module.

Detects the type of an uploaded file, validates it, and reads files and
directories from disk for the command line.

Usage:
    from packlist.input_handler import InputHandler

    handler = InputHandler()
    source = handler.load("PL_1837.pdf")
    file_type = handler.validate(source.data, source.filename)

Classes:
    InputFile: File bytes plus the name they were uploaded under
    InputHandler: Type detection, validation and directory collection
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from config import get_config
from packlist.utils.exceptions import (
    CorruptedFileError,
    FileSizeError,
    InputError,
    UnsupportedFileTypeError,
)
from packlist.utils.helpers import get_file_extension
from packlist.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class InputFile:
    """
    One input file.

    Attributes:
        filename: Name used for type detection and PO hints.
        data: Raw file bytes.
    """
    filename: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"InputFile(filename='{self.filename}', size={self.size_bytes})"


class InputHandler:
    """
    Input validation and type routing.

    Attributes:
        supported_extensions: Extensions accepted by the pipeline.
        max_file_size_mb: Upper size limit per file.

    Example:
        >>> handler = InputHandler()
        >>> handler.detect_file_type(b"%PDF-1.7 ...", "scan.bin")
        'pdf'
    """

    PDF_EXTENSIONS = {'.pdf'}
    SPREADSHEET_EXTENSIONS = {'.xlsx', '.xlsm'}

    def __init__(
        self,
        supported_extensions: Optional[Sequence[str]] = None,
        max_file_size_mb: Optional[float] = None
    ) -> None:
        extensions = supported_extensions or get_config(
            "input.supported_extensions",
            sorted(self.PDF_EXTENSIONS | self.SPREADSHEET_EXTENSIONS)
        )
        self.supported_extensions = {ext.lower() for ext in extensions}
        self.max_file_size_mb = (
            max_file_size_mb if max_file_size_mb is not None
            else get_config("input.max_file_size_mb", 50)
        )

        logger.debug(f"InputHandler initialized with extensions: {sorted(self.supported_extensions)}")

    def detect_file_type(self, data: bytes, filename: str = "") -> str:
        """
        Detect whether input is a PDF or a spreadsheet.

        The extension decides when it is supported; otherwise the leading
        bytes are checked (PDF header or zip container).

        Returns:
            'pdf' or 'spreadsheet'.

        Raises:
            UnsupportedFileTypeError: If neither applies.
        """
        extension = get_file_extension(filename) if filename else ""
        if extension in self.supported_extensions:
            if extension in self.PDF_EXTENSIONS:
                return 'pdf'
            if extension in self.SPREADSHEET_EXTENSIONS:
                return 'spreadsheet'

        head = data[:8] if data else b""
        if head.startswith(b"%PDF"):
            logger.debug(f"Detected PDF by content: {filename or '<bytes>'}")
            return 'pdf'
        # Any zip container could be a workbook; only trust it without an extension
        if head.startswith(b"PK") and not extension:
            return 'spreadsheet'

        raise UnsupportedFileTypeError(extension or "unknown", sorted(self.supported_extensions))

    def validate(self, data: bytes, filename: str = "") -> str:
        """
        Validate size and type of an input.

        Returns:
            The detected file type.

        Raises:
            CorruptedFileError: If the input is empty.
            FileSizeError: If the input exceeds the size limit.
            UnsupportedFileTypeError: If the type is not supported.
        """
        name = filename or "<bytes>"
        if not data:
            raise CorruptedFileError(name, "File is empty")

        limit = int(self.max_file_size_mb * 1024 * 1024)
        if len(data) > limit:
            raise FileSizeError(name, len(data), limit)

        file_type = self.detect_file_type(data, filename)
        logger.debug(f"Validated {name} as {file_type} ({len(data)} bytes)")
        return file_type

    def load(self, filepath: Union[str, Path]) -> InputFile:
        """
        Read a file from disk.

        Raises:
            InputError: If the path does not exist or is not a file.
        """
        path = Path(filepath)
        if not path.exists():
            raise InputError(f"File not found: {filepath}")
        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")
        return InputFile(filename=path.name, data=path.read_bytes())

    def collect_files(self, paths: Sequence[Union[str, Path]]) -> List[Path]:
        """
        Expand paths into supported files, keeping the given order.

        Directories contribute their supported files sorted by name.
        """
        files: List[Path] = []
        for raw in paths:
            path = Path(raw)
            if path.is_dir():
                found = sorted(
                    p for p in path.iterdir()
                    if p.is_file() and get_file_extension(p) in self.supported_extensions
                )
                logger.info(f"Found {len(found)} files to process in {path}")
                files.extend(found)
            else:
                files.append(path)
        return files
