"""
Spreadsheet Processor Module.

Reads every sheet of an .xlsx/.xlsm workbook into a grid of row lists.
The first row is not assumed to be a header.
"""

import io
import zipfile
from typing import Any, Dict, List

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from packlist.utils.exceptions import CorruptedFileError
from packlist.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

Grid = List[List[Any]]


class SpreadsheetProcessor:
    """
    Spreadsheet grid provider.

    Example:
        >>> sheets = SpreadsheetProcessor().read_sheets(xlsx_bytes, "PL_1726.xlsx")
        >>> list(sheets)
        ['INVOICE', 'PACKING']
    """

    def read_sheets(self, data: bytes, filename: str = "workbook.xlsx") -> Dict[str, Grid]:
        """
        Cell values of every sheet, in workbook order.

        Formula cells yield their cached values. Trailing empty cells are
        dropped from each row; empty rows are kept so row positions match
        the sheet.

        Raises:
            CorruptedFileError: If the workbook cannot be opened.
        """
        try:
            workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
            logger.error(f"Could not open workbook {filename}: {e}")
            raise CorruptedFileError(filename, str(e)) from e

        sheets: Dict[str, Grid] = {}
        try:
            for worksheet in workbook.worksheets:
                sheets[worksheet.title] = [
                    self._trim(list(row)) for row in worksheet.iter_rows(values_only=True)
                ]
        finally:
            workbook.close()

        logger.debug(
            f"Read {len(sheets)} sheet(s) from {filename}: "
            + ', '.join(f"{name} ({len(rows)} rows)" for name, rows in sheets.items())
        )
        return sheets

    @staticmethod
    def _trim(row: List[Any]) -> List[Any]:
        while row and (row[-1] is None or (isinstance(row[-1], str) and not row[-1].strip())):
            row.pop()
        return row
