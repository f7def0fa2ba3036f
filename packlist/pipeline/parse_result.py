"""
Parse Result Module.

The value returned for every input file. Failures are reported through
``error`` rather than raised, so a batch never stops on one bad file.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from packlist.extraction.packing_list import ParsedPackingList
from packlist.invoice import ParsedInvoice


@dataclass
class ParseOutcome:
    """
    Outcome of parsing one file.

    Attributes:
        filename: Name the file was parsed under.
        document: Parsed packing list, when items were found.
        invoice: First invoice found in the file.
        invoices: Every invoice found in the file, in page order.
        error: Failure message, or None.
        needs_ocr: The PDF has no native text; retry with ``force_ocr``.
        ocr_confidence: Average OCR confidence (0-100) when OCR ran.
        ocr_warning: Low-confidence warning when OCR ran.
        is_invoice: The file holds only invoices.
    """
    filename: str = ""
    document: Optional[ParsedPackingList] = None
    invoice: Optional[ParsedInvoice] = None
    invoices: List[ParsedInvoice] = field(default_factory=list)
    error: Optional[str] = None
    needs_ocr: bool = False
    ocr_confidence: Optional[float] = None
    ocr_warning: Optional[str] = None
    is_invoice: bool = False

    @property
    def success(self) -> bool:
        return self.error is None and not self.needs_ocr and (
            self.document is not None or self.is_invoice
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filename': self.filename,
            'success': self.success,
            'document': self.document.to_dict() if self.document else None,
            'invoices': [invoice.to_dict() for invoice in self.invoices],
            'error': self.error,
            'needs_ocr': self.needs_ocr,
            'ocr_confidence': None if self.ocr_confidence is None else round(self.ocr_confidence, 1),
            'ocr_warning': self.ocr_warning,
            'is_invoice': self.is_invoice,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        if self.error:
            return f"ParseOutcome(filename='{self.filename}', error={self.error!r})"
        if self.needs_ocr:
            return f"ParseOutcome(filename='{self.filename}', needs_ocr=True)"
        return f"ParseOutcome(filename='{self.filename}', document={self.document!r}, invoices={len(self.invoices)})"
