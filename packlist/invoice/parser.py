"""
Invoice Parser Module.

Reads commercial-invoice pages into :class:`ParsedInvoice` values.

Each priced line is a size followed by pieces, quantity, unit price and
an optional amount. The unit price is pinned by the column header when
the invoice says which unit it quotes (``US$/PC``, ``US$/LB``,
``US$/MT``); otherwise the unit whose implied total is closest to the
printed amount wins, and per piece is assumed when no amount is printed.
"""

import re
from datetime import date
from typing import List, Optional, Tuple

from dateutil import parser as date_parser

from packlist.classifier import SupplierDetector
from packlist.extraction.header_fields import HeaderFieldExtractor
from packlist.extraction.packing_list import UNKNOWN_PO
from packlist.normalizer import MT_TO_LBS, SizeMatch, SizeParser
from packlist.suppliers import Supplier
from packlist.utils.exceptions import InvoiceParsingError
from packlist.utils.helpers import parse_number, text_preview
from packlist.utils.logger import get_logger
from .invoice_result import InvoiceLine, ParsedInvoice

# Initialize module logger
logger = get_logger(__name__)

INVOICE_NUMBER_RE = re.compile(
    r'INVOICE\s*(?:NO\.?|NUMBER|#)\s*[:#]?\s*([A-Z0-9][A-Z0-9\-/]{2,})', re.IGNORECASE
)
INVOICE_DATE_RE = re.compile(r'\bDATE\b\s*[:.]?\s*([^\n]{6,30})', re.IGNORECASE)
TOTAL_RE = re.compile(
    r'\bTOTAL\b\s*(?:AMOUNT|VALUE)?\s*:?\s*(?:US\$|USD|\$)?\s*(\d[\d,]*\.\d{2})', re.IGNORECASE
)
TOTAL_WORD_RE = re.compile(r'\bTOTAL\b', re.IGNORECASE)

# Numbers with an optional currency prefix ("128", "3,730.22", "US$12.50")
NUMBER_RE = re.compile(r'(?<![\w.])(?:US\$|USD|\$)?\s?(\d[\d,]*(?:\.\d+)?)(?!\w)')

PER_PIECE_RE = re.compile(r'(?:US\$|USD|\$)?\s*/\s*(?:PC|PCS|PIECE)\b', re.IGNORECASE)
PER_LB_RE = re.compile(r'(?:US\$|USD|\$)?\s*/\s*(?:LB|LBS)\b', re.IGNORECASE)
PER_MT_RE = re.compile(r'(?:US\$|USD|\$)?\s*/\s*MT\b', re.IGNORECASE)
QTY_MT_RE = re.compile(r'QTY\s*\(?\s*MT', re.IGNORECASE)

PER_PIECE = "per_piece"
PER_LB = "per_lb"
PER_MT = "per_mt"

LINE_WINDOW = 200


class InvoiceParser:
    """
    Parses invoice text into priced lines and header fields.

    Attributes:
        sizes: Size grammar shared with the extractors, so invoice lines
            and packing-list items produce the same join keys.
        fields: Header field extractor for PO and warehouse.

    Example:
        >>> invoice = InvoiceParser().parse(invoice_text)
        >>> invoice.price_map()
        {'0.0240-48-120': 0.4289, ...}
    """

    def __init__(
        self,
        sizes: Optional[SizeParser] = None,
        fields: Optional[HeaderFieldExtractor] = None,
        supplier_detector: Optional[SupplierDetector] = None
    ) -> None:
        self.sizes = sizes or SizeParser()
        self.fields = fields or HeaderFieldExtractor()
        self.supplier_detector = supplier_detector or SupplierDetector()
        logger.debug("InvoiceParser initialized")

    def parse(
        self,
        text: str,
        supplier: Optional[Supplier] = None,
        source_page: Optional[int] = None
    ) -> ParsedInvoice:
        """
        Parse one invoice page or sheet.

        Args:
            text: Invoice text.
            supplier: Known supplier; detected from the text when omitted.
            source_page: Page index recorded on the result.

        Returns:
            ParsedInvoice with at least one line.

        Raises:
            InvoiceParsingError: If no priced line could be read.
        """
        text = text or ''
        matches = self.sizes.find_sizes(text)
        header = text[:matches[0].start] if matches else text
        basis = self._pinned_basis(header)
        qty_in_mt = QTY_MT_RE.search(header) is not None

        lines: List[InvoiceLine] = []
        for index, match in enumerate(matches):
            next_start = matches[index + 1].start if index + 1 < len(matches) else len(text)
            line = self._parse_line(text, match, next_start, basis, qty_in_mt)
            if line:
                lines.append(line)

        if not lines:
            raise InvoiceParsingError(
                "No priced lines found on invoice",
                {"preview": text_preview(text), "source_page": source_page}
            )

        warehouse, detected = self.fields.warehouse(text)
        invoice = ParsedInvoice(
            supplier=supplier or self.supplier_detector.detect(text),
            po_number=self.fields.po_from_text(text) or UNKNOWN_PO,
            invoice_number=self._invoice_number(text),
            items=lines,
            total_value=self._total(text, lines),
            warehouse=warehouse if detected else None,
            invoice_date=self._invoice_date(text),
            source_page=source_page,
        )
        logger.info(
            f"Parsed invoice {invoice.invoice_number or '(no number)'}: "
            f"{len(lines)} priced line(s), total {invoice.total_value:,.2f}"
        )
        return invoice

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def _parse_line(
        self,
        text: str,
        match: SizeMatch,
        next_start: int,
        basis: Optional[str],
        qty_in_mt: bool
    ) -> Optional[InvoiceLine]:
        end = min(next_start, match.end + LINE_WINDOW)
        window = text[match.end:end]
        numbers = self._numbers(window.split('\n', 1)[0])
        if len(numbers) < 3:
            # Wrapped row: read on until the next size or the totals line
            total = TOTAL_WORD_RE.search(window)
            numbers = self._numbers(window[:total.start()] if total else window)
        if len(numbers) < 3:
            logger.debug(f"Invoice line {match.raw!r} has no price columns")
            return None

        pieces, quantity, price = numbers[0], numbers[1], numbers[2]
        amount = numbers[3] if len(numbers) > 3 else None
        if not pieces.is_integer() or pieces <= 0 or quantity <= 0:
            logger.debug(f"Invoice line {match.raw!r} skipped: pcs={pieces}, qty={quantity}")
            return None

        pieces_count = int(pieces)
        qty_lbs = round(quantity * MT_TO_LBS, 2) if qty_in_mt else quantity
        line_basis = basis or self._auto_basis(price, pieces_count, qty_lbs, amount)
        price_per_piece, price_per_lb = self._unit_prices(line_basis, price, pieces_count, qty_lbs)

        return InvoiceLine(
            size=match.size,
            raw_size=match.raw,
            pieces=pieces_count,
            qty_lbs=qty_lbs,
            price_per_piece=price_per_piece,
            price_per_lb=price_per_lb,
            amount=amount,
            price_basis=line_basis,
        )

    @staticmethod
    def _numbers(segment: str) -> List[float]:
        values = [parse_number(m.group(1)) for m in NUMBER_RE.finditer(segment)]
        return [v for v in values if v is not None]

    @staticmethod
    def _pinned_basis(header: str) -> Optional[str]:
        if PER_PIECE_RE.search(header):
            return PER_PIECE
        if PER_LB_RE.search(header):
            return PER_LB
        if PER_MT_RE.search(header):
            return PER_MT
        return None

    @staticmethod
    def _auto_basis(price: float, pieces: int, qty_lbs: float, amount: Optional[float]) -> str:
        if amount is None:
            return PER_PIECE
        per_lb_gap = abs(price * qty_lbs - amount)
        per_piece_gap = abs(price * pieces - amount)
        return PER_LB if per_lb_gap < per_piece_gap else PER_PIECE

    @staticmethod
    def _unit_prices(basis: str, price: float, pieces: int, qty_lbs: float) -> Tuple[float, float]:
        """(price per piece, price per pound) for a quoted price."""
        lbs_per_piece = qty_lbs / pieces
        if basis == PER_LB:
            per_lb = price
        elif basis == PER_MT:
            per_lb = price / MT_TO_LBS
        else:
            return price, round(price / lbs_per_piece, 4)
        return round(per_lb * lbs_per_piece, 2), round(per_lb, 4)

    # ------------------------------------------------------------------
    # Header fields
    # ------------------------------------------------------------------

    @staticmethod
    def _invoice_number(text: str) -> str:
        match = INVOICE_NUMBER_RE.search(text)
        return match.group(1).upper() if match else ""

    @staticmethod
    def _total(text: str, lines: List[InvoiceLine]) -> float:
        match = TOTAL_RE.search(text)
        if match:
            value = parse_number(match.group(1))
            if value is not None:
                return value
        return round(sum(
            line.amount if line.amount is not None else line.price_per_piece * line.pieces
            for line in lines
        ), 2)

    @staticmethod
    def _invoice_date(text: str) -> Optional[date]:
        match = INVOICE_DATE_RE.search(text)
        if not match:
            return None
        candidate = match.group(1).strip()
        try:
            return date_parser.parse(candidate, dayfirst=False, fuzzy=True).date()
        except (ValueError, OverflowError) as e:
            logger.debug(f"Unreadable invoice date {candidate!r}: {e}")
            return None
