"""
Yeou Yih Extractor Module.

Yeou Yih ships hot-rolled plate in decimal-inch sizes. Each row carries
its own sales order and PO, so one packing list can cover several POs:

    1 S2509021 001715 304/304L 0.750" X 60" X 120" 2 3,062 3,110 A5123456

Lot/serial numbers are synthesized per PO in row order (001715-01,
001715-02, 001716-01). Rows whose PO differs from the document PO carry
a PO override.
"""

import re
from typing import Dict, List, Optional, Sequence

from packlist.normalizer import ParsedSize
from packlist.suppliers import Supplier
from packlist.utils.helpers import cell_to_text, parse_number
from packlist.utils.logger import get_logger
from .base_extractor import BaseExtractor, first_two
from .header_fields import SALES_ORDER_RE, strip_po
from .ocr_cleanup import clean_ocr_text
from .packing_list import PackingListItem
from .strategy import ExtractionContext, ExtractionStrategy
from .text_scanner import TextScanner, Token

# Initialize module logger
logger = get_logger(__name__)

_NUM = r'\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d{3,6}(?:\.\d+)?'


class YeouYihExtractor(BaseExtractor):
    """
    Extractor for Yeou Yih packing lists.

    Example:
        >>> result = YeouYihExtractor().extract(ExtractionContext(text=page_text, po_number="1715"))
        >>> [item.lot_serial_nbr for item in result.items]
        ['001715-01', '001715-02', '001716-01']
    """

    supplier = Supplier.YEOU_YIH

    SIZE_RE = re.compile(
        r'(\d*\.\d+)["”\']?\s*[xX×*]\s*(\d+(?:\.\d+)?)["”\']?\s*[xX×*]\s*(\d+(?:\.\d+)?)["”\']?'
    )
    OCR_SIZE_RE = re.compile(
        r'(\d{0,2}\s?\.\s?\d{2,4})\s*["”\'`]*\s*[xX×*]\s*(\d{2,3}(?:\.\d+)?)\s*["”\'`]*'
        r'\s*[xX×*]\s*(\d{2,3}(?:\.\d+)?)["”\'`]*'
    )

    # Piece count, net weight and gross weight printed together
    ROW_NUMBERS_RE = re.compile(
        rf'(?<![\w.,])(\d{{1,4}})\s+({_NUM})\s+({_NUM})(?![\d,])'
    )
    HEAT_RE = re.compile(r'\b([A-Z]{1,2}\d{4,8}[A-Z]?)\b')
    SALES_ORDER_CELL_RE = re.compile(r'^S\d{7}$')
    PO_CELL_RE = re.compile(r'^\d{6}$')

    SALES_ORDER_LOOKBACK = 120
    ROW_WINDOW = 200
    HEAT_WINDOW = 40
    ANCHOR_LOOKAHEAD = 80

    def strategies(self) -> List[ExtractionStrategy]:
        return [
            ExtractionStrategy('grid-header', self.parse_grid),
            ExtractionStrategy('grid-headerless', self.parse_grid_without_headers),
            ExtractionStrategy('regex-anchored', self.parse_text),
            ExtractionStrategy('ocr-tolerant', self.parse_ocr_text),
            ExtractionStrategy('anchor-reconstruction', self.parse_by_sales_orders),
        ]

    # ------------------------------------------------------------------
    # Spreadsheet strategies
    # ------------------------------------------------------------------

    def parse_grid(self, context: ExtractionContext) -> List[PackingListItem]:
        """Header-row grid with per-row sales order and PO columns."""
        rows = context.rows or []
        header_index = self.find_header_row(rows, ['size', 'pcs', 'heat', 'weight', 'order'])
        if header_index is None:
            return []

        header = rows[header_index]
        columns = {
            'size': self.find_column(header, ['size', 'description', 'spec']),
            'pcs': self.find_column(header, ['pcs', 'pc', "q'ty", 'qty'], exclude=['spec']),
            'po': self.find_column(header, ['p/o', 'po no', 'p.o', 'customer order'],
                                   exclude=['sales']),
            'net': self.find_column(header, ['net', "n'weight", 'n.w']),
            'gross': self.find_column(header, ['gross', "g'weight", 'g.w']),
            'heat': self.find_column(header, ['heat']),
        }
        if columns['size'] is None:
            return []

        net_unit = self.cell(header, columns['net']) or 'lbs'
        gross_unit = self.cell(header, columns['gross']) or 'lbs'
        sequences: Dict[str, int] = {}
        items: List[PackingListItem] = []

        for row in rows[header_index + 1:]:
            if self.is_total_row(row):
                continue
            raw_size = self.cell(row, columns['size'])
            size = self.sizes.parse_decimal_size(raw_size)
            if size is None:
                continue

            po_cell = self.cell(row, columns['po'])
            row_po = strip_po(po_cell) if self.PO_CELL_RE.match(po_cell) else context.po_number
            items.append(self._build(
                context, size, raw_size, row_po, sequences,
                pieces=self.number(row, columns['pcs']),
                heat=self.cell(row, columns['heat']),
                net=self.weight_to_lbs(self.number(row, columns['net']), net_unit),
                gross=self.weight_to_lbs(self.number(row, columns['gross']), gross_unit),
            ))
        return items

    def parse_grid_without_headers(self, context: ExtractionContext) -> List[PackingListItem]:
        """Rows recognised by a decimal size cell."""
        rows = context.rows or []
        sequences: Dict[str, int] = {}
        items: List[PackingListItem] = []

        for row in rows:
            cells = [cell_to_text(c) for c in row]
            if self.is_total_row(row):
                continue
            size_index = next(
                (i for i, c in enumerate(cells) if self.sizes.parse_decimal_size(c)), None
            )
            if size_index is None:
                continue

            row_po = context.po_number
            for index, cell in enumerate(cells[:size_index]):
                if self.SALES_ORDER_CELL_RE.match(cell) and index + 1 < len(cells):
                    if self.PO_CELL_RE.match(cells[index + 1]):
                        row_po = strip_po(cells[index + 1])
                        break

            tail = cells[size_index + 1:]
            numbers = [parse_number(c) for c in tail]
            numbers = [n for n in numbers if n is not None]
            if not numbers:
                continue
            heat = next((c for c in tail if self.HEAT_RE.fullmatch(c)), None)
            pair = first_two(numbers[1:])

            items.append(self._build(
                context, self.sizes.parse_decimal_size(cells[size_index]), cells[size_index],
                row_po, sequences,
                pieces=numbers[0],
                heat=heat,
                net=self.weight_to_lbs(pair['net'], 'lbs'),
                gross=self.weight_to_lbs(pair['gross'], 'lbs'),
            ))
        return items

    # ------------------------------------------------------------------
    # Text strategies
    # ------------------------------------------------------------------

    def parse_text(self, context: ExtractionContext) -> List[PackingListItem]:
        """Decimal size anchored rows on native text."""
        scanner = TextScanner(context.text)
        tokens = scanner.find_all(self.SIZE_RE)
        return self._rows_from_sizes(context, scanner, tokens, validate=False)

    def parse_ocr_text(self, context: ExtractionContext) -> List[PackingListItem]:
        """Split-decimal tolerant sizes on cleaned OCR text, range-filtered."""
        scanner = TextScanner(clean_ocr_text(context.text))
        tokens = scanner.find_all(self.OCR_SIZE_RE)
        return self._rows_from_sizes(context, scanner, tokens, validate=True)

    def parse_by_sales_orders(self, context: ExtractionContext) -> List[PackingListItem]:
        """
        Anchor-based reconstruction from sales-order/PO pairs.

        Each pair takes the first plausible size after it, or carries the
        previous row's size forward.
        """
        scanner = TextScanner(clean_ocr_text(context.text))
        anchors = scanner.find_all(SALES_ORDER_RE)
        if not anchors:
            return []

        size_tokens = [
            t for t in scanner.find_all(self.OCR_SIZE_RE)
            if self.is_plausible(self._size_from_token(t))
        ]
        sequences: Dict[str, int] = {}
        items: List[PackingListItem] = []
        last_size: Optional[ParsedSize] = None
        last_raw = ''

        for index, anchor in enumerate(anchors):
            next_start = anchors[index + 1].start if index + 1 < len(anchors) else len(scanner.text)
            token = scanner.first_after(
                size_tokens, anchor.end, min(self.ANCHOR_LOOKAHEAD, next_start - anchor.end)
            )
            position = anchor.end
            if token is not None:
                last_size = self._size_from_token(token)
                last_raw = token.text
                position = token.end
            elif last_size is None:
                continue

            numbers = scanner.search_after(
                self.ROW_NUMBERS_RE, position, min(self.ROW_WINDOW, next_start - position)
            )
            items.append(self._build_from_numbers(
                context, scanner, last_size, last_raw, strip_po(anchor.group(2)),
                sequences, numbers
            ))
        return items

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _rows_from_sizes(
        self,
        context: ExtractionContext,
        scanner: TextScanner,
        tokens: Sequence[Token],
        validate: bool
    ) -> List[PackingListItem]:
        if not tokens:
            return []

        orders = scanner.find_all(SALES_ORDER_RE)
        sequences: Dict[str, int] = {}
        items: List[PackingListItem] = []

        for index, token in enumerate(tokens):
            size = self._size_from_token(token)
            if size is None or (validate and not self.is_plausible(size)):
                logger.debug(f"Discarding size token {token.text!r}")
                continue

            order = scanner.nearest_before(orders, token.start, self.SALES_ORDER_LOOKBACK)
            row_po = strip_po(order.group(2)) if order else context.po_number

            next_start = tokens[index + 1].start if index + 1 < len(tokens) else len(scanner.text)
            numbers = scanner.search_after(
                self.ROW_NUMBERS_RE, token.end, min(self.ROW_WINDOW, next_start - token.end)
            )
            items.append(self._build_from_numbers(
                context, scanner, size, token.text, row_po, sequences, numbers
            ))
        return items

    def _build_from_numbers(
        self,
        context: ExtractionContext,
        scanner: TextScanner,
        size: ParsedSize,
        raw_size: str,
        row_po: str,
        sequences: Dict[str, int],
        numbers: Optional[Token]
    ) -> PackingListItem:
        pieces = net = gross = None
        heat = None
        if numbers is not None:
            pieces = float(numbers.group(1))
            net = float(numbers.group(2).replace(',', ''))
            gross = float(numbers.group(3).replace(',', ''))
            heat_token = scanner.search_after(self.HEAT_RE, numbers.end, self.HEAT_WINDOW)
            heat = heat_token.group(1) if heat_token else None
        return self._build(
            context, size, raw_size, row_po, sequences,
            pieces=pieces, heat=heat, net=net, gross=gross,
        )

    def _build(
        self,
        context: ExtractionContext,
        size: ParsedSize,
        raw_size: str,
        row_po: str,
        sequences: Dict[str, int],
        pieces: Optional[float] = None,
        heat: Optional[str] = None,
        net: Optional[float] = None,
        gross: Optional[float] = None
    ) -> PackingListItem:
        sequences[row_po] = sequences.get(row_po, 0) + 1
        return self.make_item(
            context, size, raw_size,
            lot_token=str(sequences[row_po]),
            pieces=pieces,
            heat=heat,
            net_lbs=net,
            gross_lbs=gross,
            finish=self.fields.finish(context.text),
            po_number=row_po,
        )

    @staticmethod
    def _size_from_token(token: Token) -> Optional[ParsedSize]:
        thickness = float(re.sub(r'\s', '', token.group(1)))
        if not 0 < thickness <= 4:
            return None
        return ParsedSize(thickness, float(token.group(2)), float(token.group(3)))
