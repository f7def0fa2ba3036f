"""
Yuen Chang Extractor Module.

Yuen Chang ships cold-rolled sheet in gauge sizes, grouped under container
and finish section rows, with weights in pounds:

    CONTAINER NO. FFAU2098727
    304/304L 2B Finish
    1 WM006 26GA x 48" x 120" 43S02543-035 S92HB05C 128 3,730.22 3,884.54

The item code (WM006) is the lot/serial number. Heat number falls back to
the coil number when the heat column is empty.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from packlist.normalizer import ParsedSize, gauge_to_decimal
from packlist.suppliers import Supplier
from packlist.utils.helpers import cell_to_text, parse_number
from packlist.utils.logger import get_logger
from .base_extractor import BaseExtractor, first_two
from .header_fields import Section, section_value_at
from .ocr_cleanup import clean_ocr_text
from .packing_list import PackingListItem
from .strategy import ExtractionContext, ExtractionStrategy
from .text_scanner import TextScanner, Token, numbers_in_range

# Initialize module logger
logger = get_logger(__name__)

_NUM = r'\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d{3,6}(?:\.\d+)?'


@dataclass
class RowFields:
    """Tokens found between one size and the next."""
    item_code: Optional[str] = None
    coil: Optional[str] = None
    heat: Optional[str] = None
    pieces: Optional[float] = None
    net: float = 0.0
    gross: float = 0.0


class YuenChangExtractor(BaseExtractor):
    """
    Extractor for Yuen Chang packing lists.

    Example:
        >>> result = YuenChangExtractor().extract(ExtractionContext(text=page_text))
        >>> result.items[0].inventory_id
        '0.0180-48__-120__-304/304L-2B____'
    """

    supplier = Supplier.YUEN_CHANG

    SIZE_RE = re.compile(
        r'(\d{1,2})\s*GA\s*[x×*]\s*(\d{2,3})["”\']?\s*[x×*]\s*(\d{2,3})["”\']?', re.IGNORECASE
    )
    OCR_SIZE_RE = re.compile(
        r'(\d{1,2})\s*[GC6]\s*A\.?\s*[x×*X]\s*(\d{2,3})\s*["”\'`]*\s*[x×*X]\s*(\d{2,3})["”\'`]*',
        re.IGNORECASE
    )

    ITEM_RE = re.compile(r'\b([A-Z]{2}\d{3})\b')
    COIL_RE = re.compile(r'\b(\d{2}[A-Z0-9]\d{5}-\d{3})\b')
    HEAT_RE = re.compile(r'\b([A-Z]{1,2}\d{1,2}[A-Z0-9]{2,6}|[A-Z]\d{4}-\d{3,4})\b')

    # Piece count, net weight and gross weight printed together
    ROW_NUMBERS_RE = re.compile(
        rf'(?<![\w.,])(\d{{1,4}})\s+({_NUM})\s+({_NUM})(?![\d,])'
    )
    PCS_RE = re.compile(r'\b(\d{1,4})\s*(?:PCS?|SHEETS?)\b', re.IGNORECASE)
    LBS_WEIGHT_RE = re.compile(rf'(?<![\w.,])({_NUM})(?![\d,])')

    ITEM_LOOKBACK = 50
    ROW_WINDOW = 300
    ANCHOR_LOOKBACK = 120

    SKIP_ROW_RE = re.compile(r'\btotal\b|excel\s+order|yc\s+ref', re.IGNORECASE)

    def strategies(self) -> List[ExtractionStrategy]:
        return [
            ExtractionStrategy('grid-header', self.parse_grid),
            ExtractionStrategy('grid-headerless', self.parse_grid_without_headers),
            ExtractionStrategy('regex-anchored', self.parse_text),
            ExtractionStrategy('ocr-tolerant', self.parse_ocr_text),
            ExtractionStrategy('anchor-reconstruction', self.parse_by_coils),
        ]

    # ------------------------------------------------------------------
    # Spreadsheet strategies
    # ------------------------------------------------------------------

    def parse_grid(self, context: ExtractionContext) -> List[PackingListItem]:
        """Header-row grid with container and finish section rows."""
        rows = context.rows or []
        header_index = self.find_header_row(rows, ['size', 'item', 'heat', 'pcs'])
        if header_index is None:
            return []

        header = rows[header_index]
        columns = {
            'item': self.find_column(header, ['item']),
            'size': self.find_column(header, ['size']),
            'coil': self.find_column(header, ['coil']),
            'heat': self.find_column(header, ['heat']),
            'pcs': self.find_column(header, ['pcs', 'pc', "q'ty", 'qty'], exclude=['spec']),
            'net': self.find_column(header, ['net', "n'weight", 'n.w']),
            'gross': self.find_column(header, ['gross', "g'weight", 'g.w']),
            'container': self.find_column(header, ['container']),
        }
        if columns['size'] is None:
            return []

        above = self.section_rows_text(rows[:header_index])
        container = self._last_section(self.fields.container_sections(above))
        finish = self._last_section(self.fields.finish_sections(above))
        net_unit = self.cell(header, columns['net']) or 'lbs'
        gross_unit = self.cell(header, columns['gross']) or 'lbs'

        items: List[PackingListItem] = []
        for row in rows[header_index + 1:]:
            row_text = ' '.join(cell_to_text(c) for c in row)
            container = self._last_section(self.fields.container_sections(row_text)) or container
            finish = self._last_section(self.fields.finish_sections(row_text)) or finish
            if self.SKIP_ROW_RE.search(row_text):
                continue

            raw_size = self.cell(row, columns['size'])
            if 'ga' not in raw_size.lower():
                continue
            size = self.sizes.parse_gauge_size(raw_size)
            pieces = self.number(row, columns['pcs'])
            if size is None or not pieces or pieces <= 0:
                continue

            item_code = self.cell(row, columns['item'])
            heat = self.cell(row, columns['heat']) or self.cell(row, columns['coil'])
            items.append(self.make_item(
                context, size, raw_size,
                lot_token=item_code or str(len(items) + 1),
                pieces=pieces,
                heat=heat,
                net_lbs=self.weight_to_lbs(self.number(row, columns['net']), net_unit),
                gross_lbs=self.weight_to_lbs(self.number(row, columns['gross']), gross_unit),
                finish=finish,
                container=self.cell(row, columns['container']) or container,
            ))
        return items

    def parse_grid_without_headers(self, context: ExtractionContext) -> List[PackingListItem]:
        """Rows recognised by a gauge size cell."""
        rows = context.rows or []
        container: Optional[str] = None
        finish: Optional[str] = None
        items: List[PackingListItem] = []

        for row in rows:
            cells = [cell_to_text(c) for c in row]
            row_text = ' '.join(cells)
            container = self._last_section(self.fields.container_sections(row_text)) or container
            finish = self._last_section(self.fields.finish_sections(row_text)) or finish
            if self.SKIP_ROW_RE.search(row_text):
                continue

            size_index = next(
                (i for i, c in enumerate(cells) if self.SIZE_RE.search(c)), None
            )
            if size_index is None:
                continue
            size = self.sizes.parse_gauge_size(cells[size_index])
            if size is None:
                continue

            item_code = next((c for c in cells[:size_index] if self.ITEM_RE.fullmatch(c)), None)
            tail = cells[size_index + 1:]
            coil = next((c for c in tail if self.COIL_RE.fullmatch(c)), None)
            heat = next(
                (c for c in tail if c != coil and self.HEAT_RE.fullmatch(c)), None
            )
            numbers = [parse_number(c) for c in tail]
            numbers = [n for n in numbers if n is not None]
            if not numbers:
                continue
            pieces = numbers[0]
            pair = first_two(numbers[1:])

            items.append(self.make_item(
                context, size, cells[size_index],
                lot_token=item_code or str(len(items) + 1),
                pieces=pieces,
                heat=heat or coil,
                net_lbs=pair['net'],
                gross_lbs=pair['gross'],
                finish=finish,
                container=container,
            ))
        return items

    # ------------------------------------------------------------------
    # Text strategies
    # ------------------------------------------------------------------

    def parse_text(self, context: ExtractionContext) -> List[PackingListItem]:
        """Gauge size anchored rows on native text."""
        scanner = TextScanner(context.text)
        size_tokens = scanner.find_all(self.SIZE_RE)
        return self._rows_from_sizes(context, scanner, size_tokens, validate=False)

    def parse_ocr_text(self, context: ExtractionContext) -> List[PackingListItem]:
        """Permissive gauge sizes on cleaned OCR text, range-filtered."""
        scanner = TextScanner(clean_ocr_text(context.text))
        size_tokens = scanner.find_all(self.OCR_SIZE_RE)
        return self._rows_from_sizes(context, scanner, size_tokens, validate=True)

    def parse_by_coils(self, context: ExtractionContext) -> List[PackingListItem]:
        """
        Anchor-based reconstruction from coil numbers.

        Each coil number takes the nearest plausible gauge size before it,
        or carries the previous coil's size forward.
        """
        text = clean_ocr_text(context.text)
        scanner = TextScanner(text)
        coils = scanner.find_all(self.COIL_RE)
        if not coils:
            return []

        size_tokens = [
            t for t in scanner.find_all(self.OCR_SIZE_RE)
            if self.is_plausible(self._size_from_token(t))
        ]
        finishes = self.fields.finish_sections(text)
        containers = self.fields.container_sections(text)
        item_codes = scanner.find_all(self.ITEM_RE)

        items: List[PackingListItem] = []
        last_size: Optional[ParsedSize] = None
        last_raw = ''
        for index, coil in enumerate(coils):
            token = scanner.nearest_before(size_tokens, coil.start, self.ANCHOR_LOOKBACK)
            if token is not None:
                last_size = self._size_from_token(token)
                last_raw = token.text
            elif last_size is None:
                continue

            next_start = coils[index + 1].start if index + 1 < len(coils) else len(text)
            row = self._row_fields(scanner, coil.end, min(self.ROW_WINDOW, next_start - coil.end))
            item = scanner.nearest_before(item_codes, coil.start, self.ANCHOR_LOOKBACK)

            items.append(self.make_item(
                context, last_size, last_raw,
                lot_token=item.group(1) if item else str(len(items) + 1),
                pieces=row.pieces,
                heat=row.heat or coil.group(1),
                net_lbs=row.net,
                gross_lbs=row.gross,
                finish=section_value_at(finishes, coil.start),
                container=section_value_at(containers, coil.start),
            ))
        return items

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _rows_from_sizes(
        self,
        context: ExtractionContext,
        scanner: TextScanner,
        size_tokens: Sequence[Token],
        validate: bool
    ) -> List[PackingListItem]:
        if not size_tokens:
            return []

        finishes = self.fields.finish_sections(scanner.text)
        containers = self.fields.container_sections(scanner.text)
        items: List[PackingListItem] = []

        for index, token in enumerate(size_tokens):
            size = self._size_from_token(token)
            if size is None or (validate and not self.is_plausible(size)):
                logger.debug(f"Discarding size token {token.text!r}")
                continue

            if index + 1 < len(size_tokens):
                limit = min(self.ROW_WINDOW, size_tokens[index + 1].start - token.end)
            else:
                limit = self.ROW_WINDOW
            row = self._row_fields(scanner, token.end, limit)
            item = scanner.search_before(self.ITEM_RE, token.start, self.ITEM_LOOKBACK)

            items.append(self.make_item(
                context, size, token.text,
                lot_token=item.group(1) if item else str(len(items) + 1),
                pieces=row.pieces,
                heat=row.heat or row.coil,
                net_lbs=row.net,
                gross_lbs=row.gross,
                finish=section_value_at(finishes, token.start),
                container=section_value_at(containers, token.start),
            ))
        return items

    def _row_fields(self, scanner: TextScanner, position: int, limit: int) -> RowFields:
        """Coil, heat, pieces and weights in the window after a size or coil."""
        row = RowFields()
        numbers = scanner.search_after(self.ROW_NUMBERS_RE, position, limit)
        heat_limit = (numbers.start - position) if numbers else limit

        coil = scanner.search_after(self.COIL_RE, position, heat_limit)
        if coil:
            row.coil = coil.group(1)
        for heat in scanner.search_all_after(self.HEAT_RE, position, heat_limit):
            if coil is None or not heat.overlaps(coil):
                row.heat = heat.group(1)
                break

        if numbers:
            row.pieces = float(numbers.group(1))
            row.net = float(numbers.group(2).replace(',', ''))
            row.gross = float(numbers.group(3).replace(',', ''))
            return row

        pcs = scanner.search_after(self.PCS_RE, position, limit)
        row.pieces = float(pcs.group(1)) if pcs else None
        weights = numbers_in_range(
            scanner.search_all_after(self.LBS_WEIGHT_RE, position, limit), 100, 100000
        )
        pair = first_two(weights)
        row.net, row.gross = pair['net'], pair['gross']
        return row

    @staticmethod
    def _size_from_token(token: Token) -> Optional[ParsedSize]:
        thickness = gauge_to_decimal(token.group(1))
        if thickness is None:
            return None
        return ParsedSize(thickness, float(token.group(2)), float(token.group(3)))

    @staticmethod
    def _last_section(sections: Sequence[Section]) -> Optional[str]:
        return sections[-1].value if sections else None
