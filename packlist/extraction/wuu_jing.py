"""
Wuu Jing Extractor Module.

Wuu Jing lists hot-rolled plate with metric sizes followed by the imperial
equivalent in parentheses, one bundle number per row, and weights in
metric tons:

    1 9.53*1525MM*3050MM(3/8"*60"*120") 6 001837-01 EITU3156602 2.112 2.125

Fallback chain:
    1. grid-header: spreadsheet with a SIZE / BUNDLE / WEIGHT header row
    2. grid-headerless: spreadsheet rows recognised by cell shapes
    3. regex-anchored: metric+imperial size, bundle and weights in windows
    4. ocr-tolerant: confusion cleanup, permissive size patterns, range filter
    5. anchor-reconstruction: bundle numbers as anchors with size carry-forward
"""

import re
from typing import List, Optional

from packlist.normalizer import ParsedSize, mm_to_decimal, mm_to_inches
from packlist.suppliers import Supplier
from packlist.utils.helpers import cell_to_text, parse_number
from packlist.utils.logger import get_logger
from .base_extractor import BaseExtractor, first_two
from .header_fields import BUNDLE_RE, CONTAINER_RE, Section, section_value_at
from .ocr_cleanup import clean_ocr_text, repair_thickness
from .packing_list import PackingListItem
from .strategy import ExtractionContext, ExtractionStrategy
from .text_scanner import TextScanner, Token, numbers_in_range

# Initialize module logger
logger = get_logger(__name__)

_T = r'[*×xX]'
_Q = r'["”\'`]*'


class WuuJingExtractor(BaseExtractor):
    """
    Extractor for Wuu Jing packing lists.

    Example:
        >>> extractor = WuuJingExtractor()
        >>> result = extractor.extract(ExtractionContext(text=page_text, po_number="1837"))
        >>> result.items[0].lot_serial_nbr
        '001837-01'
    """

    supplier = Supplier.WUU_JING

    SIZE_RE = re.compile(
        r'(\d+\.?\d*)\s*\*\s*(\d+)\s*MM\s*\*\s*(\d+)\s*MM\s*\(([^)]+)\)', re.IGNORECASE
    )

    # Permissive size shapes for OCR text, most specific first
    OCR_SIZE_PATTERNS = [
        re.compile(rf'(\d+\.?\d*)\s*{_T}\s*(\d{{3,4}})\s*MM\s*{_T}\s*(\d{{3,5}})\s*MM\s*\(([^)]*)\)',
                   re.IGNORECASE),
        re.compile(rf'(\d+\.?\d*)\s*{_T}\s*(\d{{3,4}})\s*[MN]\s*[MN]\s*{_T}\s*(\d{{3,5}})\s*[MN]\s*[MN]\s*\(([^)]*)\)',
                   re.IGNORECASE),
        re.compile(rf'(\d+\.?\d*)\s*{_T}\s*(\d{{3,4}})\s*{_T}\s*(\d{{3,5}})\s*\(([^)]*)\)',
                   re.IGNORECASE),
        re.compile(rf'(\d+\.?\d*)\s*{_T}\s*(\d{{3,4}})\s*(?:MM)?\s*{_T}\s*(\d{{3,5}})\s*(?:MM)?()',
                   re.IGNORECASE),
    ]

    IMPERIAL_LOOSE_RE = re.compile(
        rf'(\d+\s*/\s*\d+|\d*\.\d+|\d+)\s*{_Q}\s*{_T}\s*(\d{{2}})\s*{_Q}\s*{_T}\s*(\d{{2,3}})'
    )

    # Imperial size shapes near a bundle anchor; earlier shapes claim their span
    ANCHOR_SIZE_PATTERNS = [
        re.compile(rf'(\d+\s*/\s*\d+)\s*["”\'`]+\s*{_T}\s*(\d{{2}})\s*{_Q}\s*{_T}\s*(\d{{2,3}})'),
        re.compile(rf'(\d*\.\d+)\s*{_Q}\s*{_T}\s*(\d{{2}})\s*{_Q}\s*{_T}\s*(\d{{2,3}})'),
        re.compile(rf'(\d+\s*/\s*\d+)\s*{_T}\s*(\d{{2}})\s*{_T}\s*(\d{{2,3}})'),
        re.compile(rf'\b([2-8]|16)\s*{_Q}\s*{_T}\s*(\d{{2}})\s*{_Q}\s*{_T}\s*(\d{{2,3}})'),
    ]

    # Weights in metric tons: 2.112
    MT_WEIGHT_RE = re.compile(r'(?<![\d.,])(\d{1,2}\.\d{3})(?![\d])')

    # Piece count printed between the size and the bundle number
    PCS_AFTER_SIZE_RE = re.compile(r'\s*(\d{1,3})\s+(?=\d{6}-)')
    PCS_BEFORE_BUNDLE_RE = re.compile(r'(?<![\d.,])(\d{1,2})\s*$')

    # Window sizes in characters
    BUNDLE_WINDOW = 300
    WEIGHT_WINDOW = 100
    OCR_WEIGHT_WINDOW = 150
    ANCHOR_LOOKBACK = 400

    def strategies(self) -> List[ExtractionStrategy]:
        return [
            ExtractionStrategy('grid-header', self.parse_grid),
            ExtractionStrategy('grid-headerless', self.parse_grid_without_headers),
            ExtractionStrategy('regex-anchored', self.parse_text),
            ExtractionStrategy('ocr-tolerant', self.parse_ocr_text),
            ExtractionStrategy('anchor-reconstruction', self.parse_by_bundles),
        ]

    # ------------------------------------------------------------------
    # Spreadsheet strategies
    # ------------------------------------------------------------------

    def parse_grid(self, context: ExtractionContext) -> List[PackingListItem]:
        """Header-row grid: SIZE, PC, BUNDLE NO., CONTAINER, N'WEIGHT, G'WEIGHT."""
        rows = context.rows or []
        header_index = self.find_header_row(rows, ['size', 'bundle', 'weight'])
        if header_index is None:
            return []

        header = rows[header_index]
        columns = {
            'size': self.find_column(header, ['size', 'specification', 'spec']),
            'pcs': self.find_column(header, ['pcs', "pc'", 'pc', 'pieces', "q'ty", 'qty'],
                                    exclude=['spec']),
            'bundle': self.find_column(header, ['bundle']),
            'container': self.find_column(header, ['container']),
            'net': self.find_column(header, ["n'weight", 'nweight', 'n weight', 'n.w', 'net']),
            'gross': self.find_column(header, ["g'weight", 'gweight', 'g weight', 'g.w', 'gross']),
            'heat': self.find_column(header, ['heat', 'product']),
        }
        if columns['size'] is None:
            return []

        above = self.section_rows_text(rows[:header_index])
        finish = self.fields.finish(above)
        net_unit = self.cell(header, columns['net'])
        gross_unit = self.cell(header, columns['gross'])

        items: List[PackingListItem] = []
        for row in rows[header_index + 1:]:
            if self.is_total_row(row):
                continue
            raw_size = self.cell(row, columns['size'])
            size = self.sizes.parse_metric_imperial_size(raw_size)
            if size is None:
                continue

            net = self.weight_to_lbs(self.number(row, columns['net']), net_unit)
            gross = self.weight_to_lbs(self.number(row, columns['gross']), gross_unit)
            items.append(self.make_item(
                context, size, raw_size,
                lot_token=self.cell(row, columns['bundle']),
                pieces=self.number(row, columns['pcs']),
                heat=self.cell(row, columns['heat']),
                net_lbs=net,
                gross_lbs=gross,
                finish=finish,
                container=self.cell(row, columns['container']) or None,
            ))
        return items

    def parse_grid_without_headers(self, context: ExtractionContext) -> List[PackingListItem]:
        """Rows recognised by a size cell plus a bundle-number cell."""
        rows = context.rows or []
        finish = self.fields.finish(self.section_rows_text(rows))
        items: List[PackingListItem] = []

        for row in rows:
            cells = [cell_to_text(c) for c in row]
            size_index = next(
                (i for i, c in enumerate(cells) if self.sizes.parse_metric_imperial_size(c)), None
            )
            bundle_index = next((i for i, c in enumerate(cells) if BUNDLE_RE.fullmatch(c)), None)
            if size_index is None or bundle_index is None:
                continue

            numbers = [
                parse_number(row[i]) for i in range(size_index + 1, len(row))
                if i != bundle_index and parse_number(row[i]) is not None
            ]
            pieces_index = next(
                (i for i, n in enumerate(numbers) if float(n).is_integer() and 1 <= n <= 500), None
            )
            pieces = None
            weights = numbers
            if pieces_index is not None:
                pieces = numbers[pieces_index]
                weights = numbers[:pieces_index] + numbers[pieces_index + 1:]
            pair = first_two(weights)
            container = next((c for c in cells if CONTAINER_RE.fullmatch(c)), None)

            items.append(self.make_item(
                context,
                self.sizes.parse_metric_imperial_size(cells[size_index]),
                cells[size_index],
                lot_token=cells[bundle_index],
                pieces=pieces,
                net_lbs=self.weight_to_lbs(pair['net']),
                gross_lbs=self.weight_to_lbs(pair['gross']),
                finish=finish,
                container=container,
            ))
        return items

    # ------------------------------------------------------------------
    # Text strategies
    # ------------------------------------------------------------------

    def parse_text(self, context: ExtractionContext) -> List[PackingListItem]:
        """
        Regex-anchored match on native text.

        Each metric+imperial size is paired with the first bundle number
        after it (before the next size), the piece count printed between
        them, and the first two MT weights after the bundle.
        """
        scanner = TextScanner(context.text)
        size_tokens = scanner.find_all(self.SIZE_RE)
        if not size_tokens:
            return []

        finishes = self.fields.finish_sections(context.text)
        containers = self.fields.container_sections(context.text)
        bundles = scanner.find_all(BUNDLE_RE)
        items: List[PackingListItem] = []

        for index, token in enumerate(size_tokens):
            size = self.sizes.parse_metric_imperial_size(token.text)
            if size is None:
                continue

            limit = self._limit(size_tokens, index, token.end, self.BUNDLE_WINDOW)
            bundle = scanner.first_after(bundles, token.end, limit)
            pcs_match = self.PCS_AFTER_SIZE_RE.match(context.text, token.end)
            pieces = float(pcs_match.group(1)) if pcs_match else None

            weights: List[float] = []
            container = None
            if bundle is not None:
                weight_limit = min(self.WEIGHT_WINDOW, limit - (bundle.end - token.end))
                weights = numbers_in_range(
                    scanner.search_all_after(self.MT_WEIGHT_RE, bundle.end, weight_limit), 0.5, 50
                )
                container_token = scanner.search_after(CONTAINER_RE, bundle.end, 30)
                container = container_token.group(1) if container_token else None

            items.append(self._build(
                context, size, token.text, bundle, pieces, weights, finishes,
                containers, token.start, container
            ))
        return items

    def parse_ocr_text(self, context: ExtractionContext) -> List[PackingListItem]:
        """
        OCR-tolerant match.

        Cleans confusions, then tries the permissive size shapes in order;
        recovered sizes outside the plausible range are discarded.
        """
        text = clean_ocr_text(context.text)
        scanner = TextScanner(text)

        size_tokens: List[Token] = []
        for pattern in self.OCR_SIZE_PATTERNS:
            size_tokens = scanner.find_all(pattern)
            if size_tokens:
                break
        if not size_tokens:
            return []

        finishes = self.fields.finish_sections(text)
        containers = self.fields.container_sections(text)
        bundles = scanner.find_all(BUNDLE_RE)
        items: List[PackingListItem] = []

        for index, token in enumerate(size_tokens):
            size = self._size_from_ocr_token(token)
            if not self.is_plausible(size):
                logger.debug(f"Discarding implausible OCR size: {token.text!r}")
                continue

            limit = self._limit(size_tokens, index, token.end, self.BUNDLE_WINDOW)
            bundle = scanner.first_after(bundles, token.end, limit)
            pcs_match = self.PCS_AFTER_SIZE_RE.match(text, token.end)
            pieces = float(pcs_match.group(1)) if pcs_match else None

            weights: List[float] = []
            if bundle is not None:
                weight_limit = min(self.OCR_WEIGHT_WINDOW, limit - (bundle.end - token.end))
                weights = numbers_in_range(
                    scanner.search_all_after(self.MT_WEIGHT_RE, bundle.end, weight_limit), 0.3, 50
                )

            container = None
            if bundle is not None:
                container_token = scanner.search_after(CONTAINER_RE, bundle.end, 30)
                container = container_token.group(1) if container_token else None

            items.append(self._build(
                context, size, token.text, bundle, pieces, weights, finishes,
                containers, token.start, container
            ))
        return items

    def parse_by_bundles(self, context: ExtractionContext) -> List[PackingListItem]:
        """
        Anchor-based reconstruction from bundle numbers.

        For each bundle, the nearest plausible imperial size within the
        lookback window is used; when there is none, the previous bundle's
        size is carried forward. Bundles before the first size are skipped.
        """
        text = clean_ocr_text(context.text)
        scanner = TextScanner(text)
        bundles = scanner.find_all(BUNDLE_RE)
        if not bundles:
            return []

        size_tokens = [
            t for t in scanner.find_claimed(self.ANCHOR_SIZE_PATTERNS)
            if self.is_plausible(self._size_from_parts(t))
        ]
        finishes = self.fields.finish_sections(text)
        containers = self.fields.container_sections(text)

        items: List[PackingListItem] = []
        last_size: Optional[ParsedSize] = None
        last_raw = ''
        for index, bundle in enumerate(bundles):
            token = scanner.nearest_before(size_tokens, bundle.start, self.ANCHOR_LOOKBACK)
            if token is not None:
                last_size = self._size_from_parts(token)
                last_raw = token.text
            elif last_size is None:
                logger.debug(f"No size before first bundle {bundle.text}, skipping")
                continue
            else:
                logger.debug(f"Carrying size {last_size.key} forward to bundle {bundle.text}")

            pcs_match = self.PCS_BEFORE_BUNDLE_RE.search(scanner.window_before(bundle.start, 30))
            pieces = None
            if pcs_match and 1 <= int(pcs_match.group(1)) <= 20:
                pieces = float(pcs_match.group(1))

            next_start = bundles[index + 1].start if index + 1 < len(bundles) else len(text)
            window = min(self.OCR_WEIGHT_WINDOW, next_start - bundle.end)
            weights = numbers_in_range(
                scanner.search_all_after(self.MT_WEIGHT_RE, bundle.end, window), 0.3, 50
            )
            container_token = scanner.search_after(CONTAINER_RE, bundle.end, 30)

            items.append(self._build(
                context, last_size, last_raw, bundle, pieces, weights, finishes,
                containers, bundle.start,
                container_token.group(1) if container_token else None
            ))
        return items

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build(
        self,
        context: ExtractionContext,
        size: ParsedSize,
        raw_size: str,
        bundle: Optional[Token],
        pieces: Optional[float],
        weights: List[float],
        finishes: List[Section],
        containers: List[Section],
        position: int,
        container: Optional[str]
    ) -> PackingListItem:
        pair = first_two(weights)
        return self.make_item(
            context, size, raw_size,
            lot_token=bundle.text if bundle else None,
            pieces=pieces,
            net_lbs=self.weight_to_lbs(pair['net'], 'mt'),
            gross_lbs=self.weight_to_lbs(pair['gross'], 'mt'),
            finish=section_value_at(finishes, position),
            container=container or section_value_at(containers, position),
        )

    @staticmethod
    def _limit(tokens: List[Token], index: int, position: int, window: int) -> int:
        """Window after ``position`` that stops at the next size token."""
        if index + 1 < len(tokens):
            return max(0, min(window, tokens[index + 1].start - position))
        return window

    def _size_from_ocr_token(self, token: Token) -> Optional[ParsedSize]:
        imperial = token.group(4) or ''
        match = self.IMPERIAL_LOOSE_RE.search(imperial)
        if match:
            thickness = repair_thickness(match.group(1))
            if thickness:
                return ParsedSize(thickness, float(match.group(2)), float(match.group(3)))

        thickness = mm_to_decimal(token.group(1))
        if thickness is None:
            return None
        return ParsedSize(
            thickness,
            float(mm_to_inches(float(token.group(2)))),
            float(mm_to_inches(float(token.group(3))))
        )

    @staticmethod
    def _size_from_parts(token: Token) -> Optional[ParsedSize]:
        thickness = repair_thickness(token.group(1))
        if not thickness:
            return None
        return ParsedSize(thickness, float(token.group(2)), float(token.group(3)))
