"""
Generic Extractor Module.

Last-resort extractor for documents from an unrecognised mill. It knows
no supplier grammar; it looks for any size the normalizer can parse and
reads the piece count and weights printed after it.
"""

import re
from typing import List

from packlist.utils.logger import get_logger
from .base_extractor import BaseExtractor, first_two
from .header_fields import BUNDLE_RE
from .packing_list import PackingListItem
from .strategy import ExtractionContext, ExtractionStrategy
from .text_scanner import TextScanner, numbers_in_range

# Initialize module logger
logger = get_logger(__name__)


class GenericExtractor(BaseExtractor):
    """Size-anchored extraction without supplier knowledge."""

    PIECES_RE = re.compile(r'^\s*(?:[xX]\s*)?(\d{1,3})(?![\d.,])')
    LBS_RE = re.compile(r'(?<![\w.,])(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d{3,6}(?:\.\d+)?)(?![\d,])')
    MT_RE = re.compile(r'(?<![\d.,])(\d{1,2}\.\d{3})(?![\d])')

    ROW_WINDOW = 200

    def strategies(self) -> List[ExtractionStrategy]:
        return [
            ExtractionStrategy('grid-generic', self.parse_grid),
            ExtractionStrategy('generic-sizes', self.parse_text),
        ]

    def parse_grid(self, context: ExtractionContext) -> List[PackingListItem]:
        rows = context.rows or []
        header_index = self.find_header_row(rows, ['size', 'pcs', 'weight', 'heat', 'qty'])
        if header_index is None:
            return []

        header = rows[header_index]
        size_col = self.find_column(header, ['size', 'description', 'spec'])
        if size_col is None:
            return []
        pcs_col = self.find_column(header, ['pcs', 'pc', 'qty', 'pieces'], exclude=['spec'])
        net_col = self.find_column(header, ['net', "n'weight"])
        gross_col = self.find_column(header, ['gross', "g'weight"])
        heat_col = self.find_column(header, ['heat', 'coil'])
        lot_col = self.find_column(header, ['bundle', 'lot', 'item'])

        items: List[PackingListItem] = []
        for row in rows[header_index + 1:]:
            if self.is_total_row(row):
                continue
            raw_size = self.cell(row, size_col)
            size = self.sizes.parse_size(raw_size)
            if not self.is_plausible(size):
                continue
            items.append(self.make_item(
                context, size, raw_size,
                lot_token=self.cell(row, lot_col) or str(len(items) + 1),
                pieces=self.number(row, pcs_col),
                heat=self.cell(row, heat_col),
                net_lbs=self.weight_to_lbs(self.number(row, net_col), self.cell(header, net_col)),
                gross_lbs=self.weight_to_lbs(self.number(row, gross_col), self.cell(header, gross_col)),
                finish=self.fields.finish(self.section_rows_text(rows[:header_index])),
            ))
        return items

    def parse_text(self, context: ExtractionContext) -> List[PackingListItem]:
        """Every parseable size, with pieces and weights up to the next size."""
        scanner = TextScanner(context.text)
        matches = [m for m in self.sizes.find_sizes(context.text) if self.is_plausible(m.size)]
        finish = self.fields.finish(context.text)
        items: List[PackingListItem] = []

        for index, match in enumerate(matches):
            next_start = matches[index + 1].start if index + 1 < len(matches) else len(context.text)
            limit = min(self.ROW_WINDOW, next_start - match.end)
            window = scanner.window_after(match.end, limit)

            pieces_match = self.PIECES_RE.match(window)
            bundle = scanner.search_after(BUNDLE_RE, match.end, limit)

            mt_weights = numbers_in_range(
                scanner.search_all_after(self.MT_RE, match.end, limit), 0.3, 50
            )
            if mt_weights:
                pair = first_two(mt_weights)
                net = self.weight_to_lbs(pair['net'], 'mt')
                gross = self.weight_to_lbs(pair['gross'], 'mt')
            else:
                pair = first_two(numbers_in_range(
                    scanner.search_all_after(self.LBS_RE, match.end, limit), 100, 100000
                ))
                net, gross = pair['net'], pair['gross']

            items.append(self.make_item(
                context, match.size, match.raw,
                lot_token=bundle.text if bundle else str(len(items) + 1),
                pieces=float(pieces_match.group(1)) if pieces_match else None,
                net_lbs=net,
                gross_lbs=gross,
                finish=finish,
            ))
        if items:
            logger.debug(f"Generic size scan matched {len(items)} rows")
        return items
