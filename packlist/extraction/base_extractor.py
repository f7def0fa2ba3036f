"""
Base Extractor Module.

Common machinery for the per-supplier extractors: the strategy chain,
item construction (inventory ID, lot/serial, weight rounding), and the
header-row locator used by the spreadsheet strategies.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from packlist.normalizer import (
    DimensionValidator,
    IdentifierBuilder,
    ParsedSize,
    SizeParser,
    mt_to_lbs,
)
from packlist.suppliers import Supplier
from packlist.utils.helpers import cell_to_text, parse_number
from packlist.utils.logger import get_logger
from .header_fields import HeaderFieldExtractor
from .packing_list import PackingListItem
from .strategy import ChainResult, ExtractionContext, ExtractionStrategy, StrategyChain

# Initialize module logger
logger = get_logger(__name__)

# Pounds per kilogram
KG_TO_LBS = 2.20462

TOTAL_ROW_RE = re.compile(r'\b(?:sub\s*-?\s*)?total\b', re.IGNORECASE)


class BaseExtractor(ABC):
    """
    Base class for supplier extractors.

    Subclasses set ``supplier`` and return their ordered strategies from
    :meth:`strategies`. Strategies must return an empty list rather than
    raise when their pattern does not apply.

    Attributes:
        identifiers: Inventory ID and lot/serial builder.
        sizes: Size grammar parser.
        dimensions: Plausible-range validator.
        fields: Header field extractor (finish, container, PO).
    """

    supplier: Supplier = Supplier.UNKNOWN

    # Rows scanned for a header row
    HEADER_SCAN_ROWS = 25

    def __init__(
        self,
        identifiers: Optional[IdentifierBuilder] = None,
        sizes: Optional[SizeParser] = None,
        dimensions: Optional[DimensionValidator] = None,
        fields: Optional[HeaderFieldExtractor] = None
    ) -> None:
        self.identifiers = identifiers or IdentifierBuilder()
        self.sizes = sizes or SizeParser()
        self.dimensions = dimensions or DimensionValidator()
        self.fields = fields or HeaderFieldExtractor()
        self.chain = StrategyChain(self.strategies(), label=self.supplier.display_name)

        logger.debug(f"{type(self).__name__} initialized (strategies: {self.chain.names})")

    @abstractmethod
    def strategies(self) -> List[ExtractionStrategy]:
        """Ordered fallback strategies, strictest first."""

    def extract(self, context: ExtractionContext) -> ChainResult:
        """Run the fallback chain over one page or sheet."""
        return self.chain.run(context)

    # ------------------------------------------------------------------
    # Item construction
    # ------------------------------------------------------------------

    def make_item(
        self,
        context: ExtractionContext,
        size: ParsedSize,
        raw_size: str,
        lot_token: Optional[str] = None,
        pieces: Optional[float] = None,
        heat: Optional[str] = None,
        net_lbs: Optional[float] = None,
        gross_lbs: Optional[float] = None,
        finish: Optional[str] = None,
        container: Optional[str] = None,
        po_number: Optional[str] = None
    ) -> PackingListItem:
        """
        Build a canonical item.

        Args:
            context: Strategy context (supplies the document PO).
            size: Parsed size.
            raw_size: Size text as matched.
            lot_token: Bundle/item number as printed, if any.
            pieces: Piece count; values below 1 become 1.
            heat: Heat or coil number.
            net_lbs: Net weight in pounds.
            gross_lbs: Gross weight in pounds.
            finish: Finish designation for this row.
            container: Container number for this row.
            po_number: Row-level PO when it differs from the document's.
        """
        po_for_lot = po_number or context.po_number
        net = float(round(net_lbs or 0))
        gross = float(round(gross_lbs or 0))
        if gross == 0 and net:
            gross = net
        if net == 0 and gross:
            net = gross

        return PackingListItem(
            inventory_id=self.identifiers.inventory_id(size, self.supplier, finish),
            lot_serial_nbr=self.identifiers.lot_serial(lot_token, po_for_lot),
            piece_count=max(int(pieces or 1), 1),
            heat_number=(heat or '').strip(),
            gross_weight_lbs=gross,
            net_weight_lbs=net,
            raw_size=' '.join((raw_size or '').split()),
            size=size,
            finish=finish,
            container_number=container,
            po_number_override=po_number if po_number and po_number != context.po_number else None,
        )

    def is_plausible(self, size: Optional[ParsedSize]) -> bool:
        return self.dimensions.is_valid(size, self.supplier)

    # ------------------------------------------------------------------
    # Grid helpers
    # ------------------------------------------------------------------

    def find_header_row(
        self,
        rows: Sequence[Sequence[Any]],
        keywords: Sequence[str],
        min_matches: int = 2
    ) -> Optional[int]:
        """
        Index of the first row naming at least ``min_matches`` keywords.

        Only the first HEADER_SCAN_ROWS rows are scanned.
        """
        for index, row in enumerate(rows[:self.HEADER_SCAN_ROWS]):
            row_text = ' '.join(cell_to_text(c) for c in row).lower()
            matches = sum(1 for keyword in keywords if keyword in row_text)
            if matches >= min_matches:
                return index
        return None

    @staticmethod
    def find_column(
        header: Sequence[Any],
        candidates: Sequence[str],
        exclude: Sequence[str] = ()
    ) -> Optional[int]:
        """
        First header cell containing any candidate keyword.

        Candidates are tried in order, so list the most specific first.
        """
        cells = [cell_to_text(c).lower() for c in header]
        for candidate in candidates:
            for index, cell in enumerate(cells):
                if candidate in cell and not any(e in cell for e in exclude):
                    return index
        return None

    @staticmethod
    def cell(row: Sequence[Any], index: Optional[int]) -> str:
        if index is None or index >= len(row):
            return ''
        return cell_to_text(row[index])

    @staticmethod
    def number(row: Sequence[Any], index: Optional[int]) -> Optional[float]:
        if index is None or index >= len(row):
            return None
        return parse_number(row[index])

    @staticmethod
    def is_total_row(row: Sequence[Any]) -> bool:
        return any(TOTAL_ROW_RE.search(cell_to_text(c)) for c in row)

    @staticmethod
    def weight_to_lbs(value: Optional[float], header: str = '') -> float:
        """
        Convert a weight cell to pounds using its header unit.

        Headers mentioning MT (or unlabeled values under 100) are metric
        tons; KG headers are kilograms; anything else is pounds.
        """
        if not value:
            return 0.0
        unit = header.lower()
        if 'kg' in unit:
            return float(round(value * KG_TO_LBS))
        if 'mt' in unit or ('lb' not in unit and value < 100):
            return float(mt_to_lbs(value))
        return float(round(value))

    def section_rows_text(self, rows: Sequence[Sequence[Any]]) -> str:
        return '\n'.join(' '.join(cell_to_text(c) for c in row) for row in rows)


def first_two(values: List[float]) -> Dict[str, float]:
    """Net and gross from a list of weights in document order."""
    if not values:
        return {'net': 0.0, 'gross': 0.0}
    if len(values) == 1:
        return {'net': values[0], 'gross': values[0]}
    return {'net': values[0], 'gross': values[1]}
