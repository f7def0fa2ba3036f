"""
Header Fields Module.

Document-level fields that sit outside the item rows:
    - PO number (explicit, filename, spreadsheet cell, bundle numbers,
      sales-order pairs, free text)
    - Receiving warehouse
    - Finish sections ("304/304L 2B Finish", "NO.1 FINISH")
    - Container sections ("CONTAINER NO. FFAU2098727")
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import get_config
from packlist.normalizer import normalize_finish
from packlist.utils.helpers import cell_to_text, rows_to_text
from packlist.utils.logger import get_logger
from .packing_list import UNKNOWN_PO
from .text_scanner import TextScanner

# Initialize module logger
logger = get_logger(__name__)

# Bundle numbers: 001837-01 and 001837-3-01
BUNDLE_RE = re.compile(r'\b(\d{6})-(\d{2})\b')
BUNDLE_3_PART_RE = re.compile(r'\b(\d{6})-(\d+)-(\d{2})\b')

# Sales order followed by PO: "S2509021 001715"
SALES_ORDER_RE = re.compile(r'\bS(\d{7})\s+(\d{6})\b')

# ISO 6346 container number
CONTAINER_RE = re.compile(r'\b([A-Z]{4}\d{7})\b')


@dataclass(frozen=True)
class Section:
    """A value that applies from ``start`` until the next section."""
    start: int
    value: str


def strip_po(po: str) -> str:
    """Drop leading zeros ("001837" -> "1837"), keeping at least one digit."""
    return po.lstrip('0') or '0'


def section_value_at(sections: Sequence[Section], position: int) -> Optional[str]:
    """Value of the last section starting before ``position``."""
    value = None
    for section in sections:
        if section.start <= position:
            value = section.value
        else:
            break
    return value


class HeaderFieldExtractor:
    """
    Finds PO, warehouse, finish and container values in text or grids.

    Example:
        >>> fields = HeaderFieldExtractor()
        >>> fields.po_from_text("EXCEL ORDER # 001726")
        '1726'
        >>> fields.warehouse("SHIP TO: BALTIMORE, MD")
        ('Baltimore', True)
    """

    PO_PATTERNS = [
        re.compile(r'EXCEL\s+ORDER\s*#\s*:?\s*(\d{3,6})(?!\d)', re.IGNORECASE),
        re.compile(r'EXCEL\s+METALS.{0,40}?ORDER\s*NO\.?\s*:?\s*(\d{3,6})(?!\d)', re.IGNORECASE),
        re.compile(r'\bP[./]?O\.?\s*(?:NO\.?|#|NUMBER)?\s*[:#-]?\s*(\d{3,6})(?!\d)', re.IGNORECASE),
        re.compile(r'(?<!INVOICE )\bORDER\s*(?:NO\.?|#|NUMBER)?\s*[:#-]?\s*(\d{3,6})(?!\d)', re.IGNORECASE),
    ]

    # Cells holding only a PO label, whose value sits in the next cell
    PO_LABEL_RE = re.compile(
        r'^(?:EXCEL\s+)?(?:ORDER|P[./]?O\.?)\s*(?:NO\.?|#|NUMBER)?\s*:?$', re.IGNORECASE
    )

    WAREHOUSE_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
        ('Baltimore', re.compile(r'\bbaltimore\b', re.IGNORECASE)),
        ('Houston', re.compile(r'\bhouston\b', re.IGNORECASE)),
        ('Oakland', re.compile(r'\boakland\b', re.IGNORECASE)),
        ('Seattle', re.compile(r'\bseattle\b', re.IGNORECASE)),
        ('Kent', re.compile(r'\bkent\b', re.IGNORECASE)),
        ('Tampa', re.compile(r'\btampa\b', re.IGNORECASE)),
        ('Camden', re.compile(r'\bcamden\b', re.IGNORECASE)),
        ('LA', re.compile(r'\blos\s+angeles\b|\bla\s*,|\bto\s*:\s*la\b', re.IGNORECASE)),
    ]

    FINISH_PATTERNS = [
        re.compile(r'304\s*/\s*304L\s*(2B|BA|#\s*\d|NO\.?\s*\d)\s*FINISH', re.IGNORECASE),
        re.compile(r'\b(NO\.?\s*\d|#\d|2B|BA)\s*FINISH', re.IGNORECASE),
    ]

    CONTAINER_SECTION_RE = re.compile(
        r'CONTAINER\s*(?:NO\.?|#)?\s*:?\s*([A-Z]{4}\d{7})', re.IGNORECASE
    )

    def __init__(self) -> None:
        self.default_warehouse = get_config("warehouse.default", "LA")
        logger.debug(f"HeaderFieldExtractor initialized (default warehouse: {self.default_warehouse})")

    # ------------------------------------------------------------------
    # PO number
    # ------------------------------------------------------------------

    def po_from_text(self, text: str) -> Optional[str]:
        """PO stated in the text ("PO 1837", "EXCEL ORDER # 001726")."""
        for pattern in self.PO_PATTERNS:
            match = pattern.search(text or '')
            if match:
                return strip_po(match.group(1))
        return None

    def po_from_filename(self, filename: Optional[str]) -> Optional[str]:
        if not filename:
            return None
        return self.po_from_text(re.sub(r'[_]+', ' ', filename))

    def po_from_bundles(self, text: str) -> Optional[str]:
        """Most common PO prefix among bundle numbers."""
        scanner = TextScanner(text)
        prefixes = [t.group(1) for t in scanner.find_all(BUNDLE_3_PART_RE)]
        if not prefixes:
            prefixes = [t.group(1) for t in scanner.find_all(BUNDLE_RE)]
        if not prefixes:
            return None
        most_common, _count = Counter(prefixes).most_common(1)[0]
        return strip_po(most_common)

    def sales_order_map(self, text: str) -> Dict[str, str]:
        """Sales order number -> PO, from "S2509021 001715" pairs."""
        mapping: Dict[str, str] = {}
        for match in SALES_ORDER_RE.finditer(text or ''):
            mapping.setdefault(f"S{match.group(1)}", strip_po(match.group(2)))
        return mapping

    def po_from_sales_orders(self, text: str) -> Optional[str]:
        pos = list(self.sales_order_map(text).values())
        if not pos:
            return None
        return Counter(pos).most_common(1)[0][0]

    def all_pos(self, text: str) -> List[str]:
        """Every distinct PO referenced by bundles or sales orders, in order."""
        found: List[str] = []
        candidates = [m.group(1) for m in BUNDLE_3_PART_RE.finditer(text or '')]
        candidates += [m.group(1) for m in BUNDLE_RE.finditer(text or '')]
        candidates += [m.group(2) for m in SALES_ORDER_RE.finditer(text or '')]
        for candidate in candidates:
            po = strip_po(candidate)
            if po not in found:
                found.append(po)
        return found

    def po_from_grid(self, rows: Sequence[Sequence[Any]]) -> Optional[str]:
        """
        PO from spreadsheet cells.

        A cell containing label and number ("EXCEL ORDER # 001726") wins;
        a label-only cell takes the next non-empty cell on its row.
        """
        for row in rows:
            cells = [cell_to_text(c) for c in row]
            for index, cell in enumerate(cells):
                if not cell or re.search(r'INVOICE', cell, re.IGNORECASE):
                    continue
                po = self.po_from_text(cell)
                if po:
                    return po
                if self.PO_LABEL_RE.match(cell):
                    for neighbour in cells[index + 1:]:
                        digits = re.fullmatch(r'\s*#?\s*(\d{3,6})\s*', neighbour)
                        if digits:
                            return strip_po(digits.group(1))
                        if neighbour:
                            break
        return self.po_from_bundles(rows_to_text(rows))

    def resolve_po(
        self,
        explicit: Optional[str] = None,
        filename: Optional[str] = None,
        text: str = "",
        rows: Optional[Sequence[Sequence[Any]]] = None
    ) -> str:
        """
        Resolve the document PO.

        Order: explicit value, filename, spreadsheet cells, bundle numbers,
        sales-order pairs, free text. UNKNOWN_PO when nothing matches.
        """
        if explicit and explicit.strip() and explicit.strip().upper() != UNKNOWN_PO:
            return explicit.strip()

        candidates = [
            ('filename', lambda: self.po_from_filename(filename)),
            ('grid', lambda: self.po_from_grid(rows) if rows else None),
            ('bundles', lambda: self.po_from_bundles(text)),
            ('sales orders', lambda: self.po_from_sales_orders(text)),
            ('text', lambda: self.po_from_text(text)),
        ]
        for source, find in candidates:
            po = find()
            if po:
                logger.debug(f"PO {po} resolved from {source}")
                return po
        return UNKNOWN_PO

    # ------------------------------------------------------------------
    # Warehouse
    # ------------------------------------------------------------------

    def warehouse(self, text: str) -> Tuple[str, bool]:
        """
        Receiving warehouse named in the text.

        Returns:
            (warehouse, detected) where detected is False for the default.
        """
        for name, pattern in self.WAREHOUSE_PATTERNS:
            if pattern.search(text or ''):
                return name, True
        return self.default_warehouse, False

    def warehouse_from_grid(self, rows: Sequence[Sequence[Any]], max_rows: int = 15) -> Tuple[str, bool]:
        return self.warehouse(rows_to_text(list(rows)[:max_rows]))

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def finish_sections(self, text: str) -> List[Section]:
        """Finish statements in order of appearance."""
        for pattern in self.FINISH_PATTERNS:
            sections = [
                Section(m.start(), normalize_finish(m.group(1)))
                for m in pattern.finditer(text or '')
            ]
            if sections:
                return sections
        return []

    def finish(self, text: str) -> Optional[str]:
        """First finish statement in the text, if any."""
        sections = self.finish_sections(text)
        return sections[0].value if sections else None

    def container_sections(self, text: str) -> List[Section]:
        return [
            Section(m.start(), m.group(1).upper())
            for m in self.CONTAINER_SECTION_RE.finditer(text or '')
        ]
