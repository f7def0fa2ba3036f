"""
Size and Identifier Normalizers Module.

This module turns raw size tokens into :class:`ParsedSize` values and
builds the two canonical identifiers every line item carries:

    - Inventory ID: ``{thickness}-{width}__-{length}__-304/304L-{finish}``
    - Lot/serial number: passed through when already canonical, otherwise
      ``{PO padded to 6}-{bundle padded to 2}``

Size grammars:
    - Metric with imperial in parentheses: ``9.53*1525MM*3050MM(3/8"*60"*120")``
    - Gauge: ``26GA x 48" x 120"``
    - Decimal inch: ``0.750" X 60" X 120"``
    - Fraction inch: ``3/8" x 60" x 120"``
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from config import get_config
from packlist.inventory import InventoryLookup
from packlist.suppliers import Supplier
from packlist.utils.helpers import format_number
from packlist.utils.logger import get_logger
from .units import (
    format_thickness,
    fraction_to_decimal,
    gauge_to_decimal,
    mm_to_decimal,
    mm_to_inches,
    parse_thickness,
)

# Initialize module logger
logger = get_logger(__name__)

# Multiplication signs seen between dimensions
_TIMES = r'[*×xX]'
_QUOTE = r'["”″\'`]{0,2}'


@dataclass(frozen=True)
class ParsedSize:
    """
    A canonical sheet/plate size.

    Attributes:
        thickness: Decimal inches.
        width: Inches.
        length: Inches.
    """
    thickness: float
    width: float
    length: float

    @property
    def thickness_formatted(self) -> str:
        return format_thickness(self.thickness)

    @property
    def key(self) -> str:
        """Join key shared by packing-list items and invoice lines."""
        return (
            f"{self.thickness_formatted}-{format_number(self.width)}-"
            f"{format_number(self.length)}"
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            'thickness': self.thickness,
            'width': self.width,
            'length': self.length,
            'thickness_formatted': self.thickness_formatted,
        }


@dataclass(frozen=True)
class SizeMatch:
    """A size token found in free text."""
    size: ParsedSize
    raw: str
    start: int
    end: int


class SizeParser:
    """
    Parses the size grammars of every supported mill.

    Each ``parse_*`` method takes one raw token and returns a
    :class:`ParsedSize` or None; :meth:`find_sizes` scans free text for
    every grammar at once.

    Example:
        >>> parser = SizeParser()
        >>> parser.parse_gauge_size('26GA x 48" x 120"').key
        '0.0180-48-120'
    """

    METRIC_IMPERIAL_PATTERN = re.compile(
        rf'(\d+\.?\d*)\s*{_TIMES}\s*(\d+)\s*(?:MM)?\s*{_TIMES}\s*(\d+)\s*(?:MM)?\s*\(([^)]+)\)',
        re.IGNORECASE
    )
    METRIC_PATTERN = re.compile(
        rf'(\d+\.?\d*)\s*{_TIMES}\s*(\d+)\s*(?:MM)?\s*{_TIMES}\s*(\d+)\s*(?:MM)?',
        re.IGNORECASE
    )
    IMPERIAL_PARTS_PATTERN = re.compile(
        rf'(\d+\s*-\s*\d+/\d+|\d+\s*/\s*\d+|\d+\.?\d*)\s*{_QUOTE}\s*{_TIMES}\s*'
        rf'(\d+\.?\d*)\s*{_QUOTE}\s*{_TIMES}\s*(\d+\.?\d*)',
        re.IGNORECASE
    )
    GAUGE_PATTERN = re.compile(
        rf'(\d{{1,2}})\s*(?:GA)?\s*[*×xX(\s]\s*(\d+)\s*{_QUOTE}\s*[*×xX)\s]\s*(\d+)',
        re.IGNORECASE
    )
    GAUGE_LOOSE_PATTERN = re.compile(r'(\d+)\s*GA[^0-9]*(\d+)[^0-9]*(\d+)', re.IGNORECASE)
    DECIMAL_PATTERN = re.compile(
        rf'(\d*\.\d+){_QUOTE}\s*{_TIMES}\s*(\d+(?:\.\d+)?){_QUOTE}\s*{_TIMES}\s*(\d+(?:\.\d+)?)',
        re.IGNORECASE
    )

    # Free-text scanners, tried in priority order by find_sizes()
    TEXT_SCANNERS: List[Tuple[str, "re.Pattern[str]"]] = [
        ('metric_imperial', re.compile(
            rf'\d+\.?\d*\s*{_TIMES}\s*\d+\s*MM\s*{_TIMES}\s*\d+\s*MM\s*\([^)]+\)',
            re.IGNORECASE)),
        ('gauge', re.compile(
            rf'\b\d{{1,2}}\s*GA\s*{_TIMES}\s*\d{{2,3}}\s*{_QUOTE}\s*{_TIMES}\s*\d{{2,3}}{_QUOTE}',
            re.IGNORECASE)),
        ('decimal', re.compile(
            rf'\b\d+\.\d+{_QUOTE}\s*{_TIMES}\s*\d+(?:\.\d+)?{_QUOTE}\s*{_TIMES}\s*\d+(?:\.\d+)?{_QUOTE}',
            re.IGNORECASE)),
        ('fraction', re.compile(
            rf'\b\d+/\d+{_QUOTE}\s*{_TIMES}\s*\d+(?:\.\d+)?{_QUOTE}\s*{_TIMES}\s*\d+(?:\.\d+)?{_QUOTE}',
            re.IGNORECASE)),
        ('metric', re.compile(
            rf'\b\d+\.?\d*\s*{_TIMES}\s*\d{{3,4}}\s*MM\s*{_TIMES}\s*\d{{3,5}}\s*MM',
            re.IGNORECASE)),
    ]

    def parse_imperial_parts(self, text: str) -> Optional[ParsedSize]:
        """Parse ``3/8"*60"*120"`` or ``0.375 x 60 x 120``."""
        match = self.IMPERIAL_PARTS_PATTERN.search(text)
        if not match:
            return None
        thickness_token = match.group(1).replace(' ', '')
        if '/' in thickness_token:
            thickness = fraction_to_decimal(thickness_token)
        else:
            thickness = float(thickness_token)
        if not thickness:
            return None
        return ParsedSize(thickness, float(match.group(2)), float(match.group(3)))

    def parse_metric_imperial_size(self, raw: str) -> Optional[ParsedSize]:
        """
        Parse a metric size that carries its imperial equivalent.

        The parenthesised imperial part wins; when it is missing or
        unreadable the metric part is converted.

        Example:
            >>> SizeParser().parse_metric_imperial_size('9.53*1525MM*3050MM(3/8"*60"*120")')
            ParsedSize(thickness=0.375, width=60.0, length=120.0)
        """
        if not raw:
            return None
        paren = re.search(r'\(([^)]+)\)', raw)
        if paren:
            size = self.parse_imperial_parts(paren.group(1))
            if size:
                return size

        metric = self.METRIC_PATTERN.search(raw)
        if not metric:
            return None
        thickness = mm_to_decimal(metric.group(1))
        if thickness is None:
            return None
        return ParsedSize(
            thickness,
            float(mm_to_inches(float(metric.group(2)))),
            float(mm_to_inches(float(metric.group(3))))
        )

    def parse_gauge_size(self, raw: str) -> Optional[ParsedSize]:
        """Parse ``26GA x 48" x 120"`` (gauge thickness, inch width/length)."""
        if not raw:
            return None
        match = self.GAUGE_PATTERN.search(raw) or self.GAUGE_LOOSE_PATTERN.search(raw)
        if not match:
            return None
        thickness = gauge_to_decimal(match.group(1))
        if thickness is None:
            return None
        return ParsedSize(thickness, float(match.group(2)), float(match.group(3)))

    def parse_decimal_size(self, raw: str) -> Optional[ParsedSize]:
        """Parse ``0.750" X 60" X 120"``; thickness must be in (0, 4]."""
        if not raw:
            return None
        match = self.DECIMAL_PATTERN.search(raw)
        if not match:
            return None
        thickness = float(match.group(1))
        if not 0 < thickness <= 4:
            return None
        return ParsedSize(thickness, float(match.group(2)), float(match.group(3)))

    def parse_size(self, raw: str, supplier: Optional[Supplier] = None) -> Optional[ParsedSize]:
        """
        Parse a raw size token, trying the supplier's grammar first.

        Args:
            raw: Raw size text as matched in the document.
            supplier: Mill whose grammar to prefer.

        Returns:
            ParsedSize or None.
        """
        by_supplier = {
            Supplier.WUU_JING: self.parse_metric_imperial_size,
            Supplier.YUEN_CHANG: self.parse_gauge_size,
            Supplier.YEOU_YIH: self.parse_decimal_size,
        }
        order = [by_supplier[supplier]] if supplier in by_supplier else []
        if re.search(r'\d\s*GA', raw or '', re.IGNORECASE):
            order.append(self.parse_gauge_size)
        order += [self.parse_metric_imperial_size, self.parse_decimal_size,
                  self._parse_fraction_size]

        for parse in order:
            size = parse(raw)
            if size:
                return size
        return None

    def _parse_fraction_size(self, raw: str) -> Optional[ParsedSize]:
        if raw and '/' in raw and not re.search(r'MM', raw, re.IGNORECASE):
            return self.parse_imperial_parts(raw)
        return None

    def find_sizes(self, text: str) -> List[SizeMatch]:
        """
        Find every size token in free text.

        Higher-priority grammars claim their span first; later grammars
        cannot match inside an already claimed span.

        Returns:
            Non-overlapping matches ordered by position.
        """
        claimed: List[Tuple[int, int]] = []
        found: List[SizeMatch] = []

        for _name, pattern in self.TEXT_SCANNERS:
            for match in pattern.finditer(text):
                start, end = match.span()
                if any(start < c_end and end > c_start for c_start, c_end in claimed):
                    continue
                size = self.parse_size(match.group(0))
                if size is None:
                    continue
                claimed.append((start, end))
                found.append(SizeMatch(size, match.group(0).strip(), start, end))

        return sorted(found, key=lambda m: m.start)


# =============================================================================
# IDENTIFIERS
# =============================================================================

# Lot/serial shapes that are already canonical
CANONICAL_LOT_PATTERNS = [
    re.compile(r'^\d{6}-\d+-\d{2}$'),
    re.compile(r'^\d{6}-\d{2}$'),
    re.compile(r'^[A-Z]{2}\d{3}$', re.IGNORECASE),
]

FINISH_CODE_WIDTH = 6


def normalize_finish(finish: Optional[str]) -> Optional[str]:
    """
    Canonical finish designation without padding.

    Example:
        >>> normalize_finish("NO.1")
        '#1'
        >>> normalize_finish("2b")
        '2B'
    """
    if not finish:
        return None
    token = str(finish).strip().upper().rstrip('_').strip()
    number = re.fullmatch(r'(?:NO\.?\s*|#\s*)?(\d)', token)
    if number:
        return f"#{number.group(1)}"
    return token or None


def pad_finish_code(finish: str) -> str:
    """Pad a finish designation to the six-character ERP field ("#1____")."""
    return finish.ljust(FINISH_CODE_WIDTH, '_')


def is_canonical_lot(value: str) -> bool:
    return any(p.match(value) for p in CANONICAL_LOT_PATTERNS)


def build_lot_serial(bundle: Optional[str], po_number: Optional[str]) -> str:
    """
    Canonical lot/serial number.

    Canonical shapes (``001837-01``, ``001837-3-01``, ``WM006``) pass
    through; anything else is rebuilt from the PO digits padded to six and
    the bundle digits padded to two.

    Example:
        >>> build_lot_serial("001837-01", "1837")
        '001837-01'
        >>> build_lot_serial("7", "1837")
        '001837-07'
    """
    token = (bundle or '').strip()
    if token and is_canonical_lot(token):
        return token.upper()

    po_digits = re.sub(r'\D', '', po_number or '') or '0'
    bundle_digits = re.sub(r'\D', '', token) or '0'
    return f"{po_digits.zfill(6)[-6:]}-{bundle_digits.zfill(2)}"


class IdentifierBuilder:
    """
    Builds inventory IDs and lot/serial numbers for extracted items.

    Attributes:
        inventory: Injected lookup supplying manual mappings.
        material_grade: Grade token placed in every inventory ID.
    """

    def __init__(
        self,
        inventory: Optional[InventoryLookup] = None,
        material_grade: Optional[str] = None
    ) -> None:
        self.inventory = inventory if inventory is not None else InventoryLookup.from_config()
        self.material_grade = material_grade or get_config(
            "inventory.material_grade", "304/304L"
        )
        logger.debug(f"IdentifierBuilder initialized (grade: {self.material_grade})")

    def finish_code(self, supplier: Supplier, finish: Optional[str] = None) -> str:
        """Padded finish code: the document's finish, else the mill default."""
        designation = normalize_finish(finish) or normalize_finish(supplier.default_finish) or '#1'
        return pad_finish_code(designation)

    def thickness_display(self, thickness: float) -> str:
        return self.inventory.thickness_display(thickness) or format_thickness(thickness)

    def inventory_id(
        self,
        size: ParsedSize,
        supplier: Supplier,
        finish: Optional[str] = None
    ) -> str:
        """
        Inventory ID for a size, honouring manual mappings.

        Example:
            >>> builder.inventory_id(ParsedSize(0.375, 60, 120), Supplier.WUU_JING)
            '0.3750-60__-120__-304/304L-#1____'
        """
        mapping = self.inventory.lookup(size.thickness, size.width, size.length)
        if mapping and mapping.inventory_id:
            return mapping.inventory_id

        return (
            f"{self.thickness_display(size.thickness)}-"
            f"{format_number(size.width)}__-"
            f"{format_number(size.length)}__-"
            f"{self.material_grade}-"
            f"{self.finish_code(supplier, finish)}"
        )

    def lbs_per_sq_ft_override(self, size: ParsedSize) -> Optional[float]:
        mapping = self.inventory.lookup(size.thickness, size.width, size.length)
        return mapping.lbs_per_sq_ft if mapping else None

    def lot_serial(self, bundle: Optional[str], po_number: Optional[str]) -> str:
        return build_lot_serial(bundle, po_number)


__all__ = [
    'ParsedSize',
    'SizeMatch',
    'SizeParser',
    'IdentifierBuilder',
    'normalize_finish',
    'pad_finish_code',
    'is_canonical_lot',
    'build_lot_serial',
    'parse_thickness',
]
