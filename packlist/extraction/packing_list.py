"""
Packing List Data Classes.

This module defines the structured document produced by the extractors:
one :class:`PackingListItem` per bundle/coil/plate group, collected in a
:class:`ParsedPackingList`.

Totals and the container set are derived from the items on every access,
and every editing method re-sequences line numbers, so the document can
be mutated freely by a review layer without going stale.
"""

import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from packlist.normalizer import ParsedSize
from packlist.suppliers import Supplier

# Sentinel PO used when no order number could be resolved
UNKNOWN_PO = "UNKNOWN"


@dataclass
class PackingListItem:
    """
    One physical bundle, coil or plate group.

    Attributes:
        line_number: 1-based position in the document, not the mill's row number.
        inventory_id: Canonical inventory identifier.
        lot_serial_nbr: Canonical lot/serial number.
        piece_count: Pieces in the bundle (at least 1).
        heat_number: Heat or coil number.
        gross_weight_lbs: Gross weight in pounds.
        net_weight_lbs: Net (container) weight in pounds.
        raw_size: Size text exactly as matched in the source.
        size: Parsed size, when one was recognized.
        finish: Finish designation ("#1", "2B") from the document.
        container_number: Shipping container the bundle travels in.
        order_qty_override: Order quantity replacing net weight on import.
        unit_cost_override: Price per pound, typically from an invoice.
        warehouse_override: Receiving warehouse for this line only.
        order_line_nbr_override: ERP order line number for this line only.
        po_number_override: PO for this line when it differs from the document's.
        weight_confidence: Tier of the theoretical weight check.
        warnings: Data-quality flags raised for this line.
    """
    line_number: int = 0
    inventory_id: str = ""
    lot_serial_nbr: str = ""
    piece_count: int = 1
    heat_number: str = ""
    gross_weight_lbs: float = 0.0
    net_weight_lbs: float = 0.0
    raw_size: str = ""
    size: Optional[ParsedSize] = None
    finish: Optional[str] = None
    container_number: Optional[str] = None

    order_qty_override: Optional[float] = None
    unit_cost_override: Optional[float] = None
    warehouse_override: Optional[str] = None
    order_line_nbr_override: Optional[int] = None
    po_number_override: Optional[str] = None

    weight_confidence: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ParsedSize):
                value = value.to_dict()
            elif isinstance(value, list):
                value = list(value)
            data[f.name] = value
        return data

    def __repr__(self) -> str:
        return (
            f"PackingListItem(line={self.line_number}, id={self.inventory_id!r}, "
            f"lot={self.lot_serial_nbr!r}, pcs={self.piece_count}, "
            f"gross={self.gross_weight_lbs:g}, net={self.net_weight_lbs:g})"
        )


@dataclass
class ParsedPackingList:
    """
    A parsed packing-list document.

    Attributes:
        supplier: Detected mill.
        vendor_code: ERP vendor code for the mill.
        po_number: Purchase order, or UNKNOWN_PO.
        items: Ordered line items.
        warehouse: Receiving warehouse.
        warehouse_detected: True when the warehouse was found in the
            document, False when it is the default.
        source_page: Index of the page or sheet the items came from.
        strategy: Name of the extraction strategy that produced the items.
        ocr_used: Whether the text came from OCR.
        warnings: Document-level data-quality flags.

    Example:
        >>> doc = ParsedPackingList(supplier=Supplier.WUU_JING, po_number="1837")
        >>> doc.add_item(PackingListItem(gross_weight_lbs=4685, net_weight_lbs=4656))
        >>> doc.total_gross_weight_lbs
        4685.0
    """
    supplier: Supplier = Supplier.UNKNOWN
    vendor_code: str = ""
    po_number: str = UNKNOWN_PO
    items: List[PackingListItem] = field(default_factory=list)
    warehouse: str = "LA"
    warehouse_detected: bool = False
    source_page: Optional[int] = None
    strategy: Optional[str] = None
    ocr_used: bool = False
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.vendor_code:
            self.vendor_code = self.supplier.vendor_code
        self.resequence()

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def total_gross_weight_lbs(self) -> float:
        return float(sum(item.gross_weight_lbs for item in self.items))

    @property
    def total_net_weight_lbs(self) -> float:
        return float(sum(item.net_weight_lbs for item in self.items))

    @property
    def total_pieces(self) -> int:
        return sum(item.piece_count for item in self.items)

    @property
    def containers(self) -> List[str]:
        """Distinct container numbers in order of first appearance."""
        seen: List[str] = []
        for item in self.items:
            if item.container_number and item.container_number not in seen:
                seen.append(item.container_number)
        return seen

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def resequence(self) -> None:
        """Renumber line numbers 1..N in list order."""
        for index, item in enumerate(self.items, start=1):
            item.line_number = index

    def add_item(self, item: PackingListItem, position: Optional[int] = None) -> None:
        if position is None:
            self.items.append(item)
        else:
            self.items.insert(position, item)
        self.resequence()

    def remove_item(self, index: int) -> PackingListItem:
        item = self.items.pop(index)
        self.resequence()
        return item

    def move_item(self, index: int, new_index: int) -> None:
        item = self.items.pop(index)
        self.items.insert(new_index, item)
        self.resequence()

    def update_item(self, index: int, **changes: Any) -> PackingListItem:
        """
        Replace fields of one item.

        Raises:
            TypeError: If a change names a field the item does not have.
        """
        changes.pop('line_number', None)
        self.items[index] = replace(self.items[index], **changes)
        self.resequence()
        return self.items[index]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'supplier': self.supplier.value,
            'vendor_code': self.vendor_code,
            'po_number': self.po_number,
            'warehouse': self.warehouse,
            'warehouse_detected': self.warehouse_detected,
            'containers': self.containers,
            'total_gross_weight_lbs': self.total_gross_weight_lbs,
            'total_net_weight_lbs': self.total_net_weight_lbs,
            'total_pieces': self.total_pieces,
            'source_page': self.source_page,
            'strategy': self.strategy,
            'ocr_used': self.ocr_used,
            'warnings': list(self.warnings),
            'items': [item.to_dict() for item in self.items],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return (
            f"ParsedPackingList(supplier={self.supplier.value}, po={self.po_number!r}, "
            f"items={len(self.items)}, gross={self.total_gross_weight_lbs:g})"
        )
