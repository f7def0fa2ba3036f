"""
Invoice Data Classes.

A commercial invoice reduced to what the packing list needs: one priced
line per size, with the price per pound derived from whichever unit the
invoice quotes.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from packlist.extraction.packing_list import UNKNOWN_PO
from packlist.normalizer import ParsedSize
from packlist.suppliers import Supplier


@dataclass
class InvoiceLine:
    """
    One priced size on an invoice.

    Attributes:
        size: Parsed size used as the join key.
        raw_size: Size text as printed.
        pieces: Piece count.
        qty_lbs: Quantity in pounds.
        price_per_piece: USD per piece.
        price_per_lb: USD per pound (rounded to 4 places).
        amount: Stated line amount, if printed.
        price_basis: 'per_piece', 'per_lb' or 'per_mt' as quoted.
    """
    size: ParsedSize
    raw_size: str
    pieces: int
    qty_lbs: float
    price_per_piece: float
    price_per_lb: float
    amount: Optional[float] = None
    price_basis: str = "per_piece"

    @property
    def key(self) -> str:
        return self.size.key

    def to_dict(self) -> Dict[str, Any]:
        return {
            'size': self.raw_size,
            'key': self.key,
            'pcs': self.pieces,
            'qty_lbs': self.qty_lbs,
            'price_per_piece': self.price_per_piece,
            'price_per_lb': self.price_per_lb,
            'amount': self.amount,
            'price_basis': self.price_basis,
        }


@dataclass
class ParsedInvoice:
    """
    Parsed commercial invoice.

    Attributes:
        supplier: Issuing mill.
        po_number: Customer PO the invoice bills.
        invoice_number: Invoice reference.
        items: Priced lines in document order.
        total_value: Stated total, or the sum of line amounts.
        warehouse: Destination warehouse when named on the invoice.
        invoice_date: Invoice date when printed.
        source_page: Zero-based page (or sheet position) it came from.
    """
    supplier: Supplier = Supplier.UNKNOWN
    po_number: str = UNKNOWN_PO
    invoice_number: str = ""
    items: List[InvoiceLine] = field(default_factory=list)
    total_value: float = 0.0
    warehouse: Optional[str] = None
    invoice_date: Optional[date] = None
    source_page: Optional[int] = None

    def price_map(self) -> Dict[str, float]:
        """Dimension key -> price per pound; the first line of a size wins."""
        prices: Dict[str, float] = {}
        for line in self.items:
            prices.setdefault(line.key, line.price_per_lb)
        return prices

    def to_dict(self) -> Dict[str, Any]:
        return {
            'supplier': self.supplier.value,
            'po_number': self.po_number,
            'invoice_number': self.invoice_number,
            'invoice_date': self.invoice_date.isoformat() if self.invoice_date else None,
            'items': [line.to_dict() for line in self.items],
            'total_value': self.total_value,
            'warehouse': self.warehouse,
            'source_page': self.source_page,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return (
            f"ParsedInvoice(invoice='{self.invoice_number}', po='{self.po_number}', "
            f"lines={len(self.items)}, total={self.total_value:.2f})"
        )
