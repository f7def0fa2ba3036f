"""
Invoice Module.

Detects commercial-invoice pages, parses their priced lines and carries
the price per pound onto matching packing-list items.
"""

from .invoice_result import InvoiceLine, ParsedInvoice
from .detector import InvoiceDetector
from .parser import InvoiceParser
from .correlator import InvoiceCorrelator

__all__ = [
    'InvoiceLine',
    'ParsedInvoice',
    'InvoiceDetector',
    'InvoiceParser',
    'InvoiceCorrelator',
]
