"""
Invoice Correlator Module.

Carries invoice prices onto packing-list items. Items and invoice lines
are joined on the canonical dimension key, so "24GA x 48" x 120"" on the
invoice prices every 0.0240-48-120 bundle on the packing list.
"""

from typing import Dict, Sequence

from packlist.extraction.packing_list import ParsedPackingList
from packlist.utils.logger import get_logger
from .invoice_result import ParsedInvoice

# Initialize module logger
logger = get_logger(__name__)


class InvoiceCorrelator:
    """
    Price-per-pound transfer from invoices to items.

    Items whose size appears on no invoice keep their cost unset.

    Example:
        >>> matched = InvoiceCorrelator().apply(document, [invoice])
    """

    def apply(self, document: ParsedPackingList, invoices: Sequence[ParsedInvoice]) -> int:
        """
        Set ``unit_cost_override`` on every item with an invoice price.

        The first invoice listing a size wins when several do.

        Returns:
            Number of items priced.
        """
        prices: Dict[str, float] = {}
        for invoice in invoices:
            for key, price in invoice.price_map().items():
                prices.setdefault(key, price)
        if not prices:
            return 0

        matched = 0
        for item in document.items:
            if item.size is None:
                continue
            price = prices.get(item.size.key)
            if price is None:
                logger.debug(f"No invoice price for line {item.line_number} ({item.size.key})")
                continue
            item.unit_cost_override = price
            matched += 1

        logger.info(f"Invoice prices applied to {matched}/{len(document.items)} item(s)")
        return matched
