"""
Invoice Detector Module.

Decides whether a page or sheet is an invoice by comparing how many
distinct invoice terms and packing-list-only terms it contains.
"""

from typing import Optional, Tuple

from config import get_config
from packlist.classifier.vocabulary import INVOICE_TERMS, PACKING_ONLY_TERMS, TermMatcher
from packlist.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class InvoiceDetector:
    """
    Invoice versus packing-list vote.

    A text is an invoice when it contains at least ``min_invoice_terms``
    distinct invoice terms and more of them than packing-list-only terms.

    Example:
        >>> detector = InvoiceDetector()
        >>> detector.is_invoice("COMMERCIAL INVOICE ... UNIT PRICE ... TOTAL AMOUNT")
        True
    """

    def __init__(self, min_invoice_terms: Optional[int] = None) -> None:
        self.min_invoice_terms = (
            min_invoice_terms if min_invoice_terms is not None
            else get_config("invoice.min_invoice_terms", 3)
        )
        self.invoice_terms = TermMatcher(INVOICE_TERMS)
        self.packing_terms = TermMatcher(PACKING_ONLY_TERMS)

    def term_counts(self, text: str) -> Tuple[int, int]:
        """(distinct invoice terms, distinct packing-list-only terms)."""
        return len(self.invoice_terms.distinct(text)), len(self.packing_terms.distinct(text))

    def is_invoice(self, text: str) -> bool:
        invoice_count, packing_count = self.term_counts(text)
        result = invoice_count >= self.min_invoice_terms and invoice_count > packing_count
        if result:
            logger.debug(f"Invoice detected ({invoice_count} invoice vs {packing_count} packing terms)")
        return result
