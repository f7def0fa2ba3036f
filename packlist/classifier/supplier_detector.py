"""
Supplier Detector Module.

Brand-name keywords first, then structural fingerprints of each mill's
layout.
"""

import re

from packlist.suppliers import Supplier
from packlist.utils.logger import get_logger
from .vocabulary import SUPPLIER_KEYWORDS

# Initialize module logger
logger = get_logger(__name__)


class SupplierDetector:
    """
    Detects which mill issued a document.

    Example:
        >>> SupplierDetector().detect("YUEN CHANG STAINLESS STEEL CO., LTD.")
        <Supplier.YUEN_CHANG: 'yuen-chang'>
        >>> SupplierDetector().detect('1 S2509021 001715 0.750" X 60" X 120"')
        <Supplier.YEOU_YIH: 'yeou-yih'>
    """

    GAUGE_FINGERPRINT_RE = re.compile(r'\d+ga\s+x?\s*\d+')
    DECIMAL_FINGERPRINT_RE = re.compile(r'\d+\.\d+"\s*x\s*\d+"\s*x\s*\d+', re.IGNORECASE)
    SALES_ORDER_FINGERPRINT_RE = re.compile(r's\d{7}\s+\d{6}')

    def detect(self, text: str) -> Supplier:
        """
        Supplier of a text block.

        Args:
            text: Page text or flattened sheet.

        Returns:
            The detected supplier, or Supplier.UNKNOWN.
        """
        lower = (text or '').lower()

        for supplier, keywords in SUPPLIER_KEYWORDS.items():
            if any(keyword in lower for keyword in keywords):
                logger.debug(f"Supplier {supplier.display_name} detected by name")
                return supplier

        supplier = self._by_fingerprint(text or '', lower)
        if supplier is not Supplier.UNKNOWN:
            logger.debug(f"Supplier {supplier.display_name} detected by layout")
        return supplier

    def _by_fingerprint(self, text: str, lower: str) -> Supplier:
        if 'bundle no' in lower or 'mm*' in lower:
            return Supplier.WUU_JING

        if any(marker in lower for marker in ('ga*', 'ga(', 'ga x')) or self.GAUGE_FINGERPRINT_RE.search(lower):
            return Supplier.YUEN_CHANG

        if ('hot rolled stainless steel plate' in lower
                or self.DECIMAL_FINGERPRINT_RE.search(text)
                or self.SALES_ORDER_FINGERPRINT_RE.search(lower)):
            return Supplier.YEOU_YIH

        return Supplier.UNKNOWN
