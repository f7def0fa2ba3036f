"""
Document/Page Classifier Module.

Scores text for packing-list-ness, detects the issuing mill, and selects
the best page or sheet.
"""

from .vocabulary import (
    CERTIFICATE_TERMS,
    INVOICE_TERMS,
    PACKING_LIST_INDICATORS,
    PACKING_LIST_TITLES,
    PACKING_ONLY_TERMS,
    SUPPLIER_KEYWORDS,
    TermMatcher,
)
from .page_classifier import PageClassifier, PageScore, StructuralPattern
from .supplier_detector import SupplierDetector

__all__ = [
    'CERTIFICATE_TERMS',
    'INVOICE_TERMS',
    'PACKING_LIST_INDICATORS',
    'PACKING_LIST_TITLES',
    'PACKING_ONLY_TERMS',
    'SUPPLIER_KEYWORDS',
    'TermMatcher',
    'PageClassifier',
    'PageScore',
    'StructuralPattern',
    'SupplierDetector',
]
