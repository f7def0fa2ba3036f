"""
Classifier Vocabulary Module.

Term lists used to score pages and detect suppliers, and a matcher that
counts them the same way everywhere: case-insensitive, longest term
first, non-overlapping, and only at letter boundaries for alphabetic
term edges ("pc" does not match inside "spec", but "mm*" matches inside
"1525mm*3050mm").
"""

import re
from typing import Iterable, List, Set

from packlist.suppliers import Supplier


# =============================================================================
# TERM LISTS
# =============================================================================

PACKING_LIST_TITLES = [
    'packing list',
    'packing-list',
    'packinglist',
    'shipping list',
    '裝箱單',
    '装箱单',
]

PACKING_LIST_INDICATORS = [
    'pcs', 'pc', 'pieces', 'qty',
    'size', 'gauge', 'thickness',
    'bundle', 'bundle no', 'item',
    'weight', 'net weight', 'gross weight', "n'weight", "g'weight",
    'heat', 'heat no', 'coil',
    'container no', 'product no', "n'wt", "g'wt",
    'nweight', 'gweight', 'n weight', 'g weight',
    'mm*', '*mm', '60"', '48"', '120"', '144"',
]

INVOICE_TERMS = [
    'invoice',
    'total amount',
    'payment',
    'bill to',
    'price',
    'amount',
    'us$/pc',
    'us$/mt',
    'us$/lb',
    'unit price',
]

CERTIFICATE_TERMS = [
    'certificate',
    'test result',
    'chemical composition',
    'tensile',
    'yield',
    'elongation',
    'hardness',
    'mechanical properties',
]

# Terms that only appear on packing lists, weighed against INVOICE_TERMS
PACKING_ONLY_TERMS = PACKING_LIST_TITLES[:4] + [
    'bundle no', 'coil no', 'heat no',
    'net weight', 'gross weight', "n'weight", "g'weight",
    'container no', 'product no', 'nweight', 'gweight',
]

SUPPLIER_KEYWORDS = {
    Supplier.WUU_JING: ['wuu jing', 'wuu-jing', 'wuujing', '五井', 'wu jing', 'wu-jing'],
    Supplier.YUEN_CHANG: ['yuen chang', 'yuen-chang', 'yuenchang', '元昌'],
    Supplier.YEOU_YIH: ['yeou yih', 'yeou-yih', 'yeouyih'],
}


# =============================================================================
# MATCHER
# =============================================================================

class TermMatcher:
    """
    Counts vocabulary terms in text.

    Example:
        >>> matcher = TermMatcher(['price', 'unit price'])
        >>> matcher.count("UNIT PRICE US$12.50")
        1
        >>> matcher.distinct("unit price, price")
        {'unit price', 'price'}
    """

    def __init__(self, terms: Iterable[str]) -> None:
        self.terms: List[str] = sorted({t.lower() for t in terms}, key=len, reverse=True)
        self.pattern = re.compile(
            '|'.join(self._term_pattern(t) for t in self.terms), re.IGNORECASE
        )

    @staticmethod
    def _term_pattern(term: str) -> str:
        body = re.escape(term)
        if term[0].isascii() and term[0].isalpha():
            body = r'(?<![a-z])' + body
        if term[-1].isascii() and term[-1].isalpha():
            body = body + r'(?![a-z])'
        return body

    def findall(self, text: str) -> List[str]:
        if not self.terms:
            return []
        return [m.group(0).lower() for m in self.pattern.finditer(text or '')]

    def count(self, text: str) -> int:
        """Non-overlapping occurrences of any term."""
        return len(self.findall(text))

    def distinct(self, text: str) -> Set[str]:
        """Terms present at least once."""
        return set(self.findall(text))

    def contains_any(self, text: str) -> bool:
        return bool(self.terms) and self.pattern.search(text or '') is not None
