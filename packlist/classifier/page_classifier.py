"""
Page Classifier Module.

Scores text blocks for "packing-list-ness" and selects the best page of a
PDF or the best sheet of a workbook.

Scoring is additive:
    - title keyword: one bonus, first match only
    - each domain indicator occurrence: small bonus
    - each invoice or certificate term occurrence: penalty
    - 3 to 100 number-dense lines: flat bonus
    - supplier structural patterns: tiered bonus by occurrence count
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import get_config
from packlist.utils.helpers import rows_to_text
from packlist.utils.logger import get_logger
from .vocabulary import (
    CERTIFICATE_TERMS,
    INVOICE_TERMS,
    PACKING_LIST_INDICATORS,
    PACKING_LIST_TITLES,
    TermMatcher,
)

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class PageScore:
    """
    Classification of one page or sheet.

    Attributes:
        page_index: Zero-based page (or sheet) position.
        score: Additive packing-list score.
        is_packing_list: Whether the score clears the acceptance threshold.
        text: The scored text.
    """
    page_index: int
    score: int
    is_packing_list: bool
    text: str

    @property
    def page_number(self) -> int:
        return self.page_index + 1

    def __repr__(self) -> str:
        return (
            f"PageScore(page={self.page_number}, score={self.score}, "
            f"packing_list={self.is_packing_list})"
        )


@dataclass(frozen=True)
class StructuralPattern:
    """
    A supplier layout shape and its bonus tiers.

    Attributes:
        name: Label used in debug logs.
        pattern: Compiled regex counted over the whole text.
        single_bonus: Bonus for at least ``min_count`` occurrences.
        multi_bonus: Bonus for at least ``multi_count`` occurrences.
    """
    name: str
    pattern: "re.Pattern[str]"
    single_bonus: int
    multi_bonus: int
    min_count: int = 1
    multi_count: int = 3

    def bonus(self, text: str) -> int:
        count = len(self.pattern.findall(text))
        if count >= self.multi_count:
            return self.multi_bonus
        if count >= self.min_count:
            return self.single_bonus
        return 0


STRUCTURAL_PATTERNS = [
    StructuralPattern('bundle number', re.compile(r'\d{6}-\d{2}'), 15, 30),
    StructuralPattern('metric size', re.compile(r'\d+\.?\d*\s*\*\s*\d+\s*MM\s*\*\s*\d+\s*MM', re.IGNORECASE), 15, 30),
    StructuralPattern('imperial in parentheses', re.compile(r'\(\d+/\d+["”\']?\s*\*\s*\d+["”\']?\s*\*\s*\d+["”\']?\)'), 20, 20),
    StructuralPattern('decimal-inch size', re.compile(r'\d+\.\d+["”\']?\s*[xX]\s*\d+["”\']?\s*[xX]\s*\d+'), 15, 30),
    StructuralPattern('MT weights', re.compile(r'\b\d+\.\d{3}\b'), 0, 15, min_count=5, multi_count=5),
    StructuralPattern('sales order', re.compile(r'S\d{7}\s+\d{6}'), 20, 20),
]

DATA_ROW_RE = re.compile(r'^\s*\d+\s+.*\d+', re.MULTILINE)

# Sheet names that are always the packing list
PREFERRED_SHEET_NAMES = ['packing', 'packing list', 'packing lists', 'packinglist']

# Sheet names never considered
EXCLUDED_SHEET_TERMS = ['invoice', 'mark']


class PageClassifier:
    """
    Scores pages and picks the best candidate.

    Example:
        >>> classifier = PageClassifier()
        >>> classifier.score("PACKING LIST\\nSIZE PCS BUNDLE NO. HEAT NO. NET WEIGHT")
        80
        >>> classifier.select_best_page(["COMMERCIAL INVOICE ...", packing_text]).page_index
        1
    """

    def __init__(
        self,
        title_bonus: Optional[int] = None,
        indicator_bonus: Optional[int] = None,
        invoice_penalty: Optional[int] = None,
        certificate_penalty: Optional[int] = None,
        data_rows_bonus: Optional[int] = None,
        accept_threshold: Optional[int] = None,
        fallback_threshold: Optional[int] = None,
        sheet_threshold: Optional[int] = None
    ) -> None:
        self.title_bonus = title_bonus if title_bonus is not None else get_config("classifier.title_bonus", 30)
        self.indicator_bonus = indicator_bonus if indicator_bonus is not None else get_config("classifier.indicator_bonus", 10)
        self.invoice_penalty = invoice_penalty if invoice_penalty is not None else get_config("classifier.invoice_penalty", 20)
        self.certificate_penalty = certificate_penalty if certificate_penalty is not None else get_config("classifier.certificate_penalty", 20)
        self.data_rows_bonus = data_rows_bonus if data_rows_bonus is not None else get_config("classifier.data_rows_bonus", 15)
        self.accept_threshold = accept_threshold if accept_threshold is not None else get_config("classifier.accept_threshold", 30)
        self.fallback_threshold = fallback_threshold if fallback_threshold is not None else get_config("classifier.fallback_threshold", 10)
        self.sheet_threshold = sheet_threshold if sheet_threshold is not None else get_config("classifier.sheet_threshold", 20)

        self.titles = TermMatcher(PACKING_LIST_TITLES)
        self.indicators = TermMatcher(PACKING_LIST_INDICATORS)
        self.invoice_terms = TermMatcher(INVOICE_TERMS)
        self.certificate_terms = TermMatcher(CERTIFICATE_TERMS)

        logger.debug(
            f"PageClassifier initialized (accept: {self.accept_threshold}, "
            f"fallback: {self.fallback_threshold})"
        )

    def score(self, text: str) -> int:
        """
        Packing-list score of a text block.

        Args:
            text: Page text or a flattened sheet.

        Returns:
            Integer score; 30 or more is a confident packing list.
        """
        text = text or ''
        score = 0
        if self.titles.contains_any(text):
            score += self.title_bonus
        score += self.indicators.count(text) * self.indicator_bonus
        score -= self.invoice_terms.count(text) * self.invoice_penalty
        score -= self.certificate_terms.count(text) * self.certificate_penalty

        data_rows = len(DATA_ROW_RE.findall(text))
        if 3 <= data_rows <= 100:
            score += self.data_rows_bonus

        for structure in STRUCTURAL_PATTERNS:
            score += structure.bonus(text)
        return score

    def score_page(self, page_index: int, text: str) -> PageScore:
        score = self.score(text)
        return PageScore(page_index, score, score >= self.accept_threshold, text)

    def score_pages(self, pages: Sequence[str]) -> List[PageScore]:
        """Scores ordered best first; equal scores keep page order."""
        scores = [self.score_page(i, text) for i, text in enumerate(pages)]
        return sorted(scores, key=lambda s: s.score, reverse=True)

    def select_best_page(self, pages: Sequence[str]) -> Optional[PageScore]:
        """
        Best packing-list page.

        A single page is always accepted. Otherwise the best page is
        returned whether or not it clears a threshold; the thresholds only
        decide how the choice is logged. None only when there are no pages.
        """
        if not pages:
            return None
        scores = self.score_pages(pages)
        best = scores[0]
        if len(pages) == 1:
            return best

        if best.score >= self.accept_threshold:
            logger.debug(f"Selected page {best.page_number} (score {best.score})")
        elif best.score >= self.fallback_threshold:
            logger.info(f"No confident packing-list page; trying page {best.page_number} (score {best.score})")
        else:
            logger.warning(f"All pages score low; using page {best.page_number} (score {best.score})")
        return best

    def select_best_sheet(self, sheets: Dict[str, List[List[Any]]]) -> Optional[Tuple[str, List[List[Any]]]]:
        """
        Best packing-list sheet of a workbook.

        Order: a sheet with a packing-list name; the best-scoring sheet not
        named like an invoice or shipping marks when it clears the sheet
        threshold; the first such sheet; the first sheet.

        Returns:
            (sheet name, rows), or None for an empty workbook.
        """
        if not sheets:
            return None

        for name, rows in sheets.items():
            if name.strip().lower() in PREFERRED_SHEET_NAMES:
                logger.debug(f"Selected sheet '{name}' by name")
                return name, rows

        candidates = [
            (name, rows) for name, rows in sheets.items()
            if not any(term in name.lower() for term in EXCLUDED_SHEET_TERMS)
        ]
        best: Optional[Tuple[str, List[List[Any]]]] = None
        best_score = None
        for name, rows in candidates:
            score = self.score(rows_to_text(rows))
            if best_score is None or score > best_score:
                best, best_score = (name, rows), score

        if best is not None and best_score >= self.sheet_threshold:
            logger.debug(f"Selected sheet '{best[0]}' (score {best_score})")
            return best

        name = candidates[0][0] if candidates else next(iter(sheets))
        logger.info(f"No sheet scored above {self.sheet_threshold}; using '{name}'")
        return name, sheets[name]
