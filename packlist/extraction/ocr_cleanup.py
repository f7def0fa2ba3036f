"""
OCR Cleanup Module.

Declarative character-confusion table applied to OCR text before the
OCR-tolerant and anchor-based strategies run, plus the thickness repair
used when OCR drops the numerator of an inch fraction.

Each rule only fires in a digit context (a letter next to or between
digits), so words in headers are left alone. Rules are applied in table
order, and each one sees the output of the previous rule.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from packlist.normalizer import fraction_to_decimal


@dataclass(frozen=True)
class ConfusionRule:
    """
    One OCR confusion and its correction.

    Attributes:
        name: Short label used in logs and tests.
        pattern: Compiled regex matching the confused text.
        replacement: Replacement string (may use group references).
    """
    name: str
    pattern: "re.Pattern[str]"
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _rule(name: str, pattern: str, replacement: str, flags: int = 0) -> ConfusionRule:
    return ConfusionRule(name, re.compile(pattern, flags), replacement)


OCR_CONFUSIONS: List[ConfusionRule] = [
    _rule('letter-o-before-digit', r'[oO](?=\d)', '0'),
    _rule('letter-l-after-digit', r'(?<=\d)[lI]', '1'),
    _rule('pipe-next-to-digit', r'\|(?=\d)|(?<=\d)\|', '1'),
    _rule('letter-s-between-digits', r'(?<=\d)[sS](?=\d)', '5'),
    _rule('letter-b-between-digits', r'(?<=\d)B(?=\d)', '8'),
    _rule('garbled-mm', r'(?<=\d)\s?(?:Mlvl|MIVI|M\s+M|NM|MN|NN)(?=\s*[*×xX(]|\s|$)', 'MM'),
    _rule('curly-quotes', r'[”″“]', '"'),
    _rule('split-decimal', r'(?<=\d)\s+\.\s*(?=\d)|(?<=\d)\.\s+(?=\d{3}\b)', '.'),
    _rule('whitespace', r'\s+', ' '),
]


def clean_ocr_text(text: str, rules: Optional[Iterable[ConfusionRule]] = None) -> str:
    """
    Apply the confusion table to OCR text.

    Args:
        text: Raw OCR text.
        rules: Rules to apply; defaults to OCR_CONFUSIONS.

    Returns:
        Cleaned text on a single line.

    Example:
        >>> clean_ocr_text("0O1837-0l 2.1l2")
        '001837-01 2.112'
    """
    cleaned = text or ''
    for rule in (OCR_CONFUSIONS if rules is None else rules):
        cleaned = rule.apply(cleaned)
    return cleaned.strip()


# Bare numbers OCR leaves behind when the numerator of a fraction is lost
OCR_THICKNESS_REPAIRS: Dict[int, float] = {
    2: 0.5,    # 1/2
    4: 0.25,   # 1/4
    8: 0.375,  # 3/8
    16: 0.188,  # 3/16
}


def repair_thickness(token: str) -> Optional[float]:
    """
    Recover a thickness in inches from a possibly damaged OCR token.

    Fractions and decimals are read normally. A bare integer from 2 to 16
    is a fraction whose numerator was dropped: known collisions use the
    repair table, anything else is read as 1/N.

    Example:
        >>> repair_thickness("3/8")
        0.375
        >>> repair_thickness("8")
        0.375
        >>> repair_thickness("10")
        0.1
    """
    if token is None:
        return None
    cleaned = str(token).strip().strip('"\'”').replace(' ', '')
    if not cleaned:
        return None

    if '/' in cleaned:
        return fraction_to_decimal(cleaned)

    if re.fullmatch(r'\d*\.\d+', cleaned):
        value = float(cleaned)
        return value if value > 0 else None

    if re.fullmatch(r'\d+', cleaned):
        number = int(cleaned)
        if number in OCR_THICKNESS_REPAIRS:
            return OCR_THICKNESS_REPAIRS[number]
        if 2 <= number <= 16:
            return 1.0 / number
        if number == 1:
            return 1.0
    return None
