"""
Text Scanner Module.

Proximity-window primitives shared by all extractors. Every supplier
grammar reduces to the same moves: find anchor tokens, then look for a
token class inside a bounded window before or after each anchor.

Example:
    >>> scanner = TextScanner('9.53*1525MM ... 6 001837-01 2.112 2.125')
    >>> bundles = scanner.find_all(BUNDLE_RE)
    >>> weights = scanner.search_all_after(MT_WEIGHT_RE, bundles[0].end, 100)
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

Pattern = Union[str, "re.Pattern[str]"]


@dataclass(frozen=True)
class Token:
    """
    A regex match pinned to its absolute position in the scanned text.

    Attributes:
        text: The whole matched text.
        groups: Captured groups.
        start: Absolute start offset.
        end: Absolute end offset.
    """
    text: str
    groups: Tuple[Optional[str], ...]
    start: int
    end: int

    def group(self, index: int = 1) -> Optional[str]:
        if index == 0:
            return self.text
        return self.groups[index - 1]

    def overlaps(self, other: 'Token') -> bool:
        return self.start < other.end and other.start < self.end


def _compile(pattern: Pattern, flags: int = 0) -> "re.Pattern[str]":
    if isinstance(pattern, str):
        return re.compile(pattern, flags)
    return pattern


class TextScanner:
    """
    Window-bounded token search over one text.

    All offsets passed in and returned are absolute offsets into
    ``self.text``.
    """

    def __init__(self, text: str) -> None:
        self.text = text or ""

    def find_all(self, pattern: Pattern, flags: int = 0) -> List[Token]:
        """Every match of ``pattern`` in the whole text."""
        return self._tokens(_compile(pattern, flags), 0, len(self.text))

    def find_first_of(self, patterns: Sequence[Pattern], flags: int = 0) -> List[Token]:
        """Matches of the first pattern in ``patterns`` that matches at all."""
        for pattern in patterns:
            tokens = self.find_all(pattern, flags)
            if tokens:
                return tokens
        return []

    def find_claimed(self, patterns: Sequence[Pattern], flags: int = 0) -> List[Token]:
        """
        Matches of several patterns, earlier patterns claiming their spans.

        A later pattern's match that overlaps an already accepted match is
        dropped. Results are ordered by position.
        """
        accepted: List[Token] = []
        for pattern in patterns:
            for token in self.find_all(pattern, flags):
                if not any(token.overlaps(a) for a in accepted):
                    accepted.append(token)
        return sorted(accepted, key=lambda t: t.start)

    def window_after(self, position: int, size: int) -> str:
        return self.text[position:position + size]

    def window_before(self, position: int, size: int) -> str:
        return self.text[max(0, position - size):position]

    def search_after(
        self,
        pattern: Pattern,
        position: int,
        size: int,
        flags: int = 0
    ) -> Optional[Token]:
        """First match starting inside ``[position, position + size)``."""
        tokens = self.search_all_after(pattern, position, size, flags)
        return tokens[0] if tokens else None

    def search_all_after(
        self,
        pattern: Pattern,
        position: int,
        size: int,
        flags: int = 0
    ) -> List[Token]:
        """All matches inside ``[position, position + size)``."""
        end = min(len(self.text), position + size)
        return self._tokens(_compile(pattern, flags), position, end)

    def search_before(
        self,
        pattern: Pattern,
        position: int,
        size: int,
        flags: int = 0
    ) -> Optional[Token]:
        """Nearest (last) match inside ``[position - size, position)``."""
        start = max(0, position - size)
        tokens = self._tokens(_compile(pattern, flags), start, position)
        return tokens[-1] if tokens else None

    def nearest_before(
        self,
        tokens: Sequence[Token],
        position: int,
        size: int,
        accept: Optional[Callable[[Token], bool]] = None
    ) -> Optional[Token]:
        """
        Closest token ending at or before ``position`` and starting no
        earlier than ``position - size``.
        """
        best: Optional[Token] = None
        for token in tokens:
            if token.end <= position and token.start >= position - size:
                if accept is not None and not accept(token):
                    continue
                if best is None or token.start > best.start:
                    best = token
        return best

    def first_after(
        self,
        tokens: Sequence[Token],
        position: int,
        size: int,
        accept: Optional[Callable[[Token], bool]] = None
    ) -> Optional[Token]:
        """Earliest token starting inside ``[position, position + size)``."""
        best: Optional[Token] = None
        for token in tokens:
            if position <= token.start < position + size:
                if accept is not None and not accept(token):
                    continue
                if best is None or token.start < best.start:
                    best = token
        return best

    def _tokens(self, regex: "re.Pattern[str]", start: int, end: int) -> List[Token]:
        if start >= end:
            return []
        segment = self.text[start:end]
        return [
            Token(m.group(0), m.groups(), start + m.start(), start + m.end())
            for m in regex.finditer(segment)
        ]


def numbers_in_range(
    tokens: Sequence[Token],
    low: float,
    high: float,
    group: int = 1
) -> List[float]:
    """
    Parse a numeric group of each token and keep values in ``[low, high]``.

    Thousands separators and embedded spaces are ignored.
    """
    values: List[float] = []
    for token in tokens:
        raw = token.group(group) or ''
        cleaned = re.sub(r'[,\s]', '', raw)
        try:
            value = float(cleaned)
        except ValueError:
            continue
        if low <= value <= high:
            values.append(value)
    return values
