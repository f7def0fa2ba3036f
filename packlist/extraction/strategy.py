"""
Extraction Strategy Chain Module.

A supplier extractor is an ordered list of tagged strategies. Each
strategy is a plain callable taking an :class:`ExtractionContext` and
returning a (possibly empty) list of items; the chain stops at the first
strategy that returns anything. A strategy that raises is logged and
skipped like one that found nothing.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from packlist.utils.logger import get_logger
from .packing_list import PackingListItem, UNKNOWN_PO

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class ExtractionContext:
    """
    Everything a strategy may look at.

    Attributes:
        text: Page text (native, OCR, or a flattened sheet).
        po_number: Resolved PO used to synthesize lot numbers.
        rows: Cell grid when the source is a spreadsheet sheet.
        ocr: Whether ``text`` came from OCR.
    """
    text: str = ""
    po_number: str = UNKNOWN_PO
    rows: Optional[List[List[Any]]] = None
    ocr: bool = False


StrategyFunc = Callable[[ExtractionContext], List[PackingListItem]]


@dataclass(frozen=True)
class ExtractionStrategy:
    """
    A named strategy.

    Attributes:
        name: Tag recorded on the document when this strategy wins.
        func: The strategy callable.
    """
    name: str
    func: StrategyFunc

    def __call__(self, context: ExtractionContext) -> List[PackingListItem]:
        return self.func(context)


@dataclass
class ChainResult:
    """
    Outcome of running a chain.

    Attributes:
        items: Items from the winning strategy (empty when all failed).
        strategy: Name of the winning strategy, or None.
        attempted: Names of every strategy that ran, in order.
    """
    items: List[PackingListItem] = field(default_factory=list)
    strategy: Optional[str] = None
    attempted: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.items)


class StrategyChain:
    """
    Runs strategies in order until one yields items.

    Example:
        >>> chain = StrategyChain([
        ...     ExtractionStrategy("grid", parse_grid),
        ...     ExtractionStrategy("regex", parse_text),
        ... ])
        >>> result = chain.run(ExtractionContext(text=page_text))
        >>> result.strategy
        'regex'
    """

    def __init__(self, strategies: Sequence[ExtractionStrategy], label: str = "") -> None:
        self.strategies = list(strategies)
        self.label = label

    @property
    def names(self) -> List[str]:
        return [s.name for s in self.strategies]

    def run(self, context: ExtractionContext) -> ChainResult:
        result = ChainResult()
        for strategy in self.strategies:
            result.attempted.append(strategy.name)
            try:
                items = strategy(context)
            except Exception as e:
                logger.warning(f"{self.label}: '{strategy.name}' failed: {e}")
                continue
            if items:
                logger.debug(f"{self.label}: '{strategy.name}' produced {len(items)} items")
                for index, item in enumerate(items, start=1):
                    item.line_number = index
                result.items = items
                result.strategy = strategy.name
                return result
            logger.debug(f"{self.label}: '{strategy.name}' found nothing")
        return result
