"""
Extractor Registry Module.

Maps a detected supplier to its extractor. When the supplier is unknown,
every known extractor is tried and the one producing the most items
wins; the generic extractor runs only when none of them finds anything.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from packlist.normalizer import DimensionValidator, IdentifierBuilder, SizeParser
from packlist.suppliers import Supplier
from packlist.utils.logger import get_logger
from .base_extractor import BaseExtractor
from .generic import GenericExtractor
from .header_fields import HeaderFieldExtractor
from .strategy import ChainResult, ExtractionContext
from .wuu_jing import WuuJingExtractor
from .yeou_yih import YeouYihExtractor
from .yuen_chang import YuenChangExtractor

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class ExtractionOutcome:
    """
    Items plus the supplier whose extractor produced them.

    Attributes:
        supplier: Supplier whose grammar matched (UNKNOWN for the generic scan).
        result: The winning chain result.
    """
    supplier: Supplier
    result: ChainResult


class ExtractorRegistry:
    """
    Supplier-keyed extractors sharing one set of collaborators.

    Example:
        >>> registry = ExtractorRegistry()
        >>> outcome = registry.extract(context, Supplier.UNKNOWN)
        >>> outcome.supplier
        <Supplier.WUU_JING: 'wuu-jing'>
    """

    def __init__(
        self,
        identifiers: Optional[IdentifierBuilder] = None,
        sizes: Optional[SizeParser] = None,
        dimensions: Optional[DimensionValidator] = None,
        fields: Optional[HeaderFieldExtractor] = None
    ) -> None:
        shared = dict(
            identifiers=identifiers or IdentifierBuilder(),
            sizes=sizes or SizeParser(),
            dimensions=dimensions or DimensionValidator(),
            fields=fields or HeaderFieldExtractor(),
        )
        self.extractors: Dict[Supplier, BaseExtractor] = {
            Supplier.WUU_JING: WuuJingExtractor(**shared),
            Supplier.YUEN_CHANG: YuenChangExtractor(**shared),
            Supplier.YEOU_YIH: YeouYihExtractor(**shared),
        }
        self.generic = GenericExtractor(**shared)

    def get(self, supplier: Supplier) -> BaseExtractor:
        return self.extractors.get(supplier, self.generic)

    def extract(self, context: ExtractionContext, supplier: Supplier) -> ExtractionOutcome:
        """
        Extract items with the supplier's chain.

        For UNKNOWN, the known extractors are tried in order and the
        largest result is kept (the earlier extractor wins ties).
        """
        if supplier in self.extractors:
            return ExtractionOutcome(supplier, self.extractors[supplier].extract(context))

        best: Optional[ExtractionOutcome] = None
        for candidate, extractor in self.extractors.items():
            result = extractor.extract(context)
            logger.debug(f"Unknown supplier: {candidate.display_name} found {len(result.items)} items")
            if result.items and (best is None or len(result.items) > len(best.result.items)):
                best = ExtractionOutcome(candidate, result)

        if best is not None:
            logger.info(
                f"Unknown supplier matched {best.supplier.display_name} format "
                f"({len(best.result.items)} items)"
            )
            return best

        return ExtractionOutcome(Supplier.UNKNOWN, self.generic.extract(context))
