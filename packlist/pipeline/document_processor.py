"""
Document Post-Processor Module.

Final pass over a parsed packing list before it is handed back:
    - Re-sequence line numbers
    - Grade weights against theoretical weights
    - Fill in theoretical weight when a line carries no weight at all
    - Flag gross below net, out-of-range dimensions and unknown
      inventory IDs

Extracted values are never changed except by the zero-weight fallback.
"""

from typing import Optional

from packlist.extraction.packing_list import PackingListItem, ParsedPackingList
from packlist.inventory import InventoryLookup
from packlist.normalizer import (
    DimensionValidator,
    IdentifierBuilder,
    WeightConfidence,
    WeightValidator,
)
from packlist.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class DocumentProcessor:
    """
    Post-processor for parsed packing lists.

    Attributes:
        inventory: Lookup used for ID validation and weight overrides.
        identifiers: Identifier builder sharing the same lookup.
        weights: Weight validator.
        dimensions: Per-supplier dimension bounds.

    Example:
        >>> processor = DocumentProcessor(inventory)
        >>> document = processor.process(document)
        >>> document.items[0].weight_confidence
        'high'
    """

    def __init__(
        self,
        inventory: Optional[InventoryLookup] = None,
        identifiers: Optional[IdentifierBuilder] = None,
        weights: Optional[WeightValidator] = None,
        dimensions: Optional[DimensionValidator] = None
    ) -> None:
        self.inventory = inventory if inventory is not None else InventoryLookup.from_config()
        self.identifiers = identifiers or IdentifierBuilder(self.inventory)
        self.weights = weights or WeightValidator()
        self.dimensions = dimensions or DimensionValidator()

        logger.debug(f"DocumentProcessor initialized ({self.inventory.count} known inventory IDs)")

    def process(self, document: ParsedPackingList) -> ParsedPackingList:
        """
        Validate every item of a document in place.

        Args:
            document: Parsed packing list.

        Returns:
            The same document, re-sequenced, with weight confidence and
            warnings recorded on its items.
        """
        document.resequence()

        for item in document.items:
            self._check_weight(item)
            self._check_gross_net(item)
            self._check_dimensions(item, document)
            self._check_inventory_id(item)

        flagged = sum(1 for item in document.items if item.warnings)
        if flagged:
            logger.warning(f"{flagged}/{len(document.items)} item(s) have data-quality warnings")
        logger.info(
            f"Post-processed {len(document.items)} item(s): "
            f"{document.total_pieces} pcs, {document.total_gross_weight_lbs:,.0f} lbs gross"
        )
        return document

    def _check_weight(self, item: PackingListItem) -> None:
        if item.size is None:
            return

        check = self.weights.check(
            item.size,
            item.piece_count,
            item.net_weight_lbs,
            item.gross_weight_lbs,
            self.identifiers.lbs_per_sq_ft_override(item.size),
        )

        if not item.net_weight_lbs and not item.gross_weight_lbs and check.theoretical_lbs > 0:
            theoretical = float(round(check.theoretical_lbs))
            item.net_weight_lbs = theoretical
            item.gross_weight_lbs = theoretical
            item.weight_confidence = WeightConfidence.LOW.value
            item.warnings.append(f"No weight found; theoretical weight {theoretical:,.0f} lbs used")
            logger.warning(f"Line {item.line_number}: no weight, using theoretical {theoretical:,.0f} lbs")
            return

        item.weight_confidence = check.confidence.value
        if check.confidence is WeightConfidence.LOW:
            item.warnings.append(
                f"Weight deviates {check.deviation:.0%} from theoretical "
                f"{check.theoretical_lbs:,.0f} lbs"
            )

    @staticmethod
    def _check_gross_net(item: PackingListItem) -> None:
        if item.net_weight_lbs and item.gross_weight_lbs and item.gross_weight_lbs < item.net_weight_lbs:
            item.warnings.append(
                f"Gross weight {item.gross_weight_lbs:g} is below net weight {item.net_weight_lbs:g}"
            )

    def _check_dimensions(self, item: PackingListItem, document: ParsedPackingList) -> None:
        if item.size is None:
            return
        violation = self.dimensions.describe_violation(item.size, document.supplier)
        if violation:
            item.warnings.append(f"Dimension out of range: {violation}")

    def _check_inventory_id(self, item: PackingListItem) -> None:
        # An empty lookup accepts every ID
        if not item.inventory_id or self.inventory.is_valid(item.inventory_id):
            return
        closest = self.inventory.find_closest_match(item.inventory_id)
        message = f"Inventory ID {item.inventory_id} not found"
        if closest:
            message += f" (closest match: {closest})"
        item.warnings.append(message)
