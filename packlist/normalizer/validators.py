"""
Dimension and Weight Validators Module.

Plausibility checks applied to extracted sizes and weights:
    - DimensionValidator: per-supplier thickness/width/length bounds
    - WeightValidator: extracted vs theoretical weight, graded in tiers

Neither validator changes data. Dimension checks decide whether a
recovered size may be accepted at all; weight checks only grade and log.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from config import get_config
from packlist.suppliers import Supplier
from packlist.utils.logger import get_logger
from .normalizers import ParsedSize
from .units import theoretical_weight

# Initialize module logger
logger = get_logger(__name__)

Bounds = Tuple[float, float]


class DimensionValidator:
    """
    Checks a size against a supplier's plausible dimension bounds.

    Bounds are inclusive and come from ``suppliers.bounds.<supplier>``.
    Out-of-range values are rejected, never clamped.

    Example:
        >>> validator = DimensionValidator()
        >>> validator.is_valid(ParsedSize(0.375, 60, 120), Supplier.WUU_JING)
        True
        >>> validator.is_valid(ParsedSize(0.375, 60, 20), Supplier.WUU_JING)
        False
    """

    DEFAULT_BOUNDS: Dict[Supplier, Dict[str, Bounds]] = {
        Supplier.WUU_JING: {'thickness': (0.01, 1.0), 'width': (36, 72), 'length': (96, 180)},
        Supplier.YUEN_CHANG: {'thickness': (0.01, 0.2), 'width': (36, 72), 'length': (96, 180)},
        Supplier.YEOU_YIH: {'thickness': (0.1, 4.0), 'width': (24, 120), 'length': (48, 480)},
        Supplier.UNKNOWN: {'thickness': (0.01, 4.0), 'width': (12, 120), 'length': (24, 480)},
    }

    def __init__(self) -> None:
        self.bounds: Dict[Supplier, Dict[str, Bounds]] = {}
        for supplier, defaults in self.DEFAULT_BOUNDS.items():
            configured = get_config(f"suppliers.bounds.{supplier.config_key}", {}) or {}
            self.bounds[supplier] = {
                dimension: tuple(configured.get(dimension, default))
                for dimension, default in defaults.items()
            }

    def bounds_for(self, supplier: Supplier) -> Dict[str, Bounds]:
        return self.bounds.get(supplier, self.bounds[Supplier.UNKNOWN])

    def is_valid(self, size: Optional[ParsedSize], supplier: Supplier) -> bool:
        """True when every dimension lies inside the supplier's bounds."""
        if size is None:
            return False
        bounds = self.bounds_for(supplier)
        values = {'thickness': size.thickness, 'width': size.width, 'length': size.length}
        for dimension, value in values.items():
            low, high = bounds[dimension]
            if not low <= value <= high:
                return False
        return True

    def describe_violation(self, size: ParsedSize, supplier: Supplier) -> Optional[str]:
        """Human-readable reason a size is out of bounds, or None."""
        bounds = self.bounds_for(supplier)
        values = {'thickness': size.thickness, 'width': size.width, 'length': size.length}
        for dimension, value in values.items():
            low, high = bounds[dimension]
            if not low <= value <= high:
                return f"{dimension} {value:g} outside [{low:g}, {high:g}]"
        return None


class WeightConfidence(Enum):
    """How close an extracted weight is to the theoretical one."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


@dataclass
class WeightCheck:
    """
    Result of comparing an extracted weight with the theoretical weight.

    Attributes:
        confidence: Tier of the deviation.
        theoretical_lbs: Theoretical weight for all pieces.
        deviation: Relative deviation, |actual - theoretical| / theoretical.
    """
    confidence: WeightConfidence
    theoretical_lbs: float
    deviation: Optional[float] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            'confidence': self.confidence.value,
            'theoretical_lbs': round(self.theoretical_lbs, 1),
            'deviation': None if self.deviation is None else round(self.deviation, 4),
        }


class WeightValidator:
    """
    Grades extracted weights against theoretical weights.

    Net weight is preferred for the comparison, gross is used when net is
    missing. The result is only a signal: callers log it and keep the
    extracted weight.
    """

    def __init__(
        self,
        high_tolerance: Optional[float] = None,
        medium_tolerance: Optional[float] = None
    ) -> None:
        self.high_tolerance = high_tolerance if high_tolerance is not None else \
            get_config("validation.weight_tolerance.high", 0.10)
        self.medium_tolerance = medium_tolerance if medium_tolerance is not None else \
            get_config("validation.weight_tolerance.medium", 0.25)

    def check(
        self,
        size: ParsedSize,
        pieces: int,
        net_lbs: float,
        gross_lbs: float,
        lbs_per_sq_ft: Optional[float] = None
    ) -> WeightCheck:
        """
        Compare extracted weight with the theoretical weight.

        Args:
            size: Item size.
            pieces: Piece count.
            net_lbs: Extracted net weight.
            gross_lbs: Extracted gross weight.
            lbs_per_sq_ft: Manual weight-per-area override.

        Returns:
            WeightCheck with the confidence tier.
        """
        expected = theoretical_weight(
            size.thickness, size.width, size.length, pieces, lbs_per_sq_ft
        )
        actual = net_lbs or gross_lbs
        if not actual or expected <= 0:
            return WeightCheck(WeightConfidence.UNKNOWN, expected)

        deviation = abs(actual - expected) / expected
        if deviation <= self.high_tolerance:
            confidence = WeightConfidence.HIGH
        elif deviation <= self.medium_tolerance:
            confidence = WeightConfidence.MEDIUM
        else:
            confidence = WeightConfidence.LOW

        logger.debug(
            f"Weight check {size.key} x{pieces}: actual {actual:.0f} lbs, "
            f"theoretical {expected:.0f} lbs ({deviation:.1%}, {confidence.value})"
        )
        return WeightCheck(confidence, expected, deviation)
