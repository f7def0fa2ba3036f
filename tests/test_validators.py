"""Tests for dimension bounds and weight grading."""

import pytest

from config import ConfigurationManager
from packlist.normalizer import DimensionValidator, ParsedSize, WeightConfidence, WeightValidator
from packlist.suppliers import Supplier

PLATE = ParsedSize(0.375, 60, 120)


class TestDimensionValidator:
    def test_inside_bounds(self):
        assert DimensionValidator().is_valid(PLATE, Supplier.WUU_JING)

    def test_outside_bounds_rejected(self):
        validator = DimensionValidator()
        assert not validator.is_valid(ParsedSize(0.375, 60, 20), Supplier.WUU_JING)
        # Plate thickness is not a coil gauge
        assert not validator.is_valid(PLATE, Supplier.YUEN_CHANG)
        assert not validator.is_valid(None, Supplier.WUU_JING)

    def test_bounds_are_inclusive(self):
        validator = DimensionValidator()
        assert validator.is_valid(ParsedSize(1.0, 72, 180), Supplier.WUU_JING)

    def test_describe_violation(self):
        validator = DimensionValidator()
        assert validator.describe_violation(ParsedSize(0.375, 60, 20), Supplier.WUU_JING) == \
            "length 20 outside [96, 180]"
        assert validator.describe_violation(PLATE, Supplier.WUU_JING) is None

    def test_bounds_from_configuration(self):
        ConfigurationManager().set("suppliers.bounds.wuu_jing.length", [96, 240])
        validator = DimensionValidator()
        assert validator.bounds_for(Supplier.WUU_JING)["length"] == (96, 240)
        assert validator.is_valid(ParsedSize(0.375, 60, 240), Supplier.WUU_JING)


class TestWeightValidator:
    def test_high_confidence(self):
        check = WeightValidator().check(PLATE, 6, 4656, 4685)
        assert check.confidence is WeightConfidence.HIGH
        assert check.theoretical_lbs == pytest.approx(4950.0)
        assert check.deviation == pytest.approx(0.0594, abs=0.0001)

    def test_medium_and_low(self):
        validator = WeightValidator()
        assert validator.check(PLATE, 6, 4000, 4050).confidence is WeightConfidence.MEDIUM
        assert validator.check(PLATE, 6, 2000, 2050).confidence is WeightConfidence.LOW

    def test_gross_used_without_net(self):
        check = WeightValidator().check(PLATE, 6, 0, 4685)
        assert check.confidence is WeightConfidence.HIGH

    def test_no_weight(self):
        check = WeightValidator().check(PLATE, 6, 0, 0)
        assert check.confidence is WeightConfidence.UNKNOWN
        assert check.deviation is None

    def test_weight_per_area_override(self):
        check = WeightValidator().check(PLATE, 6, 4656, 4685, lbs_per_sq_ft=15.52)
        assert check.theoretical_lbs == pytest.approx(4656.0)
        assert check.deviation == pytest.approx(0.0)

    def test_custom_tolerance(self):
        check = WeightValidator(high_tolerance=0.01).check(PLATE, 6, 4656, 4685)
        assert check.confidence is WeightConfidence.MEDIUM

    def test_to_dict(self):
        data = WeightValidator().check(PLATE, 6, 4656, 4685).to_dict()
        assert data["confidence"] == "high"
        assert data["theoretical_lbs"] == 4950.0
