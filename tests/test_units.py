"""Tests for the unit conversion tables and helpers."""

import pytest

from packlist.normalizer.units import (
    GAUGE_TO_DECIMAL,
    fraction_to_decimal,
    gauge_to_decimal,
    lbs_per_sq_ft,
    lbs_to_mt,
    mm_to_decimal,
    mm_to_inches,
    mt_to_lbs,
    parse_thickness,
    theoretical_weight,
)


class TestGauge:
    @pytest.mark.parametrize("code", sorted(k for k in GAUGE_TO_DECIMAL if k.endswith("GA")))
    def test_every_gauge_is_sheet_thin_and_key_form_independent(self, code):
        bare = code[:-2]
        value = gauge_to_decimal(code)
        assert 0 < value <= 0.2
        assert gauge_to_decimal(bare) == value
        assert gauge_to_decimal(int(bare)) == value

    def test_known_values(self):
        assert gauge_to_decimal("26GA") == 0.018
        assert gauge_to_decimal("24") == 0.024
        assert gauge_to_decimal("22 GA") == 0.030

    def test_unknown_gauge(self):
        assert gauge_to_decimal("99GA") is None
        assert gauge_to_decimal("abc") is None


class TestFraction:
    def test_table_values_win(self):
        assert fraction_to_decimal("3/16") == 0.188
        assert fraction_to_decimal('3/8"') == 0.375

    def test_arithmetic_fallback(self):
        assert fraction_to_decimal("5/32") == pytest.approx(0.15625)
        assert fraction_to_decimal("1-1/4") == 1.25

    def test_invalid(self):
        assert fraction_to_decimal("1/0") is None
        assert fraction_to_decimal("thick") is None
        assert fraction_to_decimal(None) is None


class TestMillimetres:
    def test_table_and_near_table(self):
        assert mm_to_decimal("9.53MM") == 0.375
        assert mm_to_decimal("4.76") == 0.188
        assert mm_to_decimal("9.531") == 0.375

    def test_division_fallback(self):
        assert mm_to_decimal("3.0") == 0.118

    def test_invalid(self):
        assert mm_to_decimal("abc") is None
        assert mm_to_decimal("0") is None

    def test_widths_and_lengths(self):
        assert mm_to_inches(1525) == 60
        assert mm_to_inches(3050) == 120
        assert mm_to_inches(3660) == 144


class TestMass:
    def test_metric_tons_to_pounds(self):
        assert mt_to_lbs(2.112) == 4656
        assert mt_to_lbs(2.125) == 4685

    @pytest.mark.parametrize("mt", [0.1, 1.0, 2.112, 17.5, 50.0])
    def test_round_trip(self, mt):
        assert lbs_to_mt(mt_to_lbs(mt)) == pytest.approx(mt, abs=0.001)


class TestParseThickness:
    @pytest.mark.parametrize("token, expected", [
        ("26GA", 0.018),
        ("3/8", 0.375),
        ("9.53MM", 0.375),
        ("0.750", 0.75),
        ("6.35", 0.25),
    ])
    def test_interpretation_order(self, token, expected):
        assert parse_thickness(token) == expected

    def test_out_of_range(self):
        assert parse_thickness("25") is None
        assert parse_thickness("") is None
        assert parse_thickness(None) is None


class TestWeights:
    def test_table_lookup(self):
        assert lbs_per_sq_ft(0.375) == 16.5
        assert lbs_per_sq_ft(0.018) == 0.756

    @pytest.mark.parametrize("thickness, expected", [
        (0.187, 7.871),
        (0.188, 8.579),
        (0.25, 11.16),
        (0.313, 13.75),
        (0.5, 21.66),
        (0.75, 32.12),
        (1.0, 42.67),
        (1.125, 47.83),
        (3.0, 126.3),
        (3.25, 136.6),
        (3.5, 147.0),
        (3.75, 157.3),
    ])
    def test_plate_rows(self, thickness, expected):
        assert lbs_per_sq_ft(thickness) == expected

    def test_fraction_thickness_hits_plate_row(self):
        assert lbs_per_sq_ft(0.1875) == 8.579
        assert lbs_per_sq_ft(0.3125) == 13.75

    def test_near_table_value(self):
        assert lbs_per_sq_ft(0.1876) == 8.579

    def test_interpolation(self):
        assert lbs_per_sq_ft(0.2) == pytest.approx(9.08, abs=0.01)

    def test_density_beyond_table(self):
        assert lbs_per_sq_ft(5.0) == pytest.approx(5.0 * 144 * 0.2833)

    def test_theoretical_weight(self):
        assert theoretical_weight(0.375, 60, 120, 6) == pytest.approx(4950.0)
        assert theoretical_weight(0.375, 60, 120, 6, weight_per_sq_ft=16) == pytest.approx(4800.0)
        assert theoretical_weight(0.25, 48, 120) == pytest.approx(446.4)

    def test_zero_pieces_counts_one_sheet(self):
        assert theoretical_weight(0.375, 60, 120, 0) == pytest.approx(825.0)
