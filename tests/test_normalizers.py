"""Tests for size grammars and identifier construction."""

import pytest

from packlist.inventory import InventoryLookup
from packlist.normalizer import (
    IdentifierBuilder,
    ParsedSize,
    SizeParser,
    build_lot_serial,
    is_canonical_lot,
    normalize_finish,
    pad_finish_code,
)
from packlist.suppliers import Supplier


@pytest.fixture
def parser():
    return SizeParser()


class TestParsedSize:
    def test_key_and_formatting(self):
        size = ParsedSize(0.375, 60.0, 120.0)
        assert size.key == "0.3750-60-120"
        assert size.thickness_formatted == "0.3750"

    def test_fractional_width_in_key(self):
        assert ParsedSize(0.5, 60.5, 120).key == "0.5000-60.5-120"

    def test_to_dict(self):
        data = ParsedSize(0.018, 48, 120).to_dict()
        assert data["thickness_formatted"] == "0.0180"
        assert data["width"] == 48


class TestSizeParser:
    def test_metric_with_imperial(self, parser):
        size = parser.parse_metric_imperial_size('9.53*1525MM*3050MM(3/8"*60"*120")')
        assert size == ParsedSize(0.375, 60.0, 120.0)

    def test_metric_only(self, parser):
        assert parser.parse_metric_imperial_size("9.53*1525MM*3050MM") == ParsedSize(0.375, 60.0, 120.0)

    def test_unreadable_imperial_falls_back_to_metric(self, parser):
        size = parser.parse_metric_imperial_size("4.76*1525MM*3660MM(N/A)")
        assert size == ParsedSize(0.188, 60.0, 144.0)

    def test_gauge(self, parser):
        assert parser.parse_gauge_size('26GA x 48" x 120"').key == "0.0180-48-120"
        assert parser.parse_gauge_size('99GA x 48" x 120"') is None

    def test_decimal(self, parser):
        assert parser.parse_decimal_size('0.750" X 60" X 120"') == ParsedSize(0.75, 60.0, 120.0)
        assert parser.parse_decimal_size('5.5" X 60" X 120"') is None

    def test_fraction_through_parse_size(self, parser):
        assert parser.parse_size('3/8" x 60" x 120"') == ParsedSize(0.375, 60.0, 120.0)

    def test_supplier_grammar_first(self, parser):
        size = parser.parse_size('24GA x 48" x 96"', Supplier.YUEN_CHANG)
        assert size.key == "0.0240-48-96"

    def test_unparseable(self, parser):
        assert parser.parse_size("HEAT NO. A5123456") is None
        assert parser.parse_size("") is None

    def test_find_sizes_mixed_grammars(self, parser):
        text = (
            'A 9.53*1525MM*3050MM(3/8"*60"*120") '
            'B 26GA x 48" x 120" '
            'C 0.750" X 60" X 120"'
        )
        matches = parser.find_sizes(text)
        assert [m.size.key for m in matches] == [
            "0.3750-60-120",
            "0.0180-48-120",
            "0.7500-60-120",
        ]
        assert matches[0].raw.startswith("9.53*1525MM")
        assert matches[0].start < matches[1].start < matches[2].start

    def test_find_sizes_does_not_double_count(self, parser):
        matches = parser.find_sizes('9.53*1525MM*3050MM(3/8"*60"*120")')
        assert len(matches) == 1


class TestFinish:
    @pytest.mark.parametrize("raw, expected", [
        ("NO.1", "#1"),
        ("no 4", "#4"),
        ("#1", "#1"),
        ("2b", "2B"),
        (None, None),
        ("", None),
    ])
    def test_normalize_finish(self, raw, expected):
        assert normalize_finish(raw) == expected

    def test_padding(self):
        assert pad_finish_code("2B") == "2B____"
        assert pad_finish_code("#1") == "#1____"


class TestLotSerial:
    @pytest.mark.parametrize("value", ["001837-01", "001837-3-01", "WM006"])
    def test_canonical_shapes(self, value):
        assert is_canonical_lot(value)

    def test_canonical_passes_through_upper_cased(self):
        assert build_lot_serial("001837-01", "1837") == "001837-01"
        assert build_lot_serial("001837-3-01", "1837") == "001837-3-01"
        assert build_lot_serial("wm006", "1726") == "WM006"

    def test_synthesized_from_po(self):
        assert build_lot_serial("7", "1837") == "001837-07"
        assert build_lot_serial(None, "1837") == "001837-00"

    def test_unknown_po(self):
        assert build_lot_serial("B12", "UNKNOWN") == "000000-12"


class TestIdentifierBuilder:
    @pytest.fixture
    def builder(self, empty_inventory):
        return IdentifierBuilder(empty_inventory)

    def test_supplier_default_finish(self, builder):
        size = ParsedSize(0.375, 60, 120)
        assert builder.inventory_id(size, Supplier.WUU_JING) == "0.3750-60__-120__-304/304L-#1____"
        assert builder.inventory_id(ParsedSize(0.018, 48, 120), Supplier.YUEN_CHANG) == \
            "0.0180-48__-120__-304/304L-2B____"

    def test_explicit_finish(self, builder):
        size = ParsedSize(0.018, 48, 96)
        assert builder.inventory_id(size, Supplier.YUEN_CHANG, "NO.4") == \
            "0.0180-48__-96__-304/304L-#4____"

    def test_thickness_display_override(self):
        lookup = InventoryLookup(thickness_display={"0.188": "0.1875"})
        builder = IdentifierBuilder(lookup)
        assert builder.inventory_id(ParsedSize(0.188, 60, 144), Supplier.WUU_JING).startswith("0.1875-60__")

    def test_manual_mapping_wins(self, empty_inventory):
        empty_inventory.add_mapping(0.375, 60, 120, inventory_id="PLATE-3/8-60-120", lbs_per_sq_ft=15.5)
        builder = IdentifierBuilder(empty_inventory)
        size = ParsedSize(0.375, 60, 120)
        assert builder.inventory_id(size, Supplier.WUU_JING) == "PLATE-3/8-60-120"
        assert builder.lbs_per_sq_ft_override(size) == 15.5
        assert builder.lbs_per_sq_ft_override(ParsedSize(0.375, 60, 144)) is None

    def test_material_grade(self, empty_inventory):
        builder = IdentifierBuilder(empty_inventory, material_grade="316L")
        assert "-316L-" in builder.inventory_id(ParsedSize(0.375, 60, 120), Supplier.WUU_JING)

    def test_lot_serial(self, builder):
        assert builder.lot_serial("3", "1715") == "001715-03"
