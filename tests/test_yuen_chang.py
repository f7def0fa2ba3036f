"""Tests for the Yuen Chang fallback chain."""

import pytest

from packlist.extraction import ExtractionContext, YuenChangExtractor


@pytest.fixture
def extractor():
    return YuenChangExtractor()


def context(text="", rows=None, po="1726"):
    return ExtractionContext(text=text, po_number=po, rows=rows)


class TestNativeText:
    def test_regex_anchored(self, extractor, load_fixture):
        result = extractor.extract(context(load_fixture("yuen_chang_packing.txt")))

        assert result.strategy == "regex-anchored"
        assert [i.lot_serial_nbr for i in result.items] == ["WM006", "WM007", "WM008"]
        assert [i.heat_number for i in result.items] == ["S92HB05C", "S92HB06A", "S92HB07B"]
        assert [i.piece_count for i in result.items] == [128, 96, 140]
        assert [(i.net_weight_lbs, i.gross_weight_lbs) for i in result.items] == [
            (3730, 3885), (3713, 3866), (3470, 3612),
        ]

    def test_sections_apply_to_following_rows(self, extractor, load_fixture):
        items = extractor.extract(context(load_fixture("yuen_chang_packing.txt"))).items

        assert items[0].inventory_id == "0.0180-48__-120__-304/304L-2B____"
        assert items[1].size.key == "0.0240-48-120"
        assert items[2].inventory_id == "0.0180-48__-96__-304/304L-#4____"
        assert [i.container_number for i in items] == ["FFAU2098727", "FFAU2098727", "TGHU1234567"]


class TestOcrText:
    def test_recovers_gauges(self, extractor, load_fixture):
        native = extractor.extract(context(load_fixture("yuen_chang_packing.txt"))).items
        result = extractor.extract(context(load_fixture("yuen_chang_ocr.txt")))

        assert result.strategy == "ocr-tolerant"
        assert [i.size.key for i in result.items] == [i.size.key for i in native]
        assert [i.lot_serial_nbr for i in result.items] == ["WM006", "WM007", "WM008"]
        assert result.items[0].heat_number == "S92HB05C"
        assert result.items[0].finish == "2B"

    def test_implausible_length_discarded(self, extractor):
        text = '1 WM006 26GA x 48" x 20" 43S02543-035 S92HB05C 128 3,730.22 3,884.54'
        assert extractor.parse_ocr_text(context(text)) == []


class TestGrid:
    ROWS = [
        ["YUEN CHANG STAINLESS STEEL CO., LTD."],
        ["EXCEL ORDER # 001726"],
        ["NO.", "ITEM", "SIZE", "COIL NO.", "HEAT NO.", "PCS", "NET WEIGHT(LBS)", "GROSS WEIGHT(LBS)"],
        ["CONTAINER NO. FFAU2098727"],
        ["304/304L 2B Finish"],
        [1, "WM006", '26GA x 48" x 120"', "43S02543-035", "S92HB05C", 128, 3730.22, 3884.54],
        [2, "WM007", '24GA x 48" x 120"', "43S02544-012", None, 96, 3712.80, 3866.10],
        ["TOTAL", None, None, None, None, 224, 7443.02, 7750.64],
    ]

    def test_header_grid(self, extractor):
        result = extractor.extract(context(rows=self.ROWS))

        assert result.strategy == "grid-header"
        assert [i.lot_serial_nbr for i in result.items] == ["WM006", "WM007"]
        assert result.items[0].net_weight_lbs == 3730
        assert result.items[0].container_number == "FFAU2098727"
        assert result.items[0].finish == "2B"

    def test_heat_falls_back_to_coil(self, extractor):
        items = extractor.extract(context(rows=self.ROWS)).items
        assert items[0].heat_number == "S92HB05C"
        assert items[1].heat_number == "43S02544-012"
