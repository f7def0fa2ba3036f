"""Tests for PO, warehouse, finish and container extraction."""

import pytest

from packlist.extraction import UNKNOWN_PO, HeaderFieldExtractor, Section, section_value_at, strip_po


@pytest.fixture
def fields():
    return HeaderFieldExtractor()


class TestPurchaseOrder:
    @pytest.mark.parametrize("text, expected", [
        ("EXCEL ORDER # 001726", "1726"),
        ("EXCEL METALS LLC ORDER NO.: 001837", "1837"),
        ("P.O. NO.: 1837", "1837"),
        ("PO 2044", "2044"),
        ("ORDER NUMBER 5555", "5555"),
    ])
    def test_po_from_text(self, fields, text, expected):
        assert fields.po_from_text(text) == expected

    def test_invoice_order_is_not_a_po(self, fields):
        assert fields.po_from_text("INVOICE ORDER 5555") is None

    def test_po_from_filename(self, fields):
        assert fields.po_from_filename("PO_1837_packing.pdf") == "1837"
        assert fields.po_from_filename("scan.pdf") is None
        assert fields.po_from_filename(None) is None

    def test_po_from_bundles(self, fields):
        assert fields.po_from_bundles("001837-01 001837-02 001838-01") == "1837"
        assert fields.po_from_bundles("001837-3-01 001837-3-02") == "1837"
        assert fields.po_from_bundles("no bundles here") is None

    def test_sales_orders(self, fields):
        text = "S2509021 001715 ... S2509021 001715 ... S2509022 001716"
        assert fields.sales_order_map(text) == {"S2509021": "1715", "S2509022": "1716"}
        assert fields.po_from_sales_orders(text) == "1715"

    def test_all_pos(self, fields):
        assert fields.all_pos("001837-01 S2509021 001715 001837-02") == ["1837", "1715"]
        assert fields.all_pos("") == []

    def test_po_from_grid_label_and_value(self, fields):
        rows = [["EXCEL ORDER #", "", "001726"]]
        assert fields.po_from_grid(rows) == "1726"

    def test_po_from_grid_skips_invoice_cells(self, fields):
        rows = [["INVOICE NO. 12345"], ["PO 1837"]]
        assert fields.po_from_grid(rows) == "1837"

    def test_po_from_grid_falls_back_to_bundles(self, fields):
        rows = [["BUNDLE NO."], ["001900-01"]]
        assert fields.po_from_grid(rows) == "1900"

    def test_resolve_po_order(self, fields):
        text = "EXCEL ORDER # 001726"
        assert fields.resolve_po(explicit=" 2001 ", filename="PO_1837.pdf", text=text) == "2001"
        assert fields.resolve_po(explicit="UNKNOWN", filename="PO_1837.pdf", text=text) == "1837"
        assert fields.resolve_po(filename="scan.pdf", text=text) == "1726"
        assert fields.resolve_po(text="001715-01 EXCEL ORDER # 001726") == "1715"
        assert fields.resolve_po(text="nothing") == UNKNOWN_PO

    def test_strip_po(self):
        assert strip_po("001837") == "1837"
        assert strip_po("000") == "0"


class TestWarehouse:
    @pytest.mark.parametrize("text, expected", [
        ("SHIP TO: BALTIMORE, MD", ("Baltimore", True)),
        ("SHIP TO: HOUSTON, TX", ("Houston", True)),
        ("SHIP TO: KENT, WA", ("Kent", True)),
        ("PORT OF LOS ANGELES", ("LA", True)),
        ("SHIP TO: KENTUCKY", ("LA", False)),
        ("", ("LA", False)),
    ])
    def test_warehouse(self, fields, text, expected):
        assert fields.warehouse(text) == expected

    def test_default_from_configuration(self):
        from config import ConfigurationManager
        ConfigurationManager().set("warehouse.default", "Houston")
        assert HeaderFieldExtractor().warehouse("no city") == ("Houston", False)

    def test_warehouse_from_grid(self, fields):
        rows = [["SHIP TO:", "TAMPA, FL"]] + [["x"]] * 20 + [["BALTIMORE"]]
        assert fields.warehouse_from_grid(rows) == ("Tampa", True)


class TestSections:
    def test_finish_sections(self, fields):
        text = "304/304L 2B Finish\n1 WM006\n304/304L NO.4 Finish\n3 WM008"
        sections = fields.finish_sections(text)
        assert [s.value for s in sections] == ["2B", "#4"]
        assert section_value_at(sections, text.index("WM006")) == "2B"
        assert section_value_at(sections, text.index("WM008")) == "#4"

    def test_plain_finish_statement(self, fields):
        assert fields.finish("STAINLESS STEEL PLATE 304/304L NO.1 FINISH") == "#1"
        assert fields.finish("no finish stated") is None

    def test_container_sections(self, fields):
        text = "CONTAINER NO. FFAU2098727\nrow\nCONTAINER NO.: TGHU1234567\nrow"
        sections = fields.container_sections(text)
        assert [s.value for s in sections] == ["FFAU2098727", "TGHU1234567"]
        assert section_value_at(sections, 0) == "FFAU2098727"
        assert section_value_at(sections, len(text)) == "TGHU1234567"

    def test_section_value_before_first_section(self):
        assert section_value_at([Section(10, "A")], 5) is None
