"""End-to-end tests for the parsing pipeline over fake PDFs and real workbooks."""

import io
import json

import pytest
from openpyxl import Workbook

from packlist.input_handler import InputFile
from packlist.suppliers import Supplier

PDF = b"%PDF-1.4 fake"

WUU_JING_GRID = [
    ["WUU JING INDUSTRIAL CO., LTD."],
    ["EXCEL METALS LLC ORDER NO.: 001837"],
    ["STAINLESS STEEL PLATE 304/304L NO.1 FINISH"],
    ["NO.", "SIZE", "PC", "BUNDLE NO.", "CONTAINER NO.", "N'WEIGHT(MT)", "G'WEIGHT(MT)"],
    [1, '9.53*1525MM*3050MM(3/8"*60"*120")', 6, "001837-01", "EITU3156602", 2.112, 2.125],
    [2, '9.53*1525MM*3050MM(3/8"*60"*120")', 6, "001837-02", "EITU3156602", 2.108, 2.121],
    ["TOTAL", None, 12, None, None, 4.220, 4.246],
]

INVOICE_GRID = [
    ["COMMERCIAL INVOICE"],
    ["INVOICE NO.", "WJ-1837"],
    ["SIZE", "PCS", "QTY(LBS)", "UNIT PRICE US$/LB", "AMOUNT"],
    ['9.53*1525MM*3050MM(3/8"*60"*120")', 12, 9312, 1.85, 17227.20],
    ["TOTAL AMOUNT", 17227.20],
]


def workbook_bytes(sheets):
    workbook = Workbook()
    workbook.remove(workbook.active)
    for name, rows in sheets.items():
        sheet = workbook.create_sheet(name)
        for row in rows:
            sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class TestNativePdf:
    def test_wuu_jing(self, make_pipeline, load_fixture):
        outcome = make_pipeline([load_fixture("wuu_jing_packing.txt")]).parse_file(PDF, "PL.pdf")

        assert outcome.success
        doc = outcome.document
        assert doc.supplier is Supplier.WUU_JING
        assert doc.vendor_code == "V005006"
        assert doc.po_number == "1837"
        assert len(doc.items) == 3
        assert doc.strategy == "regex-anchored"
        assert (doc.warehouse, doc.warehouse_detected) == ("Baltimore", True)
        assert doc.source_page == 0
        assert not doc.ocr_used
        assert [i.weight_confidence for i in doc.items] == ["high", "high", "medium"]
        assert doc.warnings == []
        assert outcome.invoices == []

    def test_explicit_po_wins(self, make_pipeline, load_fixture):
        outcome = make_pipeline([load_fixture("yeou_yih_packing.txt")]).parse_file(PDF, "PL.pdf", po="1715")
        doc = outcome.document

        assert doc.po_number == "1715"
        assert doc.supplier is Supplier.YEOU_YIH
        assert doc.warnings == ["Multiple POs found: 1715, 1716"]

    def test_best_page_selected(self, make_pipeline, load_fixture):
        pages = ["SHIPPING MARKS\nEXCEL METALS\nMADE IN TAIWAN", load_fixture("yuen_chang_packing.txt")]
        outcome = make_pipeline(pages).parse_file(PDF, "PL.pdf")

        assert outcome.document.source_page == 1
        assert outcome.document.supplier is Supplier.YUEN_CHANG

    def test_image_only_pdf_needs_ocr(self, make_pipeline):
        outcome = make_pipeline(["", "  "]).parse_file(PDF, "scan.pdf")

        assert outcome.needs_ocr
        assert not outcome.success
        assert outcome.document is None

    def test_invoice_only(self, make_pipeline, load_fixture):
        outcome = make_pipeline([load_fixture("yuen_chang_invoice.txt")]).parse_file(PDF, "INV.pdf")

        assert outcome.success
        assert outcome.is_invoice
        assert outcome.document is None
        assert outcome.invoice.invoice_number == "YC-25-0612"

    def test_packing_list_with_invoice(self, make_pipeline, load_fixture):
        pages = [load_fixture("yuen_chang_packing.txt"), load_fixture("yuen_chang_invoice.txt")]
        outcome = make_pipeline(pages).parse_file(PDF, "PL.pdf")
        doc = outcome.document

        assert len(doc.items) == 3
        assert [i.unit_cost_override for i in doc.items] == [0.4289, 0.4202, 0.4034]
        assert len(outcome.invoices) == 1
        assert outcome.invoice.source_page == 1
        assert doc.warehouse == "Houston"

    def test_invoice_page_first_is_excluded(self, make_pipeline, load_fixture):
        pages = [load_fixture("yuen_chang_invoice.txt"), load_fixture("yuen_chang_packing.txt")]
        outcome = make_pipeline(pages).parse_file(PDF, "PL.pdf")

        assert not outcome.needs_ocr
        assert not outcome.is_invoice
        assert outcome.document.source_page == 1
        assert len(outcome.document.items) == 3
        assert outcome.invoice.source_page == 0

    def test_no_items(self, make_pipeline):
        outcome = make_pipeline(["PACKING LIST " + "lorem ipsum " * 10]).parse_file(PDF, "PL.pdf")

        assert not outcome.success
        assert "Could not parse items" in outcome.error


class TestOcrPdf:
    def test_best_ocr_page(self, make_pipeline, load_fixture):
        pipeline = make_pipeline(
            ["x", "y"],
            ocr_texts=["BLANK PAGE SCAN NOISE", load_fixture("wuu_jing_ocr.txt")],
            confidences=[40, 92],
        )
        events = []
        outcome = pipeline.parse_file(PDF, "scan.pdf", force_ocr=True, on_progress=events.append)
        doc = outcome.document

        assert doc.strategy == "ocr-tolerant"
        assert len(doc.items) == 3
        assert doc.source_page == 1
        assert doc.ocr_used
        assert outcome.ocr_confidence == 66.0
        assert outcome.ocr_warning == "Low OCR confidence (66%). Please verify the extracted data."
        assert events[0].status == "Starting OCR..."
        assert events[-1].progress == 100.0

    def test_ocr_without_items(self, make_pipeline):
        pipeline = make_pipeline(["x"], ocr_texts=["NOTHING LEGIBLE HERE"], confidences=[20])
        outcome = pipeline.parse_file(PDF, "scan.pdf", force_ocr=True)

        assert not outcome.success
        assert outcome.error
        assert outcome.ocr_confidence == 20

    def test_unparsed_invoice_keeps_ocr_accuracy(self, make_pipeline):
        pipeline = make_pipeline(
            ["x"],
            ocr_texts=["COMMERCIAL INVOICE\nBILL TO: EXCEL METALS\nPAYMENT TERMS T/T"],
            confidences=[55],
        )
        outcome = pipeline.parse_file(PDF, "scan.pdf", force_ocr=True)

        assert not outcome.success
        assert "none could be parsed" in outcome.error
        assert outcome.ocr_confidence == 55
        assert outcome.ocr_warning.startswith("Low OCR confidence")


class TestInputErrors:
    def test_unsupported_type(self, make_pipeline):
        outcome = make_pipeline([]).parse_file(b"hello", "notes.txt")
        assert "Unsupported file type" in outcome.error

    def test_empty_file(self, make_pipeline):
        outcome = make_pipeline([]).parse_file(b"", "PL.pdf")
        assert outcome.error
        assert not outcome.success


class TestSpreadsheet:
    def test_workbook_with_invoice_sheet(self, make_pipeline):
        data = workbook_bytes({"INVOICE": INVOICE_GRID, "PACKING": WUU_JING_GRID})
        outcome = make_pipeline([]).parse_file(data, "WJ_packing.xlsx")
        doc = outcome.document

        assert outcome.success
        assert doc.strategy == "grid-header"
        assert doc.source_page == 1
        assert doc.po_number == "1837"
        assert [i.unit_cost_override for i in doc.items] == [1.85, 1.85]
        assert len(outcome.invoices) == 1
        assert (doc.warehouse, doc.warehouse_detected) == ("LA", False)

    def test_bundle_po_beats_other_sheets(self, make_pipeline):
        grid = [row for row in WUU_JING_GRID if "ORDER" not in str(row[0])]
        data = workbook_bytes({"PACKING": grid, "Notes": [["P.O. NO.: 1900"]]})
        doc = make_pipeline([]).parse_file(data, "book.xlsx").document

        assert doc.po_number == "1837"

    def test_po_from_another_sheet(self, make_pipeline):
        grid = [
            [cell.replace("001837-", "B") if isinstance(cell, str) else cell for cell in row]
            for row in WUU_JING_GRID if "ORDER" not in str(row[0])
        ]
        data = workbook_bytes({"PACKING": grid, "Notes": [["P.O. NO.: 1900"]]})
        doc = make_pipeline([]).parse_file(data, "book.xlsx").document

        assert doc.po_number == "1900"

    def test_workbook_without_items(self, make_pipeline):
        data = workbook_bytes({"Sheet1": [["hello"]]})
        outcome = make_pipeline([]).parse_file(data, "book.xlsx")
        assert "Could not parse items" in outcome.error


class TestBatch:
    def test_parse_files_in_order(self, make_pipeline, load_fixture):
        pipeline = make_pipeline([load_fixture("wuu_jing_packing.txt")])
        outcomes = pipeline.parse_files([
            InputFile("a.pdf", PDF),
            InputFile("b.txt", b"hello"),
        ])

        assert [o.filename for o in outcomes] == ["a.pdf", "b.txt"]
        assert [o.success for o in outcomes] == [True, False]

    def test_outcome_serializes(self, make_pipeline, load_fixture):
        outcome = make_pipeline([load_fixture("wuu_jing_packing.txt")]).parse_file(PDF, "PL.pdf")
        data = json.loads(outcome.to_json())

        assert data["success"] is True
        assert data["document"]["po_number"] == "1837"
        assert len(data["document"]["items"]) == 3


class TestRepeatability:
    @pytest.mark.parametrize("fixture", [
        "wuu_jing_packing.txt",
        "yuen_chang_packing.txt",
        "yeou_yih_packing.txt",
        "generic_packing.txt",
    ])
    def test_same_file_parses_the_same_twice(self, make_pipeline, load_fixture, fixture):
        pipeline = make_pipeline([load_fixture(fixture)])
        first = pipeline.parse_file(PDF, "PL.pdf")
        second = pipeline.parse_file(PDF, "PL.pdf")
        fresh = make_pipeline([load_fixture(fixture)]).parse_file(PDF, "PL.pdf")

        assert first.success
        assert first.document.to_dict() == second.document.to_dict()
        assert first.to_dict() == second.to_dict() == fresh.to_dict()
