"""Tests for the command-line entry point."""

import io
import json

import pytest
from openpyxl import Workbook

import main
from packlist.pipeline import ParseOutcome

PACKING_ROWS = [
    ["WUU JING INDUSTRIAL CO., LTD."],
    ["EXCEL METALS LLC ORDER NO.: 001837"],
    ["NO.", "SIZE", "PC", "BUNDLE NO.", "CONTAINER NO.", "N'WEIGHT(MT)", "G'WEIGHT(MT)"],
    [1, '9.53*1525MM*3050MM(3/8"*60"*120")', 6, "001837-01", "EITU3156602", 2.112, 2.125],
]


@pytest.fixture
def packing_workbook(tmp_path):
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "PACKING"
    for row in PACKING_ROWS:
        sheet.append(row)
    path = tmp_path / "PL_1837.xlsx"
    buffer = io.BytesIO()
    workbook.save(buffer)
    path.write_bytes(buffer.getvalue())
    return path


class TestArguments:
    def test_defaults(self):
        args = main.parse_arguments(["--input", "a.pdf", "b.xlsx"])

        assert args.input == ["a.pdf", "b.xlsx"]
        assert args.output is None
        assert args.po is None
        assert args.force_ocr is False
        assert args.log_level is None

    def test_all_options(self):
        args = main.parse_arguments([
            "-i", "scan.pdf", "-o", "out.json", "--po", "1837", "--force-ocr",
            "--inventory", "inv.xlsx", "-c", "custom.yaml", "--log-level", "DEBUG",
        ])

        assert args.output == "out.json"
        assert args.po == "1837"
        assert args.force_ocr
        assert args.inventory == "inv.xlsx"
        assert args.config == "custom.yaml"
        assert args.log_level == "DEBUG"

    def test_input_required(self):
        with pytest.raises(SystemExit):
            main.parse_arguments([])


class TestWriteOutput:
    def test_writes_file(self, tmp_path):
        target = tmp_path / "nested" / "results.json"
        main.write_output([ParseOutcome(filename="PL.pdf", error="boom")], str(target))

        data = json.loads(target.read_text(encoding="utf-8"))
        assert data == [ParseOutcome(filename="PL.pdf", error="boom").to_dict()]

    def test_prints_without_path(self, capsys):
        main.write_output([], None)
        assert capsys.readouterr().out.strip() == "[]"


class TestMain:
    def test_parses_workbook(self, packing_workbook, tmp_path):
        output = tmp_path / "results.json"
        code = main.main(["-i", str(packing_workbook), "-o", str(output), "--log-level", "WARNING"])

        assert code == 0
        results = json.loads(output.read_text(encoding="utf-8"))
        assert results[0]["filename"] == "PL_1837.xlsx"
        assert results[0]["document"]["po_number"] == "1837"
        assert results[0]["document"]["items"][0]["lot_serial_nbr"] == "001837-01"

    def test_missing_file(self, tmp_path):
        assert main.main(["-i", str(tmp_path / "missing.pdf"), "--log-level", "ERROR"]) == 1

    def test_empty_directory(self, tmp_path):
        assert main.main(["-i", str(tmp_path), "--log-level", "ERROR"]) == 1

    def test_failed_file(self, tmp_path):
        bad = tmp_path / "broken.pdf"
        bad.write_bytes(b"%PDF-1.4 truncated")
        output = tmp_path / "results.json"

        assert main.main(["-i", str(bad), "-o", str(output), "--log-level", "ERROR"]) == 1
        assert json.loads(output.read_text(encoding="utf-8"))[0]["success"] is False

    def test_interrupt(self, monkeypatch, tmp_path):
        def interrupted(**kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr(main, "run_extraction", interrupted)
        assert main.main(["-i", str(tmp_path), "--log-level", "ERROR"]) == 130
