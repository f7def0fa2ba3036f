"""Tests for page scoring, sheet selection and supplier detection."""

import pytest

from packlist.classifier import PageClassifier, SupplierDetector, TermMatcher
from packlist.suppliers import Supplier

PACKING_HEADER = "PACKING LIST\nSIZE PCS BUNDLE NO. HEAT NO. NET WEIGHT"
INVOICE_PAGE = "COMMERCIAL INVOICE\nUNIT PRICE AMOUNT PAYMENT"


@pytest.fixture
def classifier():
    return PageClassifier()


class TestTermMatcher:
    def test_longest_term_first(self):
        matcher = TermMatcher(['price', 'unit price'])
        assert matcher.findall("UNIT PRICE and price") == ['unit price', 'price']

    def test_letter_boundaries(self):
        assert TermMatcher(['pc']).count("SPEC 6 PC") == 1
        assert TermMatcher(['mm*']).count("1525MM*3050MM") == 1

    def test_empty_vocabulary(self):
        matcher = TermMatcher([])
        assert matcher.count("anything") == 0
        assert not matcher.contains_any("anything")


class TestScoring:
    def test_title_and_indicators(self, classifier):
        assert classifier.score(PACKING_HEADER) == 80

    def test_invoice_terms_penalized(self, classifier):
        score = classifier.score(PACKING_HEADER + "\nINVOICE PAYMENT AMOUNT")
        assert score == 20
        assert score < classifier.accept_threshold

    def test_fixture_pages_are_packing_lists(self, classifier, load_fixture):
        for name in ("wuu_jing_packing.txt", "yuen_chang_packing.txt", "yeou_yih_packing.txt"):
            assert classifier.score_page(0, load_fixture(name)).is_packing_list

    def test_invoice_page_scores_below_packing_list(self, classifier, load_fixture):
        invoice = classifier.score(load_fixture("yuen_chang_invoice.txt"))
        packing = classifier.score(load_fixture("yuen_chang_packing.txt"))
        assert invoice < packing

    def test_custom_weights(self):
        classifier = PageClassifier(title_bonus=0, indicator_bonus=1)
        assert classifier.score(PACKING_HEADER) == 5


class TestPageSelection:
    def test_best_page(self, classifier, load_fixture):
        best = classifier.select_best_page([INVOICE_PAGE, load_fixture("wuu_jing_packing.txt")])
        assert best.page_index == 1
        assert best.page_number == 2

    def test_no_pages(self, classifier):
        assert classifier.select_best_page([]) is None

    def test_single_page_always_returned(self, classifier):
        assert classifier.select_best_page(["nothing useful"]).page_index == 0

    def test_ties_keep_page_order(self, classifier):
        scores = classifier.score_pages(["blank", "blank"])
        assert [s.page_index for s in scores] == [0, 1]


class TestSheetSelection:
    def test_preferred_name(self, classifier):
        sheets = {"Summary": [["PACKING LIST"]], "Packing List": [["x"]]}
        assert classifier.select_best_sheet(sheets)[0] == "Packing List"

    def test_excluded_names_skipped(self, classifier):
        sheets = {"Shipping Mark": [["x"]], "Invoice": [["INVOICE"]], "Data": [["x"]]}
        assert classifier.select_best_sheet(sheets)[0] == "Data"

    def test_best_scoring_sheet(self, classifier):
        sheets = {
            "Notes": [["hello"]],
            "Sheet2": [["PACKING LIST"], ["SIZE", "PCS", "BUNDLE NO.", "NET WEIGHT"]],
        }
        assert classifier.select_best_sheet(sheets)[0] == "Sheet2"

    def test_only_excluded_sheets(self, classifier):
        name, rows = classifier.select_best_sheet({"Invoice": [["a"]]})
        assert name == "Invoice"
        assert rows == [["a"]]

    def test_empty_workbook(self, classifier):
        assert classifier.select_best_sheet({}) is None


class TestSupplierDetector:
    @pytest.fixture
    def detector(self):
        return SupplierDetector()

    @pytest.mark.parametrize("text, expected", [
        ("WUU JING INDUSTRIAL CO., LTD.", Supplier.WUU_JING),
        ("YUEN CHANG STAINLESS STEEL CO., LTD.", Supplier.YUEN_CHANG),
        ("YEOU YIH STEEL CO., LTD.", Supplier.YEOU_YIH),
        ("NO. SIZE PC BUNDLE NO. CONTAINER NO.", Supplier.WUU_JING),
        ('1 WM006 26GA x 48" x 120"', Supplier.YUEN_CHANG),
        ('S2509021 001715 0.750" X 60" X 120"', Supplier.YEOU_YIH),
        ("hello", Supplier.UNKNOWN),
        ("", Supplier.UNKNOWN),
    ])
    def test_detect(self, detector, text, expected):
        assert detector.detect(text) is expected

    def test_keywords_checked_before_layout(self, detector):
        assert detector.detect('YEOU YIH\n9.53*1525MM*3050MM BUNDLE NO.') is Supplier.YEOU_YIH

    def test_fixtures(self, detector, load_fixture):
        assert detector.detect(load_fixture("wuu_jing_ocr.txt")) is Supplier.WUU_JING
        assert detector.detect(load_fixture("yuen_chang_packing.txt")) is Supplier.YUEN_CHANG
        assert detector.detect(load_fixture("yeou_yih_packing.txt")) is Supplier.YEOU_YIH
