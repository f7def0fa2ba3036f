"""Tests for window scanning, the OCR confusion table and thickness repair."""

import re

import pytest

from packlist.extraction import (
    OCR_CONFUSIONS,
    ConfusionRule,
    TextScanner,
    Token,
    clean_ocr_text,
    numbers_in_range,
    repair_thickness,
)

DIGITS = re.compile(r'\d+')


class TestTextScanner:
    @pytest.fixture
    def scanner(self):
        return TextScanner("aa 12 bb 34 cc 56")

    def test_find_all(self, scanner):
        assert [t.text for t in scanner.find_all(DIGITS)] == ["12", "34", "56"]

    def test_search_after_is_window_bounded(self, scanner):
        token = scanner.search_after(DIGITS, 5, 10)
        assert (token.text, token.start, token.end) == ("34", 9, 11)
        assert scanner.search_after(DIGITS, 5, 4) is None

    def test_search_before_returns_nearest(self, scanner):
        assert scanner.search_before(DIGITS, 9, 9).text == "12"
        assert scanner.search_before(DIGITS, 15, 20).text == "34"
        assert scanner.search_before(DIGITS, 3, 3) is None

    def test_search_all_after(self, scanner):
        assert [t.text for t in scanner.search_all_after(DIGITS, 0, 12)] == ["12", "34"]

    def test_windows(self, scanner):
        assert scanner.window_after(3, 2) == "12"
        assert scanner.window_before(5, 2) == "12"
        assert scanner.window_before(1, 5) == "a"

    def test_nearest_before_and_first_after(self, scanner):
        tokens = scanner.find_all(DIGITS)
        assert scanner.nearest_before(tokens, 12, 20).text == "34"
        assert scanner.nearest_before(tokens, 12, 2) is None
        assert scanner.first_after(tokens, 6, 20).text == "34"
        assert scanner.first_after(tokens, 6, 20, accept=lambda t: t.text != "34").text == "56"

    def test_find_claimed_earlier_pattern_wins(self):
        scanner = TextScanner("12-34 56")
        tokens = scanner.find_claimed([re.compile(r'\d{2}-\d{2}'), re.compile(r'\d{2}')])
        assert [t.text for t in tokens] == ["12-34", "56"]

    def test_find_first_of(self):
        scanner = TextScanner("x 12")
        tokens = scanner.find_first_of([re.compile(r'[A-Z]{3}'), DIGITS])
        assert [t.text for t in tokens] == ["12"]

    def test_token_groups_and_overlap(self):
        token = Token("12-34", ("12", "34"), 0, 5)
        assert token.group(2) == "34"
        assert token.overlaps(Token("34", (), 3, 5))
        assert not token.overlaps(Token("56", (), 6, 8))

    def test_numbers_in_range(self):
        tokens = TextScanner("0.2 2.112 1,234.5 99999").find_all(re.compile(r'([\d,.]+)'))
        assert numbers_in_range(tokens, 0.3, 5000) == [2.112, 1234.5]


class TestConfusionTable:
    @pytest.mark.parametrize("raw, expected", [
        ("0O1837-0l 2.1l2", "001837-01 2.112"),
        ('3/8"*60"*|20"', '3/8"*60"*120"'),
        ("9.53*1S25MM", "9.53*1525MM"),
        ("3B5", "385"),
        ("1525 NM*3050MM", "1525MM*3050MM"),
        ('48” x 120”', '48" x 120"'),
        ("2 .112", "2.112"),
        ("2. 112", "2.112"),
        ("a \n  b", "a b"),
    ])
    def test_corrections(self, raw, expected):
        assert clean_ocr_text(raw) == expected

    def test_header_words_untouched(self):
        assert clean_ocr_text("NO. SIZE BUNDLE NO. HEAT NO.") == "NO. SIZE BUNDLE NO. HEAT NO."

    def test_rules_are_ordered_and_named(self):
        names = [rule.name for rule in OCR_CONFUSIONS]
        assert names[0] == "letter-o-before-digit"
        assert names[-1] == "whitespace"

    def test_custom_rules(self):
        rule = ConfusionRule("z-to-2", re.compile(r'Z'), "2")
        assert clean_ocr_text("1Z", rules=[rule]) == "12"
        assert clean_ocr_text("a  b", rules=[]) == "a  b"

    def test_empty(self):
        assert clean_ocr_text(None) == ""


class TestRepairThickness:
    @pytest.mark.parametrize("token, expected", [
        ("3/8", 0.375),
        ('3/8"', 0.375),
        ("8", 0.375),
        ("4", 0.25),
        ("16", 0.188),
        ("10", 0.1),
        ("0.75", 0.75),
        ("1", 1.0),
    ])
    def test_repairs(self, token, expected):
        assert repair_thickness(token) == pytest.approx(expected)

    @pytest.mark.parametrize("token", ["abc", "20", "", None])
    def test_not_a_thickness(self, token):
        assert repair_thickness(token) is None
