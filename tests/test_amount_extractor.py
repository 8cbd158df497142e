"""
Unit tests for the receipt total-amount extractor.
"""

import pytest
from receipt_ocr.services.amount_extractor import (
    clean_amount,
    extract_total,
    find_total,
    match_families,
)


class TestCleanAmount:
    """Separator normalization and lenient parsing"""

    def test_dot_decimal(self):
        assert clean_amount("12.50") == 12.5

    def test_comma_decimal(self):
        assert clean_amount("12,50") == 12.5

    def test_comma_thousands_dot_decimal(self):
        assert clean_amount("1,234.56") == 1234.56

    def test_dot_thousands_comma_decimal(self):
        assert clean_amount("1.234,56") == 1234.56

    def test_multiple_grouping_separators(self):
        assert clean_amount("1,234,567.89") == 1234567.89
        assert clean_amount("1.234.567,89") == 1234567.89

    def test_currency_symbols_and_spaces_stripped(self):
        assert clean_amount("$ 12.50") == 12.5
        assert clean_amount("€9,99") == 9.99
        assert clean_amount("₹1,500.00") == 1500.0

    def test_negative_sign_preserved(self):
        assert clean_amount("-50.00") == -50.0
        assert clean_amount("-$50.00") == -50.0

    def test_plain_integer(self):
        assert clean_amount("5384") == 5384.0

    def test_only_first_comma_becomes_decimal(self):
        # "1,234,56" -> "1.234,56" -> longest numeric prefix "1.234"
        assert clean_amount("1,234,56") == 1.234

    def test_trailing_garbage_after_number_ignored(self):
        assert clean_amount("12.34.56") == 12.34

    @pytest.mark.parametrize("raw", ["", "-", ".", ",", "abc", "$"])
    def test_unparseable_returns_none(self, raw):
        assert clean_amount(raw) is None

    def test_overflowing_digit_run_returns_none(self):
        assert clean_amount("9" * 400) is None
        assert clean_amount("-" + "9" * 400) is None


class TestExtractTotal:
    """Pattern-family cascade over OCR text"""

    def test_total_with_dollar_sign(self):
        assert extract_total("Total: $12.50") == 12.5

    def test_last_total_wins(self):
        assert extract_total("Subtotal 10.00\nTax 1.50\nTotal 11.50") == 11.5

    def test_subtotal_then_total_same_family(self):
        text = "Subtotal: 10.00\nTotal: 12.50"
        assert extract_total(text) == 12.5

    def test_amount_due_thousands_comma(self):
        assert extract_total("Amount Due: 1,234.56") == 1234.56

    def test_balance_european_format(self):
        assert extract_total("Balance 1.234,56") == 1234.56

    def test_negative_total(self):
        assert extract_total("Total: -50.00") == -50.0

    def test_unknown_localized_keyword_returns_none(self):
        assert extract_total("Gesamtbetrag 1.234,56") is None

    def test_empty_text_returns_none(self):
        assert extract_total("") is None

    @pytest.mark.parametrize("text", [
        "Thank you for shopping with us",
        "TOTAL\nAMOUNT DUE\nBALANCE",
        "Total: $ --.--",
    ])
    def test_text_without_digits_returns_none(self, text):
        assert extract_total(text) is None

    def test_no_keyword_returns_none(self):
        assert extract_total("Item 1: 5.00\nItem 2: 3.00\n") is None

    def test_grand_total_preferred_over_later_single_keyword(self):
        # Family 1 wins even though a plain "Total" line comes later
        text = "Grand Total: $42.00\nCash 50.00\nTotal tendered 50.00"
        assert extract_total(text) == 42.0

    def test_case_insensitive(self):
        assert extract_total("TOTAL  $7.25") == 7.25
        assert extract_total("grand total 19.99") == 19.99

    def test_euro_and_pound_glyphs(self):
        assert extract_total("Total €8,40") == 8.4
        assert extract_total("Balance £1,020.00") == 1020.0

    def test_multi_word_key_with_bare_integer(self):
        assert extract_total("Net Payable: ₹5384") == 5384.0

    def test_fallback_integer_total(self):
        assert extract_total("Total: 5384") == 5384.0

    def test_fallback_pay_keyword(self):
        assert extract_total("Please pay 75") == 75.0

    def test_amount_on_line_after_keyword(self):
        assert extract_total("TOTAL\n99.99") == 99.99

    def test_fallback_single_fraction_digit(self):
        assert extract_total("Balance 12.5") == 12.5

    def test_keyword_inside_word_does_not_match(self):
        # "Subtotal" alone has no standalone total keyword
        assert extract_total("Subtotal 10.00") is None

    def test_overflowing_total_is_not_returned(self):
        assert extract_total("Total " + "9" * 400) is None

    def test_idempotent(self):
        text = "Subtotal 10.00\nTax 1.50\nTotal 11.50"
        assert extract_total(text) == extract_total(text) == 11.5


class TestFindTotal:
    """Family reporting used by the parse-text endpoint"""

    def test_reports_multi_word_family(self):
        match = find_total("Amount Due: 1,234.56")
        assert match.family == 1
        assert match.candidate.keyword == "Amount Due"
        assert match.amount == 1234.56

    def test_reports_dot_decimal_family(self):
        match = find_total("Total: $12.50")
        assert match.family == 2
        assert match.candidate.amount_text == "$12.50"

    def test_reports_comma_decimal_family(self):
        assert find_total("Balance 1.234,56").family == 3

    def test_reports_fallback_family(self):
        assert find_total("Total: 5384").family == 4

    def test_none_when_nothing_matches(self):
        assert find_total("no numbers here") is None

    def test_match_families_lists_every_candidate(self):
        families = match_families("Subtotal 10.00\nTax 1.50\nTotal 11.50\nTotal 12.00")
        assert len(families) == 4
        assert families[0] == []
        assert [c.amount_text.strip() for c in families[1]] == ["11.50", "12.00"]
