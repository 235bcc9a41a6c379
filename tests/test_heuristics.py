"""Tests for the heuristic extractor."""

from datetime import date
from decimal import Decimal

from finagent.extraction import (
    extract_amount,
    extract_bill_name,
    extract_category,
    extract_date,
    extract_description,
    extract_goal_name,
    validate_amount,
    validate_date,
)


class TestExtractAmount:

    def test_dollar_amount(self):
        assert extract_amount("I spent $50 on groceries") == Decimal("50")

    def test_two_decimal_fraction_is_exact(self):
        assert extract_amount("bought lunch for $12.99") == Decimal("12.99")

    def test_amount_without_dollar_sign(self):
        assert extract_amount("paid 300 for insurance") == Decimal("300")

    def test_first_number_wins(self):
        assert extract_amount("Add rent bill of $1200 due 2024-01-01") == Decimal("1200")

    def test_absent(self):
        assert extract_amount("I bought stuff") is None


class TestExtractCategory:

    def test_case_insensitive(self):
        assert extract_category("Paid the RENT today") == "rent"

    def test_vocabulary_order_breaks_ties(self):
        # "food" precedes "groceries" in the vocabulary
        assert extract_category("groceries and food") == "food"

    def test_absent(self):
        assert extract_category("I bought stuff") is None


class TestExtractDescription:

    def test_words_after_spent(self):
        assert extract_description("I spent $50 on groceries") == "$50 on groceries"

    def test_at_most_four_words(self):
        text = "bought a very big new red car today"
        assert extract_description(text) == "a very big new"

    def test_marker_token_with_dollar(self):
        assert extract_description("paid $20 for the taxi") == "for the taxi"

    def test_marker_is_last_word(self):
        assert extract_description("what I spent") is None

    def test_absent(self):
        assert extract_description("hello there") is None


class TestNameTables:

    def test_bill_name(self):
        assert extract_bill_name("electricity bill $80") == "Electricity"

    def test_bill_name_default(self):
        assert extract_bill_name("phone bill $40") == "Bill"

    def test_goal_name(self):
        assert extract_goal_name("Save $6000 for vacation") == "Vacation Fund"

    def test_goal_name_default(self):
        assert extract_goal_name("Save $100") == "Savings Goal"


class TestExtractDate:

    def test_iso_date(self):
        assert extract_date("due 2024-01-01 please") == date(2024, 1, 1)

    def test_absent(self):
        assert extract_date("due next friday") is None

    def test_skips_impossible_dates(self):
        assert extract_date("2024-13-45 or 2024-02-29") == date(2024, 2, 29)


class TestValidators:

    def test_validate_amount(self):
        assert validate_amount(Decimal("0.01"))
        assert validate_amount(5)
        assert not validate_amount(0)
        assert not validate_amount(Decimal("-3"))
        assert not validate_amount(True)
        assert not validate_amount("50")
        assert not validate_amount(Decimal("NaN"))

    def test_validate_date(self):
        assert validate_date("2024-02-29")
        assert not validate_date("2023-02-29")
        assert not validate_date("tomorrow")
