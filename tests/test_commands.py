"""Tests for add-transaction command extraction."""
import pytest
from finwise.models.transaction import TransactionType
from finwise.services.commands import CommandExtractor, parse_amount


@pytest.fixture
def extractor():
    return CommandExtractor()


def test_income_with_million_suffix(extractor):
    """add 30M to my income as salary."""
    command = extractor.extract("add 30M to my income as salary")

    assert command is not None
    assert command.type == TransactionType.INCOME
    assert command.amount == 30000000
    assert command.category == "salary"
    assert command.title == "salary"


def test_expense_with_thousand_suffix(extractor):
    command = extractor.extract("add 500k to my expense as rent")

    assert command.type == TransactionType.EXPENSE
    assert command.amount == 500000
    assert command.category == "rent"


def test_type_first_form(extractor):
    command = extractor.extract("Add income 2.5m for consulting work")

    assert command.type == TransactionType.INCOME
    assert command.amount == 2500000
    assert command.category == "consulting work"


def test_thousands_separator_without_suffix(extractor):
    command = extractor.extract("add 1,200 for my expense as weekly groceries")

    assert command.amount == 1200
    assert command.category == "weekly groceries"


def test_trailing_punctuation_trimmed(extractor):
    command = extractor.extract("please add $45 to my expense as coffee beans!!")

    assert command.amount == 45
    assert command.category == "coffee beans"


def test_missing_category_uses_defaults(extractor):
    income = extractor.extract("add 100 to my income")
    expense = extractor.extract("add expense 20")

    assert income.title == "Income"
    assert income.category == "General Income"
    assert expense.title == "Expense"
    assert expense.category == "General Expense"


@pytest.mark.parametrize("text,tx_type", [
    ("add 500k to my expense as", TransactionType.EXPENSE),
    ("add 500k to my expense for", TransactionType.EXPENSE),
    ("add income 40 as", TransactionType.INCOME),
    ("add income 40 for  ", TransactionType.INCOME),
])
def test_trailing_connective_uses_defaults(extractor, text, tx_type):
    command = extractor.extract(text)

    assert command.type == tx_type
    assert command.title == ("Income" if tx_type == TransactionType.INCOME else "Expense")
    assert command.category == ("General Income" if tx_type == TransactionType.INCOME else "General Expense")


def test_connective_prefix_of_word_is_kept(extractor):
    command = extractor.extract("add 12 to my expense asparagus")

    assert command.category == "asparagus"


def test_case_insensitive(extractor):
    command = extractor.extract("ADD 3B TO MY INCOME AS BONUS")

    assert command.type == TransactionType.INCOME
    assert command.amount == 3e9
    assert command.category == "BONUS"


@pytest.mark.parametrize("text", [
    "add 0 to my income as nothing",
    "add expense 0k as rent",
    "How much did I spend today?",
    "add some money to my income",
    "",
])
def test_no_match(extractor, text):
    assert extractor.extract(text) is None


def test_first_matching_pattern_decides(extractor):
    """The first pattern matches with a zero amount, so the second is never tried."""
    assert extractor.extract("add 0 to my expense then add expense 50 as food") is None


def test_extraction_is_pure(extractor):
    text = "add 75k for my expense as car repair"

    assert extractor.extract(text) == extractor.extract(text)


@pytest.mark.parametrize("literal", ["1", "2.5", "1,200", "0.75", "999"])
@pytest.mark.parametrize("suffix,multiplier", [("k", 1e3), ("m", 1e6), ("b", 1e9), ("K", 1e3), ("M", 1e6), ("B", 1e9)])
def test_suffix_multiplies(literal, suffix, multiplier):
    assert parse_amount(literal + suffix) == parse_amount(literal) * multiplier


@pytest.mark.parametrize("literal", ["", "abc", "0", "0.0k", "1.2.3", "5x"])
def test_parse_amount_rejects(literal):
    assert parse_amount(literal) is None
