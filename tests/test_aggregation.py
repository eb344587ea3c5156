"""Tests for windowed finance aggregation."""
import pytest
from datetime import datetime, timedelta, timezone
from finwise.models.transaction import Transaction
from finwise.services.aggregation import (
    FinanceAggregator,
    coerce_amount,
    last_n_days_window,
    resolve_window,
    today_window,
)

NOW = datetime(2024, 1, 1, 12, 0)


def make_tx(tx_type, amount, category="Other", date=NOW, user_id="user_1", title=None):
    return Transaction(
        id=f"{tx_type}-{category}-{amount}",
        type=tx_type,
        amount=amount,
        category=category,
        title=title or category,
        date=date,
        user_id=user_id,
    )


@pytest.fixture
def aggregator():
    return FinanceAggregator()


@pytest.fixture
def new_year_transactions():
    return [
        make_tx("income", 1000, "Salary", datetime(2024, 1, 1, 9, 0)),
        make_tx("expense", 400, "Food", datetime(2024, 1, 1, 10, 0)),
        make_tx("expense", 100, "Transport", datetime(2024, 1, 1, 11, 0)),
    ]


def test_today_totals_and_breakdown(aggregator, new_year_transactions):
    report = aggregator.totals(new_year_transactions, today_window(NOW))

    assert report.total_income == 1000
    assert report.total_expenses == 500
    assert report.balance == 500
    assert report.transaction_count == 3
    assert [(c.category, c.total, c.percentage) for c in report.category_breakdown] == [
        ("Food", 400, 80.0),
        ("Transport", 100, 20.0),
    ]
    assert report.savings_rate == 50.0


def test_today_includes_midnight_excludes_previous_day(aggregator):
    transactions = [
        make_tx("expense", 10, "Early", datetime(2024, 1, 1, 0, 0, 0)),
        make_tx("expense", 99, "Late", datetime(2023, 12, 31, 23, 59, 59, 999000)),
        make_tx("expense", 50, "Tomorrow", datetime(2024, 1, 2, 0, 0, 0)),
    ]

    report = aggregator.totals(transactions, today_window(NOW))

    assert report.total_expenses == 10
    assert [c.category for c in report.category_breakdown] == ["Early"]


def test_last_n_days_lower_bound_inclusive(aggregator):
    window = last_n_days_window(7, NOW)
    transactions = [
        make_tx("expense", 5, "Edge", NOW - timedelta(days=7)),
        make_tx("expense", 7, "Outside", NOW - timedelta(days=7, seconds=1)),
        make_tx("expense", 3, "Now", NOW),
    ]

    report = aggregator.totals(transactions, window)

    assert report.total_expenses == 8
    assert report.transaction_count == 2


def test_aware_dates_are_compared_in_local_time(aggregator):
    local_midnight = datetime(2024, 1, 1, 0, 0).astimezone()
    as_utc = local_midnight.astimezone(timezone.utc)

    report = aggregator.totals([make_tx("income", 20, date=as_utc)], today_window(NOW))

    assert report.total_income == 20


@pytest.mark.parametrize("name,days", [("week", 7), ("month", 30), ("year", 365)])
def test_named_periods(name, days):
    window = resolve_window(name, now=NOW)

    assert window.label == name
    assert window.end - window.start == timedelta(days=days)


def test_custom_day_window():
    window = resolve_window("days", days=14, now=NOW)

    assert window.label == "last_14_days"
    assert window.end - window.start == timedelta(days=14)


@pytest.mark.parametrize("name,days", [("fortnight", None), ("days", None), ("days", 0)])
def test_invalid_windows(name, days):
    with pytest.raises(ValueError):
        resolve_window(name, days=days, now=NOW)


def test_created_at_is_ignored_for_windowing(aggregator):
    tx = make_tx("expense", 30, "Old", datetime(2023, 6, 1)).model_copy(update={"created_at": NOW})

    report = aggregator.totals([tx], today_window(NOW))

    assert report.transaction_count == 0


def test_empty_input(aggregator):
    report = aggregator.totals([], resolve_window("month", now=NOW))

    assert report.total_income == 0
    assert report.total_expenses == 0
    assert report.balance == 0
    assert report.category_breakdown == []
    assert report.savings_rate is None


def test_income_only_has_no_breakdown(aggregator):
    report = aggregator.totals([make_tx("income", 300, "Salary")], today_window(NOW))

    assert report.category_breakdown == []
    assert report.savings_rate == 100.0


def test_single_category_is_one_hundred_percent(aggregator):
    transactions = [make_tx("expense", amount, "Food") for amount in (12.5, 7.25, 80)]

    breakdown = aggregator.totals(transactions, today_window(NOW)).category_breakdown

    assert len(breakdown) == 1
    assert breakdown[0].percentage == 100


def test_percentages_sum_to_one_hundred(aggregator):
    transactions = [
        make_tx("expense", 1, "A"),
        make_tx("expense", 1, "B"),
        make_tx("expense", 1, "C"),
    ]

    breakdown = aggregator.totals(transactions, today_window(NOW)).category_breakdown

    assert sum(c.percentage for c in breakdown) == pytest.approx(100, abs=0.05)


def test_ties_keep_first_seen_order(aggregator):
    transactions = [
        make_tx("expense", 50, "Books"),
        make_tx("expense", 80, "Rent"),
        make_tx("expense", 50, "Games"),
    ]

    breakdown = aggregator.category_breakdown(transactions)

    assert [c.category for c in breakdown] == ["Rent", "Books", "Games"]


def test_negative_balance(aggregator):
    transactions = [make_tx("income", 100, "Salary"), make_tx("expense", 250, "Rent")]

    report = aggregator.totals(transactions, today_window(NOW))

    assert report.balance == -150
    assert report.balance == report.total_income - report.total_expenses
    assert report.savings_rate == -150.0


def test_lenient_amounts(aggregator):
    transactions = [
        make_tx("income", "1,234.50", "Salary"),
        make_tx("expense", "not a number", "Food"),
        make_tx("expense", None, "Misc"),
        make_tx("expense", "2,000", "Rent"),
    ]

    report = aggregator.totals(transactions, today_window(NOW))

    assert report.total_income == 1234.5
    assert report.total_expenses == 2000
    assert report.transaction_count == 4


@pytest.mark.parametrize("value,expected", [
    (12, 12.0),
    ("1,234.50", 1234.5),
    (" 7 ", 7.0),
    ("", 0.0),
    ("abc", 0.0),
    (None, 0.0),
    (float("nan"), 0.0),
    ("inf", 0.0),
])
def test_coerce_amount(value, expected):
    assert coerce_amount(value) == expected


def test_other_users_are_excluded(aggregator):
    transactions = [
        make_tx("expense", 40, "Food", user_id="user_1"),
        make_tx("expense", 999, "Food", user_id="intruder"),
    ]

    report = aggregator.totals(transactions, today_window(NOW), user_id="user_1")

    assert report.total_expenses == 40
    assert report.transaction_count == 1


def test_idempotent_and_input_untouched(aggregator, new_year_transactions):
    before = [tx.model_dump() for tx in new_year_transactions]
    window = today_window(NOW)

    first = aggregator.totals(new_year_transactions, window)
    second = aggregator.totals(new_year_transactions, window)

    assert first == second
    assert [tx.model_dump() for tx in new_year_transactions] == before


def test_todays_spending_lists_expenses_newest_first(aggregator, new_year_transactions):
    snapshot = aggregator.todays_spending(new_year_transactions, now=NOW)

    assert snapshot.total_spending == 500
    assert [tx.category for tx in snapshot.transactions] == ["Transport", "Food"]
