"""Time-windowed aggregation over a user's transactions."""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Dict, Iterable, List, Optional
from finwise.models.summary import CategoryAggregate, SpendingSnapshot, TotalsReport
from finwise.models.transaction import Transaction, TransactionType

logger = logging.getLogger(__name__)

NAMED_PERIOD_DAYS = {
    "week": 7,
    "month": 30,
    "year": 365,
}

DEFAULT_CATEGORY = "Other"


@dataclass(frozen=True)
class Window:
    """A bounded time range. ``end`` is exclusive for the today window."""

    label: str
    start: datetime
    end: datetime
    end_inclusive: bool = True

    def contains(self, moment: datetime) -> bool:
        moment = to_local(moment)
        if moment < self.start:
            return False
        return moment <= self.end if self.end_inclusive else moment < self.end


def to_local(moment: datetime) -> datetime:
    """Return an aware datetime in the local timezone. Naive values are read as local time."""
    return moment.astimezone()


def today_window(now: Optional[datetime] = None) -> Window:
    """[local midnight, next local midnight) around ``now``."""
    current = to_local(now) if now else datetime.now().astimezone()
    midnight = datetime.combine(current.date(), time.min)
    return Window(
        label="today",
        start=midnight.astimezone(),
        end=(midnight + timedelta(days=1)).astimezone(),
        end_inclusive=False,
    )


def last_n_days_window(days: int, now: Optional[datetime] = None, label: Optional[str] = None) -> Window:
    """[now - days, now], both bounds inclusive."""
    if days < 1:
        raise ValueError(f"days must be positive, got {days}")
    current = to_local(now) if now else datetime.now().astimezone()
    return Window(
        label=label or f"last_{days}_days",
        start=current - timedelta(days=days),
        end=current,
    )


def resolve_window(
    name: str = "month",
    days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Window:
    """
    Build a window from a specifier.

    Args:
        name: "today", "week", "month", "year" or "days"
        days: Day count, required when name is "days"
        now: Reference time. If None, uses the current local time.

    Raises:
        ValueError: Unknown specifier or missing day count
    """
    key = (name or "").strip().lower()
    if key == "today":
        return today_window(now)
    if key in NAMED_PERIOD_DAYS:
        return last_n_days_window(NAMED_PERIOD_DAYS[key], now, label=key)
    if key == "days":
        if days is None:
            raise ValueError("days is required for a custom window")
        return last_n_days_window(days, now)
    raise ValueError(f"Unknown window: {name}")


def coerce_amount(value: object) -> float:
    """
    Read a stored amount leniently.

    Strings have thousands separators stripped before parsing. Anything that
    cannot be read as a finite number counts as 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable amount treated as zero", extra={"amount": repr(value)})
        return 0.0
    return number if math.isfinite(number) else 0.0


class FinanceAggregator:
    """Computes income/expense summaries. Holds no state between calls."""

    def filter_window(
        self,
        transactions: Iterable[Transaction],
        window: Window,
        user_id: Optional[str] = None,
    ) -> List[Transaction]:
        """Transactions whose ``date`` falls in the window, restricted to ``user_id`` when given."""
        owned = [tx for tx in transactions if user_id is None or tx.user_id == user_id]
        return [tx for tx in owned if window.contains(tx.date)]

    def category_breakdown(self, transactions: Iterable[Transaction]) -> List[CategoryAggregate]:
        """
        Expense totals per category, largest first.

        Equal totals keep the order in which their categories first appeared.
        Returns an empty list when there are no expenses.
        """
        by_category: Dict[str, float] = {}
        for tx in transactions:
            if tx.type != TransactionType.EXPENSE:
                continue
            category = tx.category or DEFAULT_CATEGORY
            by_category[category] = by_category.get(category, 0.0) + coerce_amount(tx.amount)

        total_expenses = sum(by_category.values())
        if total_expenses <= 0:
            return []

        aggregates = [
            CategoryAggregate(
                category=category,
                total=total,
                percentage=round(total / total_expenses * 100, 2),
            )
            for category, total in by_category.items()
        ]
        return sorted(aggregates, key=lambda agg: agg.total, reverse=True)

    def totals(
        self,
        transactions: Iterable[Transaction],
        window: Window,
        user_id: Optional[str] = None,
    ) -> TotalsReport:
        """
        Build a TotalsReport for the window.

        Args:
            transactions: A user's transactions (may already be pre-filtered)
            window: Window to aggregate over
            user_id: If given, rows owned by anyone else are dropped first

        Returns:
            TotalsReport with totals, balance, savings rate and category breakdown
        """
        in_window = self.filter_window(transactions, window, user_id)

        total_income = 0.0
        total_expenses = 0.0
        for tx in in_window:
            amount = coerce_amount(tx.amount)
            if tx.type == TransactionType.INCOME:
                total_income += amount
            elif tx.type == TransactionType.EXPENSE:
                total_expenses += amount

        balance = total_income - total_expenses
        savings_rate = round(balance / total_income * 100, 2) if total_income > 0 else None

        return TotalsReport(
            window=window.label,
            start=window.start,
            end=window.end,
            total_income=total_income,
            total_expenses=total_expenses,
            balance=balance,
            savings_rate=savings_rate,
            category_breakdown=self.category_breakdown(in_window),
            transaction_count=len(in_window),
        )

    def todays_spending(
        self,
        transactions: Iterable[Transaction],
        now: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> SpendingSnapshot:
        """Expenses dated today, newest first."""
        window = today_window(now)
        expenses = [
            tx
            for tx in self.filter_window(transactions, window, user_id)
            if tx.type == TransactionType.EXPENSE
        ]
        expenses.sort(key=lambda tx: to_local(tx.date), reverse=True)
        return SpendingSnapshot(
            total_spending=sum(coerce_amount(tx.amount) for tx in expenses),
            transactions=expenses,
        )
