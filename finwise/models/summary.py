"""Aggregation and command models."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict
from finwise.models.transaction import Transaction, TransactionType


class ParsedCommand(BaseModel):
    """Add-transaction instruction extracted from free text. Not persisted."""

    model_config = ConfigDict(frozen=True)

    type: TransactionType
    amount: float = Field(..., description="Amount after suffix multiplication")
    category: str
    title: str

    @property
    def is_actionable(self) -> bool:
        return self.amount > 0


class CategoryAggregate(BaseModel):
    """Expense total for one category."""

    category: str
    total: float
    percentage: float = Field(..., description="Share of total expenses, 0-100")


class TotalsReport(BaseModel):
    """Financial summary for one window."""

    window: str = Field(..., description="'today', 'week', 'month', 'year' or 'last_<n>_days'")
    start: datetime
    end: datetime
    total_income: float = 0.0
    total_expenses: float = 0.0
    balance: float = 0.0
    savings_rate: Optional[float] = Field(None, description="Percent of income kept; None without income")
    category_breakdown: List[CategoryAggregate] = Field(default_factory=list)
    transaction_count: int = 0


class SpendingSnapshot(BaseModel):
    """Expense-only view of one window, listing the transactions."""

    total_spending: float = 0.0
    transactions: List[Transaction] = Field(default_factory=list)
