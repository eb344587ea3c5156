"""Transaction data models."""
from datetime import datetime
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class Transaction(BaseModel):
    """Transaction model."""

    id: Optional[str] = None
    type: TransactionType
    amount: Union[float, str, None] = Field(
        default=0.0,
        description="Non-negative amount. Legacy records may hold a separator-formatted string",
    )
    category: str = Field(default="Other", description="Transaction category")
    title: str = Field(..., description="Short description")
    note: str = Field(default="", description="Optional annotation")
    date: datetime = Field(..., description="Date the user intends the transaction for")
    created_at: Optional[datetime] = Field(None, description="Record creation timestamp")
    user_id: str = Field(..., description="Owning user identifier")

    class Config:
        json_schema_extra = {
            "example": {
                "type": "expense",
                "amount": 45.99,
                "category": "Food",
                "title": "Groceries",
                "note": "",
                "date": "2024-01-15T10:30:00",
                "user_id": "user_123",
            }
        }


class TransactionCreate(BaseModel):
    """Transaction creation model; the store assigns id and created_at."""

    type: TransactionType
    amount: float = Field(..., ge=0, description="Non-negative amount")
    category: str = Field(default="Other", description="Transaction category")
    title: str = Field(..., description="Short description")
    note: str = Field(default="", description="Optional annotation")
    date: datetime = Field(default_factory=datetime.now, description="Date the user intends the transaction for")
    user_id: str = Field(..., description="Owning user identifier")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v.strip()


class TransactionIn(BaseModel):
    """Request body for creating a transaction over HTTP (user comes from the header)."""

    type: TransactionType
    amount: float = Field(..., ge=0)
    category: str = "Other"
    title: str
    note: str = ""
    date: Optional[datetime] = None
