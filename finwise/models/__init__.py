from .transaction import Transaction, TransactionCreate, TransactionIn, TransactionType
from .chat import ChatMessage, ChatMessageCreate, ChatRequest, ChatResponse, Sender
from .summary import (
    ParsedCommand,
    CategoryAggregate,
    TotalsReport,
    SpendingSnapshot,
)

__all__ = [
    "Transaction",
    "TransactionCreate",
    "TransactionIn",
    "TransactionType",
    "ChatMessage",
    "ChatMessageCreate",
    "ChatRequest",
    "ChatResponse",
    "Sender",
    "ParsedCommand",
    "CategoryAggregate",
    "TotalsReport",
    "SpendingSnapshot",
]
