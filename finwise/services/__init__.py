from .commands import CommandExtractor, parse_amount
from .aggregation import FinanceAggregator, Window, resolve_window, today_window, last_n_days_window, coerce_amount
from .prompts import PromptBuilder
from .fallback import fallback_response
from .assistant import AssistantOrchestrator, AssistantReply, ReplyOutcome

__all__ = [
    "CommandExtractor",
    "parse_amount",
    "FinanceAggregator",
    "Window",
    "resolve_window",
    "today_window",
    "last_n_days_window",
    "coerce_amount",
    "PromptBuilder",
    "fallback_response",
    "AssistantOrchestrator",
    "AssistantReply",
    "ReplyOutcome",
]
