"""Assistant pipeline: one inbound message in, one reply out."""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional
from finwise.adapters.base import CompletionAdapter
from finwise.config import settings
from finwise.errors import require_user
from finwise.models.summary import ParsedCommand
from finwise.models.transaction import TransactionCreate
from finwise.services.aggregation import FinanceAggregator, resolve_window, today_window
from finwise.services.commands import CommandExtractor
from finwise.services.fallback import fallback_response
from finwise.services.prompts import PromptBuilder
from finwise.storage.database import TransactionStore

logger = logging.getLogger(__name__)

FINANCE_KEYWORDS = (
    "my", "total", "spending", "spent", "income", "balance", "expense",
    "transaction", "today", "week", "month", "year", "category", "budget",
)

# period -> number of top expense categories listed in the context block
PERIOD_TOP_CATEGORIES = {
    "week": 3,
    "month": 5,
}


class ReplyOutcome(str, Enum):
    """Which branch produced a reply."""

    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_FAILED = "transaction_failed"
    COMPLETION = "completion"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class AssistantReply:
    text: str
    outcome: ReplyOutcome
    transaction_id: Optional[str] = None


def is_finance_query(message: str) -> bool:
    """True when the message mentions any personal-finance keyword."""
    text = (message or "").lower()
    return any(keyword in text for keyword in FINANCE_KEYWORDS)


def detect_period(message: str) -> Optional[str]:
    """The period a finance question asks about; None means unspecified."""
    text = (message or "").lower()
    if "today" in text:
        return "today"
    if "week" in text:
        return "week"
    if "month" in text:
        return "month"
    return None


def format_amount(amount: float) -> str:
    """Grouped, at most 3 decimals, no trailing zeros: 30000000.0 -> "30,000,000"; 12.5 -> "12.5"."""
    return f"{amount:,.3f}".rstrip("0").rstrip(".")


class AssistantOrchestrator:
    """
    Turns a user's message into the assistant's reply.

    An add-transaction command always wins over finance-question handling.
    Every failure except a missing user identity degrades to a textual reply.
    """

    def __init__(
        self,
        transaction_store: TransactionStore,
        adapter: Optional[CompletionAdapter] = None,
        extractor: Optional[CommandExtractor] = None,
        aggregator: Optional[FinanceAggregator] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        timeout_seconds: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.transaction_store = transaction_store
        self.adapter = adapter
        self.extractor = extractor or CommandExtractor()
        self.aggregator = aggregator or FinanceAggregator()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.timeout_seconds = settings.completion_timeout_seconds if timeout_seconds is None else timeout_seconds
        self.clock = clock or (lambda: datetime.now().astimezone())

    async def respond(self, user_id: str, message: str) -> str:
        """Reply text for ``message``."""
        reply = await self.handle_message(user_id, message)
        return reply.text

    async def handle_message(self, user_id: str, message: str) -> AssistantReply:
        """
        Run the pipeline for one message.

        Args:
            user_id: Resolved identity of the sender
            message: Raw message text

        Returns:
            AssistantReply with the text and the branch that produced it

        Raises:
            NotAuthenticatedError: user_id is missing or blank
        """
        user_id = require_user(user_id)

        command = self.extractor.extract(message)
        if command is not None:
            return await self._add_transaction(user_id, command)

        if self.adapter is None:
            logger.debug("Completion service not configured, using fallback", extra={"user_id": user_id})
            return AssistantReply(fallback_response(message), ReplyOutcome.FALLBACK)

        context = ""
        if is_finance_query(message):
            context = await self._build_context(user_id, message)
        return await self._complete(message, context)

    async def _add_transaction(self, user_id: str, command: ParsedCommand) -> AssistantReply:
        tx_type = command.type.value
        tx = TransactionCreate(
            type=command.type,
            amount=command.amount,
            category=command.category,
            title=command.title,
            note="",
            date=self.clock(),
            user_id=user_id,
        )
        try:
            tx_id = await asyncio.to_thread(self.transaction_store.write, tx)
        except Exception:
            logger.exception("Failed to add transaction from chat", extra={"user_id": user_id, "type": tx_type})
            return AssistantReply(f"❌ Failed to add {tx_type}. Please try again.", ReplyOutcome.TRANSACTION_FAILED)

        logger.info("Transaction added from chat", extra={"user_id": user_id, "transaction_id": tx_id})
        text = (
            f"✅ {tx_type.capitalize()} of ${format_amount(command.amount)} "
            f"for \"{command.category}\" added successfully!"
        )
        return AssistantReply(text, ReplyOutcome.TRANSACTION_ADDED, transaction_id=tx_id)

    async def _build_context(self, user_id: str, message: str) -> str:
        """Financial context block for the period the message asks about (default: month)."""
        period = detect_period(message)
        now = self.clock()
        try:
            if period == "today":
                window = today_window(now)
                transactions = await asyncio.to_thread(
                    self.transaction_store.query, user_id, window.start, window.end
                )
                snapshot = self.aggregator.todays_spending(transactions, now=now, user_id=user_id)
                return self.prompt_builder.format_today_context(snapshot)

            window = resolve_window(period or "month", now=now)
            transactions = await asyncio.to_thread(
                self.transaction_store.query, user_id, window.start, window.end
            )
            report = self.aggregator.totals(transactions, window, user_id=user_id)
        except Exception:
            logger.exception("Could not load financial context", extra={"user_id": user_id})
            return self.prompt_builder.CONTEXT_UNAVAILABLE

        if period == "week":
            heading = self.prompt_builder.WEEK_HEADING
        elif period == "month":
            heading = self.prompt_builder.MONTH_HEADING
        else:
            heading = self.prompt_builder.RECENT_HEADING
        return self.prompt_builder.format_period_context(
            report,
            heading,
            top_categories=PERIOD_TOP_CATEGORIES.get(period, 0),
        )

    async def _complete(self, message: str, context: str) -> AssistantReply:
        prompt = self.prompt_builder.build_assistant_prompt(message, context)
        try:
            answer = await asyncio.wait_for(
                self.adapter.complete(
                    prompt,
                    temperature=settings.completion_temperature,
                    max_tokens=settings.completion_max_tokens,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("Completion service timed out", extra={"model": self.adapter.model_id, "timeout": self.timeout_seconds})
            return AssistantReply(fallback_response(message), ReplyOutcome.FALLBACK)
        except Exception as e:
            logger.warning("Completion service failed", extra={"model": self.adapter.model_id, "error": str(e)})
            return AssistantReply(fallback_response(message), ReplyOutcome.FALLBACK)

        answer = (answer or "").strip()
        if not answer:
            return AssistantReply(fallback_response(message), ReplyOutcome.FALLBACK)
        return AssistantReply(answer, ReplyOutcome.COMPLETION)
