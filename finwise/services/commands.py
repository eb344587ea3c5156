"""Extraction of add-transaction commands from chat messages."""
import math
import re
from typing import Optional, Pattern, Tuple
from finwise.models.summary import ParsedCommand
from finwise.models.transaction import TransactionType


SUFFIX_MULTIPLIERS = {
    "k": 1e3,
    "m": 1e6,
    "b": 1e9,
}

DEFAULT_TITLES = {
    TransactionType.INCOME: "Income",
    TransactionType.EXPENSE: "Expense",
}

DEFAULT_CATEGORIES = {
    TransactionType.INCOME: "General Income",
    TransactionType.EXPENSE: "General Expense",
}

_AMOUNT = r"\$?(?P<amount>\d[\d,]*(?:\.\d+)?)(?P<suffix>[kmb])?\b"
_TYPE = r"(?P<type>income|expense)s?\b"
_PHRASE = r"\s*(?:(?:as|for)(?:\s+|$))?(?P<phrase>[\w\s]*)"

_AMOUNT_LITERAL_RE = re.compile(r"\s*\$?(\d[\d,]*(?:\.\d+)?)([kmb])?\s*", re.IGNORECASE)


def parse_amount(literal: str, suffix: Optional[str] = None) -> Optional[float]:
    """
    Parse an amount literal such as "1,200", "2.5m" or "$30K".

    Thousands separators are stripped and a trailing k/m/b suffix multiplies
    the value by 1e3/1e6/1e9. An explicit ``suffix`` overrides one embedded in
    the literal.

    Returns:
        The amount, or None when the literal is malformed or the result is
        not a finite positive number.
    """
    m = _AMOUNT_LITERAL_RE.fullmatch(literal or "")
    if not m:
        return None
    number, embedded_suffix = m.groups()
    try:
        value = float(number.replace(",", ""))
    except ValueError:
        return None
    unit = (suffix or embedded_suffix or "").lower()
    if unit:
        if unit not in SUFFIX_MULTIPLIERS:
            return None
        value *= SUFFIX_MULTIPLIERS[unit]
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class CommandExtractor:
    """Detects "add transaction" instructions in free text.

    Patterns are tried in order and the first one that matches decides the
    outcome, even when its amount turns out to be invalid.
    """

    PATTERNS: Tuple[Pattern[str], ...] = (
        # add 30M to my income as salary
        re.compile(
            r"\badd\s+" + _AMOUNT + r"\s*(?:(?:to|for)\s+)?(?:my\s+)?" + _TYPE + _PHRASE,
            re.IGNORECASE,
        ),
        # add income 30M as salary
        re.compile(
            r"\badd\s+" + _TYPE + r"\s*" + _AMOUNT + _PHRASE,
            re.IGNORECASE,
        ),
    )

    def extract(self, text: str) -> Optional[ParsedCommand]:
        """
        Parse a message into a ParsedCommand.

        Args:
            text: Raw user utterance

        Returns:
            ParsedCommand, or None when nothing matched or the amount is not
            a finite positive number
        """
        if not text:
            return None

        for pattern in self.PATTERNS:
            match = pattern.search(text)
            if match:
                return self._build_command(match)
        return None

    def _build_command(self, match: "re.Match[str]") -> Optional[ParsedCommand]:
        tx_type = TransactionType(match.group("type").lower())
        amount = parse_amount(match.group("amount"), match.group("suffix"))
        if amount is None:
            return None

        phrase = (match.group("phrase") or "").strip()
        return ParsedCommand(
            type=tx_type,
            amount=amount,
            category=phrase or DEFAULT_CATEGORIES[tx_type],
            title=phrase or DEFAULT_TITLES[tx_type],
        )
