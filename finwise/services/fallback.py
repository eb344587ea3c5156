"""Canned answers used when the completion service cannot answer."""
from typing import Tuple

# (keywords, answer); first row with a keyword contained in the message wins.
FALLBACK_TABLE: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (
        ("budget", "spending"),
        "Here are some budgeting tips: 1) Track your expenses for a month, "
        "2) Use the 50/30/20 rule (50% needs, 30% wants, 20% savings), "
        "3) Set specific savings goals, 4) Review and adjust monthly.",
    ),
    (
        ("save", "saving"),
        "Great question about saving! Try these strategies: 1) Start with an emergency fund "
        "(3-6 months expenses), 2) Automate your savings, 3) Cut unnecessary subscriptions, "
        "4) Consider high-yield savings accounts.",
    ),
    (
        ("invest", "investment"),
        "Investment basics: 1) Start early to benefit from compound interest, "
        "2) Diversify your portfolio, 3) Consider index funds for beginners, "
        "4) Only invest money you won't need for 5+ years. Always do your research!",
    ),
    (
        ("debt", "loan"),
        "For debt management: 1) List all debts with interest rates, "
        "2) Pay minimums on all, extra on highest rate debt, "
        "3) Consider debt consolidation if beneficial, 4) Avoid taking on new debt.",
    ),
)

DEFAULT_FALLBACK = (
    "I'm here to help with your finances! You can ask me about budgeting, saving, investing, "
    "debt management, or any other financial topics. What specific area would you like guidance on?"
)


def fallback_response(message: str) -> str:
    """Deterministic keyword-routed answer for ``message``."""
    text = (message or "").lower()
    for keywords, answer in FALLBACK_TABLE:
        if any(keyword in text for keyword in keywords):
            return answer
    return DEFAULT_FALLBACK
