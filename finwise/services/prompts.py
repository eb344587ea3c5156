"""Prompt templates for the finance assistant."""
from finwise.models.summary import SpendingSnapshot, TotalsReport
from finwise.services.aggregation import coerce_amount


class PromptBuilder:
    """Builds the assistant prompt and the financial context blocks it embeds."""

    ASSISTANT_PROMPT_TEMPLATE = """You are FinWise Bot, a helpful financial assistant for the FinWise app. You help users with personal finance questions, budgeting advice, and analyzing their spending patterns.

IMPORTANT: When users ask about "my spending", "my income", "my transactions", or similar personal finance questions, use the actual financial data provided below to give specific, accurate answers.

Key guidelines:
1. Always use the actual financial data when available to answer questions about the user's finances
2. Be specific with amounts and provide actionable insights
3. If asking about spending/income for specific periods, reference the exact amounts
4. Suggest practical tips based on their actual spending patterns
5. Be encouraging and supportive about their financial goals
6. Keep responses concise but informative (2-3 sentences max)
7. Use currency formatting for amounts (e.g., $123.45)
8. If no financial data is available for the requested period, explain that clearly

User's question: "{message}"{context}

Provide a helpful, specific response based on the user's actual financial data when available."""

    CONTEXT_UNAVAILABLE = "\n\nNote: Unable to fetch your current financial data."

    TODAY_HEADING = "User's actual financial data for TODAY:"
    WEEK_HEADING = "User's actual financial data for this WEEK:"
    MONTH_HEADING = "User's actual financial data for this MONTH:"
    RECENT_HEADING = "User's recent financial data (last 30 days):"

    def build_assistant_prompt(self, message: str, context: str = "") -> str:
        """Build the completion prompt for one user message."""
        return self.ASSISTANT_PROMPT_TEMPLATE.format(message=message, context=context)

    def format_today_context(self, snapshot: SpendingSnapshot) -> str:
        """Context block listing today's expenses."""
        lines = [
            "",
            "",
            self.TODAY_HEADING,
            f"- Total spending today: ${snapshot.total_spending:,.2f}",
            f"- Number of transactions: {len(snapshot.transactions)}",
        ]
        if snapshot.transactions:
            lines.append("- Today's expenses breakdown:")
            for tx in snapshot.transactions:
                lines.append(f"  • {tx.title}: ${coerce_amount(tx.amount):,.2f} ({tx.category})")
        return "\n".join(lines) + "\n"

    def format_period_context(
        self,
        report: TotalsReport,
        heading: str,
        top_categories: int = 0,
    ) -> str:
        """
        Context block for a multi-day window.

        Args:
            report: Aggregated totals for the window
            heading: First line of the block
            top_categories: How many expense categories to list (0 lists none)
        """
        lines = [
            "",
            "",
            heading,
            f"- Total income: ${report.total_income:,.2f}",
            f"- Total expenses: ${report.total_expenses:,.2f}",
            f"- Balance: ${report.balance:,.2f}",
            f"- Number of transactions: {report.transaction_count}",
        ]
        if report.savings_rate is not None:
            lines.append(f"- Savings rate: {report.savings_rate:.1f}%")
        ranked = report.category_breakdown[:top_categories]
        if ranked:
            lines.append("- Top spending categories:")
            for agg in ranked:
                lines.append(f"  • {agg.category}: ${agg.total:,.2f} ({agg.percentage:.1f}%)")
        return "\n".join(lines) + "\n"
