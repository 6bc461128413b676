"""
analytics/insights.py
---------------------

Turns the dashboard aggregates into 3–5 short insights via Gemini.

Contract
--------
- One stateless `generate_content` call per invocation, constrained to a JSON
  array of {title, content, type} objects.
- No retries, no caching. Identical input may yield different insights.
- Never raises: a missing key, network failure, timeout, unparseable JSON or a
  schema mismatch all return `[]`.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any, List, Optional, Sequence

from google import genai
from google.genai import types as genai_types
from pydantic import BaseModel, Field, TypeAdapter

from analytics.metrics import Renewal, compute_dashboard_stats, upcoming_renewals
from core.config import (
    AI_TIMEOUT_SEC,
    BUSINESS_NAME,
    CURRENCY,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    VAT_RATE,
)
from core.errors import InsightError
from core.models import AIInsight, Invoice, InsightType, Project, Transaction

_insights_adapter = TypeAdapter(List[AIInsight])

INSIGHT_SCHEMA = genai_types.Schema(
    type=genai_types.Type.ARRAY,
    items=genai_types.Schema(
        type=genai_types.Type.OBJECT,
        properties={
            "title": genai_types.Schema(type=genai_types.Type.STRING),
            "content": genai_types.Schema(type=genai_types.Type.STRING),
            "type": genai_types.Schema(
                type=genai_types.Type.STRING,
                enum=[t.value for t in InsightType],
                description="The type of insight: suggestion, warning, or tip",
            ),
        },
        required=["title", "content", "type"],
    ),
)


class InsightSummary(BaseModel):
    """Fixed-shape numeric snapshot embedded in the prompt."""
    total_revenue: float
    total_earnings: float
    unpaid_invoices: int
    total_unpaid_amount: float
    expenses: float
    project_count: int
    invoice_count: int
    transaction_count: int
    renewals: List[Renewal] = Field(default_factory=list)


def build_summary(
    invoices: Sequence[Invoice],
    transactions: Sequence[Transaction],
    projects: Sequence[Project],
    today: Optional[date] = None,
) -> InsightSummary:
    stats = compute_dashboard_stats(invoices, transactions, projects, today=today)
    return InsightSummary(
        total_revenue=stats.total_paid,
        total_earnings=stats.total_earnings,
        unpaid_invoices=stats.unpaid_count,
        total_unpaid_amount=stats.total_unpaid,
        expenses=stats.total_expenses,
        project_count=stats.project_count,
        invoice_count=stats.invoice_count,
        transaction_count=stats.transaction_count,
        renewals=upcoming_renewals(projects, today=today),
    )


def build_prompt(summary: InsightSummary, currency: str = CURRENCY) -> str:
    def money(value: float) -> str:
        return f"{value:,.0f} {currency}"

    if summary.renewals:
        renewal_lines = "\n".join(
            f"      - {r.project_name}: {r.kind} renewal due {r.due.isoformat()} ({r.days_left} days)"
            for r in summary.renewals
        )
    else:
        renewal_lines = "      - none within the reminder window"

    return f"""
      Act as a high-level financial architect and business strategist for {BUSINESS_NAME}.
      Analyze the following business snapshot (All values are in {currency}):
      - Revenue (Paid): {money(summary.total_revenue)}
      - Personal Earnings: {money(summary.total_earnings)}
      - Unpaid Invoices: {summary.unpaid_invoices} (Total Pending: {money(summary.total_unpaid_amount)})
      - Expenses: {money(summary.expenses)}
      - Active Projects: {summary.project_count}
      - Invoices on record: {summary.invoice_count}; ledger transactions: {summary.transaction_count}
      - Upcoming project renewals:
{renewal_lines}

      Provide 3-5 strategic insights including:
      1. Cash flow warnings or healthy trends.
      2. Profitability analysis.
      3. Renewal reminders for projects (if any are close to expiry).
      4. Tax preparation advice (VAT related - {VAT_RATE:.0%} standard).

      Respond in JSON format as an array of objects with fields: title, content, type (suggestion|warning|tip).
    """


def parse_insights(text: Optional[str]) -> List[AIInsight]:
    """Parse the model's JSON text. Raises InsightError on any mismatch."""
    if not text:
        return []
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    try:
        data = json.loads(cleaned)
        return _insights_adapter.validate_python(data)
    except (ValueError, TypeError) as e:
        raise InsightError(f"Unusable insight payload: {e}") from e


class InsightGenerator:
    """
    Gemini-backed insight adapter.

    Parameters
    ----------
    api_key : str, optional
        Gemini API key; defaults to GEMINI_API_KEY / API_KEY.
    model : str
        Model name.
    timeout : float
        Request timeout in seconds; expiry is treated like any other failure.
    client : optional
        Pre-built `genai.Client` (or a fake with `.models.generate_content`).
    """

    def __init__(
        self,
        api_key: Optional[str] = GEMINI_API_KEY,
        model: str = GEMINI_MODEL,
        timeout: float = AI_TIMEOUT_SEC,
        client: Any = None,
        debug: bool = False,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = client
        self._debug = debug

    @property
    def available(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> Any:
        # Built right before the call so a key added to the environment is picked up.
        if self._client is not None:
            return self._client
        if not self.api_key:
            raise InsightError("GEMINI_API_KEY not set (.env or environment).")
        return genai.Client(
            api_key=self.api_key,
            http_options=genai_types.HttpOptions(timeout=int(self.timeout * 1000)),
        )

    def generate(
        self,
        invoices: Sequence[Invoice],
        transactions: Sequence[Transaction],
        projects: Sequence[Project],
    ) -> List[AIInsight]:
        """Return a fresh list of insights, or [] on any failure."""
        try:
            prompt = build_prompt(build_summary(invoices, transactions, projects))
            client = self._get_client()
            if self._debug:
                print(f"[Insights] → Requesting insights from {self.model}")
            response = client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=genai_types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=INSIGHT_SCHEMA,
                ),
            )
            insights = parse_insights(getattr(response, "text", None))
            if self._debug:
                print(f"[Insights] ← Got {len(insights)} insights")
            return insights
        except Exception as e:  # noqa: BLE001 - insights are optional, never fatal
            print(f"[Insights] ⚠️ AI Insight Error: {type(e).__name__}: {e}")
            return []


def generate_insights(
    invoices: Sequence[Invoice],
    transactions: Sequence[Transaction],
    projects: Sequence[Project],
    generator: Optional[InsightGenerator] = None,
) -> List[AIInsight]:
    """Module-level convenience wrapper around InsightGenerator.generate."""
    return (generator or InsightGenerator()).generate(invoices, transactions, projects)
