# tests/test_insights.py
import json
from datetime import date

import pytest

from analytics.insights import (
    InsightGenerator,
    build_prompt,
    build_summary,
    generate_insights,
    parse_insights,
)
from core.errors import InsightError
from core.models import Invoice, InvoiceCreate, InsightType, PaymentStatus
from tests.conftest import SAMPLE_INSIGHTS, FakeGenAI


def _invoices():
    paid = InvoiceCreate.from_amount(
        invoice_number="INV-1", client_name="A", date=date(2026, 3, 1), amount=1000,
        status=PaymentStatus.PAID,
    )
    unpaid = InvoiceCreate.from_amount(
        invoice_number="INV-2", client_name="B", date=date(2026, 3, 2), amount=500,
    )
    return [Invoice(id="1", **paid.model_dump()), Invoice(id="2", **unpaid.model_dump())]


def test_generate_parses_structured_response(genai_client):
    generator = InsightGenerator(api_key="k", model="m", client=genai_client)

    insights = generator.generate(_invoices(), [], [])
    assert [i.title for i in insights] == ["Chase unpaid invoices", "Set aside VAT"]
    assert insights[0].type == InsightType.WARNING

    request = genai_client.models.requests[0]
    assert request["model"] == "m"
    assert request["config"].response_mime_type == "application/json"
    assert "1,000 RWF" in request["contents"]


def test_network_error_returns_empty():
    generator = InsightGenerator(api_key="k", client=FakeGenAI(error=ConnectionError("offline")))
    assert generator.generate(_invoices(), [], []) == []


def test_bad_json_returns_empty():
    generator = InsightGenerator(api_key="k", client=FakeGenAI(text="Here are some tips!"))
    assert generator.generate([], [], []) == []


def test_schema_mismatch_returns_empty():
    payload = json.dumps([{"title": "x", "content": "y", "type": "prophecy"}])
    generator = InsightGenerator(api_key="k", client=FakeGenAI(text=payload))
    assert generator.generate([], [], []) == []


def test_missing_key_returns_empty():
    generator = InsightGenerator(api_key=None)
    assert not generator.available
    assert generator.generate([], [], []) == []


def test_module_level_helper(genai_client):
    generator = InsightGenerator(api_key="k", client=genai_client)
    assert len(generate_insights([], [], [], generator=generator)) == 2


def test_parse_strips_code_fences():
    text = "```json\n" + json.dumps(SAMPLE_INSIGHTS) + "\n```"
    assert len(parse_insights(text)) == 2


def test_parse_raises_on_garbage():
    with pytest.raises(InsightError):
        parse_insights("{not json")


def test_summary_and_prompt():
    summary = build_summary(_invoices(), [], [], today=date(2026, 3, 15))
    assert summary.total_revenue == 1000
    assert summary.unpaid_invoices == 1
    assert summary.total_unpaid_amount == 500

    prompt = build_prompt(summary)
    assert "Unpaid Invoices: 1" in prompt
    assert "none within the reminder window" in prompt
