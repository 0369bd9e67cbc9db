# tests/agents/test_extraction_engine.py

import asyncio
from datetime import date

import pytest
from pydantic_ai import BinaryContent
from pydantic_ai.messages import ModelResponse, SystemPromptPart, ToolCallPart, UserPromptPart
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.test import TestModel

from agents.extraction_engine import ExtractionEngine
from core.errors import UpstreamError
from core.intent import Intent


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

class Recorder:
    """FunctionModel body that answers with fixed output args and keeps every request."""

    def __init__(self, output_args):
        self.output_args = output_args
        self.requests = []

    def __call__(self, messages, info: AgentInfo) -> ModelResponse:
        self.requests.append(messages)
        return ModelResponse(parts=[ToolCallPart(info.output_tools[0].name, self.output_args)])

    def parts(self, kind):
        return [p for m in self.requests[0] for p in m.parts if isinstance(p, kind)]


def _engine(output_args):
    recorder = Recorder(output_args)
    return ExtractionEngine(FunctionModel(recorder)), recorder


def _failing(messages, info):
    raise RuntimeError("service unavailable")


# ---------------------------------------------------------------------
# classify_intent
# ---------------------------------------------------------------------

def test_classifies_log_intent():
    engine = ExtractionEngine(TestModel(custom_output_args={"intent": "log"}))

    assert asyncio.run(engine.classify_intent("lunch 12.50")) is Intent.LOG


def test_classifies_query_intent():
    engine = ExtractionEngine(TestModel(custom_output_args={"intent": "query"}))

    assert asyncio.run(engine.classify_intent("how much last month?")) is Intent.QUERY


def test_image_is_always_log_without_model_call():
    engine, recorder = _engine({"intent": "query"})

    assert asyncio.run(engine.classify_intent(None, has_image=True)) is Intent.LOG
    assert recorder.requests == []


def test_blank_text_is_not_classified():
    engine, recorder = _engine({"intent": "log"})

    assert asyncio.run(engine.classify_intent("   ")) is None
    assert recorder.requests == []


def test_unusable_intent_output_is_none():
    """
    A response that never fits the schema means "didn't understand", not an error.
    """
    engine, _ = _engine({"intent": "maybe"})

    assert asyncio.run(engine.classify_intent("hello")) is None


def test_completion_service_failure_is_upstream_error():
    engine = ExtractionEngine(FunctionModel(_failing))

    with pytest.raises(UpstreamError):
        asyncio.run(engine.classify_intent("lunch 12.50"))


# ---------------------------------------------------------------------
# extract_expense
# ---------------------------------------------------------------------

def test_extracts_expense_fields_from_text():
    engine, recorder = _engine({"amount": 12.5, "category": "Food", "description": "lunch"})

    candidate = asyncio.run(engine.extract_expense(text="lunch 12.50"))

    assert candidate == {"amount": 12.5, "category": "Food", "description": "lunch"}
    assert recorder.parts(UserPromptPart)[0].content == "lunch 12.50"


def test_receipt_image_is_sent_as_binary_content():
    engine, recorder = _engine({"amount": 8.0, "category": "Food", "description": "Cafe"})

    asyncio.run(engine.extract_expense(image=b"\xff\xd8jpeg-bytes"))

    content = recorder.parts(UserPromptPart)[0].content
    images = [c for c in content if isinstance(c, BinaryContent)]
    assert len(images) == 1
    assert images[0].data == b"\xff\xd8jpeg-bytes"
    assert images[0].media_type == "image/jpeg"


def test_empty_extraction_is_none():
    engine, _ = _engine({})

    assert asyncio.run(engine.extract_expense(text="hmm")) is None


@pytest.mark.parametrize("kwargs", [{}, {"text": "lunch", "image": b"img"}])
def test_exactly_one_input_is_required(kwargs):
    engine, _ = _engine({})

    with pytest.raises(ValueError):
        asyncio.run(engine.extract_expense(**kwargs))


# ---------------------------------------------------------------------
# extract_query
# ---------------------------------------------------------------------

def test_query_prompt_carries_today():
    engine, recorder = _engine(
        {"start_date": "2026-09-01", "end_date": "2026-09-30", "category": "All"}
    )

    candidate = asyncio.run(engine.extract_query("how much last month?", date(2026, 10, 19)))

    assert candidate == {"start_date": "2026-09-01", "end_date": "2026-09-30", "category": "All"}
    system = " ".join(p.content for p in recorder.parts(SystemPromptPart))
    assert "Today is 2026-10-19" in system


def test_query_category_defaults_to_all():
    engine, _ = _engine({"start_date": "2026-10-01", "end_date": "2026-10-19"})

    candidate = asyncio.run(engine.extract_query("spent this month?", date(2026, 10, 19)))

    assert candidate["category"] == "All"
