# FILE: agents/extraction_engine.py
"""
Extraction Engine

Three independent capabilities, one agent each, one model round-trip per call:
- classify_intent: "log" or "query"
- extract_expense: text OR receipt photo -> candidate expense fields
- extract_query:   text + today -> candidate {start_date, end_date, category}

Output is UNTRUSTED. Callers run it through services.expense_validator.
"Nothing usable came back" is returned as None, not raised.
"""

import logging
from datetime import date
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel
from pydantic_ai import Agent, BinaryContent, RunContext
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.models import Model

from core.errors import UpstreamError
from core.intent import Intent
from models.expense import CandidateExpense
from models.query import CandidateQuery

logger = logging.getLogger("extraction_engine")

RECEIPT_MEDIA_TYPE = "image/jpeg"


# -----------------------------
# Prompts
# -----------------------------
INTENT_PROMPT = (
    "You are a routing assistant for an expense-tracking chatbot. "
    "Determine if the user message is an 'expense logging' or an 'expense query'.\n\n"
    "Rules:\n"
    "1. The user describes money they spent, bought or paid for → intent 'log'.\n"
    "2. The user asks about past spending, totals or categories "
    "(e.g. 'How much did I spend on food last month?') → intent 'query'.\n"
    "Return strictly as JSON: {\"intent\": \"log\" | \"query\"}."
)

EXPENSE_PROMPT = (
    "You assist in logging expenses. Extract the amount, category, date (optional) "
    "and description from the user input, which is either a message or a photo of a receipt.\n\n"
    "EXTRACTION RULES:\n"
    "1. AMOUNT: the total money spent, as a plain number (12.5, not '$12.50').\n"
    "2. CATEGORY: exactly one of Food, Transportation, Utilities, Entertainment, Others. "
    "Leave it empty if the input does not make the category clear.\n"
    "3. DATE: only when a calendar date is stated or printed on the receipt, as YYYY-MM-DD.\n"
    "4. DESCRIPTION: a short summary of what was bought (for receipts, the merchant and items).\n\n"
    "Never invent values. Leave a field empty rather than guessing."
)


def _query_prompt(ctx: RunContext[date]) -> str:
    return (
        f"You assist in querying expenses. Today is {ctx.deps.isoformat()}. "
        "Extract the start_date and end_date (YYYY-MM-DD) for the query from the user's input, "
        "resolving relative expressions like 'last month' or 'this week' against today. "
        "Only include a category if the user explicitly specifies one from Food, Transportation, "
        "Utilities, Entertainment, Clothing, or Others. "
        "If the user does not mention a category, set the category to \"All\"."
    )


class IntentDecision(BaseModel):
    intent: Literal["log", "query"]


class ExtractionEngine:
    def __init__(self, model: Model):
        self.intent_agent = Agent(model, system_prompt=INTENT_PROMPT, output_type=IntentDecision)
        self.expense_agent = Agent(model, system_prompt=EXPENSE_PROMPT, output_type=CandidateExpense)
        self.query_agent = Agent(model, deps_type=date, output_type=CandidateQuery)
        self.query_agent.system_prompt(_query_prompt)

    async def _run(self, agent: Agent, prompt: Any, label: str, **kwargs: Any) -> Optional[Any]:
        try:
            result = await agent.run(prompt, **kwargs)
        except UnexpectedModelBehavior as e:
            # Empty or schema-invalid response: a normal "not enough info" branch
            logger.warning(f"[EXTRACTION_UNUSABLE] capability={label}, reason={e}")
            return None
        except Exception as e:
            logger.exception(f"[EXTRACTION_FAILED] capability={label}")
            raise UpstreamError("Completion service call failed") from e
        return result.output

    async def classify_intent(self, text: Optional[str], *, has_image: bool = False) -> Optional[Intent]:
        # Receipt photos are never queries: skip the model call entirely
        if has_image:
            return Intent.LOG
        if not text or not text.strip():
            return None

        decision = await self._run(self.intent_agent, text, "intent")
        if decision is None:
            return None
        logger.info(f"[INTENT] intent={decision.intent}, text_length={len(text)}")
        return Intent(decision.intent)

    async def extract_expense(
        self, text: Optional[str] = None, image: Optional[bytes] = None
    ) -> Optional[Dict[str, Any]]:
        if (text is None) == (image is None):
            raise ValueError("extract_expense takes exactly one of text or image")

        if image is not None:
            # Sent as inline base64 image data by the provider
            prompt: Any = [BinaryContent(data=image, media_type=RECEIPT_MEDIA_TYPE)]
        else:
            prompt = text

        candidate = await self._run(self.expense_agent, prompt, "expense")
        if candidate is None:
            return None
        fields = candidate.model_dump(exclude_none=True)
        logger.info(f"[EXPENSE_EXTRACTED] fields={sorted(fields)}, from_image={image is not None}")
        return fields or None

    async def extract_query(self, text: str, today: date) -> Optional[Dict[str, Any]]:
        candidate = await self._run(self.query_agent, text, "query", deps=today)
        if candidate is None:
            return None
        logger.info(f"[QUERY_EXTRACTED] query={candidate.model_dump()}")
        return candidate.model_dump()
