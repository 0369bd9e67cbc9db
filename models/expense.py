# models/expense.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExpenseCategory(str, Enum):
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    OTHERS = "Others"


# Accepted as a query filter only, so records from the older category set stay reachable
LEGACY_CATEGORIES = ("Clothing",)

ALL_CATEGORIES = "All"


class ExpenseInput(BaseModel):
    """A validated expense, before the store assigns id/owner/createdAt."""

    amount: float = Field(..., ge=0, description="The amount of the expense")
    category: ExpenseCategory = Field(..., description="The category of the expense")
    date: Optional[datetime] = Field(None, description="When the expense happened")
    description: Optional[str] = Field(None, description="The description of the expense")


class Expense(BaseModel):
    """A persisted expense, serialized with camelCase keys (ownerId, createdAt)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    amount: float
    category: str
    date: datetime
    description: Optional[str] = None
    owner_id: str
    created_at: datetime


# -----------------------------
# LLM output schema (untrusted)
# -----------------------------
class CandidateExpense(BaseModel):
    amount: Optional[float] = Field(None, description="The amount spent, as a number")
    category: Optional[str] = Field(
        None,
        description="One of: Food, Transportation, Utilities, Entertainment, Others",
    )
    date: Optional[str] = Field(None, description="Date of the expense, ISO format YYYY-MM-DD")
    description: Optional[str] = Field(None, description="Short description of what was bought")
