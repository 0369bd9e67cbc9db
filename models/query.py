# models/query.py
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from models.expense import ALL_CATEGORIES


# -----------------------------
# LLM output schema (untrusted)
# -----------------------------
class CandidateQuery(BaseModel):
    start_date: Optional[str] = Field(
        None, description="Start date (inclusive), ISO format YYYY-MM-DD"
    )
    end_date: Optional[str] = Field(
        None, description="End date (inclusive), ISO format YYYY-MM-DD"
    )
    category: str = Field(
        ALL_CATEGORIES,
        description=(
            "One of Food, Transportation, Utilities, Entertainment, Clothing, Others, "
            "or 'All' when the user does not name a category"
        ),
    )


# -----------------------------
# Validated query (Validator → Store)
# -----------------------------
class ExpenseQuery(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category: str = ALL_CATEGORIES

    @property
    def is_all_categories(self) -> bool:
        return self.category == ALL_CATEGORIES
