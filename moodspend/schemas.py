"""
Input schemas for journal writes.

Each model validates one create/edit request before anything is persisted.
Only two coercions are allowed: a missing finance `type` becomes "expense",
and surrounding whitespace is stripped from text fields.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _EventInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    date: str = Field(..., description="YYYY-MM-DD")
    memo: str = Field("", max_length=2000)

    @field_validator("date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError:
            raise ValueError("date must be YYYY-MM-DD") from None


class StressEventInput(_EventInput):
    """Stress log entry. The score is derived from `mood`, never accepted."""

    mood: str = Field(..., min_length=1, max_length=100)
    context: str = Field("", max_length=100)


class FinanceEventInput(_EventInput):
    category: str = Field(..., min_length=1, max_length=100)
    amount: int = Field(..., ge=0, description="Whole currency units")
    type: Literal["expense", "income"] = "expense"

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value):
        return value or "expense"
