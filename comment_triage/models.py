"""Pydantic models for triage output records."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class Category(str, Enum):
    """Exclusive triage categories."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    SPAM = "spam"


class TriageReport(BaseModel):
    """Exported result of one triage run."""
    generated_at: datetime
    total: int
    counts: dict[Category, int]
    comments: dict[Category, list[str]]
    dropped: int = 0  # Units that timed out or failed
