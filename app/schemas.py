"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.readings import MatchStatus


class ReadingSchema(BaseModel):
    """A parsed weather reading; absent measurements are null."""

    model_config = ConfigDict(from_attributes=True)

    timestamp: datetime
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None


class MatchEntry(BaseModel):
    """Match outcome for one submitted capture time."""

    timestamp: str = Field(..., description="Capture time exactly as submitted.")
    status: MatchStatus
    delta_minutes: Optional[float] = Field(
        default=None, description="Minutes between capture time and nearest reading."
    )
    reading: Optional[ReadingSchema] = None


class MatchResponse(BaseModel):
    reading_count: int = Field(..., ge=0)
    threshold_minutes: float = Field(..., ge=0)
    results: List[MatchEntry] = Field(default_factory=list)
