"""Pydantic schemas for brain dump API."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BrainDumpCreateRequest(BaseModel):
    original_text: str


class BrainDumpCreateResponse(BaseModel):
    id: UUID
    processed: bool = False
    request_id: str


class BrainDumpRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    original_text: str
    summary: str
    what_matters: List[str] = Field(default_factory=list)
    what_doesnt: List[str] = Field(default_factory=list)
    actionable_focus: str
    processed: bool
    created_at: datetime
    processed_at: Optional[datetime] = None
