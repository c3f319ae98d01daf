"""Pydantic schemas for reports."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ReportGenerate(BaseModel):
    paper_id: UUID


class ReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    paper_id: UUID
    user_id: UUID
    summary: dict[str, Any]
    chart_data: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime


class ReportListItem(ReportOut):
    paper_title: str | None = None
