"""Pydantic schemas for plans and the caller's subscription."""

from pydantic import BaseModel


class PlanOut(BaseModel):
    id: str
    questions: int
    papers: int
    ai_enabled: bool


class UsageOut(BaseModel):
    questions: int
    papers: int


class SubscriptionOut(BaseModel):
    plan: str
    status: str
    limits: PlanOut
    usage: UsageOut
