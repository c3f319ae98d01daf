"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from quizflow.api.v1.endpoints import (
    ai,
    answers,
    feedback,
    health,
    papers,
    questions,
    reports,
    subscriptions,
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(questions.router, prefix="/questions", tags=["Questions"])
api_router.include_router(papers.router, prefix="/papers", tags=["Papers"])
api_router.include_router(answers.router, prefix="/answers", tags=["Answers"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(feedback.router, prefix="/feedback", tags=["Feedback"])
api_router.include_router(subscriptions.router, prefix="/subscriptions", tags=["Subscriptions"])
api_router.include_router(ai.router, prefix="/ai", tags=["AI"])
