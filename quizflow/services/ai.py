"""AI question drafting through an OpenAI-compatible chat completions API.

Drafts are validated with the same rules as hand-written questions and
returned to the caller; nothing is stored until the teacher saves them.
"""

import json
from functools import lru_cache
from typing import Any

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from quizflow.core.app_exceptions import ServiceUnavailableError
from quizflow.core.config import settings
from quizflow.core.logging import get_logger
from quizflow.models.user import User
from quizflow.schemas.ai import GeneratedQuestions, GenerateQuestionsRequest
from quizflow.schemas.question import QuestionCreate
from quizflow.services.plans import ensure_feature

logger = get_logger(__name__)

SERVICE_NAME = "AI question generation"

SYSTEM_PROMPT = """You are an assistant that writes quiz questions for teachers.
Write {count} questions of type "{question_type}" from the material the user provides.

Rules:
1. Questions are accurate and unambiguous.
2. Choice questions have 3 to 5 plausible options.
3. Difficulty is mostly medium.
4. Every question has the correct answer and a short explanation.

Reply with one JSON object and nothing else:
{{"questions": [{{"type": "{question_type}", "content": "...", "options": ["...", "..."],
"answer": "...", "explanation": "...", "difficulty": "easy|medium|hard", "points": 5,
"tags": ["..."]}}]}}

"answer" is the text of the correct option for single choice, a list of the
correct option texts for multiple choice, and a reference answer string for
fill and essay questions. "options" is null for fill and essay questions."""


@lru_cache
def get_ai_client() -> OpenAI:
    if not settings.AI_API_KEY:
        raise ServiceUnavailableError(SERVICE_NAME)
    return OpenAI(
        api_key=settings.AI_API_KEY,
        base_url=settings.AI_BASE_URL,
        timeout=settings.AI_TIMEOUT_SECONDS,
        max_retries=1,
    )


def _parse_drafts(content: str | None) -> list[Any]:
    """Question items of the model's JSON reply."""
    try:
        payload = json.loads(content or "")
    except json.JSONDecodeError as e:
        logger.warning("AI reply is not JSON", extra={"error": str(e)})
        raise ServiceUnavailableError(SERVICE_NAME) from e

    items = payload.get("questions") if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        logger.warning("AI reply has no question list")
        raise ServiceUnavailableError(SERVICE_NAME)
    return items


def generate_questions(user: User, data: GenerateQuestionsRequest) -> GeneratedQuestions:
    """Ask the model for drafts and keep the ones that pass validation."""
    ensure_feature(user, "ai_enabled", "ai_generation")
    client = get_ai_client()

    system_prompt = SYSTEM_PROMPT.format(count=data.count, question_type=data.type.value)
    try:
        completion = client.chat.completions.create(
            model=settings.AI_MODEL,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": data.prompt},
            ],
            temperature=0.7,
            response_format={"type": "json_object"},
        )
    except OpenAIError as e:
        logger.error("AI provider request failed", extra={"error": str(e)})
        raise ServiceUnavailableError(SERVICE_NAME) from e

    content = completion.choices[0].message.content if completion.choices else None
    drafts = _parse_drafts(content)[: data.count]

    questions = []
    for item in drafts:
        try:
            questions.append(QuestionCreate.model_validate(item))
        except ValidationError:
            continue

    discarded = len(drafts) - len(questions)
    logger.info(
        "AI questions drafted",
        extra={"user_id": str(user.id), "requested": data.count, "kept": len(questions), "discarded": discarded},
    )
    return GeneratedQuestions(questions=questions, requested=data.count, discarded=discarded)
