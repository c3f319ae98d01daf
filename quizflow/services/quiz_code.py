"""Quiz code issuance.

A quiz code is the short public identifier students type (or scan) to open a
published paper. Codes avoid characters that are easy to misread: I, L, O, 0
and 1.
"""

import secrets

from sqlalchemy.orm import Session

from quizflow.core.app_exceptions import ConflictError
from quizflow.core.config import settings
from quizflow.core.logging import get_logger
from quizflow.models.paper import Paper

logger = get_logger(__name__)

QUIZ_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
QUIZ_CODE_LENGTH = 6


def generate_quiz_code() -> str:
    """Draw a code uniformly from the alphabet using the OS random source.

    No uniqueness check is done here; see ``generate_unique_quiz_code``.
    """
    return "".join(secrets.choice(QUIZ_CODE_ALPHABET) for _ in range(QUIZ_CODE_LENGTH))


def is_valid_quiz_code(code: str) -> bool:
    """Whether ``code`` could have been produced by ``generate_quiz_code``."""
    return len(code) == QUIZ_CODE_LENGTH and all(ch in QUIZ_CODE_ALPHABET for ch in code)


def generate_unique_quiz_code(db: Session, max_attempts: int | None = None) -> str:
    """Generate a code not used by any paper yet.

    The unique constraint on ``papers.quiz_code`` remains the final guard
    against two concurrent publishes drawing the same code.

    Raises:
        ConflictError: if every attempt collided with an existing code
    """
    attempts = max_attempts or settings.QUIZ_CODE_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        code = generate_quiz_code()
        taken = db.query(Paper.id).filter(Paper.quiz_code == code).first()
        if not taken:
            return code
        logger.info("Quiz code collision", extra={"attempt": attempt})

    logger.warning("Quiz code generation exhausted", extra={"attempts": attempts})
    raise ConflictError("Could not allocate a unique quiz code, please retry")
