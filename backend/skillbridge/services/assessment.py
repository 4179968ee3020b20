# backend/skillbridge/services/assessment.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from skillbridge.errors import ModelResponseError
from skillbridge.schemas import AssessmentReply, Question
from skillbridge.services import llm_groq
from skillbridge.services.prompts import load_prompt

log = logging.getLogger(__name__)

QUESTION_COUNT = 3
PARSE_ERROR = "Failed to parse assessment results"


async def generate_assessment(skill: str) -> List[Question]:
    """Ask the model for a fresh three-question multiple-choice quiz on one skill."""
    llm_groq.ensure_configured()
    system, user_template = load_prompt("assessment")
    out = await llm_groq.chat(
        [
            {"role": "system", "content": system},
            {"role": "user", "content": user_template.format(skill=skill, count=QUESTION_COUNT)},
        ],
        temperature=0.4,
        response_format=llm_groq.JSON_OBJECT,
    )
    data = llm_groq.parse_json_reply(out, PARSE_ERROR)
    # older prompts asked for a bare array
    if isinstance(data, list):
        data = {"questions": data}
    try:
        reply = AssessmentReply.model_validate(data)
    except ValidationError as e:
        log.warning("Assessment reply failed validation: %s | raw=%s", e, out[:1000])
        raise ModelResponseError(PARSE_ERROR)
    if len(reply.questions) != QUESTION_COUNT:
        log.warning("Assessment reply had %d questions, expected %d", len(reply.questions), QUESTION_COUNT)
        raise ModelResponseError(PARSE_ERROR)
    return reply.questions


def grade(questions: Sequence[Question], answers: Sequence[Optional[str]]) -> int:
    """Count answers that match the question's correct option exactly."""
    return sum(
        1 for q, a in zip(questions, answers)
        if a is not None and a.strip() == q.correct_answer
    )


def passed(score: int, total: int) -> bool:
    # all or nothing
    return total > 0 and score == total
