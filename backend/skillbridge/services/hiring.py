# backend/skillbridge/services/hiring.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError
from sqlalchemy.orm import Session

from skillbridge.config import settings
from skillbridge.errors import ModelResponseError
from skillbridge.models import Employee, Roadmap
from skillbridge.schemas import HiringComparison
from skillbridge.services import llm_groq
from skillbridge.services.prompts import load_prompt

log = logging.getLogger(__name__)

PARSE_ERROR = "AI response was not valid JSON. Please try again."


def internal_sample(db: Session, limit: int) -> List[Dict[str, Any]]:
    rows = db.query(Employee).order_by(Employee.id.asc()).limit(limit).all()
    return [
        {"id": e.id, "name": e.full_name, "role": e.designation, "skills": e.skills}
        for e in rows
    ]


def external_sample(db: Session, fetch: int, limit: int) -> List[Dict[str, Any]]:
    # fetch the strongest matches, then keep only the top few to bound prompt size
    rows = (
        db.query(Roadmap)
        .order_by(Roadmap.match_percentage.desc(), Roadmap.id.asc())
        .limit(max(fetch, limit))
        .all()
    )
    return [
        {"id": r.id, "role": r.target_role, "skills": r.current_skills}
        for r in rows[:limit]
    ]


def _truncate(text: str, n: int) -> str:
    if len(text) <= n:
        return text
    return text[:n] + "... (truncated)"


def build_messages(
    job_title: str,
    job_description: str,
    internal: List[Dict[str, Any]],
    external: List[Dict[str, Any]],
) -> List[Dict[str, str]]:
    system, user_template = load_prompt("compare_hiring")
    user = user_template.format(
        job_title=job_title,
        job_description=_truncate(job_description, settings.compare_description_chars),
        internal=json.dumps(internal, default=str),
        external=json.dumps(external, default=str),
        market_salary=f"{settings.market_salary:.0f}",
        training_cost=f"{settings.training_cost:.0f}",
    )
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


async def compare_hiring(db: Session, job_title: str, job_description: str) -> HiringComparison:
    llm_groq.ensure_configured()

    internal = await run_in_threadpool(internal_sample, db, settings.compare_internal_limit)
    external = await run_in_threadpool(
        external_sample, db, settings.compare_external_fetch, settings.compare_external_limit
    )
    log.info(
        "Comparing %d internal vs %d external candidates for %r",
        len(internal), len(external), job_title,
    )

    out = await llm_groq.chat(
        build_messages(job_title, job_description, internal, external),
        temperature=0.2,
        response_format=llm_groq.JSON_OBJECT,
    )
    data = llm_groq.parse_json_reply(out, PARSE_ERROR)
    try:
        return HiringComparison.model_validate(data)
    except ValidationError as e:
        log.warning("Comparison reply failed validation: %s | raw=%s", e, out[:1000])
        raise ModelResponseError(PARSE_ERROR)
