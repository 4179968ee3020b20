# backend/skillbridge/services/roadmaps.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session

from skillbridge.models import Roadmap
from skillbridge.schemas import CandidateOut, GapAnalysis, RoadmapOut, RoadmapStep

log = logging.getLogger(__name__)


def coerce_list(value: Any) -> List[Any]:
    """
    Read a stored list column. New rows hold native JSON arrays; rows written
    by the old client may hold the same array as JSON text.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            parsed = json.loads(text)
        except ValueError:
            log.warning("Unparseable list column value: %r", text[:200])
            return []
        if isinstance(parsed, list):
            return parsed
    log.warning("Unexpected list column type: %s", type(value).__name__)
    return []


def split_skills(text: Optional[str]) -> List[str]:
    return [s.strip() for s in (text or "").split(",") if s.strip()]


def _str_list(value: Any) -> List[str]:
    return [str(x) for x in coerce_list(value) if x is not None]


def _steps(value: Any) -> List[RoadmapStep]:
    steps: List[RoadmapStep] = []
    for item in coerce_list(value):
        try:
            steps.append(RoadmapStep.model_validate(item))
        except ValidationError:
            log.warning("Skipping malformed roadmap step: %r", item)
    return steps


def serialize_roadmap(r: Roadmap) -> RoadmapOut:
    return RoadmapOut(
        id=r.id,
        user_id=r.user_id,
        target_role=r.target_role,
        current_skills=r.current_skills or "",
        match_percentage=int(r.match_percentage or 0),
        missing_skills=_str_list(r.missing_skills),
        actionable_steps=_steps(r.actionable_steps),
        verified_skills=_str_list(r.verified_skills),
        linkedin_url=r.linkedin_url,
        github_url=r.github_url,
        created_at=r.created_at,
    )


def serialize_candidate(r: Roadmap) -> CandidateOut:
    return CandidateOut(
        id=r.id,
        user_id=r.user_id,
        target_role=r.target_role,
        current_skills=split_skills(r.current_skills),
        match_percentage=int(r.match_percentage or 0),
        missing_skills=_str_list(r.missing_skills),
        verified_skills=_str_list(r.verified_skills),
        created_at=r.created_at,
    )


def create_roadmap(
    db: Session,
    user_id: str,
    target_role: str,
    current_skills: str,
    analysis: GapAnalysis,
    linkedin_url: Optional[str] = None,
    github_url: Optional[str] = None,
) -> Roadmap:
    steps: List[Dict[str, Any]] = [s.model_dump(by_alias=True) for s in analysis.actionable_roadmap]
    row = Roadmap(
        user_id=user_id,
        target_role=target_role,
        current_skills=current_skills,
        match_percentage=analysis.match_percentage,
        missing_skills=list(analysis.missing_skills),
        actionable_steps=steps,
        verified_skills=[],
        linkedin_url=linkedin_url,
        github_url=github_url,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def list_for_user(db: Session, user_id: str) -> List[Roadmap]:
    return (
        db.query(Roadmap)
        .filter(Roadmap.user_id == user_id)
        .order_by(Roadmap.created_at.desc(), Roadmap.id.desc())
        .all()
    )


def latest_for_user(db: Session, user_id: str) -> Optional[Roadmap]:
    return (
        db.query(Roadmap)
        .filter(Roadmap.user_id == user_id)
        .order_by(Roadmap.created_at.desc(), Roadmap.id.desc())
        .first()
    )


def search_by_role(db: Session, role_query: Optional[str], limit: int) -> List[Roadmap]:
    q = db.query(Roadmap)
    term = (role_query or "").strip()
    if term:
        # % and _ in the term are literals, not wildcards
        q = q.filter(func.lower(Roadmap.target_role).contains(term.lower(), autoescape=True))
    return (
        q.order_by(Roadmap.match_percentage.desc(), Roadmap.id.asc())
        .limit(limit)
        .all()
    )


def add_verified_skill(db: Session, roadmap: Roadmap, skill: str) -> List[str]:
    """Append a skill to the roadmap's verified list once. Last writer wins."""
    current = _str_list(roadmap.verified_skills)
    if skill.lower() in {s.lower() for s in current}:
        return current
    updated = current + [skill]
    # assign a new list so the JSON column is flagged dirty
    roadmap.verified_skills = updated
    db.commit()
    return updated
