# backend/skillbridge/routers/assessment.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from skillbridge.auth import CurrentUser, UserRole, require_role
from skillbridge.db import get_db
from skillbridge.schemas import AssessmentReq, Question, VerifyReq, VerifyResp
from skillbridge.services import assessment as svc
from skillbridge.services.roadmaps import add_verified_skill, coerce_list, latest_for_user, split_skills

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assessment", tags=["assessment"])


@router.post("", response_model=List[Question])
async def generate(req: AssessmentReq):
    return await svc.generate_assessment(req.skill)


@router.post("/verify", response_model=VerifyResp)
def verify(
    req: VerifyReq,
    user: CurrentUser = Depends(require_role(UserRole.CANDIDATE)),
    db: Session = Depends(get_db),
):
    """
    Grade a finished assessment. Only a perfect score verifies the skill,
    which is then added to the candidate's latest roadmap.
    """
    roadmap = latest_for_user(db, user.user_id)
    if roadmap is None:
        raise HTTPException(status_code=404, detail="roadmap not found")

    listed = {s.lower(): s for s in split_skills(roadmap.current_skills)}
    skill = listed.get(req.skill.lower())
    if skill is None:
        raise HTTPException(status_code=400, detail="skill is not on your roadmap")

    total = len(req.questions)
    score = svc.grade(req.questions, req.answers)
    ok = svc.passed(score, total)

    if ok:
        verified = add_verified_skill(db, roadmap, skill)
        log.info("User %s verified %r on roadmap %s", user.user_id, skill, roadmap.id)
    else:
        verified = [str(s) for s in coerce_list(roadmap.verified_skills)]

    return VerifyResp(skill=skill, score=score, total=total, passed=ok, verified_skills=verified)
