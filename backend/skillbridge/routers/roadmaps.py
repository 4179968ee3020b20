# backend/skillbridge/routers/roadmaps.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from skillbridge.auth import CurrentUser, UserRole, get_current_user, home_path, require_role
from skillbridge.db import get_db
from skillbridge.models import Roadmap
from skillbridge.schemas import RoadmapOut, SessionOut, SkillStatus, VerifySkillsOut
from skillbridge.services.roadmaps import (
    coerce_list,
    latest_for_user,
    list_for_user,
    serialize_roadmap,
    split_skills,
)

router = APIRouter(prefix="/api", tags=["candidate"])

require_candidate = require_role(UserRole.CANDIDATE)


@router.get("/session", response_model=SessionOut)
def session(user: CurrentUser = Depends(get_current_user)):
    return SessionOut(user_id=user.user_id, role=user.role.value, home=home_path(user.role))


@router.get("/roadmaps", response_model=List[RoadmapOut])
def my_roadmaps(user: CurrentUser = Depends(require_candidate), db: Session = Depends(get_db)):
    return [serialize_roadmap(r) for r in list_for_user(db, user.user_id)]


@router.get("/roadmaps/{roadmap_id}", response_model=RoadmapOut)
def get_roadmap(roadmap_id: int, user: CurrentUser = Depends(require_candidate), db: Session = Depends(get_db)):
    row = db.query(Roadmap).filter(Roadmap.id == roadmap_id, Roadmap.user_id == user.user_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="roadmap not found")
    return serialize_roadmap(row)


@router.get("/verify/skills", response_model=VerifySkillsOut)
def skills_to_verify(user: CurrentUser = Depends(require_candidate), db: Session = Depends(get_db)):
    row = latest_for_user(db, user.user_id)
    if row is None:
        return VerifySkillsOut()
    verified = {str(s).lower() for s in coerce_list(row.verified_skills)}
    return VerifySkillsOut(
        roadmap_id=row.id,
        skills=[SkillStatus(name=s, verified=s.lower() in verified) for s in split_skills(row.current_skills)],
    )
