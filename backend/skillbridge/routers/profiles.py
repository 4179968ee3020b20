# backend/skillbridge/routers/profiles.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from skillbridge.db import get_db
from skillbridge.schemas import ProfileOut
from skillbridge.services.roadmaps import coerce_list, latest_for_user

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


@router.get("/{user_id}", response_model=ProfileOut)
def public_profile(user_id: str, db: Session = Depends(get_db)):
    # public: no token required
    row = latest_for_user(db, user_id)
    if not row:
        raise HTTPException(status_code=404, detail="profile not found")
    return ProfileOut(
        user_id=row.user_id,
        target_role=row.target_role,
        verified_skills=[str(s) for s in coerce_list(row.verified_skills)],
    )
