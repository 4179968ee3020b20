# backend/skillbridge/routers/recruiter.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skillbridge.auth import CurrentUser, UserRole, require_role
from skillbridge.config import settings
from skillbridge.db import get_db
from skillbridge.schemas import CandidateOut
from skillbridge.services.roadmaps import search_by_role, serialize_candidate

router = APIRouter(prefix="/api/recruiter", tags=["recruiter"])


@router.get("/candidates", response_model=List[CandidateOut])
def search_candidates(
    role: Optional[str] = Query(None, description="substring of the candidate's target role"),
    limit: Optional[int] = Query(None, ge=1, le=200),
    user: CurrentUser = Depends(require_role(UserRole.ENTERPRISE)),
    db: Session = Depends(get_db),
):
    """
    Candidates whose target role contains `role` (case-insensitive),
    strongest match first.
    """
    rows = search_by_role(db, role, limit or settings.search_limit)
    return [serialize_candidate(r) for r in rows]
