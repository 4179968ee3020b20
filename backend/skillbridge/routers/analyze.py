# backend/skillbridge/routers/analyze.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillbridge.auth import CurrentUser, UserRole, get_optional_user
from skillbridge.db import get_db
from skillbridge.schemas import AnalyzeReq, GapAnalysis
from skillbridge.services.analyzer import analyze_gap
from skillbridge.services.roadmaps import create_roadmap

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])


@router.post("/analyze", response_model=GapAnalysis)
async def analyze(
    req: AnalyzeReq,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    analysis = await analyze_gap(req)

    if user is not None and user.role is UserRole.CANDIDATE:
        # a failed save still returns the analysis; the candidate can resubmit
        try:
            row = await run_in_threadpool(
                create_roadmap,
                db,
                user_id=user.user_id,
                target_role=req.target_role,
                current_skills=req.current_skills,
                analysis=analysis,
                linkedin_url=req.linkedin_url,
                github_url=req.github_url,
            )
            log.info("Saved roadmap %s for user %s", row.id, user.user_id)
        except SQLAlchemyError:
            await run_in_threadpool(db.rollback)
            log.exception("Error saving roadmap for user %s", user.user_id)
    return analysis
