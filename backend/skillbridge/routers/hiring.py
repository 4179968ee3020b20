# backend/skillbridge/routers/hiring.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillbridge.auth import CurrentUser, UserRole, require_role
from skillbridge.db import get_db
from skillbridge.schemas import CompareReq, HiringComparison
from skillbridge.services.hiring import compare_hiring

router = APIRouter(prefix="/api", tags=["hiring"])


@router.post("/compare-hiring", response_model=HiringComparison)
async def compare(
    req: CompareReq,
    user: CurrentUser = Depends(require_role(UserRole.ENTERPRISE)),
    db: Session = Depends(get_db),
):
    return await compare_hiring(db, req.job_title, req.job_description)
