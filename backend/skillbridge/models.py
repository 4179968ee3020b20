from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, JSON, Integer, TIMESTAMP, Numeric
from skillbridge.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Roadmap(Base):
    __tablename__ = "roadmaps"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    target_role = Column(String, nullable=False)
    current_skills = Column(Text, nullable=False)
    match_percentage = Column(Integer, nullable=False, default=0)
    # always written as native JSON arrays; legacy rows may hold JSON text
    missing_skills = Column(JSON, default=list)
    actionable_steps = Column(JSON, default=list)
    verified_skills = Column(JSON, default=list)
    linkedin_url = Column(Text)
    github_url = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), default=_utcnow, index=True)


class Employee(Base):
    """Internal staff, managed outside this service. Read-only here."""
    __tablename__ = "employees"
    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String, nullable=False)
    designation = Column(String)
    skills = Column(Text)
    salary = Column(Numeric)
