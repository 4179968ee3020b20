from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class _Wire(BaseModel):
    # camelCase on the wire, snake_case in code
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


# ---------- gap analysis ----------

class AnalyzeReq(_Wire):
    current_skills: str = Field(..., alias="currentSkills", min_length=1)
    target_role: str = Field(..., alias="targetRole", min_length=1)
    resume_content: Optional[str] = Field(None, alias="resumeContent", description="base64 file body")
    resume_type: Optional[str] = Field(None, alias="resumeType", description="mime type of the resume")
    linkedin_url: Optional[str] = Field(None, alias="linkedinUrl")
    github_url: Optional[str] = Field(None, alias="githubUrl")


class RoadmapStep(_Wire):
    step_name: str = Field(
        ...,
        validation_alias=AliasChoices("stepName", "name", "step_name"),
        serialization_alias="stepName",
        min_length=1,
    )
    description: str = ""
    resources: List[str] = Field(default_factory=list)


class GapAnalysis(_Wire):
    """Shape the model must answer with; also the /api/analyze response."""
    match_percentage: int = Field(..., alias="matchPercentage", ge=0, le=100)
    missing_skills: List[str] = Field(..., alias="missingSkills")
    actionable_roadmap: List[RoadmapStep] = Field(..., alias="actionableRoadmap", min_length=1)

    @field_validator("match_percentage", mode="before")
    @classmethod
    def _round_percentage(cls, v: Any) -> Any:
        # models sometimes answer 72.5 or "72"
        if isinstance(v, float):
            return round(v)
        if isinstance(v, str) and v.strip().rstrip("%").replace(".", "", 1).isdigit():
            return round(float(v.strip().rstrip("%")))
        return v


# ---------- assessment ----------

class AssessmentReq(_Wire):
    skill: str = Field(..., min_length=1)


class Question(_Wire):
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_answer: str = Field(..., alias="correctAnswer")

    @model_validator(mode="after")
    def _answer_is_an_option(self):
        if self.correct_answer not in self.options:
            raise ValueError("correctAnswer must be one of the options")
        return self


class AssessmentReply(_Wire):
    questions: List[Question]


class VerifyReq(_Wire):
    skill: str = Field(..., min_length=1)
    questions: List[Question] = Field(..., min_length=1)
    answers: List[Optional[str]]

    @model_validator(mode="after")
    def _one_answer_per_question(self):
        if len(self.answers) != len(self.questions):
            raise ValueError("answers must have one entry per question")
        return self


class VerifyResp(_Wire):
    skill: str
    score: int
    total: int
    passed: bool
    verified_skills: List[str] = Field(default_factory=list, alias="verifiedSkills")


# ---------- hiring comparison ----------

class CompareReq(_Wire):
    job_title: str = Field(..., alias="jobTitle", min_length=1)
    job_description: str = Field(..., alias="jobDescription", min_length=1)


class InternalPick(BaseModel):
    name: str
    id: Any = None
    reason: str = ""


class ExternalPick(BaseModel):
    id: Any = None
    reason: str = ""


class FinancialAnalysis(BaseModel):
    hiring_cost: float
    upskilling_cost: float
    savings: float


class HiringComparison(BaseModel):
    recommendation: Literal["Internal Upskill", "External Hire"]
    match_score: float = Field(..., ge=0, le=100)
    best_internal_candidate: Optional[InternalPick] = None
    best_external_candidate: Optional[ExternalPick] = None
    financial_analysis: FinancialAnalysis
    strategy_summary: str


# ---------- stored records ----------

class RoadmapOut(BaseModel):
    id: int
    user_id: str
    target_role: str
    current_skills: str
    match_percentage: int
    missing_skills: List[str]
    actionable_steps: List[RoadmapStep]
    verified_skills: List[str]
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    created_at: Optional[datetime] = None


class CandidateOut(BaseModel):
    id: int
    user_id: str
    target_role: str
    current_skills: List[str]
    match_percentage: int
    missing_skills: List[str]
    verified_skills: List[str]
    created_at: Optional[datetime] = None


class ProfileOut(BaseModel):
    user_id: str
    target_role: str
    verified_skills: List[str]


class SessionOut(BaseModel):
    user_id: str
    role: str
    home: str


class SkillStatus(BaseModel):
    name: str
    verified: bool


class VerifySkillsOut(BaseModel):
    roadmap_id: Optional[int] = None
    skills: List[SkillStatus] = Field(default_factory=list)
