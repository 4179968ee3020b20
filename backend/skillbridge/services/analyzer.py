import logging

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from skillbridge.errors import ModelResponseError
from skillbridge.schemas import AnalyzeReq, GapAnalysis
from skillbridge.services import llm_groq
from skillbridge.services.prompts import load_prompt
from skillbridge.services.resume_text import resume_to_text

log = logging.getLogger(__name__)

PARSE_ERROR = "Failed to parse analysis results"


def build_messages(req: AnalyzeReq, resume: str = "") -> list[dict]:
    system, user_template = load_prompt("analyze")
    user = user_template.format(
        skills=req.current_skills,
        role=req.target_role,
        linkedin=req.linkedin_url or "none",
        github=req.github_url or "none",
        resume=resume or "(none)",
    )
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


async def analyze_gap(req: AnalyzeReq) -> GapAnalysis:
    llm_groq.ensure_configured()
    # PDF/DOCX parsing is CPU bound
    resume = await run_in_threadpool(resume_to_text, req.resume_content, req.resume_type)
    out = await llm_groq.chat(
        build_messages(req, resume),
        temperature=0.2,
        response_format=llm_groq.JSON_OBJECT,
    )
    data = llm_groq.parse_json_reply(out, PARSE_ERROR)
    try:
        return GapAnalysis.model_validate(data)
    except ValidationError as e:
        log.warning("Analysis reply failed validation: %s | raw=%s", e, out[:1000])
        raise ModelResponseError(PARSE_ERROR)
