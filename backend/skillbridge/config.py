# config.py
import os
from typing import List, Optional
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()


def _env_list(name: str, default: str = "") -> List[str]:
    raw = os.getenv(name, default) or ""
    return [s.strip() for s in raw.split(",") if s.strip()]


class Settings(BaseModel):
    env: str = os.getenv("ENV", "dev")
    database_url: str = os.getenv("DATABASE_URL", "")
    groq_api_key: Optional[str] = os.getenv("GROQ_API_KEY")
    groq_model: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    llm_timeout_secs: float = float(os.getenv("LLM_TIMEOUT_SECS", "90"))
    auth_jwt_secret: Optional[str] = os.getenv("AUTH_JWT_SECRET")
    auth_jwt_algorithm: str = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
    cors_origins: List[str] = _env_list("CORS_ORIGINS", "*")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # recruiter search
    search_limit: int = int(os.getenv("SEARCH_LIMIT", "50"))

    # hiring comparison: sample sizes and flat cost placeholders
    compare_internal_limit: int = int(os.getenv("COMPARE_INTERNAL_LIMIT", "2"))
    compare_external_limit: int = int(os.getenv("COMPARE_EXTERNAL_LIMIT", "2"))
    compare_external_fetch: int = int(os.getenv("COMPARE_EXTERNAL_FETCH", "10"))
    compare_description_chars: int = int(os.getenv("COMPARE_DESCRIPTION_CHARS", "200"))
    market_salary: float = float(os.getenv("MARKET_SALARY", "120000"))
    training_cost: float = float(os.getenv("TRAINING_COST", "5000"))


settings = Settings()


# Fail fast on what the app cannot start without. The model key is checked per request.
if not settings.database_url:
    raise RuntimeError("Missing required env(s): DATABASE_URL")
