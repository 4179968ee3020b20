import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillbridge.config import settings
from skillbridge.db import Base, engine
from skillbridge import models  # noqa: F401  (registers tables)
from skillbridge.errors import register_exception_handlers
from skillbridge.routers import analyze, assessment, hiring, profiles, recruiter, roadmaps

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("skillbridge")


def _mask(val: str | None) -> str:
    if not val:
        return "<missing>"
    if len(val) <= 8:
        return "********"
    return f"{val[:4]}…{val[-4:]}"


app = FastAPI(title="SkillBridge")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins, allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(analyze.router)
app.include_router(assessment.router)
app.include_router(hiring.router)
app.include_router(recruiter.router)
app.include_router(roadmaps.router)
app.include_router(profiles.router)

@app.on_event("startup")
async def _startup():
    # tables are owned by the managed database in prod; this only fills gaps
    Base.metadata.create_all(bind=engine)
    log.info("[startup] env=%s model=%s GROQ_API_KEY: %s", settings.env, settings.groq_model, _mask(settings.groq_api_key))
    if not settings.auth_jwt_secret:
        log.warning("[startup] AUTH_JWT_SECRET missing; authenticated routes will fail")

@app.get("/healthz")
def health():
    return {"status": "ok"}
