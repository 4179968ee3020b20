import base64
import json

from sqlalchemy.exc import SQLAlchemyError

from skillbridge.config import settings
from skillbridge.models import Roadmap
from skillbridge.routers import analyze as analyze_router

GOOD = {
    "matchPercentage": 62,
    "missingSkills": ["Kubernetes", "Terraform"],
    "actionableRoadmap": [
        {"stepName": "Learn containers", "description": "Docker then k8s", "resources": ["kubernetes.io"]},
        {"stepName": "IaC", "description": "Terraform basics"},
        {"stepName": "Ship it", "description": "Deploy a side project"},
    ],
}

BODY = {"currentSkills": "Python, SQL, Linux", "targetRole": "DevOps Engineer"}


def test_analysis_shape(client, fake_llm):
    fake_llm.reply = json.dumps(GOOD)

    r = client.post("/api/analyze", json=BODY)
    assert r.status_code == 200
    out = r.json()
    assert set(out) == {"matchPercentage", "missingSkills", "actionableRoadmap"}
    assert 0 <= out["matchPercentage"] <= 100
    assert out["missingSkills"] == ["Kubernetes", "Terraform"]
    assert out["actionableRoadmap"][0]["stepName"] == "Learn containers"
    assert out["actionableRoadmap"][1]["resources"] == []

    assert len(fake_llm.calls) == 1
    assert fake_llm.calls[0]["response_format"] == {"type": "json_object"}
    prompt = fake_llm.prompt()
    assert "Python, SQL, Linux" in prompt and "DevOps Engineer" in prompt


def test_fenced_reply_is_accepted(client, fake_llm):
    fake_llm.reply = "```json\n" + json.dumps(GOOD) + "\n```"
    r = client.post("/api/analyze", json=BODY)
    assert r.status_code == 200
    assert r.json()["matchPercentage"] == 62


def test_candidate_analysis_is_saved(client, fake_llm, db, candidate_headers):
    fake_llm.reply = json.dumps(GOOD)
    body = dict(BODY, linkedinUrl="https://linkedin.com/in/x")

    r = client.post("/api/analyze", json=body, headers=candidate_headers)
    assert r.status_code == 200

    rows = db.query(Roadmap).all()
    assert len(rows) == 1
    row = rows[0]
    assert row.user_id == "cand-1"
    assert row.target_role == "DevOps Engineer"
    assert row.match_percentage == 62
    # stored as native arrays, not JSON text
    assert row.missing_skills == ["Kubernetes", "Terraform"]
    assert row.actionable_steps[0]["stepName"] == "Learn containers"
    assert row.verified_skills == []
    assert row.linkedin_url == "https://linkedin.com/in/x"


def test_anonymous_analysis_is_not_saved(client, fake_llm, db):
    fake_llm.reply = json.dumps(GOOD)
    assert client.post("/api/analyze", json=BODY).status_code == 200
    assert db.query(Roadmap).count() == 0


def test_failed_save_still_returns_analysis(client, fake_llm, db, candidate_headers, monkeypatch):
    fake_llm.reply = json.dumps(GOOD)

    def boom(*args, **kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(analyze_router, "create_roadmap", boom)
    r = client.post("/api/analyze", json=BODY, headers=candidate_headers)
    assert r.status_code == 200
    assert r.json()["matchPercentage"] == 62
    assert db.query(Roadmap).count() == 0


def test_missing_target_role_is_400_without_model_call(client, fake_llm):
    r = client.post("/api/analyze", json={"currentSkills": "Python"})
    assert r.status_code == 400
    assert r.json() == {"error": "targetRole is required"}
    assert fake_llm.calls == []


def test_blank_skills_is_400(client, fake_llm):
    r = client.post("/api/analyze", json={"currentSkills": "   ", "targetRole": "SRE"})
    assert r.status_code == 400
    assert "currentSkills" in r.json()["error"]
    assert fake_llm.calls == []


def test_missing_key_is_config_error(client, fake_llm, monkeypatch):
    monkeypatch.setattr(settings, "groq_api_key", None)
    r = client.post("/api/analyze", json=BODY)
    assert r.status_code == 500
    assert r.json() == {"error": "Server configuration error: API Key missing"}
    assert fake_llm.calls == []


def test_unparseable_reply(client, fake_llm):
    fake_llm.reply = "Sure! Here is your analysis: matchPercentage is about 60"
    r = client.post("/api/analyze", json=BODY)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to parse analysis results"}


def test_out_of_range_percentage_is_rejected(client, fake_llm):
    fake_llm.reply = json.dumps(dict(GOOD, matchPercentage=140))
    r = client.post("/api/analyze", json=BODY)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to parse analysis results"}


def test_fractional_percentage_is_rounded(client, fake_llm):
    fake_llm.reply = json.dumps(dict(GOOD, matchPercentage=71.6))
    r = client.post("/api/analyze", json=BODY)
    assert r.status_code == 200
    assert r.json()["matchPercentage"] == 72


def test_plain_text_resume_goes_into_prompt(client, fake_llm):
    fake_llm.reply = json.dumps(GOOD)
    resume = base64.b64encode(b"Built CI pipelines with Jenkins at Acme").decode()
    body = dict(BODY, resumeContent=resume, resumeType="text/plain", githubUrl="https://github.com/x")

    assert client.post("/api/analyze", json=body).status_code == 200
    prompt = fake_llm.prompt()
    assert "Jenkins at Acme" in prompt
    assert "https://github.com/x" in prompt


def test_bad_resume_base64_is_400(client, fake_llm):
    body = dict(BODY, resumeContent="not base64!!", resumeType="text/plain")
    r = client.post("/api/analyze", json=body)
    assert r.status_code == 400
    assert fake_llm.calls == []


def test_unsupported_resume_type_is_400(client, fake_llm):
    body = dict(BODY, resumeContent=base64.b64encode(b"\x89PNG").decode(), resumeType="image/png")
    r = client.post("/api/analyze", json=body)
    assert r.status_code == 400
    assert "Unsupported resume type" in r.json()["error"]


def test_reply_without_missing_skills_is_rejected(client, fake_llm):
    reply = {k: v for k, v in GOOD.items() if k != "missingSkills"}
    fake_llm.reply = json.dumps(reply)
    r = client.post("/api/analyze", json=BODY)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to parse analysis results"}


def test_model_outage_is_reported(client, monkeypatch):
    import httpx
    from skillbridge.services import llm_groq

    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="over capacity"))

    class Offline(llm_groq.GroqLLM):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, transport=transport, **kwargs)

    monkeypatch.setattr(llm_groq, "GroqLLM", Offline)
    r = client.post("/api/analyze", json=BODY)
    assert r.status_code == 500
    assert r.json() == {"error": "Model request failed"}
