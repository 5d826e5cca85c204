import base64
import json

from app.config import settings
from app.errors import LLMServiceError
from app.services.projects import (
    MERMAID_IMAGE_BASE,
    ProjectsOk,
    mermaid_image_url,
    parse_projects,
)

ALICE = {"X-User-Email": "alice@example.com", "X-User-Name": "Alice"}

PROJECTS = {"projects": [
    {
        "title": "Clinic Appointment Scheduler",
        "description": "Book and manage appointments.",
        "difficulty": "beginner",
        "estimatedDays": 7,
        "features": [{"name": "Booking", "priority": "must-have"}],
        "workflowDiagrams": [
            {"title": "Architecture", "type": "architecture",
             "mermaidCode": "flowchart TB\\n    A[Client] --> B[API]"},
            "not a diagram",
        ],
    },
    {
        "title": "Patient Records API",
        "difficulty": "legendary",
        "estimatedDays": "a while",
    },
    {"title": "", "description": "No title"},
    42,
]}


def test_mermaid_image_url_unescapes_and_encodes():
    url = mermaid_image_url("flowchart TB\\n    A --> B")
    assert url.startswith(MERMAID_IMAGE_BASE + "/")
    encoded = url.rsplit("/", 1)[1]
    assert "=" not in encoded
    padded = encoded + "=" * (-len(encoded) % 4)
    assert base64.urlsafe_b64decode(padded).decode() == "flowchart TB\n    A --> B"
    assert mermaid_image_url("   ") == ""

def test_parse_projects_normalizes_and_drops_unusable_items():
    result = parse_projects(json.dumps(PROJECTS), "Python", "Healthcare")
    assert isinstance(result, ProjectsOk)
    first, second = result.projects
    assert (first.technology, first.domain) == ("Python", "Healthcare")
    assert first.estimated_days == 7
    assert len(first.workflow_diagrams) == 1
    assert first.workflow_diagrams[0].image_url.startswith(MERMAID_IMAGE_BASE)
    assert first.created_at.endswith("Z")
    # extra sections written by the AI are kept as-is
    assert first.model_dump(by_alias=True)["features"] == [{"name": "Booking", "priority": "must-have"}]
    assert second.difficulty == "intermediate"
    assert second.estimated_days == 15
    assert first.id != second.id

def test_parse_projects_reports_bad_payloads():
    assert parse_projects("{{", "Python", "Healthcare").kind == "parse_error"
    assert parse_projects('{"items": []}', "Python", "Healthcare").kind == "shape_error"
    empty = parse_projects('{"projects": [{"title": ""}]}', "Python", "Healthcare")
    assert empty.kind == "shape_error"

def test_generate_projects_then_serve_from_cache(client, fake_llm):
    payload = {"technology": "Python", "domain": "Healthcare"}
    assert client.get("/api/projects/generate", params=payload, headers=ALICE).json() == {"exists": False}

    fake_llm.queue(PROJECTS)
    response = client.post("/api/projects/generate", json=payload, headers=ALICE)
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["cached"] is False
    assert [p["title"] for p in data["projects"]] == ["Clinic Appointment Scheduler", "Patient Records API"]
    assert data["projects"][0]["features"] == [{"name": "Booking", "priority": "must-have"}]
    assert "Generate 5 Python portfolio projects for the Healthcare domain." in fake_llm.calls[0][1]["content"]

    assert client.get("/api/projects/generate", params=payload, headers=ALICE).json() == {"exists": True}

    again = client.post("/api/projects/generate", json=payload, headers=ALICE).json()
    assert again["cached"] is True
    assert again["cachedAt"].endswith("Z")
    assert [p["id"] for p in again["projects"]] == [p["id"] for p in data["projects"]]
    assert len(fake_llm.calls) == 1

def test_generate_projects_falls_back_to_the_default_model(client, fake_llm):
    fake_llm.queue(LLMServiceError("context too long"), PROJECTS)
    response = client.post("/api/projects/generate", json={"technology": "Go", "domain": "Fintech"},
                           headers=ALICE)
    assert response.status_code == 200
    assert fake_llm.models == [settings.LLM_QUALITY_MODEL, settings.LLM_MODEL]

def test_generate_projects_ai_failure_is_not_cached(client, fake_llm):
    payload = {"technology": "Go", "domain": "Fintech"}
    response = client.post("/api/projects/generate", json=payload, headers=ALICE)
    assert response.status_code == 502
    assert response.json()["error"]["code"] == "AI_001"
    assert client.get("/api/projects/generate", params=payload, headers=ALICE).json() == {"exists": False}

def test_generate_projects_rejects_unusable_payload(client, fake_llm):
    fake_llm.queue('{"projects": []}')
    response = client.post("/api/projects/generate", json={"technology": "Go", "domain": "Fintech"},
                           headers=ALICE)
    assert response.status_code == 500
    assert response.json()["error"]["code"] == "ERR_001"

def test_exists_check_needs_both_fields(client):
    response = client.get("/api/projects/generate", params={"technology": "Go"}, headers=ALICE)
    assert response.json() == {"exists": False}

def test_projects_require_identity(client):
    response = client.post("/api/projects/generate", json={"technology": "Go", "domain": "Fintech"})
    assert response.status_code == 401
