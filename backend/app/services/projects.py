"""Validation of AI-generated portfolio project ideas.

A project set is generated once per (technology, domain) and cached; see
``app/api/projects.py``.
"""
import base64
import logging
import uuid
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, ValidationError

from app.models.database import utcnow
from app.models.schemas import ProjectSpecification, WorkflowDiagram
from app.services.payloads import PayloadParseError, PayloadShapeError, load_item_list

logger = logging.getLogger(__name__)

PROJECT_COUNT = 5
PROJECT_MAX_TOKENS = 30000
PROJECT_FALLBACK_MAX_TOKENS = 8000
PROJECT_TEMPERATURE = 0.6

# Typical build time in days per difficulty; the low end is the default estimate
DIFFICULTY_DAYS = {
    "beginner": (5, 10),
    "intermediate": (15, 25),
    "advanced": (30, 45),
}

MERMAID_IMAGE_BASE = "https://mermaid.ink/img"


class ProjectsOk(BaseModel):
    kind: Literal["ok"] = "ok"
    projects: List[ProjectSpecification]


ProjectsResult = Union[ProjectsOk, PayloadParseError, PayloadShapeError]


def mermaid_image_url(mermaid_code: str) -> str:
    """PNG rendering URL for a Mermaid diagram (mermaid.ink)"""
    if not mermaid_code or not mermaid_code.strip():
        return ""
    # Models often double-escape the JSON they were shown
    clean = (
        mermaid_code.replace("\\n", "\n")
        .replace('\\"', '"')
        .replace("\\t", "  ")
        .strip()
    )
    encoded = base64.urlsafe_b64encode(clean.encode("utf-8")).decode("ascii").rstrip("=")
    return f"{MERMAID_IMAGE_BASE}/{encoded}"


def _diagram(item: Dict[str, Any]) -> WorkflowDiagram:
    def text(key: str) -> str:
        value = item.get(key)
        return value if isinstance(value, str) else ""

    code = text("mermaidCode")
    return WorkflowDiagram(
        title=text("title"),
        type=text("type") or "architecture",
        description=text("description"),
        mermaid_code=code,
        image_url=mermaid_image_url(code),
    )


def sanitize_project(project: Dict[str, Any], technology: str, domain: str,
                     created_at: str) -> ProjectSpecification:
    """Stamp a raw project with its identity and normalize the typed fields.

    Raises ``ValidationError`` when the title or description is unusable.
    """
    difficulty = project.get("difficulty")
    if difficulty not in DIFFICULTY_DAYS:
        difficulty = "intermediate"

    days = project.get("estimatedDays")
    if isinstance(days, bool) or not isinstance(days, (int, float)) or days < 1:
        days = DIFFICULTY_DAYS[difficulty][0]

    diagrams = project.get("workflowDiagrams")
    diagrams = [_diagram(d) for d in diagrams if isinstance(d, dict)] if isinstance(diagrams, list) else []

    data = dict(project)
    data.update({
        "id": uuid.uuid4().hex,
        "technology": technology,
        "domain": domain,
        "difficulty": difficulty,
        "estimatedDays": int(days),
        "workflowDiagrams": diagrams,
        "createdAt": created_at,
    })
    return ProjectSpecification.model_validate(data)


def parse_projects(raw: Any, technology: str, domain: str) -> ProjectsResult:
    """Validate an AI project payload of the form ``{"projects": [...]}``.

    Projects without a usable title are dropped; an empty result is a shape
    error.
    """
    items = load_item_list(raw, "projects")
    if not isinstance(items, list):
        return items

    created_at = utcnow().isoformat() + "Z"
    projects = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            projects.append(sanitize_project(item, technology, domain, created_at))
        except ValidationError as e:
            logger.warning("Dropping malformed project %r: %s", item.get("title"), e.errors()[:1])

    if not projects:
        return PayloadShapeError(detail="No usable projects in payload")
    logger.debug("Validated %d projects for %s + %s", len(projects), technology, domain)
    return ProjectsOk(projects=projects)
