import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.errors import BadRequestError
from app.models.database import GeneratedProjectSet, User, get_db
from app.models.schemas import (
    ProjectSpecification,
    ProjectsExistResponse,
    ProjectsRequest,
    ProjectsResponse,
)
from app.services.llm import llm_service

logger = logging.getLogger(__name__)

router = APIRouter()

def _find_cached(db: Session, technology: str, domain: str) -> Optional[GeneratedProjectSet]:
    return db.query(GeneratedProjectSet).filter(
        GeneratedProjectSet.technology == technology,
        GeneratedProjectSet.domain == domain
    ).first()

def _save(db: Session, technology: str, domain: str, projects: List[ProjectSpecification]):
    """Cache a generated set; a failed save only costs the next caller a regeneration"""
    db.add(GeneratedProjectSet(
        technology=technology,
        domain=domain,
        projects_json=json.dumps([p.model_dump(by_alias=True) for p in projects])
    ))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Projects for %s + %s were cached concurrently", technology, domain)

@router.get("/generate", response_model=ProjectsExistResponse)
async def check_projects_exist(
    technology: Optional[str] = Query(None),
    domain: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Whether projects for this technology and domain are already cached"""
    technology = (technology or "").strip()
    domain = (domain or "").strip()
    if not technology or not domain:
        return ProjectsExistResponse(exists=False)
    return ProjectsExistResponse(exists=_find_cached(db, technology, domain) is not None)

@router.post("/generate", response_model=ProjectsResponse, response_model_exclude_none=True)
async def generate_projects(
    request: ProjectsRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Return the cached project ideas for a technology and domain, generating them once"""
    technology = request.technology.strip()
    domain = request.domain.strip()
    if not technology or not domain:
        raise BadRequestError("Missing required fields: technology, domain")

    cached = _find_cached(db, technology, domain)
    if cached is not None:
        logger.info("Serving cached projects for %s + %s", technology, domain)
        return ProjectsResponse(
            projects=[ProjectSpecification.model_validate(p) for p in json.loads(cached.projects_json)],
            cached=True,
            cached_at=cached.created_at.isoformat() + "Z" if cached.created_at else None
        )

    projects = await llm_service.generate_projects(technology, domain)
    _save(db, technology, domain, projects)

    logger.info("Generated %d projects for %s + %s", len(projects), technology, domain)
    return ProjectsResponse(projects=projects)
