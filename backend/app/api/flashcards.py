import logging
from typing import Dict, List

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user
from app.errors import BadRequestError
from app.models.database import User
from app.models.schemas import FlashCardsRequest, FlashCardsResponse
from app.services.flashcards import TECH_TOPICS
from app.services.llm import llm_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/topics", response_model=Dict[str, List[str]])
async def get_topics(user: User = Depends(get_current_user)):
    """Suggested study topics per technology"""
    return TECH_TOPICS

@router.post("/generate", response_model=FlashCardsResponse, response_model_exclude_none=True)
async def generate_flashcards(
    request: FlashCardsRequest,
    user: User = Depends(get_current_user)
):
    """Generate study flash cards; AI failures come back as ``success: false``"""
    technology = request.technology.strip()
    topic = request.topic.strip()
    if not technology or not topic:
        raise BadRequestError("Missing required fields: technology, topic")

    logger.info("Flash cards requested by user %s: %s - %s (%d cards)",
                user.id, technology, topic, request.count)
    return await llm_service.generate_flashcards(
        technology=technology,
        topic=topic,
        count=request.count
    )
