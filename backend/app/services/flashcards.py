import logging
import uuid
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel

from app.models.schemas import FlashCard
from app.services.payloads import PayloadParseError, PayloadShapeError, load_item_list

logger = logging.getLogger(__name__)

DEFAULT_CARD_COUNT = 10
FLASHCARD_MAX_TOKENS = 8000
FLASHCARD_TEMPERATURE = 0.7

# Suggested topics per technology, offered to the study UI
TECH_TOPICS: Dict[str, List[str]] = {
    "React": ["Hooks", "State Management", "Component Lifecycle", "Performance", "Context API", "Redux", "Testing"],
    "JavaScript": ["ES6+", "Async/Await", "Closures", "Prototypes", "DOM", "Event Loop", "Modules"],
    "TypeScript": ["Types", "Interfaces", "Generics", "Decorators", "Utility Types", "Type Guards"],
    "Node.js": ["Express", "Middleware", "Streams", "File System", "REST API", "Authentication"],
    "Python": ["Data Structures", "OOP", "Decorators", "Generators", "Async", "Testing"],
    "SQL": ["Queries", "Joins", "Indexes", "Transactions", "Normalization", "Performance"],
    "System Design": ["Scalability", "Load Balancing", "Caching", "Databases", "Microservices"],
    "Data Structures": ["Arrays", "Trees", "Graphs", "Hash Tables", "Stacks", "Queues"],
    "Algorithms": ["Sorting", "Searching", "Dynamic Programming", "Recursion", "Big O"],
}

VALID_DIFFICULTIES = ("easy", "medium", "hard")


class FlashCardsOk(BaseModel):
    kind: Literal["ok"] = "ok"
    cards: List[FlashCard]


FlashCardsResult = Union[FlashCardsOk, PayloadParseError, PayloadShapeError]


def _optional_text(value: Any) -> Optional[str]:
    return value.strip() if isinstance(value, str) and value.strip() else None


def sanitize_card(card: Dict[str, Any], technology: str, topic: str) -> FlashCard:
    """Fill in whatever the AI left out of a single card"""
    tags = card.get("tags")
    if isinstance(tags, list) and tags:
        tags = [str(tag) for tag in tags if tag is not None]
    else:
        tags = [technology, topic]
    difficulty = card.get("difficulty")
    card_id = card.get("id")

    return FlashCard(
        id=str(card_id) if card_id not in (None, "") else uuid.uuid4().hex,
        front=_optional_text(card.get("front")) or "Question not available",
        back=_optional_text(card.get("back")) or "Answer not available",
        difficulty=difficulty if difficulty in VALID_DIFFICULTIES else "medium",
        tags=tags,
        hint=_optional_text(card.get("hint")),
        code_snippet=_optional_text(card.get("codeSnippet")),
    )


def parse_flashcards(raw: Any, technology: str, topic: str) -> FlashCardsResult:
    """Validate an AI flash card payload of the form ``{"cards": [...]}``."""
    items = load_item_list(raw, "cards")
    if not isinstance(items, list):
        return items

    cards = [sanitize_card(item, technology, topic) for item in items if isinstance(item, dict)]
    logger.debug("Processed %d flash cards for %s - %s", len(cards), technology, topic)
    return FlashCardsOk(cards=cards)
