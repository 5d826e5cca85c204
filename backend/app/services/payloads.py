"""Reading untrusted JSON payloads returned by the AI"""
import json
from typing import Any, List, Literal, Union

from pydantic import BaseModel


class PayloadParseError(BaseModel):
    kind: Literal["parse_error"] = "parse_error"
    detail: str


class PayloadShapeError(BaseModel):
    kind: Literal["shape_error"] = "shape_error"
    detail: str


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` block some models still emit"""
    cleaned = raw.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def load_item_list(raw: Any, key: str) -> Union[List[Any], PayloadParseError, PayloadShapeError]:
    """Return the list stored under ``key`` in a JSON object payload"""
    if not isinstance(raw, str):
        return PayloadParseError(detail="Response was not text")
    try:
        payload = json.loads(strip_code_fences(raw))
    except ValueError as e:
        return PayloadParseError(detail=f"Invalid JSON: {e}")

    if not isinstance(payload, dict):
        return PayloadShapeError(detail="Payload must be a JSON object")
    items = payload.get(key)
    if not isinstance(items, list):
        return PayloadShapeError(detail=f"Missing {key} array; keys found: {sorted(payload)}")
    return items
