import json
import logging
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from mindlog.suggestions.errors import ExtractionError
from mindlog.suggestions.schemas import (
    ExtractionResult,
    GoalCandidate,
    HabitCandidate,
    TaskCandidate,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _loads_object(raw: str) -> Any:
    """Parse JSON, tolerating code fences or prose around a single object."""
    s = raw.strip()
    if s.startswith("```"):
        s = s.strip("`\n ")
        if s.lower().startswith("json"):
            s = s[4:]
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        start = s.find("{")
        end = s.rfind("}")
        if start != -1 and end > start:
            return json.loads(s[start : end + 1])
        raise


def _coerce_items(items: List[Any], model: Type[T], label: str) -> List[T]:
    out: List[T] = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning(f"Skipping {label}[{idx}]: expected an object, got {type(item).__name__}")
            continue
        try:
            out.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {label}[{idx}]: {e.errors()[0].get('msg', e)}")
    return out


def parse_extraction_response(raw: str) -> ExtractionResult:
    """
    Turns a raw model response into an ExtractionResult.

    The response as a whole must be a JSON object whose goals/tasks/habits keys,
    when present, are lists. Anything else raises ExtractionError. Inside valid
    lists, malformed items are skipped and logged.

    Args:
        raw (str): Model output text.

    Returns:
        ExtractionResult: The validated candidates.

    Raises:
        ExtractionError: If the response is empty, not JSON, or not the expected shape.
    """
    if not raw or not raw.strip():
        raise ExtractionError("Empty response from extraction model")
    try:
        data = _loads_object(raw)
    except (json.JSONDecodeError, ValueError) as e:
        raise ExtractionError(f"Extraction response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ExtractionError(f"Extraction response must be a JSON object, got {type(data).__name__}")

    lists = {}
    for key in ("goals", "tasks", "habits"):
        value = data.get(key)
        if value is None:
            value = []
        if not isinstance(value, list):
            raise ExtractionError(f"Extraction response field '{key}' must be a list")
        lists[key] = value

    return ExtractionResult(
        goals=_coerce_items(lists["goals"], GoalCandidate, "goals"),
        tasks=_coerce_items(lists["tasks"], TaskCandidate, "tasks"),
        habits=_coerce_items(lists["habits"], HabitCandidate, "habits"),
    )
