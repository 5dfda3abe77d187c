from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from mindlog.suggestions.schemas import ExtractionResult


class ExtractionClient(ABC):
    """
    Capability that turns a batch of journal texts into candidate goals, tasks and habits.

    Implementations perform the only outbound network I/O of the pipeline and have
    no retry policy of their own; every failure surfaces as ExtractionError.
    """

    model_tag: str = "unknown"

    @abstractmethod
    def extract(
        self,
        entries: Sequence[Dict[str, Any]],
        existing_goals: Sequence[Dict[str, Any]],
        existing_tasks: Sequence[Dict[str, Any]],
    ) -> ExtractionResult:
        """
        Args:
            entries: [{"content": str, "date": str}] oldest first.
            existing_goals: [{"name": str, "progress": float}]
            existing_tasks: [{"title": str, "completed": bool}]

        Returns:
            ExtractionResult: Candidate goals, tasks and habits.

        Raises:
            ExtractionError: On network, timeout or malformed-response failures.
        """


def as_entry_payload(entries: Sequence[Dict[str, Any]], max_chars: int) -> List[Dict[str, str]]:
    """Trims entry texts to max_chars and stringifies dates."""
    payload: List[Dict[str, str]] = []
    for entry in entries:
        content = (entry.get("content") or "").strip()
        if len(content) > max_chars:
            content = content[:max_chars]
        payload.append({"content": content, "date": str(entry.get("date") or "")})
    return payload
