from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from openai import OpenAI, OpenAIError, APITimeoutError

import mindlog.suggestions.prompts as prompts
from mindlog.core.config import (
    EXTRACTION_MAX_TOKENS,
    EXTRACTION_TIMEOUT_SECONDS,
    OPENAI_API_KEY,
    OPENAI_CHAT_MODEL,
)
from mindlog.suggestions.errors import ExtractionError
from mindlog.suggestions.providers.base import ExtractionClient, as_entry_payload
from mindlog.suggestions.providers.parsing import parse_extraction_response
from mindlog.suggestions.schemas import ExtractionResult

logger = logging.getLogger(__name__)

EXTRACTION_JSON_SCHEMA: dict[str, Any] = {
    "name": "journal_suggestions",
    "schema": {
        "type": "object",
        "properties": {
            "goals": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string"},
                        "description": {"type": "string"},
                        "category": {"type": "string"},
                    },
                    "required": ["name", "description", "category"],
                    "additionalProperties": False,
                },
            },
            "tasks": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "description": {"type": "string"},
                        "goal": {"type": ["string", "null"]},
                    },
                    "required": ["title", "description", "goal"],
                    "additionalProperties": False,
                },
            },
            "habits": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "description": {"type": "string"},
                        "frequency": {"type": "string", "enum": ["daily", "weekly", "monthly"]},
                    },
                    "required": ["title", "description", "frequency"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["goals", "tasks", "habits"],
        "additionalProperties": False,
    },
}


class OpenAIExtractionClient(ExtractionClient):
    """Extraction over the OpenAI chat completions API."""

    model_tag = "chatgpt"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = EXTRACTION_TIMEOUT_SECONDS,
        max_tokens: int = EXTRACTION_MAX_TOKENS,
        client: Optional[OpenAI] = None,
    ):
        self.model = model or OPENAI_CHAT_MODEL
        self.max_tokens = max_tokens
        if not self.model:
            raise ExtractionError("Missing OPENAI_CHAT_MODEL in environment")
        if client is None:
            key = api_key or OPENAI_API_KEY
            if not key:
                raise ExtractionError("Missing OPENAI_API_KEY in environment")
            # No SDK retries; a timed out call fails the run.
            client = OpenAI(api_key=key, timeout=timeout, max_retries=0)
        self._client = client

    def build_messages(
        self,
        entries: Sequence[Dict[str, Any]],
        existing_goals: Sequence[Dict[str, Any]],
        existing_tasks: Sequence[Dict[str, Any]],
    ) -> List[dict[str, str]]:
        goals_slim = [
            {"name": g.get("name", ""), "progress": float(g.get("progress") or 0.0)}
            for g in existing_goals
        ]
        tasks_slim = [
            {"title": t.get("title", ""), "completed": bool(t.get("completed"))}
            for t in existing_tasks
        ]
        user_prompt = prompts.EXTRACTION_USER_TEMPLATE.format(
            entries_json=json.dumps(as_entry_payload(entries, prompts.MAX_ENTRY_CHARS), ensure_ascii=False),
            goals_json=json.dumps(goals_slim, ensure_ascii=False),
            tasks_json=json.dumps(tasks_slim, ensure_ascii=False),
        )
        return [
            {"role": "system", "content": prompts.EXTRACTION_SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt},
        ]

    def extract(
        self,
        entries: Sequence[Dict[str, Any]],
        existing_goals: Sequence[Dict[str, Any]],
        existing_tasks: Sequence[Dict[str, Any]],
    ) -> ExtractionResult:
        """Run one chat completion for the batch and parse the structured result."""
        messages = self.build_messages(entries, existing_goals, existing_tasks)
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=0.0,
                response_format={"type": "json_schema", "json_schema": EXTRACTION_JSON_SCHEMA},
            )
        except APITimeoutError as e:
            logger.error(f"OpenAI extraction timed out: {e}")
            raise ExtractionError("Extraction request timed out") from e
        except OpenAIError as e:
            logger.error(f"OpenAI extraction request failed: {e}")
            raise ExtractionError(f"Extraction request failed: {e}") from e

        if not resp.choices:
            raise ExtractionError("Extraction response contained no choices")
        content = resp.choices[0].message.content or ""
        result = parse_extraction_response(content)
        logger.info(
            f"Extracted {len(result.goals)} goals, {len(result.tasks)} tasks, "
            f"{len(result.habits)} habits from {len(entries)} entries"
        )
        return result
