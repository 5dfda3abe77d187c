from fastapi import HTTPException
from functools import lru_cache
from mindlog.suggestions.errors import ExtractionError
from mindlog.suggestions.providers.base import ExtractionClient
from mindlog.suggestions.providers.openai import OpenAIExtractionClient
import logging

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def default_extraction_client() -> ExtractionClient:
    """Process-wide extraction client. Raises ExtractionError when OpenAI is not configured."""
    return OpenAIExtractionClient()


def get_extraction_client() -> ExtractionClient:
    """
    FastAPI dependency that returns the extraction client, or a 503 when the
    text-generation backend is not configured.
    """
    try:
        return default_extraction_client()
    except ExtractionError as e:
        logger.error(f"Extraction client unavailable: {e}")
        raise HTTPException(
            status_code=503,
            detail="AI suggestions are not available right now. Please contact support to enable AI features.",
        )
