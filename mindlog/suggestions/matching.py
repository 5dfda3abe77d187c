"""
Text normalization and approximate duplicate detection for suggestions.

Both sides of every comparison go through `normalize`, so stored and incoming
texts are always compared in the same canonical form.
"""

import re
import string
from typing import Iterable, Optional

_WHITESPACE_RE = re.compile(r"\s+")
_EDGE_PUNCTUATION = string.punctuation + "‘’“”…–—"

# Stems of activities that show up constantly in wellness suggestions. Two texts
# sharing one of these are treated as the same item.
STRONG_KEYWORD_STEMS: tuple[str, ...] = (
    "meditat",
    "read",
    "walk",
    "water",
    "hydrat",
    "run",
    "jog",
    "sleep",
    "journal",
    "gratitud",
    "exercis",
    "workout",
    "stretch",
    "yoga",
)


def normalize(text: Optional[str]) -> str:
    """Lower-case, trim, collapse whitespace and strip edge punctuation."""
    if not text:
        return ""
    canonical = _WHITESPACE_RE.sub(" ", text.casefold()).strip()
    return canonical.strip(_EDGE_PUNCTUATION + " ")


def _keyword_stems(canonical: str) -> set[str]:
    tokens = canonical.replace("/", " ").replace("-", " ").split()
    return {
        stem
        for token in tokens
        for stem in STRONG_KEYWORD_STEMS
        if token.strip(_EDGE_PUNCTUATION).startswith(stem)
    }


def is_same_item(candidate: str, existing: str) -> bool:
    """Compare two already-normalized texts."""
    if not candidate or not existing:
        return False
    if candidate == existing:
        return True
    if candidate in existing or existing in candidate:
        return True
    return bool(_keyword_stems(candidate) & _keyword_stems(existing))


def is_duplicate(candidate_text: str, existing_texts: Iterable[str]) -> bool:
    """
    Decides whether a candidate is the same item as any existing text.

    Matches on equal canonical forms, substring containment in either direction,
    or a shared strong keyword stem. Short texts match broadly: "Read" and
    "Read to kids" are the same item.

    Args:
        candidate_text (str): Raw or normalized candidate text.
        existing_texts (Iterable[str]): Raw or normalized texts already present.

    Returns:
        bool: True if the candidate duplicates any existing text.
    """
    candidate = normalize(candidate_text)
    if not candidate:
        return False
    return any(is_same_item(candidate, normalize(existing)) for existing in existing_texts)


def find_match(candidate_text: str, existing_texts: Iterable[str]) -> Optional[str]:
    """Returns the first existing text the candidate duplicates, or None."""
    candidate = normalize(candidate_text)
    if not candidate:
        return None
    for existing in existing_texts:
        if is_same_item(candidate, normalize(existing)):
            return existing
    return None
