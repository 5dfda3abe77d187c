"""
Keyword tables for goal categories and habit frequencies.

Used when the model leaves out a category or frequency, or returns one we do not
recognise. Tables are ordered: the first matching row wins.
"""

import re
from typing import Optional

DEFAULT_GOAL_CATEGORY = "Other"
DEFAULT_HABIT_FREQUENCY = "daily"

GOAL_CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "Fitness": ["workout", "run", "jog", "lift", "gym", "exercise", "marathon", "walk", "yoga"],
    "Nutrition": ["calorie", "protein", "eat", "meal", "diet", "water", "cook", "sugar"],
    "Career": ["resume", "interview", "job", "apply", "portfolio", "network", "promotion"],
    "Learning": ["study", "course", "read", "learn", "exam", "book", "language"],
    "Productivity": ["ship", "focus", "plan", "track", "organize", "declutter", "schedule"],
    "Mindfulness": ["meditat", "journal", "reflect", "gratitude", "breath", "mindful", "therapy"],
    "Social": ["friend", "family", "conversation", "call", "text", "meet", "partner"],
    "Sleep": ["sleep", "bedtime", "wake", "alarm", "rest", "nap"],
    "Finance": ["budget", "save", "invest", "spend", "debt", "money"],
}

HABIT_FREQUENCY_PATTERNS: dict[str, list[str]] = {
    "weekly": [r"\bweekly\b", r"\b(every|each|per|a|once a|twice a) week\b", r"\bweekends?\b"],
    "monthly": [r"\bmonthly\b", r"\b(every|each|per|a|once a) month\b"],
    "daily": [r"\bdaily\b", r"\b(every|each|per|a) (day|morning|evening|night)\b", r"\bnightly\b"],
}

VALID_FREQUENCIES = frozenset(HABIT_FREQUENCY_PATTERNS)

_CATEGORY_BY_LOWER = {c.lower(): c for c in list(GOAL_CATEGORY_KEYWORDS) + [DEFAULT_GOAL_CATEGORY]}


def infer_goal_category(text: str) -> str:
    """Returns the first category with a keyword hit, else "Other"."""
    lowered = (text or "").lower()
    words = re.findall(r"[a-z']+", lowered)
    for category, keywords in GOAL_CATEGORY_KEYWORDS.items():
        if any(word.startswith(kw) for kw in keywords for word in words):
            return category
    return DEFAULT_GOAL_CATEGORY


def resolve_goal_category(hint: Optional[str], text: str) -> str:
    """Keeps a recognised category hint, otherwise infers one from the text."""
    if hint:
        known = _CATEGORY_BY_LOWER.get(hint.strip().lower())
        if known:
            return known
    return infer_goal_category(text)


def infer_habit_frequency(text: str) -> str:
    lowered = (text or "").lower()
    for frequency, patterns in HABIT_FREQUENCY_PATTERNS.items():
        if any(re.search(p, lowered) for p in patterns):
            return frequency
    return DEFAULT_HABIT_FREQUENCY


def resolve_habit_frequency(hint: Optional[str], text: str) -> str:
    if hint and hint.strip().lower() in VALID_FREQUENCIES:
        return hint.strip().lower()
    return infer_habit_frequency(text)
