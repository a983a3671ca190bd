import math
import re
from typing import Iterable, List, Optional

INTEGER_PATTERN = re.compile(r"-?\d+")


def extract_question_text(question) -> str:
    """Return the first usable heading of a raw question, or an empty string"""
    headings = getattr(question, "headings", None) or []
    if headings and headings[0].heading:
        return str(headings[0].heading)
    heading = getattr(question, "heading", None)
    if heading:
        return str(heading)
    return ""


def extract_integer(text: str) -> Optional[int]:
    """First signed integer in a label, e.g. '1 - Strongly Disagree' -> 1"""
    match = INTEGER_PATTERN.search(text or "")
    if not match:
        return None
    return int(match.group(0))


def contains_any(text: str, markers: Iterable[str]) -> bool:
    value = (text or "").lower()
    return any(marker in value for marker in markers)


def clamp_unit(value) -> Optional[float]:
    """Clamp an untrusted number into [0, 1]; None for anything that is not a finite number"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        # ints beyond float range are still finite, so they clamp to the nearer bound
        return 1.0 if value > 0 else 0.0
    if not math.isfinite(number):
        return None
    return min(1.0, max(0.0, number))


def clean_feedback(items) -> List[str]:
    if not isinstance(items, (list, tuple)):
        return []
    cleaned = ["" if item is None else str(item).strip() for item in items]
    return [item for item in cleaned if item]


def join_feedback(items) -> str:
    return "\n".join(clean_feedback(items))
