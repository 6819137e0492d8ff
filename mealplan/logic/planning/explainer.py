"""Turns scoring reason codes into display chips."""
from typing import Dict, List

from mealplan.utilities.constants import MAX_REASONS_PER_DAY

REASON_CHIPS: Dict[str, Dict[str, str]] = {
    "favorite": {"text": "Your favorite", "variant": "success"},
    "≤30m": {"text": "Ready in 30 min", "variant": "success"},
    "≤40m": {"text": "Ready in 40 min", "variant": "default"},
    "quick": {"text": "Quick", "variant": "success"},
    "best value": {"text": "Best value", "variant": "success"},
    "kid-friendly": {"text": "Kid-friendly", "variant": "info"},
    "bulk cook": {"text": "Bulk cook", "variant": "info"},
    "reuses ingredients": {"text": "Reuses ingredients", "variant": "info"},
    "high-protein": {"text": "High protein", "variant": "info"},
    "vegetarian": {"text": "Vegetarian", "variant": "info"},
}

PRIORITY = ["favorite", "≤30m", "quick", "best value", "kid-friendly", "bulk cook",
            "reuses ingredients", "high-protein", "≤40m", "vegetarian"]


def explain_reasons(reasons: List[str], max_chips: int = MAX_REASONS_PER_DAY) -> List[Dict[str, str]]:
    """Known reasons as chips, highest priority first. Unknown codes are skipped."""
    known = [r for r in dict.fromkeys(reasons) if r in REASON_CHIPS]
    known.sort(key=PRIORITY.index)
    return [dict(REASON_CHIPS[r]) for r in known[:max_chips]]
