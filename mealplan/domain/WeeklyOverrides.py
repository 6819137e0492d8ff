"""Per-week adjustments layered on top of the household defaults."""
from datetime import date
from typing import Dict, List, Optional

from mealplan.domain.Ingredient import PantryItem
from mealplan.utilities.constants import DEFAULT_DINNERS_PER_WEEK, MAX_DINNERS_PER_WEEK


class WeeklyOverrides:
    def __init__(self, week_of: Optional[date] = None, dinners: int = DEFAULT_DINNERS_PER_WEEK,
                 servings_per_meal: Optional[int] = None, kid_friendly_weeknights: bool = True,
                 diet_adjust: Optional[Dict[str, bool]] = None,
                 pantry_adds: Optional[List[PantryItem]] = None):
        if not 1 <= dinners <= MAX_DINNERS_PER_WEEK:
            raise ValueError(f"Dinner count must be between 1 and {MAX_DINNERS_PER_WEEK}: {dinners}")
        self.week_of = week_of
        self.dinners = dinners
        self.servings_per_meal = servings_per_meal
        self.kid_friendly_weeknights = kid_friendly_weeknights
        self.diet_adjust = dict(diet_adjust or {})
        self.pantry_adds = pantry_adds[:] if pantry_adds else []

    def __str__(self) -> str:
        return f"Overrides week_of={self.week_of} dinners={self.dinners} servings={self.servings_per_meal}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "WeeklyOverrides":
        d = dict(data)
        week_of = d.get("week_of")
        return WeeklyOverrides(
            week_of=date.fromisoformat(week_of) if isinstance(week_of, str) and week_of else week_of,
            dinners=int(d.get("dinners", DEFAULT_DINNERS_PER_WEEK)),
            servings_per_meal=d.get("servings_per_meal"),
            kid_friendly_weeknights=bool(d.get("kid_friendly_weeknights", True)),
            diet_adjust=d.get("diet_adjust"),
            pantry_adds=[PantryItem.from_dict(p) for p in d.get("pantry_adds", [])],
        )

    def to_dict(self):
        return {
            "week_of": self.week_of.isoformat() if self.week_of else None,
            "dinners": self.dinners,
            "servings_per_meal": self.servings_per_meal,
            "kid_friendly_weeknights": self.kid_friendly_weeknights,
            "diet_adjust": self.diet_adjust,
            "pantry_adds": [p.to_dict() for p in self.pantry_adds],
        }
