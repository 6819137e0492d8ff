import logging
from pathlib import Path
from typing import List, Optional

from mealplan.domain.Plan import PlanWeek
from mealplan.infra import paths
from mealplan.infra.json_store import atomic_write, read_json

logger = logging.getLogger(__name__)


class PlanRepository:
    """Stores the "current week plan" and re-validates it against the catalog on read."""

    def __init__(self, plan_file: Optional[Path] = None):
        self.plan_file = Path(plan_file) if plan_file else paths.PLAN_FILE

    def get_current_plan(self, catalog=None) -> Optional[PlanWeek]:
        """Load the saved plan, or None when no plan has been generated yet.

        When a catalog is given every day is checked with resolve_plan, so
        days whose recipe vanished come back flagged instead of dropped.
        """
        data = read_json(self.plan_file, None)
        if not isinstance(data, dict) or "start" not in data:
            return None
        try:
            plan = PlanWeek.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Stored plan in %s is unreadable: %s", self.plan_file, e)
            return None
        if catalog is not None:
            resolve_plan(plan, catalog)
        return plan

    def save_current_plan(self, plan: PlanWeek) -> None:
        atomic_write(self.plan_file, plan.to_dict())

    def replace_day(self, plan: PlanWeek, day_index: int, recipe, reasons: Optional[List[str]] = None) -> PlanWeek:
        """Swap the recipe on one day and persist.

        A leftover day that follows the replaced bulk day stops being leftovers
        of a recipe that is no longer cooked, so it is swapped along with it.
        """
        if not 0 <= day_index < len(plan.days):
            raise IndexError(f"No day {day_index} in plan of {len(plan.days)} days")
        day = plan.days[day_index]
        old_recipe_id = day.recipe_id
        _assign(day, recipe, reasons)
        day.bulk = False
        day.leftover = False
        day.notes = None
        next_index = day_index + 1
        if next_index < len(plan.days):
            follower = plan.days[next_index]
            if follower.leftover and follower.recipe_id == old_recipe_id:
                _assign(follower, recipe, reasons)
                day.bulk = True
        plan.suggested_swaps.pop(day_index, None)
        plan.recompute_cost()
        self.save_current_plan(plan)
        return plan


def _assign(day, recipe, reasons):
    day.recipe_id = recipe.id
    day.cost_estimate = round(recipe.cost_for(day.scaled_servings), 2)
    day.reasons = list(reasons or [])
    day.missing = False


def resolve_plan(plan: PlanWeek, catalog) -> List[int]:
    """Flag days whose recipe id no longer resolves in the catalog.

    Returns the indices of unresolved days. The caller is expected to ask
    the user to pick a replacement for them.
    """
    unresolved = []
    for i, day in enumerate(plan.days):
        if catalog.get_by_id(day.recipe_id) is None:
            day.missing = True
            unresolved.append(i)
            logger.warning("Plan %s day %s: recipe %s not found in catalog",
                           plan.start.isoformat(), day.date.isoformat(), day.recipe_id)
        else:
            day.missing = False
    if unresolved:
        plan.recompute_cost()
    return unresolved
