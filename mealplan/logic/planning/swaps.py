"""Swap suggestions: alternatives for a planned dinner."""
from typing import Iterable, List, Optional

from mealplan.domain.Household import Household
from mealplan.domain.Recipe import Recipe
from mealplan.logic.planning.scoring import ScoringContext, score_and_rank
from mealplan.utilities.constants import (
    DEFAULT_WEEKNIGHT_MAX_MINS,
    MAX_SUGGESTED_SWAPS,
    WEEKNIGHT_SEARCH_SLACK_MINS,
)


def suggest_swaps(catalog, current_recipe_id: str, is_weekend: bool = False, kid_friendly: bool = True,
                  household: Optional[Household] = None, exclude_ids: Iterable[str] = (),
                  max_count: int = MAX_SUGGESTED_SWAPS, recent_recipe_ids: Iterable[str] = ()) -> List[Recipe]:
    """Up to max_count alternatives for current_recipe_id.

    Recipes by the same chef come first, then the rest of the catalog. The
    current recipe and exclude_ids are never suggested. With a household the
    candidates in each group are scored and ineligible ones dropped; without
    one they keep catalog order. When current_recipe_id is no longer in the
    catalog there is no chef to match, so only the general group is offered.
    """
    if max_count <= 0:
        return []
    current = catalog.get_by_id(current_recipe_id)

    cap = household.weeknight_cap if household else DEFAULT_WEEKNIGHT_MAX_MINS
    max_time = None if is_weekend else cap + WEEKNIGHT_SEARCH_SLACK_MINS
    excluded = {current_recipe_id, *exclude_ids}

    same_chef: List[Recipe] = []
    if current is not None and current.source.chef:
        same_chef = catalog.search(chef=current.source.chef, max_time=max_time, exclude_ids=excluded)
    others = catalog.search(max_time=max_time, exclude_ids=excluded | {r.id for r in same_chef})

    if household is not None:
        context = ScoringContext(
            household,
            is_weekend=is_weekend,
            kid_friendly_required=kid_friendly,
            selected_recipes=[current] if current is not None else [],
            recent_recipe_ids=recent_recipe_ids,
        )
        groups = [[r for r, _ in score_and_rank(group, context)] for group in (same_chef, others)]
    else:
        groups = [same_chef, others]
        if kid_friendly and not is_weekend:
            groups = [sorted(group, key=lambda r: not r.kid_friendly) for group in groups]

    return (groups[0] + groups[1])[:max_count]
