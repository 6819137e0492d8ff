"""Week composer: builds a PlanWeek from the catalog and household settings.

compose_week is a pure function of its inputs. Recency comes in through
recent_recipe_ids and recording the result in the history is left to the
caller, so composing twice with the same inputs gives the same plan.
"""
import logging
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from mealplan.domain.Household import Household
from mealplan.domain.Plan import PlanDay, PlanWeek
from mealplan.domain.Recipe import Recipe
from mealplan.domain.WeeklyOverrides import WeeklyOverrides
from mealplan.logic.planning.scoring import ScoringContext, score_and_rank
from mealplan.logic.planning.swaps import suggest_swaps
from mealplan.logic.shopping.names import ingredient_key
from mealplan.utilities.constants import (
    CANDIDATES_TO_SCORE_PER_SLOT,
    DEFAULT_DINNERS_PER_WEEK,
    DEFAULT_SERVINGS_PER_MEAL,
    KID_FRIENDLY_MIN_OPTIONS,
    LEFTOVER_NOTE,
    LEFTOVERS_MIN_DINNERS,
    MAX_REASONS_PER_DAY,
)

logger = logging.getLogger(__name__)


def next_monday(today: Optional[date] = None) -> date:
    """Monday of next week (a Monday maps to the following Monday)."""
    today = today or date.today()
    return today + timedelta(days=7 - today.weekday())


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def get_candidates_for_day(catalog, context: ScoringContext, exclude_ids: Iterable[str]) -> List[Recipe]:
    """Catalog search for one slot.

    Weeknights are bounded by the relaxed search bound. When kid-friendly
    weeknights are requested and enough kid-friendly options exist, only
    those are kept; otherwise scoring penalises the rest.
    """
    max_time = None if context.is_weekend else context.search_bound
    candidates = catalog.search(max_time=max_time, exclude_ids=exclude_ids)
    if not context.is_weekend and context.kid_friendly_required:
        kid_friendly = [r for r in candidates if r.kid_friendly]
        if len(kid_friendly) >= KID_FRIENDLY_MIN_OPTIONS:
            candidates = kid_friendly
    return candidates


def compose_week(catalog, household: Household, overrides: Optional[WeeklyOverrides] = None, *,
                 recent_recipe_ids: Iterable[str] = (), start: Optional[date] = None) -> PlanWeek:
    overrides = overrides or WeeklyOverrides()
    start = start or overrides.week_of or next_monday()
    dinners = overrides.dinners or DEFAULT_DINNERS_PER_WEEK
    servings = overrides.servings_per_meal or household.total_servings or DEFAULT_SERVINGS_PER_MEAL
    kid_friendly = overrides.kid_friendly_weeknights
    week_household = household.with_diet_adjust(overrides.diet_adjust)
    recent = list(recent_recipe_ids)

    days: List[PlanDay] = []
    conflicts: List[str] = []
    selected: List[Recipe] = []
    protein_counts: Dict[str, int] = {}
    ingredient_counts: Dict[str, int] = {}
    leftovers_enabled = dinners >= LEFTOVERS_MIN_DINNERS and household.leftover_friendly
    bulk_day: Optional[PlanDay] = None
    bulk_recipe: Optional[Recipe] = None

    for i in range(dinners):
        day_date = start + timedelta(days=i)
        weekend = is_weekend(day_date)

        if leftovers_enabled and bulk_day is not None and days and days[-1] is bulk_day:
            days.append(PlanDay(
                date=day_date,
                recipe_id=bulk_day.recipe_id,
                scaled_servings=servings,
                cost_estimate=round(bulk_recipe.cost_for(servings), 2),
                notes=LEFTOVER_NOTE,
                leftover=True,
            ))
            continue

        context = ScoringContext(
            week_household,
            is_weekend=weekend,
            kid_friendly_required=kid_friendly,
            selected_recipes=selected,
            protein_counts=protein_counts,
            ingredient_counts=ingredient_counts,
            recent_recipe_ids=recent,
        )
        candidates = get_candidates_for_day(catalog, context, [r.id for r in selected])
        ranked = score_and_rank(candidates, context, CANDIDATES_TO_SCORE_PER_SLOT)
        if not ranked:
            reason = "No suitable recipes found" if not candidates else "All candidates filtered out"
            conflicts.append(f"{reason} for {day_date.strftime('%A')} {day_date.isoformat()} (day {i + 1})")
            logger.warning("Composer: %s for day %d of week %s", reason.lower(), i + 1, start.isoformat())
            continue

        recipe, explanation = ranked[0]
        make_bulk = (leftovers_enabled and bulk_day is None and i < dinners - 1
                     and not weekend and recipe.bulk_cook)
        day = PlanDay(
            date=day_date,
            recipe_id=recipe.id,
            scaled_servings=servings,
            cost_estimate=round(recipe.cost_for(servings), 2),
            bulk=make_bulk,
            reasons=explanation.reasons[:MAX_REASONS_PER_DAY],
        )
        days.append(day)
        if make_bulk:
            bulk_day, bulk_recipe = day, recipe

        selected.append(recipe)
        protein = recipe.protein_type()
        if protein:
            protein_counts[protein] = protein_counts.get(protein, 0) + 1
        for ing in recipe.ingredients:
            key = ingredient_key(ing.name)
            ingredient_counts[key] = ingredient_counts.get(key, 0) + 1

    week_ids = [r.id for r in selected]
    swaps: Dict[int, List[str]] = {}
    for index, day in enumerate(days):
        if day.leftover:
            continue
        others = [rid for rid in week_ids if rid != day.recipe_id]
        swaps[index] = [r.id for r in suggest_swaps(
            catalog, day.recipe_id,
            is_weekend=is_weekend(day.date),
            kid_friendly=kid_friendly,
            household=week_household,
            exclude_ids=others,
            recent_recipe_ids=recent,
        )]

    plan = PlanWeek(start=start, days=days, conflicts=conflicts, suggested_swaps=swaps)
    plan.cost_estimate = round(sum(_day_costs(days, selected)), 2)
    logger.info("Composed week %s: %d dinners, %d conflicts, $%.2f",
                start.isoformat(), len(days), len(conflicts), plan.cost_estimate)
    return plan


def _day_costs(days: List[PlanDay], selected: List[Recipe]):
    by_id = {r.id: r for r in selected}
    for day in days:
        yield (by_id[day.recipe_id].cost_per_serve_est or 0) * day.scaled_servings
