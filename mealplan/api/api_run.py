from fastapi import (
    FastAPI,
    Query,
    HTTPException,
    Response,
    Body
)
from pydantic import BaseModel
from datetime import date as _date
from typing import Any, Dict, Optional
import logging

from mealplan.domain.Plan import PlanWeek
from mealplan.infra.pdf_utils import generate_pdf_for_week
from mealplan.infra.Household_Repository import HouseholdRepository
from mealplan.infra.Plan_Repository import PlanRepository
from mealplan.infra.Recipe_History import RecipeHistory
from mealplan.infra.Recipe_Repository import RecipeRepository
from mealplan.logic.planning.composer import compose_week, is_weekend, next_monday
from mealplan.logic.planning.explainer import explain_reasons
from mealplan.logic.planning.swaps import suggest_swaps
from mealplan.logic.shopping.aggregator import aggregate_shopping_list
from mealplan.utilities.export_import import DataExporter, DataImporter, shopping_list_to_csv
from mealplan.utilities.validators import HouseholdInput, OverridesInput, SwapRequest

# Routers
from mealplan.api.routes import recipes
from mealplan.api.api_ai import router as ai_router

# Logging
logger = logging.getLogger("mealplan_app")

# Initialize FastAPI app
app = FastAPI(title="Family Meal Planner API")

# Include routers
app.include_router(recipes.router)
app.include_router(ai_router)


class PlanGenerateInput(BaseModel):
    week_of: Optional[_date] = None


# -------------------- Helpers --------------------
def _plan_response(plan: PlanWeek, catalog: RecipeRepository) -> Dict[str, Any]:
    """Plan JSON plus the days that need a replacement and display chips per day."""
    data = plan.to_dict()
    data["unresolved_days"] = plan.unresolved_days()
    for day_data, day in zip(data["days"], plan.days):
        recipe = None if day.missing else catalog.get_by_id(day.recipe_id)
        day_data["title"] = recipe.title if recipe else None
        day_data["chips"] = explain_reasons(day.reasons)
    return data


def _current_plan_or_404(catalog: RecipeRepository) -> PlanWeek:
    plan = PlanRepository().get_current_plan(catalog)
    if plan is None:
        raise HTTPException(status_code=404, detail="No plan generated yet")
    return plan


def _other_recipe_ids(plan: PlanWeek, day_index: int):
    """Recipes planned on the other days, not counting leftovers of this day's recipe."""
    current = plan.days[day_index].recipe_id
    return [rid for i, rid in enumerate(plan.recipe_ids()) if i != day_index and rid != current]


def _week_pantry(plan: PlanWeek):
    households = HouseholdRepository()
    pantry = list(households.get_household().pantry)
    overrides = households.get_overrides(plan.start)
    if overrides:
        pantry.extend(overrides.pantry_adds)
    return pantry


# -------------------- HOUSEHOLD --------------------
@app.get("/api/household")
def get_household():
    return HouseholdRepository().get_household().to_dict()


@app.put("/api/household")
def put_household(body: HouseholdInput):
    repo = HouseholdRepository()
    household = body.to_household(repo.get_household().id)
    repo.save_household(household)
    logger.info("Household settings saved: %s", household)
    return household.to_dict()


# -------------------- WEEKLY OVERRIDES --------------------
@app.get("/api/overrides/{week_of}")
def get_overrides(week_of: _date):
    overrides = HouseholdRepository().get_overrides(week_of)
    if overrides is None:
        household = HouseholdRepository().get_household()
        return OverridesInput(servings_per_meal=household.total_servings).to_overrides(week_of).to_dict()
    return overrides.to_dict()


@app.put("/api/overrides/{week_of}")
def put_overrides(week_of: _date, body: OverridesInput):
    overrides = body.to_overrides(week_of)
    HouseholdRepository().save_overrides(overrides)
    return overrides.to_dict()


# -------------------- PLAN --------------------
@app.post("/api/plan/generate")
def generate_plan(body: Optional[PlanGenerateInput] = None):
    catalog = RecipeRepository()
    households = HouseholdRepository()
    history = RecipeHistory()

    household = households.get_household()
    week_of = (body.week_of if body else None) or next_monday()
    overrides = households.get_overrides(week_of)
    plan = compose_week(catalog, household, overrides,
                        recent_recipe_ids=history.recent_recipe_ids(week_of), start=week_of)

    PlanRepository().save_current_plan(plan)
    history.record_week(week_of, [d.recipe_id for d in plan.days if not d.leftover])
    logger.info("Generated plan for week %s with %d days", week_of.isoformat(), len(plan.days))
    return _plan_response(plan, catalog)


@app.get("/api/plan/current")
def current_plan():
    catalog = RecipeRepository()
    return _plan_response(_current_plan_or_404(catalog), catalog)


@app.get("/api/plan/swaps/{day_index}")
def plan_swaps(day_index: int):
    catalog = RecipeRepository()
    plan = _current_plan_or_404(catalog)
    if not 0 <= day_index < len(plan.days):
        raise HTTPException(status_code=404, detail=f"No day {day_index} in the current plan")
    day = plan.days[day_index]
    households = HouseholdRepository()
    overrides = households.get_overrides(plan.start)
    swaps = suggest_swaps(
        catalog, day.recipe_id,
        is_weekend=is_weekend(day.date),
        kid_friendly=overrides.kid_friendly_weeknights if overrides else True,
        household=households.get_household(),
        exclude_ids=_other_recipe_ids(plan, day_index),
        recent_recipe_ids=RecipeHistory().recent_recipe_ids(plan.start),
    )
    return {"day_index": day_index, "current": day.recipe_id, "swaps": [r.to_dict() for r in swaps]}


@app.post("/api/plan/swap")
def swap_day(body: SwapRequest):
    catalog = RecipeRepository()
    plan = _current_plan_or_404(catalog)
    if body.day_index >= len(plan.days):
        raise HTTPException(status_code=404, detail=f"No day {body.day_index} in the current plan")
    recipe = catalog.get_by_id(body.recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe {body.recipe_id} not found")
    if recipe.id in _other_recipe_ids(plan, body.day_index):
        raise HTTPException(status_code=409, detail=f"Recipe {recipe.id} is already planned this week")
    plan = PlanRepository().replace_day(plan, body.day_index, recipe)
    logger.info("Swapped day %d of week %s to %s", body.day_index, plan.start.isoformat(), recipe.id)
    return _plan_response(plan, catalog)


# -------------------- SHOPPING LIST --------------------
@app.get("/api/shopping-list")
def shopping_list(exclude_pantry_staples: bool = Query(default=False)):
    catalog = RecipeRepository()
    plan = _current_plan_or_404(catalog)
    result = aggregate_shopping_list(plan, catalog, _week_pantry(plan),
                                     exclude_pantry_staples=exclude_pantry_staples)
    data = result.to_dict()
    data["week_of"] = plan.start.isoformat()
    data["unresolved_days"] = plan.unresolved_days()
    return data


@app.get("/api/shopping-list.csv")
def shopping_list_csv(exclude_pantry_staples: bool = Query(default=False)):
    catalog = RecipeRepository()
    plan = _current_plan_or_404(catalog)
    result = aggregate_shopping_list(plan, catalog, _week_pantry(plan),
                                     exclude_pantry_staples=exclude_pantry_staples)
    return Response(
        content=shopping_list_to_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="shopping-list-{plan.start.isoformat()}.csv"'},
    )


# -------------------- EXPORT / IMPORT --------------------
@app.get("/api/export")
def export_data():
    return DataExporter().export_all()


@app.post("/api/import")
def import_data(payload: Dict[str, Any] = Body(...), merge: bool = Query(default=True)):
    try:
        summary = DataImporter().import_all(payload, merge=merge)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "ok", "imported": summary}


@app.get("/export_pdf")
def export_pdf():
    catalog = RecipeRepository()
    plan = _current_plan_or_404(catalog)
    pdf_bytes = generate_pdf_for_week(plan, catalog)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="meal_plan_{plan.start.isoformat()}.pdf"'},
    )
