from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from mealplan.infra.Recipe_Repository import RecipeRepository
from mealplan.utilities.validators import RecipeInput

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("")
def list_recipes(tag: Optional[List[str]] = Query(default=None), max_time: Optional[int] = Query(default=None, ge=1),
                 chef: Optional[str] = None, exclude: Optional[List[str]] = Query(default=None),
                 limit: Optional[int] = Query(default=None, ge=1)):
    """Search the catalog; every tag given must be present."""
    recipes = RecipeRepository().search(chef=chef, tags=tag, max_time=max_time, exclude_ids=exclude, limit=limit)
    return {"recipes": [r.to_dict() for r in recipes], "count": len(recipes)}


@router.get("/{recipe_id}")
def get_recipe(recipe_id: str):
    recipe = RecipeRepository().get_by_id(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe {recipe_id} not found")
    return recipe.to_dict()


@router.post("", status_code=201)
def add_recipe(body: RecipeInput):
    repo = RecipeRepository()
    recipe = body.to_recipe()
    if body.id is None and repo.get_by_id(recipe.id) is not None:
        raise HTTPException(status_code=409, detail=f"A recipe with id {recipe.id} already exists")
    repo.add_custom([recipe])
    return recipe.to_dict()
