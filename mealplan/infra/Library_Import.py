"""Convert indexed JSON-LD recipe files into catalog Recipe records.

Library layout: <library>/<chef>/<recipe>.json, each file holding
{id, sourceUrl, chef, domain, indexedAt, recipe: {schema.org Recipe}}.
"""
import json
import logging
import re
from fractions import Fraction
from pathlib import Path
from typing import List, Optional

from mealplan.domain.Ingredient import Ingredient
from mealplan.domain.Recipe import Recipe, RecipeSource
from mealplan.logic.shopping.units import normalize_recipe_unit
from mealplan.utilities.constants import DEFAULT_RECIPE_SERVES

logger = logging.getLogger(__name__)

_DURATION = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?")
_INGREDIENT_LINE = re.compile(r"^(\d+(?:\.\d+)?|\d+/\d+)\s*([a-zA-Z]+)?\s+(.+)$")
_MEAT_WORDS = ('chicken', 'beef', 'pork', 'fish', 'lamb', 'turkey')

CHEF_ALIASES = {
    'nagi': 'recipe_tin_eats',
    'recipe-tin-eats': 'recipe_tin_eats',
    'jamie-oliver': 'jamie_oliver',
}


def parse_duration(duration: Optional[str]) -> Optional[int]:
    """ISO 8601 duration (PT45M, PT1H30M) to minutes."""
    if not duration:
        return None
    match = _DURATION.match(duration)
    if not match or not any(match.groups()):
        return None
    hours, minutes = match.groups()
    return int(hours or 0) * 60 + int(minutes or 0)


def parse_servings(recipe_yield) -> int:
    if isinstance(recipe_yield, list):
        recipe_yield = recipe_yield[0] if recipe_yield else None
    if not recipe_yield:
        return DEFAULT_RECIPE_SERVES
    if isinstance(recipe_yield, (int, float)):
        return int(recipe_yield)
    match = re.search(r"\d+", str(recipe_yield))
    return int(match.group(0)) if match else DEFAULT_RECIPE_SERVES


def parse_ingredient(line: str) -> Ingredient:
    """Parse "500g chicken breast" / "1/2 cup milk" / "1 onion" into an Ingredient."""
    text = (line or "").strip()
    match = _INGREDIENT_LINE.match(text)
    if not match:
        return Ingredient(text, 1, 'unit')
    qty_str, unit_word, name = match.groups()
    qty = float(Fraction(qty_str))
    if unit_word:
        unit, factor = normalize_recipe_unit(unit_word)
        if unit == 'unit' and unit_word.lower() not in ('unit', 'units', 'piece', 'pieces', 'whole'):
            # "2 onions": the word belongs to the name, not the unit
            name = f"{unit_word} {name}"
            factor = 1
    else:
        unit, factor = 'unit', 1
    return Ingredient(name.strip(), qty * factor, unit)


def extract_tags(recipe: dict, time_mins: Optional[int]) -> List[str]:
    tags: List[str] = []
    categories = recipe.get("recipeCategory") or []
    if isinstance(categories, str):
        categories = [categories]
    for cat in categories:
        tags.append(re.sub(r"[^a-z0-9]+", "_", str(cat).lower()).strip("_"))

    if time_mins:
        if time_mins <= 30:
            tags.append('quick')
        if time_mins <= 40:
            tags.append('kid_friendly')
        if time_mins >= 60:
            tags.append('bulk_cook')

    text = " ".join(recipe.get("recipeIngredient") or []).lower()
    if 'chicken' in text:
        tags.append('chicken')
    if 'beef' in text or 'steak' in text:
        tags.append('beef')
    if 'pork' in text:
        tags.append('pork')
    if 'lamb' in text:
        tags.append('lamb')
    if 'fish' in text or 'salmon' in text:
        tags.append('fish')
    if 'pasta' in text or 'spaghetti' in text:
        tags.append('pasta')
    if not any(meat in text for meat in _MEAT_WORDS):
        tags.append('vegetarian')
    # keep first occurrence order
    return list(dict.fromkeys(t for t in tags if t))


def estimate_cost_per_serve(ingredient_count: int, serves: int) -> float:
    total = 2.50 + ingredient_count * 0.35
    return max(2.0, min(8.0, round(total / max(serves, 1), 2)))


def convert_indexed_recipe(indexed: dict) -> Recipe:
    recipe = indexed.get("recipe") or {}
    time_mins = parse_duration(recipe.get("totalTime"))
    serves = parse_servings(recipe.get("recipeYield"))
    lines = recipe.get("recipeIngredient") or []
    chef = str(indexed.get("chef", ""))
    return Recipe(
        id=str(indexed["id"]),
        title=recipe.get("name") or "Untitled Recipe",
        source=RecipeSource(
            url=indexed.get("sourceUrl", ""),
            domain=indexed.get("domain", ""),
            chef=CHEF_ALIASES.get(chef, chef.replace("-", "_")),
            license='permitted',
            fetched_at=indexed.get("indexedAt", ""),
        ),
        time_mins=time_mins,
        serves=serves,
        ingredients=[parse_ingredient(line) for line in lines],
        tags=extract_tags(recipe, time_mins),
        cost_per_serve_est=estimate_cost_per_serve(len(lines) or 10, serves),
    )


def reading_from_library(library_dir: Path) -> List[Recipe]:
    """Load every <chef>/<file>.json under library_dir; bad files are skipped."""
    library_dir = Path(library_dir)
    if not library_dir.is_dir():
        logger.warning("Recipe library not found at %s", library_dir)
        return []
    recipes: List[Recipe] = []
    for chef_dir in sorted(p for p in library_dir.iterdir() if p.is_dir()):
        for path in sorted(chef_dir.glob("*.json")):
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    recipes.append(convert_indexed_recipe(json.load(f)))
            except (OSError, ValueError, KeyError) as e:
                logger.error("Error loading %s/%s: %s", chef_dir.name, path.name, e)
    logger.info("Loaded %d recipes from library %s", len(recipes), library_dir)
    return recipes
