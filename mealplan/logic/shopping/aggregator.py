"""Shopping list aggregation.

Provides aggregate_shopping_list(plan, catalog, pantry, exclude_pantry_staples=False).
Every planned day contributes its recipe scaled to the day's servings, leftover
days included since the bulk batch is bought for both nights. Lines are keyed by
normalised name and base unit, so the same ingredient in incompatible units ends
up on separate lines. Pantry quantities are taken off lines in the same base
unit, and a line the pantry fully covers is dropped.
"""
import logging
from typing import Dict, Iterable, Tuple

from mealplan.domain.Plan import PlanWeek
from mealplan.domain.ShoppingList import AggregatedIngredient, ShoppingList
from mealplan.logic.shopping.names import normalize_ingredient_name
from mealplan.logic.shopping.pricing import aisle_for, estimate_ingredient_cost
from mealplan.logic.shopping.units import to_base_unit

logger = logging.getLogger(__name__)


def subtract_pantry(lines: Dict[Tuple[str, str], AggregatedIngredient], pantry: Iterable) -> None:
    for item in pantry:
        if not item.qty or item.qty <= 0:
            continue
        qty, unit = to_base_unit(item.qty, item.unit)
        key = (normalize_ingredient_name(item.name), unit)
        line = lines.get(key)
        if line is None:
            continue
        line.total_qty = max(0, line.total_qty - qty)
        if round(line.total_qty, 2) <= 0:
            logger.debug("Pantry covers %s %s, dropping it from the list", key[0], unit)
            del lines[key]


def aggregate_shopping_list(plan: PlanWeek, catalog, pantry: Iterable = (), *,
                            exclude_pantry_staples: bool = False) -> ShoppingList:
    if not plan or not plan.days:
        return ShoppingList()

    pantry = list(pantry)
    pantry_names = {normalize_ingredient_name(item.name) for item in pantry}
    lines: Dict[Tuple[str, str], AggregatedIngredient] = {}

    for day in plan.days:
        if day.missing:
            continue
        recipe = catalog.get_by_id(day.recipe_id)
        if recipe is None:
            logger.warning("Shopping list: recipe %s for %s not found, skipping",
                           day.recipe_id, day.date.isoformat())
            continue
        factor = day.scaled_servings / (recipe.serves or 1)
        for ing in recipe.ingredients:
            normalized = normalize_ingredient_name(ing.name)
            if not normalized:
                continue
            portion = ing.scaled(factor)
            qty, unit = to_base_unit(portion.qty, portion.unit)
            line = lines.get((normalized, unit))
            if line is None:
                line = AggregatedIngredient(
                    name=ing.name,
                    normalized_name=normalized,
                    total_qty=0,
                    unit=unit,
                    category=aisle_for(ing.name),
                    is_pantry_staple=normalized in pantry_names,
                )
                lines[(normalized, unit)] = line
            line.add_source(recipe.id, recipe.title, qty)

    subtract_pantry(lines, pantry)

    items = []
    for line in lines.values():
        if exclude_pantry_staples and line.is_pantry_staple:
            continue
        line.total_qty = round(line.total_qty, 2)
        for source in line.sources:
            source["qty"] = round(source["qty"], 2)
        line.estimated_price = estimate_ingredient_cost(line.name, line.total_qty, line.unit)
        items.append(line)

    items.sort(key=lambda i: (i.category, i.normalized_name, i.unit))
    return ShoppingList(items)
