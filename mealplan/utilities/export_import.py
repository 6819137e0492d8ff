"""
Export and Import functionality for custom recipes, household settings, plans and history.
"""
import csv
import io
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from mealplan.domain.Household import Household
from mealplan.domain.Plan import PlanWeek
from mealplan.domain.Recipe import Recipe
from mealplan.domain.ShoppingList import ShoppingList
from mealplan.domain.WeeklyOverrides import WeeklyOverrides
from mealplan.infra import paths
from mealplan.infra.json_store import atomic_write, read_json

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"

SHOPPING_CSV_HEADERS = ["Category", "Qty", "Unit", "Item", "Est. Price", "Pantry Staple"]


def shopping_list_to_csv(shopping_list: ShoppingList) -> str:
    """CSV grouped by aisle category, quantities in display units (kg/L from 1000 g/ml)."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(SHOPPING_CSV_HEADERS)
    for category in sorted(shopping_list.by_category()):
        for item in shopping_list.by_category()[category]:
            qty, unit = item.total_qty, item.unit
            if unit == "g" and qty >= 1000:
                qty, unit = qty / 1000, "kg"
            elif unit == "ml" and qty >= 1000:
                qty, unit = qty / 1000, "L"
            writer.writerow([
                category,
                f"{qty:g}",
                unit,
                item.name,
                f"{item.estimated_price:.2f}",
                "yes" if item.is_pantry_staple else "no",
            ])
    return buf.getvalue()


class DataExporter:
    """Collect all persisted app data into one JSON document."""

    def __init__(self, data_paths=None):
        self.paths = data_paths or paths

    def export_all(self) -> Dict[str, Any]:
        payload = {
            "version": EXPORT_VERSION,
            "export_date": datetime.now().isoformat(),
            "household": read_json(self.paths.HOUSEHOLD_FILE, None),
            "weekly_overrides": read_json(self.paths.OVERRIDES_FILE, {}),
            "custom_recipes": read_json(self.paths.RECIPES_FILE, []),
            "current_plan": read_json(self.paths.PLAN_FILE, None),
            "recipe_history": read_json(self.paths.HISTORY_FILE, []),
        }
        logger.info("Exported %d custom recipes", len(payload["custom_recipes"] or []))
        return payload


class DataImporter:
    """Import a document produced by DataExporter.

    Each section is parsed with the domain from_dict before anything is written,
    so a malformed document raises ValueError and leaves the data files untouched.
    """

    def __init__(self, data_paths=None):
        self.paths = data_paths or paths

    def import_all(self, payload: Dict[str, Any], merge: bool = True) -> Dict[str, Optional[int]]:
        if not isinstance(payload, dict) or "version" not in payload:
            raise ValueError("Not a meal planner export (missing version)")

        for section, kind in (("household", dict), ("weekly_overrides", dict), ("current_plan", dict),
                              ("custom_recipes", list), ("recipe_history", list)):
            if payload.get(section) is not None and not isinstance(payload[section], kind):
                raise ValueError(f"Invalid export document: {section} must be a {kind.__name__}")

        try:
            household = Household.from_dict(payload["household"]) if payload.get("household") else None
            recipes = [Recipe.from_dict(r) for r in payload.get("custom_recipes") or []]
            overrides = {k: WeeklyOverrides.from_dict(v).to_dict()
                         for k, v in (payload.get("weekly_overrides") or {}).items()}
            plan = PlanWeek.from_dict(payload["current_plan"]) if payload.get("current_plan") else None
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid export document: {e}") from e
        history = [h for h in payload.get("recipe_history") or []
                   if isinstance(h, dict) and "recipe_id" in h and "week_of" in h]

        if merge:
            existing = {r["id"]: r for r in read_json(self.paths.RECIPES_FILE, []) if isinstance(r, dict) and "id" in r}
            existing.update({r.id: r.to_dict() for r in recipes})
            recipe_rows = list(existing.values())
            stored_overrides = read_json(self.paths.OVERRIDES_FILE, {}) or {}
            stored_overrides.update(overrides)
            overrides = stored_overrides
        else:
            recipe_rows = [r.to_dict() for r in recipes]

        atomic_write(self.paths.RECIPES_FILE, recipe_rows)
        atomic_write(self.paths.OVERRIDES_FILE, overrides)
        atomic_write(self.paths.HISTORY_FILE, history)
        if household is not None:
            atomic_write(self.paths.HOUSEHOLD_FILE, household.to_dict())
        if plan is not None:
            atomic_write(self.paths.PLAN_FILE, plan.to_dict())

        logger.info("Imported %d recipes (%s mode)", len(recipes), "merge" if merge else "replace")
        return {
            "recipes": len(recipes),
            "weekly_overrides": len(overrides),
            "history_entries": len(history),
            "household": 1 if household else 0,
            "plan": 1 if plan else 0,
        }
