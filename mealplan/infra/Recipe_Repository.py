"""Recipe catalog repository.

The catalog is the indexed recipe library plus custom recipes (user-added or
AI-generated) kept in recipes.json. Callers receive a repository instance and
pass it to the planning functions; nothing here is cached at module level.
"""
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from mealplan.domain.Recipe import Recipe
from mealplan.infra import paths
from mealplan.infra.Library_Import import reading_from_library
from mealplan.infra.json_store import atomic_write

logger = logging.getLogger(__name__)


def reading_from_recipes(recipes_file: Path) -> List[Recipe]:
    """Read custom recipes from JSON file with proper error handling."""
    try:
        with open(recipes_file, 'r', encoding='utf-8') as f:
            recipes_data = json.load(f)
        return [Recipe.from_dict(entry) for entry in recipes_data]
    except FileNotFoundError:
        logger.warning(f"Recipes file not found: {recipes_file}. Returning empty list.")
        return []
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in recipes file: {e}")
        return []
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Error reading recipes: {e}")
        return []


class RecipeRepository:
    def __init__(self, library_dir: Optional[Path] = None, recipes_file: Optional[Path] = None,
                 recipes: Optional[Iterable[Recipe]] = None):
        self.library_dir = Path(library_dir) if library_dir else paths.LIBRARY_DIR
        self.recipes_file = Path(recipes_file) if recipes_file else paths.RECIPES_FILE
        self._recipes: Optional[List[Recipe]] = list(recipes) if recipes is not None else None
        self.in_memory = recipes is not None

    @classmethod
    def from_recipes(cls, recipes: Iterable[Recipe]) -> "RecipeRepository":
        """In-memory catalog (no files are read or written)."""
        return cls(recipes=recipes)

    def load_all(self) -> List[Recipe]:
        if self._recipes is None:
            library = reading_from_library(self.library_dir)
            custom = reading_from_recipes(self.recipes_file)
            merged = {r.id: r for r in library}
            # custom recipes win on id collisions
            merged.update({r.id: r for r in custom})
            self._recipes = list(merged.values())
        return self._recipes

    def get_all(self) -> List[Recipe]:
        return list(self.load_all())

    def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        for recipe in self.load_all():
            if recipe.id == recipe_id:
                return recipe
        return None

    def search(self, chef: Optional[str] = None, tags: Optional[List[str]] = None,
               max_time: Optional[int] = None, exclude_ids: Optional[Iterable[str]] = None,
               limit: Optional[int] = None) -> List[Recipe]:
        """Filter the catalog; results keep catalog order.

        tags must all be present; recipes without a time always pass max_time.
        """
        excluded = set(exclude_ids or ())
        results = []
        for recipe in self.load_all():
            if chef and recipe.source.chef != chef:
                continue
            if tags and not all(tag in recipe.tags for tag in tags):
                continue
            if max_time is not None and recipe.time_mins is not None and recipe.time_mins > max_time:
                continue
            if recipe.id in excluded:
                continue
            results.append(recipe)
        if limit:
            results = results[:limit]
        return results

    def add_custom(self, recipes: Iterable[Recipe]) -> List[Recipe]:
        """Persist custom recipes (replacing same-id entries) and refresh the catalog.

        An in-memory catalog is updated in place and never touches recipes.json.
        """
        new = list(recipes)
        if self.in_memory:
            merged = {r.id: r for r in self._recipes}
            merged.update({r.id: r for r in new})
            self._recipes = list(merged.values())
            return new
        existing = {r.id: r for r in reading_from_recipes(self.recipes_file)}
        for recipe in new:
            existing[recipe.id] = recipe
        atomic_write(self.recipes_file, [r.to_dict() for r in existing.values()])
        self._recipes = None
        return new
