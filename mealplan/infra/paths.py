from mealplan.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
LIBRARY_DIR = DATA_DIR / 'library'
RECIPES_FILE = DATA_DIR / 'recipes.json'
HOUSEHOLD_FILE = DATA_DIR / 'household.json'
OVERRIDES_FILE = DATA_DIR / 'weekly_overrides.json'
PLAN_FILE = DATA_DIR / 'plan.json'
HISTORY_FILE = DATA_DIR / 'recipe_history.json'

__all__ = ['DATA_DIR', 'LIBRARY_DIR', 'RECIPES_FILE', 'HOUSEHOLD_FILE', 'OVERRIDES_FILE', 'PLAN_FILE',
           'HISTORY_FILE']
