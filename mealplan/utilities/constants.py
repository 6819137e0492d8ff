from typing import Final

# Meal planning defaults
DEFAULT_DINNERS_PER_WEEK: Final[int] = 5
MAX_DINNERS_PER_WEEK: Final[int] = 7
DEFAULT_SERVINGS_PER_MEAL: Final[int] = 4
DEFAULT_RECIPE_SERVES: Final[int] = 4
DEFAULT_RECIPE_TIME_MINS: Final[int] = 30
DEFAULT_WEEKNIGHT_MAX_MINS: Final[int] = 40
DEFAULT_WEEKEND_MAX_MINS: Final[int] = 60
# Weeknight candidate search allows a little more than the household cap
WEEKNIGHT_SEARCH_SLACK_MINS: Final[int] = 5
# Leftover strategy only kicks in for weeks with at least this many dinners
LEFTOVERS_MIN_DINNERS: Final[int] = 5
KID_FRIENDLY_MIN_OPTIONS: Final[int] = 3

# Scoring & composition
MAX_SUGGESTED_SWAPS: Final[int] = 3
MAX_REASONS_PER_DAY: Final[int] = 3
CANDIDATES_TO_SCORE_PER_SLOT: Final[int] = 10
REPETITION_WINDOW_WEEKS: Final[int] = 3

PROTEIN_TYPES: Final[tuple[str, ...]] = ("chicken", "beef", "pork", "fish", "lamb", "seafood")

TAG_KID_FRIENDLY: Final[str] = "kid_friendly"
TAG_BULK_COOK: Final[str] = "bulk_cook"
LEFTOVER_NOTE: Final[str] = "Leftovers from previous day"

# AI prompts
SYSTEM_PROMPT: Final[str] = (
    """You are a helpful meal planning assistant that suggests dinner recipes based on family preferences.

You must respond ONLY with valid JSON in this exact format:
"""
)
RECIPES_JSON_FORMAT: Final[str] = (
    """
{
  "recipes": [
    {
      "name": str,
      "cuisine": str,
      "totalTime": int (minutes),
      "servings": int,
      "ingredients": [
        { "name": str, "qty": number, "unit": "g" | "ml" | "tsp" | "tbsp" | "unit" }
      ],
      "instructions": [str, str],
      "tags": [str, str],
      "estimatedCost": number (total dollars for the whole recipe)
    }
  ]
}

Rules:
- Return ONLY valid JSON, no markdown, no code blocks, no extra text
- Keep instructions short (3-5 steps) and ingredient lists concise (8-12 items)
- Tag recipes with "kid_friendly", "bulk_cook", "quick" and the main protein where they apply
"""
)
PANTRY_SCAN_PROMPT: Final[str] = (
    "List the food ingredients visible in this photo of a pantry, fridge or receipt. "
    'Respond ONLY with JSON: {"ingredients": [str, str]} using short generic names.'
)
RECIPE_IMAGE_PROMPT: Final[str] = (
    "Extract the recipe shown in this image. Respond ONLY with JSON for a single recipe "
    "(the object inside \"recipes\") in this format:\n"
)
RECIPE_URL_PROMPT: Final[str] = (
    "Extract the recipe from the following web page text. Respond ONLY with JSON for a single "
    "recipe (the object inside \"recipes\") in this format:\n"
)
