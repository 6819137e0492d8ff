"""
Input validation schemas using Pydantic for better data integrity.
"""
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from mealplan.domain.Household import Household
from mealplan.domain.Ingredient import Ingredient, PantryItem
from mealplan.domain.Recipe import Recipe, RecipeSource
from mealplan.domain.WeeklyOverrides import WeeklyOverrides
from mealplan.logic.shopping.units import normalize_recipe_unit
from mealplan.utilities.constants import (
    DEFAULT_DINNERS_PER_WEEK,
    DEFAULT_RECIPE_SERVES,
    MAX_DINNERS_PER_WEEK,
)


class IngredientInput(BaseModel):
    """Schema for ingredient input validation."""
    name: str = Field(..., min_length=1, max_length=100)
    qty: float = Field(0, ge=0, le=100000)
    unit: str = Field("unit", max_length=20)

    @field_validator('name', 'unit')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v

    def to_ingredient(self) -> Ingredient:
        return Ingredient(self.name, self.qty, self.unit or "unit")


class BudgetInput(BaseModel):
    min: float = Field(15, ge=5, le=100)
    max: float = Field(20, ge=5, le=100)

    @model_validator(mode='after')
    def check_range(self):
        if self.min > self.max:
            raise ValueError('Minimum budget cannot be greater than maximum budget')
        return self


class CookTimeInput(BaseModel):
    weeknight: int = Field(40, ge=10, le=120)
    weekend: int = Field(60, ge=10, le=180)


class DietInput(BaseModel):
    gluten_light: bool = False
    high_protein: bool = False
    organic_preferred: bool = False


class HouseholdInput(BaseModel):
    """Schema for household settings; nothing is saved when validation fails."""
    adults: int = Field(2, ge=1, le=10)
    kids: List[int] = Field(default_factory=list)
    total_servings: Optional[int] = Field(None, ge=1, le=30)
    diet: DietInput = Field(default_factory=DietInput)
    favorites: List[str] = Field(default_factory=list)
    pantry: List[IngredientInput] = Field(default_factory=list)
    preferred_chef: Optional[str] = None
    cuisines: List[str] = Field(default_factory=lambda: ["australian"])
    allergies: List[str] = Field(default_factory=list)
    avoid_foods: List[str] = Field(default_factory=list)
    favorite_ingredients: List[str] = Field(default_factory=list)
    budget_per_meal: BudgetInput = Field(default_factory=BudgetInput)
    max_cook_time: CookTimeInput = Field(default_factory=CookTimeInput)
    leftover_friendly: bool = True
    variety_level: int = Field(3, ge=1, le=5)

    @field_validator('kids')
    @classmethod
    def validate_kid_ages(cls, v):
        for age in v:
            if age < 0 or age > 18:
                raise ValueError('Child ages must be between 0 and 18')
        return v

    @field_validator('cuisines')
    @classmethod
    def validate_cuisines(cls, v):
        cleaned = [c.strip() for c in v if c and c.strip()]
        if not cleaned:
            raise ValueError('Select at least one cuisine')
        return cleaned

    @field_validator('allergies', 'avoid_foods', 'favorite_ingredients', 'favorites')
    @classmethod
    def drop_blank(cls, v):
        return [item.strip() for item in v if item and item.strip()]

    def to_household(self, household_id: str = "default") -> Household:
        return Household(
            id=household_id,
            adults=self.adults,
            kids=list(self.kids),
            total_servings=self.total_servings,
            diet=self.diet.model_dump(),
            favorites=list(self.favorites),
            pantry=[PantryItem(p.name, p.qty, p.unit) for p in self.pantry],
            preferred_chef=self.preferred_chef or None,
            cuisines=list(self.cuisines),
            allergies=list(self.allergies),
            avoid_foods=list(self.avoid_foods),
            favorite_ingredients=list(self.favorite_ingredients),
            budget_per_meal=self.budget_per_meal.model_dump(),
            max_cook_time=self.max_cook_time.model_dump(),
            leftover_friendly=self.leftover_friendly,
            variety_level=self.variety_level,
        )


class OverridesInput(BaseModel):
    dinners: int = Field(DEFAULT_DINNERS_PER_WEEK, ge=1, le=MAX_DINNERS_PER_WEEK)
    servings_per_meal: Optional[int] = Field(None, ge=1, le=30)
    kid_friendly_weeknights: bool = True
    diet_adjust: Dict[str, bool] = Field(default_factory=dict)
    pantry_adds: List[IngredientInput] = Field(default_factory=list)

    @field_validator('diet_adjust')
    @classmethod
    def known_diet_flags(cls, v):
        unknown = set(v) - set(DietInput.model_fields)
        if unknown:
            raise ValueError(f"Unknown diet flags: {', '.join(sorted(unknown))}")
        return v

    def to_overrides(self, week_of: date) -> WeeklyOverrides:
        return WeeklyOverrides(
            week_of=week_of,
            dinners=self.dinners,
            servings_per_meal=self.servings_per_meal,
            kid_friendly_weeknights=self.kid_friendly_weeknights,
            diet_adjust=dict(self.diet_adjust),
            pantry_adds=[PantryItem(p.name, p.qty, p.unit) for p in self.pantry_adds],
        )


class RecipeInput(BaseModel):
    """Schema for a user-added recipe."""
    id: Optional[str] = Field(None, max_length=120)
    title: str = Field(..., min_length=3, max_length=200)
    time_mins: Optional[int] = Field(None, ge=1, le=600)
    serves: int = Field(DEFAULT_RECIPE_SERVES, ge=1, le=50)
    ingredients: List[IngredientInput]
    instructions: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    cost_per_serve_est: Optional[float] = Field(None, ge=0, le=200)
    source_url: str = ""
    chef: str = ""

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Validate recipe title."""
        if not v.strip():
            raise ValueError('Recipe title cannot be empty')
        return v.strip()

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v):
        """Ensure recipe has at least one ingredient."""
        if not v:
            raise ValueError('Recipe must have at least one ingredient')
        return v

    @field_validator('instructions', 'tags')
    @classmethod
    def drop_blank(cls, v):
        return [item.strip() for item in v if item and item.strip()]

    def to_recipe(self) -> Recipe:
        return Recipe(
            id=self.id or recipe_id_from_name(self.title, prefix="custom"),
            title=self.title,
            source=RecipeSource(url=self.source_url, domain="user-added", chef=self.chef),
            time_mins=self.time_mins,
            serves=self.serves,
            ingredients=[i.to_ingredient() for i in self.ingredients],
            tags=self.tags,
            instructions=self.instructions,
            cost_per_serve_est=self.cost_per_serve_est,
        )


class GenerateRecipesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    household: HouseholdInput
    number_of_recipes: int = Field(7, ge=1, le=14, alias="numberOfRecipes")
    exclude_recipe_ids: List[str] = Field(default_factory=list, alias="excludeRecipeIds")
    specific_days: Optional[List[str]] = Field(None, alias="specificDays")


class RecipeUrlRequest(BaseModel):
    url: str = Field(..., min_length=8, max_length=2000)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        v = v.strip()
        if not re.match(r'^https?://', v):
            raise ValueError('URL must start with http:// or https://')
        return v


class SwapRequest(BaseModel):
    day_index: int = Field(..., ge=0, le=MAX_DINNERS_PER_WEEK - 1)
    recipe_id: str = Field(..., min_length=1)


# === AI payload decoding ===

class GeneratedIngredient(BaseModel):
    model_config = ConfigDict(extra='ignore')

    name: str = Field(..., min_length=1)
    qty: float = 1
    unit: str = "unit"

    @field_validator('qty', mode='before')
    @classmethod
    def coerce_qty(cls, v):
        try:
            qty = float(v)
        except (TypeError, ValueError):
            return 1
        return qty if qty > 0 else 1

    @field_validator('unit', mode='before')
    @classmethod
    def coerce_unit(cls, v):
        return str(v).strip() if v else "unit"


class GeneratedRecipe(BaseModel):
    """Shape of one recipe in the model's JSON output."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    name: str = Field(..., min_length=1)
    cuisine: Optional[str] = None
    total_time: Optional[int] = Field(None, alias="totalTime")
    servings: int = DEFAULT_RECIPE_SERVES
    ingredients: List[GeneratedIngredient] = Field(..., min_length=1)
    instructions: List[str] = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)
    estimated_cost: Optional[float] = Field(None, alias="estimatedCost")
    source_url: Optional[str] = Field(None, alias="sourceUrl")

    @field_validator('servings', mode='before')
    @classmethod
    def coerce_servings(cls, v):
        try:
            servings = int(v)
        except (TypeError, ValueError):
            return DEFAULT_RECIPE_SERVES
        return servings if servings > 0 else DEFAULT_RECIPE_SERVES

    @field_validator('total_time', mode='before')
    @classmethod
    def coerce_time(cls, v):
        try:
            minutes = int(v)
        except (TypeError, ValueError):
            return None
        return minutes if minutes > 0 else None

    @field_validator('instructions', mode='before')
    @classmethod
    def coerce_instructions(cls, v):
        if isinstance(v, str):
            v = [line for line in v.splitlines()]
        return [str(step).strip() for step in (v or []) if str(step).strip()]

    @field_validator('tags', mode='before')
    @classmethod
    def coerce_tags(cls, v):
        return [str(t).strip().lower().replace(" ", "_").replace("-", "_") for t in (v or []) if str(t).strip()]

    def to_recipe(self, domain: str = "ai-generated", chef: str = "AI Generated") -> Recipe:
        ingredients = []
        for ing in self.ingredients:
            unit, multiplier = normalize_recipe_unit(ing.unit)
            ingredients.append(Ingredient(ing.name.strip(), ing.qty * multiplier, unit))
        tags = list(self.tags)
        if self.cuisine and self.cuisine.lower() not in tags:
            tags.append(self.cuisine.lower())
        cost = round(self.estimated_cost / self.servings, 2) if self.estimated_cost else None
        return Recipe(
            id=recipe_id_from_name(self.name),
            title=self.name.strip(),
            source=RecipeSource(url=self.source_url or "", domain=domain, chef=chef,
                                fetched_at=datetime.now(timezone.utc).isoformat()),
            time_mins=self.total_time,
            serves=self.servings,
            ingredients=ingredients,
            tags=tags,
            instructions=self.instructions,
            cost_per_serve_est=cost,
        )


class DecodeResult:
    """Outcome of decoding one untrusted AI recipe: either a Recipe or an error message."""

    def __init__(self, recipe: Optional[Recipe] = None, error: Optional[str] = None):
        self.recipe = recipe
        self.error = error

    @property
    def ok(self) -> bool:
        return self.recipe is not None

    @property
    def kind(self) -> str:
        return "recipe" if self.ok else "error"

    def __str__(self) -> str:
        return f"DecodeResult({self.recipe.id if self.ok else self.error})"

    __repr__ = __str__


def recipe_id_from_name(name: str, prefix: str = "ai") -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (name or "").lower()).strip("-")
    return f"{prefix}-{slug}" if slug else prefix


def decode_generated_recipe(payload: Any, **source) -> DecodeResult:
    if not isinstance(payload, dict):
        return DecodeResult(error=f"Expected a JSON object, got {type(payload).__name__}")
    try:
        generated = GeneratedRecipe.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return DecodeResult(error=f"Invalid recipe {payload.get('name', '?')!r}: {fields}")
    return DecodeResult(recipe=generated.to_recipe(**source))


def decode_generated_recipes(payload: Any, **source) -> List[DecodeResult]:
    """Accepts {"recipes": [...]}, a bare list, or a single recipe object."""
    if isinstance(payload, dict) and "recipes" in payload:
        payload = payload["recipes"]
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        return [DecodeResult(error="AI response did not contain a recipe list")]
    return [decode_generated_recipe(item, **source) for item in payload]
