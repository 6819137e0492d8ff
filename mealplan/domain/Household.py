"""Household aggregate: the family profile that drives plan generation defaults."""
from typing import Dict, List, Optional

from mealplan.domain.Ingredient import PantryItem
from mealplan.utilities.constants import (
    DEFAULT_SERVINGS_PER_MEAL,
    DEFAULT_WEEKEND_MAX_MINS,
    DEFAULT_WEEKNIGHT_MAX_MINS,
)

DIET_FLAGS = ("gluten_light", "high_protein", "organic_preferred")


class Household:
    def __init__(self, id: str = "default", adults: int = 2, kids: Optional[List[int]] = None,
                 total_servings: Optional[int] = None, diet: Optional[Dict[str, bool]] = None,
                 favorites: Optional[List[str]] = None, pantry: Optional[List[PantryItem]] = None,
                 preferred_chef: Optional[str] = None, cuisines: Optional[List[str]] = None,
                 allergies: Optional[List[str]] = None, avoid_foods: Optional[List[str]] = None,
                 favorite_ingredients: Optional[List[str]] = None,
                 budget_per_meal: Optional[Dict[str, float]] = None,
                 max_cook_time: Optional[Dict[str, int]] = None,
                 leftover_friendly: bool = True, variety_level: int = 3):
        self.id = id
        self.adults = adults
        # kids are stored as a list of ages
        self.kids = kids[:] if kids else []
        self.total_servings = total_servings or (adults + len(self.kids)) or DEFAULT_SERVINGS_PER_MEAL
        d = diet or {}
        self.diet = {flag: bool(d.get(flag, False)) for flag in DIET_FLAGS}
        self.favorites = favorites[:] if favorites else []
        self.pantry = pantry[:] if pantry else []
        self.preferred_chef = preferred_chef
        self.cuisines = cuisines[:] if cuisines else []
        self.allergies = allergies[:] if allergies else []
        self.avoid_foods = avoid_foods[:] if avoid_foods else []
        self.favorite_ingredients = favorite_ingredients[:] if favorite_ingredients else []
        self.budget_per_meal = dict(budget_per_meal or {"min": 15, "max": 20})
        cook = max_cook_time or {}
        self.max_cook_time = {
            "weeknight": int(cook.get("weeknight", DEFAULT_WEEKNIGHT_MAX_MINS)),
            "weekend": int(cook.get("weekend", DEFAULT_WEEKEND_MAX_MINS)),
        }
        self.leftover_friendly = leftover_friendly
        self.variety_level = variety_level

    def __str__(self) -> str:
        return (f"Household {self.id}: {self.adults} adults, {len(self.kids)} kids, "
                f"{self.total_servings} servings, favorites={len(self.favorites)}")

    __repr__ = __str__

    @property
    def weeknight_cap(self) -> int:
        return self.max_cook_time["weeknight"]

    def excluded_foods(self) -> List[str]:
        '''Lowercased allergy and avoid-food terms that rule a recipe out.'''
        return [t.strip().lower() for t in self.allergies + self.avoid_foods if t and t.strip()]

    def with_diet_adjust(self, adjust: Optional[Dict[str, bool]]) -> "Household":
        '''Returns a copy with diet flags partially overridden for a single week.'''
        copy = Household.from_dict(self.to_dict())
        for flag, value in (adjust or {}).items():
            if flag in DIET_FLAGS and value is not None:
                copy.diet[flag] = bool(value)
        return copy

    @staticmethod
    def from_dict(data) -> "Household":
        d = dict(data) if isinstance(data, dict) else {}
        return Household(
            id=d.get("id", "default"),
            adults=int(d.get("adults", 2)),
            kids=[int(age) for age in d.get("kids", [])],
            total_servings=d.get("total_servings"),
            diet=d.get("diet"),
            favorites=list(d.get("favorites", [])),
            pantry=[PantryItem.from_dict(p) for p in d.get("pantry", [])],
            preferred_chef=d.get("preferred_chef"),
            cuisines=list(d.get("cuisines", [])),
            allergies=list(d.get("allergies", [])),
            avoid_foods=list(d.get("avoid_foods", [])),
            favorite_ingredients=list(d.get("favorite_ingredients", [])),
            budget_per_meal=d.get("budget_per_meal"),
            max_cook_time=d.get("max_cook_time"),
            leftover_friendly=bool(d.get("leftover_friendly", True)),
            variety_level=int(d.get("variety_level", 3)),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "adults": self.adults,
            "kids": self.kids,
            "total_servings": self.total_servings,
            "diet": self.diet,
            "favorites": self.favorites,
            "pantry": [p.to_dict() for p in self.pantry],
            "preferred_chef": self.preferred_chef,
            "cuisines": self.cuisines,
            "allergies": self.allergies,
            "avoid_foods": self.avoid_foods,
            "favorite_ingredients": self.favorite_ingredients,
            "budget_per_meal": self.budget_per_meal,
            "max_cook_time": self.max_cook_time,
            "leftover_friendly": self.leftover_friendly,
            "variety_level": self.variety_level,
        }
