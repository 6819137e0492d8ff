from datetime import date

import pytest
from pydantic import ValidationError

from mealplan.utilities.validators import (
    GenerateRecipesRequest,
    HouseholdInput,
    OverridesInput,
    RecipeInput,
    RecipeUrlRequest,
    SwapRequest,
    decode_generated_recipe,
    decode_generated_recipes,
    recipe_id_from_name,
)


def test_household_defaults_to_household():
    household = HouseholdInput().to_household()
    assert household.adults == 2
    assert household.cuisines == ["australian"]
    assert household.max_cook_time == {"weeknight": 40, "weekend": 60}
    assert household.total_servings == 2


@pytest.mark.parametrize("payload", [
    {"adults": 0},
    {"adults": 11},
    {"kids": [4, 19]},
    {"kids": [-1]},
    {"cuisines": []},
    {"cuisines": ["  "]},
    {"budget_per_meal": {"min": 30, "max": 20}},
    {"budget_per_meal": {"min": 2, "max": 20}},
    {"max_cook_time": {"weeknight": 5}},
    {"variety_level": 6},
])
def test_household_rejects(payload):
    with pytest.raises(ValidationError):
        HouseholdInput(**payload)


def test_household_cleans_lists():
    household = HouseholdInput(allergies=[" peanut ", ""], kids=[3, 7], cuisines=["Thai "]).to_household()
    assert household.allergies == ["peanut"]
    assert household.cuisines == ["Thai"]
    assert household.total_servings == 4


def test_overrides():
    overrides = OverridesInput(dinners=6, diet_adjust={"high_protein": True}).to_overrides(date(2025, 11, 3))
    assert overrides.week_of == date(2025, 11, 3)
    assert overrides.dinners == 6
    assert overrides.diet_adjust == {"high_protein": True}
    with pytest.raises(ValidationError):
        OverridesInput(dinners=8)
    with pytest.raises(ValidationError):
        OverridesInput(diet_adjust={"keto": True})


def test_recipe_input():
    recipe = RecipeInput(title=" Nonna's Lasagne ", ingredients=[{"name": "beef mince", "qty": 500, "unit": "g"}],
                         time_mins=90).to_recipe()
    assert recipe.id == "custom-nonna-s-lasagne"
    assert recipe.title == "Nonna's Lasagne"
    assert recipe.source.domain == "user-added"
    assert recipe.ingredients[0].qty == 500

    with pytest.raises(ValidationError):
        RecipeInput(title="Soup", ingredients=[])
    with pytest.raises(ValidationError):
        RecipeInput(title="ab", ingredients=[{"name": "x"}])


def test_request_models():
    request = GenerateRecipesRequest.model_validate({"household": {}, "numberOfRecipes": 3,
                                                     "excludeRecipeIds": ["a"]})
    assert request.number_of_recipes == 3
    assert request.exclude_recipe_ids == ["a"]
    with pytest.raises(ValidationError):
        GenerateRecipesRequest.model_validate({"household": {}, "numberOfRecipes": 20})
    with pytest.raises(ValidationError):
        RecipeUrlRequest(url="ftp://example.com/recipe")
    assert RecipeUrlRequest(url=" https://example.com/r ").url == "https://example.com/r"
    with pytest.raises(ValidationError):
        SwapRequest(day_index=7, recipe_id="x")


def test_recipe_id_from_name():
    assert recipe_id_from_name("Honey Garlic Salmon!") == "ai-honey-garlic-salmon"
    assert recipe_id_from_name("***") == "ai"


def test_decode_generated_recipe():
    result = decode_generated_recipe({
        "name": "Lemon Chicken Traybake",
        "cuisine": "Mediterranean",
        "totalTime": "35",
        "servings": 4,
        "ingredients": [
            {"name": "chicken thighs", "qty": 1, "unit": "kg"},
            {"name": "stock", "qty": 1, "unit": "cup"},
            {"name": "lemon", "qty": "two"},
        ],
        "instructions": "Heat oven.\nRoast everything.",
        "tags": ["Kid Friendly", "one-pan"],
        "estimatedCost": 18,
    })
    assert result.ok
    assert result.kind == "recipe"
    recipe = result.recipe
    assert recipe.id == "ai-lemon-chicken-traybake"
    assert recipe.time_mins == 35
    assert [(i.qty, i.unit) for i in recipe.ingredients] == [(1000, "g"), (250, "ml"), (1, "unit")]
    assert recipe.instructions == ["Heat oven.", "Roast everything."]
    assert recipe.tags == ["kid_friendly", "one_pan", "mediterranean"]
    assert recipe.cost_per_serve_est == 4.5
    assert recipe.source.domain == "ai-generated"


@pytest.mark.parametrize("payload", [
    "not an object",
    {"name": "No ingredients", "ingredients": [], "instructions": ["cook"]},
    {"ingredients": [{"name": "rice"}], "instructions": ["cook"]},
])
def test_decode_generated_recipe_errors(payload):
    result = decode_generated_recipe(payload)
    assert not result.ok
    assert result.kind == "error"
    assert result.error


def test_decode_generated_recipes_shapes():
    good = {"name": "Dal", "ingredients": [{"name": "lentils", "qty": 300, "unit": "g"}], "instructions": ["Simmer"]}
    assert [r.ok for r in decode_generated_recipes({"recipes": [good, {"name": "bad"}]})] == [True, False]
    assert [r.ok for r in decode_generated_recipes(good)] == [True]
    assert [r.ok for r in decode_generated_recipes([good])] == [True]
    assert [r.ok for r in decode_generated_recipes("nope")] == [False]
    photo = decode_generated_recipes([good], domain="photo", chef="Photo Import")[0].recipe
    assert photo.source.domain == "photo"
