import json
import unittest

import pytest

from mealplan.domain.Ingredient import Ingredient
from mealplan.infra.Library_Import import (
    convert_indexed_recipe,
    estimate_cost_per_serve,
    extract_tags,
    parse_duration,
    parse_ingredient,
    parse_servings,
    reading_from_library,
)
from mealplan.infra import paths
from mealplan.infra.Recipe_Repository import RecipeRepository, reading_from_recipes
from mealplan.tests.catalog_helpers import make_catalog, make_recipe


class TestSearch(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog(
            make_recipe("alpha", time=20, tags=["kid_friendly"], chef="nagi"),
            make_recipe("bravo", time=50, tags=["kid_friendly", "bulk_cook"], chef="jamie"),
            make_recipe("charlie", time=None, tags=["vegetarian"], chef="nagi"),
            make_recipe("delta", time=40, tags=["kid_friendly"], chef="jamie"),
        )

    def test_max_time_keeps_untimed_recipes(self):
        ids = [r.id for r in self.catalog.search(max_time=45)]
        self.assertEqual(ids, ["alpha", "charlie", "delta"])

    def test_tags_must_all_match(self):
        ids = [r.id for r in self.catalog.search(tags=["kid_friendly", "bulk_cook"])]
        self.assertEqual(ids, ["bravo"])

    def test_chef_exclude_and_limit(self):
        self.assertEqual([r.id for r in self.catalog.search(chef="nagi", exclude_ids=["alpha"])], ["charlie"])
        self.assertEqual(len(self.catalog.search(limit=2)), 2)

    def test_get_by_id(self):
        self.assertEqual(self.catalog.get_by_id("delta").time_mins, 40)
        self.assertIsNone(self.catalog.get_by_id("nope"))


class TestLibraryImport(unittest.TestCase):

    def test_parse_duration(self):
        self.assertEqual(parse_duration("PT45M"), 45)
        self.assertEqual(parse_duration("PT1H30M"), 90)
        self.assertEqual(parse_duration("PT2H"), 120)
        self.assertIsNone(parse_duration(""))
        self.assertIsNone(parse_duration("soon"))

    def test_parse_servings(self):
        self.assertEqual(parse_servings("6 servings"), 6)
        self.assertEqual(parse_servings(["5"]), 5)
        self.assertEqual(parse_servings(None), 4)

    def test_parse_ingredient(self):
        self.assertEqual(parse_ingredient("500g chicken breast"), Ingredient("chicken breast", 500, "g"))
        self.assertEqual(parse_ingredient("1/2 cup milk"), Ingredient("milk", 125, "ml"))
        self.assertEqual(parse_ingredient("2 tbsp soy sauce"), Ingredient("soy sauce", 2, "tbsp"))
        self.assertEqual(parse_ingredient("1 onion"), Ingredient("onion", 1, "unit"))
        self.assertEqual(parse_ingredient("2 celery stalks"), Ingredient("celery stalks", 2, "unit"))
        self.assertEqual(parse_ingredient("salt to taste"), Ingredient("salt to taste", 1, "unit"))

    def test_extract_tags(self):
        recipe = {"recipeCategory": ["Main Course"], "recipeIngredient": ["500g chicken thigh", "1 onion"]}
        tags = extract_tags(recipe, 25)
        self.assertEqual(tags, ["main_course", "quick", "kid_friendly", "chicken"])
        self.assertIn("bulk_cook", extract_tags({"recipeIngredient": ["lentils"]}, 75))
        self.assertIn("vegetarian", extract_tags({"recipeIngredient": ["lentils"]}, 75))

    def test_estimate_cost_per_serve_is_clamped(self):
        self.assertEqual(estimate_cost_per_serve(10, 4), 2.0)
        self.assertEqual(estimate_cost_per_serve(20, 2), 4.75)
        self.assertEqual(estimate_cost_per_serve(60, 1), 8.0)

    def test_convert_indexed_recipe(self):
        recipe = convert_indexed_recipe({
            "id": "rte-soup",
            "chef": "nagi",
            "sourceUrl": "https://www.recipetineats.com/soup/",
            "domain": "recipetineats.com",
            "recipe": {"name": "Soup", "totalTime": "PT40M", "recipeYield": "5",
                       "recipeIngredient": ["500g chicken thigh", "2l chicken stock"]},
        })
        self.assertEqual(recipe.source.chef, "recipe_tin_eats")
        self.assertEqual(recipe.source.license, "permitted")
        self.assertEqual(recipe.time_mins, 40)
        self.assertEqual(recipe.serves, 5)
        self.assertEqual(recipe.ingredients[1], Ingredient("chicken stock", 2000, "ml"))
        self.assertTrue(recipe.kid_friendly)


def _write_library(root):
    chef_dir = root / "library" / "jamie-oliver"
    chef_dir.mkdir(parents=True)
    (chef_dir / "chow-mein.json").write_text(json.dumps({
        "id": "jo-chow-mein", "chef": "jamie-oliver",
        "recipe": {"name": "Chow Mein", "totalTime": "PT20M", "recipeIngredient": ["300g egg noodles"]},
    }), encoding="utf-8")
    (chef_dir / "broken.json").write_text("{not json", encoding="utf-8")
    return root / "library"


def test_reading_from_library_skips_bad_files(tmp_path):
    recipes = reading_from_library(_write_library(tmp_path))
    assert [r.id for r in recipes] == ["jo-chow-mein"]
    assert recipes[0].source.chef == "jamie_oliver"


def test_missing_recipes_file_is_empty(tmp_path):
    assert reading_from_recipes(tmp_path / "nope.json") == []


def test_custom_recipes_override_library_and_persist(tmp_path):
    library = _write_library(tmp_path)
    recipes_file = tmp_path / "recipes.json"
    repo = RecipeRepository(library_dir=library, recipes_file=recipes_file)
    assert repo.get_by_id("jo-chow-mein").title == "Chow Mein"

    repo.add_custom([make_recipe("jo-chow-mein", title="Better Chow Mein"), make_recipe("extra")])
    assert repo.get_by_id("jo-chow-mein").title == "Better Chow Mein"

    fresh = RecipeRepository(library_dir=library, recipes_file=recipes_file)
    assert sorted(r.id for r in fresh.get_all()) == ["extra", "jo-chow-mein"]
    stored = json.loads(recipes_file.read_text(encoding="utf-8"))
    assert {r["id"] for r in stored} == {"jo-chow-mein", "extra"}


def test_in_memory_catalog_adds_without_writing(tmp_path, monkeypatch):
    monkeypatch.setattr(paths, "RECIPES_FILE", tmp_path / "recipes.json")
    catalog = make_catalog(make_recipe("alpha"), make_recipe("bravo"))
    catalog.add_custom([make_recipe("charlie"), make_recipe("alpha", time=10)])
    assert [r.id for r in catalog.get_all()] == ["alpha", "bravo", "charlie"]
    assert catalog.get_by_id("alpha").time_mins == 10
    assert not paths.RECIPES_FILE.exists()


@pytest.mark.parametrize("payload", ["{broken", json.dumps([{"title": "no id"}])])
def test_corrupt_recipes_file_is_empty(tmp_path, payload):
    path = tmp_path / "recipes.json"
    path.write_text(payload, encoding="utf-8")
    assert reading_from_recipes(path) == []


if __name__ == '__main__':
    unittest.main()
