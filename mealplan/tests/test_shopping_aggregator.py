import csv
from datetime import date, timedelta
import io
import unittest

from mealplan.domain.Ingredient import Ingredient, PantryItem
from mealplan.domain.Plan import PlanDay, PlanWeek
from mealplan.logic.shopping.aggregator import aggregate_shopping_list
from mealplan.logic.shopping.names import ingredient_key, normalize_ingredient_name
from mealplan.logic.shopping.pricing import aisle_for, categorize_ingredient, estimate_ingredient_cost
from mealplan.tests.catalog_helpers import make_catalog, make_recipe
from mealplan.utilities.export_import import shopping_list_to_csv

MONDAY = date(2025, 11, 3)


def plan_for(*recipe_ids, servings=4):
    days = [PlanDay(MONDAY + timedelta(days=i), rid, servings) for i, rid in enumerate(recipe_ids)]
    return PlanWeek(start=MONDAY, days=days)


class TestNames(unittest.TestCase):

    def test_normalize(self):
        self.assertEqual(normalize_ingredient_name("Fresh chicken breast (skinless), diced"), "chicken breast")
        self.assertEqual(normalize_ingredient_name("2 onions or shallots"), "onions")
        self.assertEqual(normalize_ingredient_name("Extra virgin olive oil"), "olive oil")
        self.assertEqual(normalize_ingredient_name("Greek yoghurt"), "yoghurt")
        self.assertEqual(normalize_ingredient_name("  Garlic  "), "garlic")

    def test_ingredient_key(self):
        self.assertEqual(ingredient_key("chicken thigh fillets"), "chicken thigh")
        self.assertEqual(ingredient_key("Minced garlic"), "garlic")


class TestPricing(unittest.TestCase):

    def test_categories(self):
        self.assertEqual(categorize_ingredient("chicken breast"), "protein")
        self.assertEqual(categorize_ingredient("salmon"), "seafood")
        self.assertEqual(categorize_ingredient("eggplant"), "vegetables")
        self.assertEqual(categorize_ingredient("eggs"), "dairy")
        self.assertEqual(categorize_ingredient("fresh basil"), "herbs")
        self.assertEqual(categorize_ingredient("arborio rice"), "pantry")
        self.assertEqual(aisle_for("prawns"), "Seafood")

    def test_estimates(self):
        self.assertEqual(estimate_ingredient_cost("chicken breast", 1000, "g"), 15.0)
        self.assertEqual(estimate_ingredient_cost("salt", 5, "ml"), 0.10)
        self.assertEqual(estimate_ingredient_cost("bread rolls", 2, "unit"), 8.0)
        self.assertEqual(estimate_ingredient_cost("fresh coriander", 1, "bunch"), 3.5)


class TestAggregateShoppingList(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog(
            make_recipe("fajitas", ingredients=[
                Ingredient("chicken breast", 500, "g"),
                Ingredient("onion", 1),
                Ingredient("olive oil", 1, "tbsp"),
            ]),
            make_recipe("pesto-pasta", ingredients=[
                Ingredient("Chicken breast, diced", 500, "g"),
                Ingredient("onion", 1),
                Ingredient("olive oil", 2, "tsp"),
                Ingredient("salt", 1, "tsp"),
            ]),
            make_recipe("big-batch", serves=8, ingredients=[Ingredient("onion", 400, "g")]),
        )

    def item(self, shopping_list, name, unit=None):
        for item in shopping_list.get_items():
            if item.normalized_name == name and (unit is None or item.unit == unit):
                return item
        self.fail(f"{name} not on the list")

    def test_same_ingredient_merges_across_recipes(self):
        result = aggregate_shopping_list(plan_for("fajitas", "pesto-pasta"), self.catalog)
        chicken = self.item(result, "chicken breast")
        self.assertEqual(chicken.total_qty, 1000)
        self.assertEqual(chicken.unit, "g")
        self.assertEqual(chicken.category, "Meat")
        self.assertEqual(chicken.estimated_price, 15.0)
        self.assertEqual([s["recipe_id"] for s in chicken.sources], ["fajitas", "pesto-pasta"])

    def test_compatible_units_merge(self):
        result = aggregate_shopping_list(plan_for("fajitas", "pesto-pasta"), self.catalog)
        oil = self.item(result, "olive oil")
        self.assertEqual(oil.total_qty, 25)
        self.assertEqual(oil.unit, "ml")
        self.assertEqual(self.item(result, "onion").total_qty, 2)

    def test_incompatible_units_stay_separate(self):
        result = aggregate_shopping_list(plan_for("fajitas", "big-batch"), self.catalog)
        self.assertEqual(self.item(result, "onion", "unit").total_qty, 1)
        self.assertEqual(self.item(result, "onion", "g").total_qty, 400)

    def test_scaled_to_servings(self):
        result = aggregate_shopping_list(plan_for("big-batch", servings=4), self.catalog)
        self.assertEqual(self.item(result, "onion").total_qty, 200)
        result = aggregate_shopping_list(plan_for("fajitas", servings=6), self.catalog)
        self.assertEqual(self.item(result, "chicken breast").total_qty, 750)

    def test_pantry_flag_and_exclusion(self):
        pantry = [PantryItem("Salt", 1, "unit"), PantryItem("olive oil", 10, "ml")]
        result = aggregate_shopping_list(plan_for("fajitas", "pesto-pasta"), self.catalog, pantry)
        self.assertTrue(self.item(result, "salt").is_pantry_staple)
        self.assertEqual(self.item(result, "olive oil").total_qty, 15)
        self.assertFalse(self.item(result, "chicken breast").is_pantry_staple)

        trimmed = aggregate_shopping_list(plan_for("fajitas", "pesto-pasta"), self.catalog, pantry,
                                          exclude_pantry_staples=True)
        names = [i.normalized_name for i in trimmed.get_items()]
        self.assertNotIn("salt", names)
        self.assertNotIn("olive oil", names)
        self.assertEqual(len(trimmed), len(result) - 2)

    def test_pantry_quantities_are_subtracted(self):
        catalog = make_catalog(make_recipe("risotto", ingredients=[
            Ingredient("rice", 500, "g"),
            Ingredient("parmesan", 100, "g"),
            Ingredient("stock", 1, "l"),
        ]))
        pantry = [PantryItem("rice", 400, "g"), PantryItem("Parmesan", 0.1, "kg"), PantryItem("stock", 2, "unit")]
        result = aggregate_shopping_list(plan_for("risotto"), catalog, pantry)
        rice = self.item(result, "rice")
        self.assertEqual(rice.total_qty, 100)
        self.assertTrue(rice.is_pantry_staple)
        self.assertNotIn("parmesan", [i.normalized_name for i in result.get_items()])
        self.assertEqual(self.item(result, "stock").total_qty, 1000)

    def test_herbs_priced_per_bunch(self):
        catalog = make_catalog(
            make_recipe("curry", ingredients=[Ingredient("fresh coriander", 1, "bunch")]),
            make_recipe("salsa", ingredients=[Ingredient("fresh coriander", 1, "bunches")]),
        )
        coriander = self.item(aggregate_shopping_list(plan_for("curry", "salsa"), catalog), "coriander")
        self.assertEqual((coriander.total_qty, coriander.unit), (2, "bunch"))
        self.assertEqual(coriander.category, "Fresh Herbs")
        self.assertEqual(coriander.estimated_price, 7.0)

    def test_same_plan_same_list(self):
        plan = plan_for("fajitas", "pesto-pasta", "big-batch")
        first = aggregate_shopping_list(plan, self.catalog)
        second = aggregate_shopping_list(plan, self.catalog)
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_sorted_by_category_then_name(self):
        result = aggregate_shopping_list(plan_for("fajitas", "pesto-pasta", "big-batch"), self.catalog)
        keys = [(i.category, i.normalized_name, i.unit) for i in result.get_items()]
        self.assertEqual(keys, sorted(keys))

    def test_unknown_and_missing_recipes_are_skipped(self):
        plan = plan_for("fajitas", "gone", "pesto-pasta")
        plan.days[2].missing = True
        with self.assertLogs("mealplan.logic.shopping.aggregator", level="WARNING"):
            result = aggregate_shopping_list(plan, self.catalog)
        self.assertEqual(self.item(result, "chicken breast").total_qty, 500)

    def test_leftover_days_are_included(self):
        plan = plan_for("fajitas", "fajitas")
        plan.days[0].bulk = True
        plan.days[1].leftover = True
        chicken = self.item(aggregate_shopping_list(plan, self.catalog), "chicken breast")
        self.assertEqual(chicken.total_qty, 1000)
        self.assertEqual(chicken.sources, [{"recipe_id": "fajitas", "recipe_title": "Fajitas", "qty": 1000}])

    def test_empty_plan(self):
        self.assertEqual(len(aggregate_shopping_list(PlanWeek(start=MONDAY), self.catalog)), 0)

    def test_csv_export(self):
        result = aggregate_shopping_list(plan_for("fajitas", "pesto-pasta"), self.catalog)
        rows = list(csv.reader(io.StringIO(shopping_list_to_csv(result))))
        self.assertEqual(rows[0], ["Category", "Qty", "Unit", "Item", "Est. Price", "Pantry Staple"])
        self.assertEqual(len(rows), len(result) + 1)
        chicken = [row for row in rows if row[3] == "chicken breast"][0]
        self.assertEqual(chicken[:3], ["Meat", "1", "kg"])


if __name__ == '__main__':
    unittest.main()
