from datetime import date
import unittest

from mealplan.domain.Household import Household
from mealplan.domain.Ingredient import Ingredient
from mealplan.domain.WeeklyOverrides import WeeklyOverrides
from mealplan.logic.planning.composer import compose_week, is_weekend, next_monday
from mealplan.tests.catalog_helpers import make_catalog, make_recipe
from mealplan.utilities.constants import LEFTOVER_NOTE

MONDAY = date(2025, 11, 3)
NAMES = ("alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "golf", "hotel")


def kid_catalog(*extra):
    recipes = [make_recipe(name, time=25, tags=["kid_friendly"]) for name in NAMES]
    return make_catalog(*(list(extra) + recipes))


class TestDates(unittest.TestCase):

    def test_next_monday(self):
        self.assertEqual(next_monday(date(2025, 11, 5)), date(2025, 11, 10))
        self.assertEqual(next_monday(date(2025, 11, 3)), date(2025, 11, 10))
        self.assertEqual(next_monday(date(2025, 11, 9)), date(2025, 11, 10))

    def test_is_weekend(self):
        self.assertFalse(is_weekend(date(2025, 11, 7)))
        self.assertTrue(is_weekend(date(2025, 11, 8)))
        self.assertTrue(is_weekend(date(2025, 11, 9)))


class TestComposeWeek(unittest.TestCase):

    def setUp(self):
        self.household = Household(adults=2, kids=[6, 9], leftover_friendly=False)

    def overrides(self, **kwargs):
        kwargs.setdefault("servings_per_meal", 4)
        return WeeklyOverrides(week_of=MONDAY, **kwargs)

    def test_kid_friendly_weeknights_within_relaxed_bound(self):
        slow = make_recipe("slow-kid-stew", time=50, tags=["kid_friendly"])
        adult = make_recipe("adult-curry", time=30)
        self.household.favorites = ["adult-curry"]
        catalog = kid_catalog(slow, adult)

        plan = compose_week(catalog, self.household, self.overrides(dinners=5))

        self.assertEqual(len(plan.days), 5)
        self.assertEqual(plan.conflicts, [])
        ids = plan.recipe_ids()
        self.assertEqual(len(set(ids)), 5)
        self.assertNotIn("slow-kid-stew", ids)
        self.assertNotIn("adult-curry", ids)
        for day in plan.days:
            recipe = catalog.get_by_id(day.recipe_id)
            self.assertLessEqual(recipe.time_mins, 45)
            self.assertTrue(recipe.kid_friendly)
        self.assertEqual(plan.days[0].date, MONDAY)
        self.assertEqual(plan.days[4].date, date(2025, 11, 7))

    def test_recipes_unique_without_leftovers(self):
        catalog = kid_catalog()
        plan = compose_week(catalog, self.household, self.overrides(dinners=7))
        self.assertEqual(len(plan.days), 7)
        self.assertEqual(len(set(plan.recipe_ids())), 7)

    def test_cost_is_sum_of_scaled_costs(self):
        catalog = make_catalog(*[make_recipe(name, cost=2.5 + i) for i, name in enumerate(NAMES[:5])])
        plan = compose_week(catalog, self.household, self.overrides(dinners=5))
        expected = sum(catalog.get_by_id(d.recipe_id).cost_per_serve_est * d.scaled_servings for d in plan.days)
        self.assertEqual(plan.cost_estimate, round(expected, 2))
        for day in plan.days:
            self.assertEqual(day.cost_estimate, round(catalog.get_by_id(day.recipe_id).cost_per_serve_est * 4, 2))

    def test_servings_come_from_household_when_not_overridden(self):
        plan = compose_week(kid_catalog(), self.household, WeeklyOverrides(week_of=MONDAY, dinners=2))
        self.assertEqual([d.scaled_servings for d in plan.days], [4, 4])
        plan = compose_week(kid_catalog(), self.household, self.overrides(dinners=2, servings_per_meal=6))
        self.assertEqual([d.scaled_servings for d in plan.days], [6, 6])

    def test_conflict_when_catalog_runs_out(self):
        catalog = make_catalog(make_recipe("alpha"), make_recipe("bravo"))
        plan = compose_week(catalog, self.household, self.overrides(dinners=4))
        self.assertEqual(len(plan.days), 2)
        self.assertEqual(plan.conflicts, [
            "No suitable recipes found for Wednesday 2025-11-05 (day 3)",
            "No suitable recipes found for Thursday 2025-11-06 (day 4)",
        ])

    def test_conflict_when_everything_is_filtered(self):
        self.household.allergies = ["peanut"]
        catalog = make_catalog(make_recipe("satay", ingredients=[Ingredient("peanut butter", 100, "g")]))
        plan = compose_week(catalog, self.household, self.overrides(dinners=1))
        self.assertEqual(plan.days, [])
        self.assertEqual(plan.conflicts, ["All candidates filtered out for Monday 2025-11-03 (day 1)"])

    def test_allergens_never_planned(self):
        self.household.allergies = ["peanut"]
        satay = make_recipe("aaa-satay", ingredients=[Ingredient("peanut butter", 100, "g")], tags=["kid_friendly"])
        plan = compose_week(kid_catalog(satay), self.household, self.overrides(dinners=7))
        self.assertNotIn("aaa-satay", plan.recipe_ids())

    def test_same_inputs_same_plan(self):
        catalog = kid_catalog(make_recipe("bulk-bake", tags=["kid_friendly", "bulk_cook"]))
        self.household.leftover_friendly = True
        first = compose_week(catalog, self.household, self.overrides(dinners=6), recent_recipe_ids=["alpha"])
        second = compose_week(catalog, self.household, self.overrides(dinners=6), recent_recipe_ids=["alpha"])
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_weekend_detected_from_dates(self):
        catalog = make_catalog(
            make_recipe("alpha-roast", time=120),
            make_recipe("bravo", time=20),
            make_recipe("charlie", time=20),
            make_recipe("delta", time=20),
        )
        overrides = WeeklyOverrides(week_of=date(2025, 11, 7), dinners=3, servings_per_meal=4,
                                    kid_friendly_weeknights=False)
        plan = compose_week(catalog, self.household, overrides)
        self.assertEqual(plan.recipe_ids(), ["bravo", "alpha-roast", "charlie"])

    def test_recent_recipes_are_avoided(self):
        catalog = make_catalog(make_recipe("alpha"), make_recipe("bravo"))
        plan = compose_week(catalog, self.household, self.overrides(dinners=1))
        self.assertEqual(plan.recipe_ids(), ["alpha"])
        plan = compose_week(catalog, self.household, self.overrides(dinners=1), recent_recipe_ids=["alpha"])
        self.assertEqual(plan.recipe_ids(), ["bravo"])

    def test_start_argument_wins_over_overrides(self):
        plan = compose_week(kid_catalog(), self.household, self.overrides(dinners=1), start=date(2025, 11, 10))
        self.assertEqual(plan.start, date(2025, 11, 10))
        self.assertEqual(plan.days[0].date, date(2025, 11, 10))

    def test_reasons_capped(self):
        self.household.favorites = ["alpha"]
        catalog = make_catalog(make_recipe("alpha", cost=2.0, tags=["kid_friendly", "bulk_cook"]))
        plan = compose_week(catalog, self.household, self.overrides(dinners=1))
        self.assertEqual(plan.days[0].reasons, ["favorite", "best value", "bulk cook"])


class TestLeftovers(unittest.TestCase):

    def setUp(self):
        self.household = Household(adults=2, kids=[6, 9], leftover_friendly=True)
        self.catalog = kid_catalog(make_recipe("bulk-bake", tags=["kid_friendly", "bulk_cook"]))

    def compose(self, dinners, **kwargs):
        overrides = WeeklyOverrides(week_of=MONDAY, dinners=dinners, servings_per_meal=4)
        return compose_week(self.catalog, self.household, overrides, **kwargs)

    def test_bulk_day_followed_by_leftovers(self):
        plan = self.compose(5)
        self.assertEqual(len(plan.days), 5)
        bulk, leftover = plan.days[0], plan.days[1]
        self.assertEqual(bulk.recipe_id, "bulk-bake")
        self.assertTrue(bulk.bulk)
        self.assertTrue(leftover.leftover)
        self.assertEqual(leftover.recipe_id, "bulk-bake")
        self.assertEqual(leftover.notes, LEFTOVER_NOTE)
        self.assertEqual(leftover.date, date(2025, 11, 4))

        others = plan.recipe_ids()[2:]
        self.assertNotIn("bulk-bake", others)
        self.assertEqual(len(set(others)), 3)
        self.assertEqual(sum(1 for d in plan.days if d.bulk), 1)
        self.assertNotIn(1, plan.suggested_swaps)
        self.assertIn(0, plan.suggested_swaps)

    def test_leftover_day_counts_towards_cost(self):
        plan = self.compose(5)
        self.assertEqual(plan.cost_estimate, 100.0)
        self.assertEqual(plan.days[1].cost_estimate, 20.0)

    def test_no_leftovers_in_short_weeks(self):
        plan = self.compose(4)
        self.assertFalse(any(d.leftover or d.bulk for d in plan.days))
        self.assertEqual(len(set(plan.recipe_ids())), 4)

    def test_no_leftovers_when_household_declines(self):
        self.household.leftover_friendly = False
        plan = self.compose(5)
        self.assertFalse(any(d.leftover or d.bulk for d in plan.days))
        self.assertEqual(len(set(plan.recipe_ids())), 5)

    def test_last_slot_is_never_bulk(self):
        self.catalog = make_catalog(
            make_recipe("alpha", tags=["bulk_cook"]),
            *[make_recipe(name) for name in ("bravo", "charlie", "delta", "echo")]
        )
        plan = self.compose(5, recent_recipe_ids=["alpha"])
        self.assertEqual(plan.recipe_ids()[-1], "alpha")
        self.assertFalse(any(d.bulk or d.leftover for d in plan.days))


class TestWeekSwaps(unittest.TestCase):

    def test_swaps_exclude_the_rest_of_the_week(self):
        household = Household(adults=2, leftover_friendly=False)
        catalog = make_catalog(*[make_recipe(name) for name in NAMES[:7]])
        plan = compose_week(catalog, household, WeeklyOverrides(week_of=MONDAY, dinners=5, servings_per_meal=2))
        week = set(plan.recipe_ids())
        self.assertEqual(sorted(plan.suggested_swaps), [0, 1, 2, 3, 4])
        for index, swaps in plan.suggested_swaps.items():
            self.assertTrue(swaps)
            self.assertFalse(set(swaps) & week)


if __name__ == '__main__':
    unittest.main()
