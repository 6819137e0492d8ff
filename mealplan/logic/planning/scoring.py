"""Deterministic rules-based scoring for dinner selection.

A recipe is first checked against hard filters (allergies, avoided foods and
the relaxed weeknight time bound). Eligible recipes start from a base score
and collect bonuses and penalties from SCORING_WEIGHTS.
"""
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from mealplan.domain.Household import Household
from mealplan.domain.Recipe import Recipe
from mealplan.logic.shopping.names import ingredient_key
from mealplan.utilities.constants import WEEKNIGHT_SEARCH_SLACK_MINS

SCORING_WEIGHTS: Dict[str, float] = {
    "BASE_SCORE": 100,
    # bonuses
    "FAVORITE_BONUS": 50,
    "INGREDIENT_REUSE_BONUS_PER_MATCH": 5,
    "PACK_REUSE_BONUS": 10,
    "PACK_REUSE_THRESHOLD": 2,
    "VALUE_BONUS_MAX": 15,
    "VALUE_THRESHOLD_PER_SERVE": 4.0,
    "BULK_COOK_BONUS": 8,
    "HIGH_PROTEIN_BONUS": 5,
    "ORGANIC_FRIENDLY_BONUS": 3,
    "PREFERRED_CHEF_BONUS": 10,
    # penalties
    "RECENT_RECIPE_PENALTY": 30,
    "PROTEIN_REPETITION_PENALTY_PER_USE": 15,
    "COMPLEXITY_THRESHOLD": 12,
    "COMPLEXITY_PENALTY_PER_INGREDIENT": 0.5,
    "OVER_WEEKNIGHT_CAP_PENALTY": 20,
    "NOT_KID_FRIENDLY_PENALTY": 25,
}


class ScoreExplanation:
    def __init__(self, score: float = 0, eligible: bool = True, reasons: Optional[List[str]] = None,
                 bonuses: Optional[List[str]] = None, penalties: Optional[List[str]] = None):
        self.score = score
        self.eligible = eligible
        self.reasons = reasons[:] if reasons else []
        self.bonuses = bonuses[:] if bonuses else []
        self.penalties = penalties[:] if penalties else []

    def __str__(self) -> str:
        state = "" if self.eligible else " (ineligible)"
        return f"score={self.score:g}{state} reasons={self.reasons}"

    __repr__ = __str__

    def to_dict(self):
        return {
            "score": self.score,
            "eligible": self.eligible,
            "reasons": self.reasons,
            "bonuses": self.bonuses,
            "penalties": self.penalties,
        }


class ScoringContext:
    """Week state a candidate is scored against.

    selected_recipes, protein_counts and ingredient_counts are updated by the
    composer after each pick; the scorer only reads them.
    """

    def __init__(self, household: Household, is_weekend: bool = False, kid_friendly_required: bool = False,
                 weeknight_cap: Optional[int] = None, selected_recipes: Optional[List[Recipe]] = None,
                 protein_counts: Optional[Dict[str, int]] = None,
                 ingredient_counts: Optional[Dict[str, int]] = None,
                 recent_recipe_ids: Iterable[str] = (), preferred_chef: Optional[str] = None):
        self.household = household
        self.is_weekend = is_weekend
        self.kid_friendly_required = kid_friendly_required
        self.weeknight_cap = weeknight_cap if weeknight_cap is not None else household.weeknight_cap
        self.selected_recipes = selected_recipes if selected_recipes is not None else []
        self.protein_counts = protein_counts if protein_counts is not None else {}
        self.ingredient_counts = ingredient_counts if ingredient_counts is not None else {}
        self.recent_recipe_ids = set(recent_recipe_ids)
        self.preferred_chef = preferred_chef if preferred_chef is not None else household.preferred_chef

    @property
    def search_bound(self) -> int:
        return self.weeknight_cap + WEEKNIGHT_SEARCH_SLACK_MINS


def _excluded_term(recipe: Recipe, terms: List[str]) -> Optional[str]:
    haystacks = [recipe.title.lower()] + [ing.name.lower() for ing in recipe.ingredients]
    for term in terms:
        if any(term in text for text in haystacks):
            return term
    return None


def _pack_reuse_hit(recipe: Recipe, selected: List[Recipe]) -> Optional[str]:
    counts = Counter(ingredient_key(ing.name) for ing in recipe.ingredients)
    for other in selected:
        for ing in other.ingredients:
            key = ingredient_key(ing.name)
            if key in counts:
                counts[key] += 1
    for name, count in counts.items():
        if name and count >= SCORING_WEIGHTS["PACK_REUSE_THRESHOLD"]:
            return name
    return None


def score_recipe(recipe: Recipe, context: ScoringContext) -> ScoreExplanation:
    w = SCORING_WEIGHTS
    household = context.household

    excluded = _excluded_term(recipe, household.excluded_foods())
    if excluded:
        return ScoreExplanation(0, False, penalties=[f"Contains excluded food: {excluded}"])
    if not context.is_weekend and recipe.effective_time > context.search_bound:
        return ScoreExplanation(0, False, penalties=[
            f"Exceeds weeknight time limit ({recipe.effective_time}m > {context.search_bound}m)"])

    score = w["BASE_SCORE"]
    reasons: List[str] = []
    bonuses: List[str] = []
    penalties: List[str] = []

    if recipe.id in household.favorites:
        score += w["FAVORITE_BONUS"]
        bonuses.append(f"Favorite (+{w['FAVORITE_BONUS']:g})")
        reasons.append("favorite")

    if recipe.id in context.recent_recipe_ids:
        score -= w["RECENT_RECIPE_PENALTY"]
        penalties.append(f"Recently used (-{w['RECENT_RECIPE_PENALTY']:g})")

    protein = recipe.protein_type()
    if protein and context.protein_counts.get(protein, 0) > 0:
        penalty = context.protein_counts[protein] * w["PROTEIN_REPETITION_PENALTY_PER_USE"]
        score -= penalty
        penalties.append(f"Protein repetition: {protein} (-{penalty:g})")

    reuse = sum(1 for ing in recipe.ingredients if context.ingredient_counts.get(ingredient_key(ing.name)))
    if reuse:
        bonus = reuse * w["INGREDIENT_REUSE_BONUS_PER_MATCH"]
        score += bonus
        bonuses.append(f"Ingredient reuse: {reuse} matches (+{bonus:g})")
        reasons.append("reuses ingredients")

    pack_hit = _pack_reuse_hit(recipe, context.selected_recipes)
    if pack_hit:
        score += w["PACK_REUSE_BONUS"]
        bonuses.append(f"Pack reuse: {pack_hit} (+{w['PACK_REUSE_BONUS']:g})")
        reasons.append("best value")

    cost = recipe.cost_per_serve_est
    if cost and cost < w["VALUE_THRESHOLD_PER_SERVE"]:
        bonus = int((w["VALUE_THRESHOLD_PER_SERVE"] - cost) / w["VALUE_THRESHOLD_PER_SERVE"] * w["VALUE_BONUS_MAX"])
        score += bonus
        bonuses.append(f"Cost effective (+{bonus})")
        reasons.append("best value")

    if recipe.bulk_cook:
        score += w["BULK_COOK_BONUS"]
        bonuses.append(f"Bulk cook (+{w['BULK_COOK_BONUS']:g})")
        reasons.append("bulk cook")

    if household.diet.get("high_protein") and recipe.has_tag("high_protein"):
        score += w["HIGH_PROTEIN_BONUS"]
        bonuses.append(f"High protein (+{w['HIGH_PROTEIN_BONUS']:g})")
        reasons.append("high-protein")

    if household.diet.get("organic_preferred") and recipe.has_tag("organic_ok"):
        score += w["ORGANIC_FRIENDLY_BONUS"]
        bonuses.append(f"Organic friendly (+{w['ORGANIC_FRIENDLY_BONUS']:g})")

    if context.preferred_chef and recipe.source.chef == context.preferred_chef:
        score += w["PREFERRED_CHEF_BONUS"]
        bonuses.append(f"Preferred chef (+{w['PREFERRED_CHEF_BONUS']:g})")

    extra = len(recipe.ingredients) - w["COMPLEXITY_THRESHOLD"]
    if extra > 0:
        penalty = extra * w["COMPLEXITY_PENALTY_PER_INGREDIENT"]
        score -= penalty
        penalties.append(f"Complex recipe (-{penalty:.1f})")

    if not context.is_weekend and recipe.effective_time > context.weeknight_cap:
        score -= w["OVER_WEEKNIGHT_CAP_PENALTY"]
        penalties.append(f"Over weeknight cap of {context.weeknight_cap}m (-{w['OVER_WEEKNIGHT_CAP_PENALTY']:g})")

    if context.kid_friendly_required and not context.is_weekend and not recipe.kid_friendly:
        score -= w["NOT_KID_FRIENDLY_PENALTY"]
        penalties.append(f"Not kid-friendly on a weeknight (-{w['NOT_KID_FRIENDLY_PENALTY']:g})")

    if recipe.time_mins and recipe.time_mins <= 30:
        reasons.append("≤30m")
    elif recipe.time_mins and recipe.time_mins <= 40:
        reasons.append("≤40m")

    if recipe.kid_friendly:
        reasons.append("kid-friendly")

    return ScoreExplanation(
        score=max(0, score),
        eligible=True,
        reasons=list(dict.fromkeys(reasons)),
        bonuses=bonuses,
        penalties=penalties,
    )


def score_and_rank(candidates: Iterable[Recipe], context: ScoringContext,
                   top_n: Optional[int] = None) -> List[Tuple[Recipe, ScoreExplanation]]:
    """Eligible candidates ordered by score descending, ties broken by recipe id."""
    scored = [(recipe, score_recipe(recipe, context)) for recipe in candidates]
    ranked = sorted(((r, e) for r, e in scored if e.eligible), key=lambda item: (-item[1].score, item[0].id))
    return ranked[:top_n] if top_n else ranked
