"""Ingredient name normalisation shared by scoring and the shopping list."""
import re

_PREP_WORDS = (
    "fresh", "dried", "ground", "chopped", "sliced", "diced", "minced", "grated",
    "crushed", "shredded", "raw", "cooked",
)
_QUALITY_WORDS = (
    "plain", "greek", "whole", "full cream", "low fat", "reduced fat", "extra virgin",
    "unsalted", "salted", "canned", "frozen",
)

_PARENS = re.compile(r"\([^)]*\)")
_DIGITS = re.compile(r"[0-9]+([./][0-9]+)?")
_ALTERNATIVE = re.compile(r"\s+(and/or|or)\s+.*$")
_LEADING = re.compile(r"^(?:(?:%s)\s+)+" % "|".join(re.escape(w) for w in _PREP_WORDS + _QUALITY_WORDS))
_TRAILING = re.compile(r"\s+(?:%s)$" % "|".join(re.escape(w) for w in _QUALITY_WORDS))
_SPACES = re.compile(r"\s+")


def normalize_ingredient_name(name: str) -> str:
    """Canonical form of an ingredient name.

    "Fresh chicken breast (skinless), diced" -> "chicken breast"
    "2 onions or shallots" -> "onions"
    """
    n = (name or "").lower()
    n = n.split(",", 1)[0]
    n = _PARENS.sub("", n)
    n = _DIGITS.sub("", n)
    n = _SPACES.sub(" ", n).strip()
    n = _ALTERNATIVE.sub("", n)
    n = _LEADING.sub("", n)
    n = _TRAILING.sub("", n)
    return _SPACES.sub(" ", n).strip()


def ingredient_key(name: str) -> str:
    '''Coarse key for ingredient reuse: first two words of the normalised name.'''
    return " ".join(normalize_ingredient_name(name).split(" ")[:2])
