"""Category based ingredient price estimates (AUD).

Rates are per kg (or litre, assuming 1 L = 1 kg) unless the category is
priced per bunch or per unit.
"""
import re
from typing import Dict, Tuple

from mealplan.logic.shopping.units import convert_to_kg

MIN_PRICE = 0.10

# category -> (rate, priced per)
CATEGORY_RATES: Dict[str, Tuple[float, str]] = {
    'protein': (15.00, 'kg'),
    'seafood': (30.00, 'kg'),
    'vegetables': (5.00, 'kg'),
    'dairy': (8.00, 'kg'),
    'pantry': (3.00, 'kg'),
    'herbs': (3.50, 'bunch'),
    'spices': (8.00, 'unit'),
    'fruit': (6.00, 'kg'),
    'bakery': (4.00, 'unit'),
    'condiments': (12.00, 'kg'),
}

# ordered: first match wins
_CATEGORY_PATTERNS = [
    ('protein', re.compile(r"chicken|beef|pork|lamb|turkey|duck|mince|steak|chop|fillet|sausage|bacon")),
    ('seafood', re.compile(r"fish|salmon|tuna|prawn|shrimp|crab|lobster|mussel|oyster|calamari|barramundi")),
    ('dairy', re.compile(r"milk|cream|cheese|butter|yogurt|yoghurt|creme fraiche|mascarpone|parmesan|\beggs?\b")),
    ('herbs', re.compile(r"^(?=.*(?:fresh|bunch))(?=.*(?:basil|parsley|coriander|cilantro|mint|rosemary|thyme|oregano|dill|chives|sage))")),
    ('spices', re.compile(r"cumin|paprika|turmeric|cinnamon|nutmeg|cardamom|curry|garam|powder|dried|ground")),
    ('vegetables', re.compile(r"onion|garlic|tomato|potato|carrot|capsicum|pepper|broccoli|cauliflower|zucchini|"
                              r"eggplant|lettuce|spinach|kale|cabbage|celery|cucumber|mushroom|pumpkin|squash|"
                              r"beetroot|bean|pea|corn")),
    ('fruit', re.compile(r"apple|banana|orange|lemon|lime|grape|berry|mango|pineapple|melon|peach|pear|plum|"
                         r"cherry|kiwi|avocado")),
    ('bakery', re.compile(r"bread|roll|bun|pita|tortilla|wrap|baguette|loaf")),
    ('condiments', re.compile(r"oil|vinegar|sauce|paste|mayo|mustard|ketchup|relish|dressing|stock")),
]

CATEGORY_LABELS: Dict[str, str] = {
    'protein': 'Meat',
    'seafood': 'Seafood',
    'vegetables': 'Fresh Produce',
    'dairy': 'Dairy & Eggs',
    'pantry': 'Pantry',
    'herbs': 'Fresh Herbs',
    'spices': 'Herbs & Spices',
    'fruit': 'Fruit',
    'bakery': 'Bakery',
    'condiments': 'Sauces & Condiments',
}


def categorize_ingredient(name: str) -> str:
    """Pricing category for an ingredient; anything unmatched is pantry."""
    normalized = (name or "").lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(normalized):
            return category
    return 'pantry'


def aisle_for(name: str) -> str:
    return CATEGORY_LABELS[categorize_ingredient(name)]


def estimate_ingredient_cost(name: str, qty: float, unit: str) -> float:
    category = categorize_ingredient(name)
    rate, priced_per = CATEGORY_RATES[category]
    u = (unit or "").strip().lower()
    if priced_per == 'bunch' and u in ('bunch', 'bunches'):
        price = rate * qty
    elif priced_per == 'unit' and u in ('', 'unit', 'units', 'whole', 'piece', 'pieces'):
        price = rate * qty
    else:
        price = rate * convert_to_kg(qty, unit)
    return max(MIN_PRICE, round(price, 2))
