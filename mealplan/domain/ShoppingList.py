"""ShoppingList aggregate: AggregatedIngredient lines built from a week plan."""
from typing import Dict, List, Optional


class AggregatedIngredient:
    def __init__(self, name: str, normalized_name: str, total_qty: float, unit: str,
                 category: str = "Other", sources: Optional[List[Dict]] = None,
                 is_pantry_staple: bool = False, estimated_price: float = 0.0):
        self.name = name
        self.normalized_name = normalized_name
        self.total_qty = total_qty
        self.unit = unit
        self.category = category
        # [{recipe_id, recipe_title, qty}] in insertion order
        self.sources = sources[:] if sources else []
        self.is_pantry_staple = is_pantry_staple
        self.estimated_price = estimated_price

    def add_source(self, recipe_id: str, recipe_title: str, qty: float):
        '''Adds a contribution, merging repeat contributions of the same recipe.'''
        self.total_qty += qty
        for source in self.sources:
            if source["recipe_id"] == recipe_id:
                source["qty"] += qty
                return
        self.sources.append({"recipe_id": recipe_id, "recipe_title": recipe_title, "qty": qty})

    def display(self) -> str:
        qty, unit = self.total_qty, self.unit
        if unit == "g" and qty >= 1000:
            qty, unit = qty / 1000, "kg"
        elif unit == "ml" and qty >= 1000:
            qty, unit = qty / 1000, "L"
        return f"{qty:g} {unit} {self.name}"

    def __str__(self) -> str:
        staple = " [pantry]" if self.is_pantry_staple else ""
        return f"{self.category}: {self.display()}{staple} (${self.estimated_price:.2f})"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, AggregatedIngredient):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self.normalized_name, self.unit, self.total_qty))

    def to_dict(self):
        return {
            "name": self.name,
            "normalized_name": self.normalized_name,
            "total_qty": self.total_qty,
            "unit": self.unit,
            "category": self.category,
            "sources": [dict(s) for s in self.sources],
            "is_pantry_staple": self.is_pantry_staple,
            "estimated_price": self.estimated_price,
        }


class ShoppingList:
    def __init__(self, items: Optional[List[AggregatedIngredient]] = None):
        self.items = items[:] if items else []

    def get_items(self) -> List[AggregatedIngredient]:
        return self.items

    def total_price(self, include_pantry_staples: bool = False) -> float:
        return round(sum(i.estimated_price for i in self.items
                         if include_pantry_staples or not i.is_pantry_staple), 2)

    def by_category(self) -> Dict[str, List[AggregatedIngredient]]:
        groups: Dict[str, List[AggregatedIngredient]] = {}
        for item in self.items:
            groups.setdefault(item.category, []).append(item)
        return groups

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Shopping List:\n\t{items_str}"

    def __repr__(self) -> str:
        return self.__str__()

    def to_dict(self):
        return {
            "items": [item.to_dict() for item in self.items],
            "count": len(self.items),
            "total_price": self.total_price(),
        }
