"""Ingredient value object: name, quantity and unit as used by recipes and the pantry."""


class Ingredient:
    def __init__(self, name: str = "", qty: float = 0, unit: str = "unit"):
        self.name = name
        self.qty = qty
        self.unit = unit or "unit"

    def scaled(self, factor: float) -> "Ingredient":
        '''Returns a copy with the quantity multiplied by factor.'''
        return Ingredient(self.name, self.qty * factor, self.unit)

    def __str__(self) -> str:
        return f"{self.name} - {self.qty:g} {self.unit}"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ingredient):
            return NotImplemented
        return (self.name, self.qty, self.unit) == (other.name, other.qty, other.unit)

    @staticmethod
    def from_dict(data) -> "Ingredient":
        '''Creates an Ingredient from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        qty = d.get("qty", d.get("quantity", 0))
        try:
            qty = float(qty)
        except (TypeError, ValueError):
            qty = 0.0
        return Ingredient(str(d.get("name", "") or ""), qty, str(d.get("unit", "") or "unit"))

    def to_dict(self):
        return {"name": self.name, "qty": self.qty, "unit": self.unit}


class PantryItem(Ingredient):
    '''An ingredient the household already keeps at home.'''

    def __str__(self) -> str:
        return f"Pantry: {super().__str__()}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "PantryItem":
        base = Ingredient.from_dict(data)
        return PantryItem(base.name, base.qty, base.unit)
