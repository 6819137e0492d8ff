"""Plan domain entities: PlanDay (one dinner slot) and PlanWeek (the generated schedule)."""
from datetime import date
from typing import Dict, List, Optional


class PlanDay:
    def __init__(self, date: date, recipe_id: str, scaled_servings: int, cost_estimate: float = 0.0,
                 notes: Optional[str] = None, bulk: bool = False, leftover: bool = False,
                 reasons: Optional[List[str]] = None):
        self.date = date
        self.recipe_id = recipe_id
        self.scaled_servings = scaled_servings
        self.cost_estimate = cost_estimate
        self.notes = notes
        self.bulk = bulk
        self.leftover = leftover
        self.reasons = reasons[:] if reasons else []
        # set when the recipe id no longer resolves in the catalog
        self.missing = False

    def __str__(self) -> str:
        marker = " (leftovers)" if self.leftover else (" (bulk)" if self.bulk else "")
        return f"{self.date.isoformat()}: {self.recipe_id}{marker} x{self.scaled_servings}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "PlanDay":
        d = dict(data)
        day = PlanDay(
            date=date.fromisoformat(d["date"]),
            recipe_id=str(d["recipe_id"]),
            scaled_servings=int(d.get("scaled_servings", 0)),
            cost_estimate=float(d.get("cost_estimate", 0) or 0),
            notes=d.get("notes"),
            bulk=bool(d.get("bulk", False)),
            leftover=bool(d.get("leftover", False)),
            reasons=list(d.get("reasons", [])),
        )
        return day

    def to_dict(self):
        data = {
            "date": self.date.isoformat(),
            "recipe_id": self.recipe_id,
            "scaled_servings": self.scaled_servings,
            "cost_estimate": self.cost_estimate,
            "notes": self.notes,
            "bulk": self.bulk,
            "leftover": self.leftover,
            "reasons": self.reasons,
        }
        if self.missing:
            data["missing"] = True
        return data


class PlanWeek:
    def __init__(self, start: date, days: Optional[List[PlanDay]] = None, cost_estimate: float = 0.0,
                 conflicts: Optional[List[str]] = None,
                 suggested_swaps: Optional[Dict[int, List[str]]] = None):
        self.start = start
        self.days = days[:] if days else []
        self.cost_estimate = cost_estimate
        self.conflicts = conflicts[:] if conflicts else []
        self.suggested_swaps = dict(suggested_swaps or {})

    def __str__(self) -> str:
        days_str = ",\n\t".join(str(day) for day in self.days)
        return f"Week of {self.start.isoformat()} (${self.cost_estimate:.2f}):\n\t{days_str}"

    __repr__ = __str__

    def recipe_ids(self) -> List[str]:
        return [day.recipe_id for day in self.days]

    def unresolved_days(self) -> List[int]:
        return [i for i, day in enumerate(self.days) if day.missing]

    def recompute_cost(self) -> float:
        self.cost_estimate = round(sum(day.cost_estimate for day in self.days if not day.missing), 2)
        return self.cost_estimate

    @staticmethod
    def from_dict(data) -> "PlanWeek":
        d = dict(data)
        swaps = {int(k): list(v) for k, v in (d.get("suggested_swaps") or {}).items()}
        return PlanWeek(
            start=date.fromisoformat(d["start"]),
            days=[PlanDay.from_dict(day) for day in d.get("days", [])],
            cost_estimate=float(d.get("cost_estimate", 0) or 0),
            conflicts=list(d.get("conflicts", [])),
            suggested_swaps=swaps,
        )

    def to_dict(self):
        return {
            "start": self.start.isoformat(),
            "days": [day.to_dict() for day in self.days],
            "cost_estimate": self.cost_estimate,
            "conflicts": self.conflicts,
            "suggested_swaps": {str(k): v for k, v in self.suggested_swaps.items()},
        }
