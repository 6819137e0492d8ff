"""Recipe domain entity: id, title, source attribution, timing, servings, ingredients, tags, cost."""
from datetime import datetime, timezone
from typing import List, Optional

from mealplan.domain.Ingredient import Ingredient
from mealplan.utilities.constants import (
    DEFAULT_RECIPE_SERVES,
    DEFAULT_RECIPE_TIME_MINS,
    PROTEIN_TYPES,
    TAG_BULK_COOK,
    TAG_KID_FRIENDLY,
)

LICENSES = ("unknown", "restricted", "permitted")


class RecipeSource:
    def __init__(self, url: str = "", domain: str = "", chef: str = "", license: str = "unknown",
                 image: Optional[str] = None, fetched_at: str = ""):
        self.url = url
        self.domain = domain
        self.chef = chef
        self.license = license if license in LICENSES else "unknown"
        self.image = image
        self.fetched_at = fetched_at or datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"{self.chef or self.domain or 'unknown source'}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "RecipeSource":
        d = dict(data) if isinstance(data, dict) else {}
        return RecipeSource(
            url=d.get("url", "") or "",
            domain=d.get("domain", "") or "",
            chef=d.get("chef", "") or "",
            license=d.get("license", "unknown") or "unknown",
            image=d.get("image"),
            fetched_at=d.get("fetched_at", d.get("fetchedAt", "")) or "",
        )

    def to_dict(self):
        data = {
            "url": self.url,
            "domain": self.domain,
            "chef": self.chef,
            "license": self.license,
            "fetched_at": self.fetched_at,
        }
        if self.image:
            data["image"] = self.image
        return data


class Recipe:
    def __init__(self, id: str, title: str = "", source: Optional[RecipeSource] = None,
                 time_mins: Optional[int] = None, serves: int = DEFAULT_RECIPE_SERVES,
                 ingredients: Optional[List[Ingredient]] = None, tags: Optional[List[str]] = None,
                 instructions: Optional[List[str]] = None, cost_per_serve_est: Optional[float] = None):
        self.id = id
        self.title = title
        self.source = source or RecipeSource()
        self.time_mins = time_mins
        self.serves = serves or DEFAULT_RECIPE_SERVES
        self.ingredients = ingredients[:] if ingredients else []
        self.tags = tags[:] if tags else []
        self.instructions = instructions[:] if instructions else []
        self.cost_per_serve_est = cost_per_serve_est

    def __str__(self) -> str:
        time_str = f"{self.time_mins}m" if self.time_mins is not None else "?m"
        return f"{self.id}: {self.title} - {time_str} - serves {self.serves} - Tags: {', '.join(self.tags)}"

    __repr__ = __str__

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    @property
    def kid_friendly(self) -> bool:
        return self.has_tag(TAG_KID_FRIENDLY)

    @property
    def bulk_cook(self) -> bool:
        return self.has_tag(TAG_BULK_COOK)

    @property
    def effective_time(self) -> int:
        return self.time_mins if self.time_mins is not None else DEFAULT_RECIPE_TIME_MINS

    def protein_type(self) -> Optional[str]:
        '''First protein tag on the recipe, if any.'''
        for tag in self.tags:
            if tag in PROTEIN_TYPES:
                return tag
        return None

    def cost_for(self, servings: int) -> float:
        return (self.cost_per_serve_est or 0) * servings

    @staticmethod
    def from_dict(data) -> "Recipe":
        d = dict(data)
        time_mins = d.get("time_mins", d.get("timeMins"))
        cost = d.get("cost_per_serve_est", d.get("costPerServeEst"))
        return Recipe(
            id=str(d["id"]),
            title=d.get("title", "") or "",
            source=RecipeSource.from_dict(d.get("source", {})),
            time_mins=int(time_mins) if time_mins is not None else None,
            serves=int(d.get("serves") or DEFAULT_RECIPE_SERVES),
            ingredients=[Ingredient.from_dict(ing) for ing in d.get("ingredients", [])],
            tags=list(d.get("tags", [])),
            instructions=list(d.get("instructions", []) or []),
            cost_per_serve_est=float(cost) if cost is not None else None,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "source": self.source.to_dict(),
            "time_mins": self.time_mins,
            "serves": self.serves,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "tags": self.tags,
            "instructions": self.instructions,
            "cost_per_serve_est": self.cost_per_serve_est,
        }
