"""Recipe usage history used to avoid repeating meals within a few weeks."""
import logging
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from mealplan.infra import paths
from mealplan.infra.json_store import atomic_write, read_json
from mealplan.utilities.constants import REPETITION_WINDOW_WEEKS

logger = logging.getLogger(__name__)


class RecipeHistory:
    def __init__(self, history_file: Optional[Path] = None, window_weeks: int = REPETITION_WINDOW_WEEKS):
        self.history_file = Path(history_file) if history_file else paths.HISTORY_FILE
        self.window_weeks = window_weeks

    def entries(self) -> List[Dict[str, str]]:
        data = read_json(self.history_file, [])
        if not isinstance(data, list):
            logger.error("Recipe history in %s is not a list; ignoring it", self.history_file)
            return []
        return [e for e in data if isinstance(e, dict) and "recipe_id" in e and "week_of" in e]

    def _prune(self, entries: Iterable[Dict[str, str]], reference: date) -> List[Dict[str, str]]:
        window_start = reference - timedelta(weeks=self.window_weeks)
        kept = []
        for entry in entries:
            try:
                week_of = date.fromisoformat(entry["week_of"])
            except ValueError:
                continue
            if week_of >= window_start:
                kept.append(entry)
        return kept

    def recent_recipe_ids(self, week_of: Optional[date] = None) -> List[str]:
        """Unique recipe ids used within the repetition window before week_of."""
        reference = week_of or date.today()
        recent = self._prune(self.entries(), reference)
        # entries for week_of itself are skipped: they belong to the plan being regenerated
        ids = [e["recipe_id"] for e in recent if e["week_of"] != reference.isoformat()]
        return list(dict.fromkeys(ids))

    def record_week(self, week_of: date, recipe_ids: Iterable[str]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        week_key = week_of.isoformat()
        # regenerating a week replaces what was recorded for it
        merged: Dict[str, Dict[str, str]] = {}
        for entry in self.entries():
            if entry["week_of"] == week_key:
                continue
            merged[f"{entry['recipe_id']}:{entry['week_of']}"] = entry
        for recipe_id in recipe_ids:
            merged[f"{recipe_id}:{week_key}"] = {"recipe_id": recipe_id, "week_of": week_key, "used_at": now}
        pruned = self._prune(merged.values(), max(week_of, date.today()))
        atomic_write(self.history_file, pruned)
