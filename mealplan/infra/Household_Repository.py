"""Household and weekly-overrides persistence (JSON files)."""
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from mealplan.domain.Household import Household
from mealplan.domain.WeeklyOverrides import WeeklyOverrides
from mealplan.infra import paths
from mealplan.infra.json_store import atomic_write, read_json

logger = logging.getLogger(__name__)


class HouseholdRepository:
    def __init__(self, household_file: Optional[Path] = None, overrides_file: Optional[Path] = None):
        self.household_file = Path(household_file) if household_file else paths.HOUSEHOLD_FILE
        self.overrides_file = Path(overrides_file) if overrides_file else paths.OVERRIDES_FILE

    def get_household(self) -> Household:
        """Stored household, or the default profile when nothing has been saved yet."""
        data = read_json(self.household_file, None)
        if not isinstance(data, dict):
            return Household()
        return Household.from_dict(data)

    def save_household(self, household: Household) -> None:
        atomic_write(self.household_file, household.to_dict())

    def get_overrides(self, week_of: date) -> Optional[WeeklyOverrides]:
        store = read_json(self.overrides_file, {}) or {}
        entry = store.get(week_of.isoformat())
        if not entry:
            return None
        try:
            return WeeklyOverrides.from_dict(entry)
        except ValueError as e:
            logger.warning("Ignoring invalid overrides for week %s: %s", week_of, e)
            return None

    def save_overrides(self, overrides: WeeklyOverrides) -> None:
        if overrides.week_of is None:
            raise ValueError("Weekly overrides need a week_of date")
        store = read_json(self.overrides_file, {}) or {}
        store[overrides.week_of.isoformat()] = overrides.to_dict()
        atomic_write(self.overrides_file, store)
