import json
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Dict, List

from dates import day_key
from models import AppState, Habit, HabitCollection, ImportResult

logger = logging.getLogger(__name__)

DEFAULT_HABIT_NAMES = ["Read 20 Pages", "Workout"]


def default_collection() -> HabitCollection:
    return HabitCollection([Habit(name=name) for name in DEFAULT_HABIT_NAMES])


# Function to convert model objects to dictionaries for JSON serialization
def habit_to_dict(habit: Habit) -> Dict[str, Any]:
    return {
        "name": habit.name,
        "completedDates": sorted(habit.completed_dates),
    }


def collection_to_list(collection: HabitCollection) -> List[Dict[str, Any]]:
    return [habit_to_dict(h) for h in collection]


def _completed_dates(value) -> set:
    # Anything other than a list of strings counts as "no history"
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        return set()
    return set(value)


def decode_habits(entries: list) -> HabitCollection:
    """Build a collection from raw habit dicts, normalizing bad fields"""
    collection = HabitCollection()
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        name = name.strip()
        if collection.find(name) is not None:
            logger.debug("Skipping duplicate habit %r", name)
            continue
        collection.habits.append(Habit(name=name, completed_dates=_completed_dates(entry.get("completedDates"))))
    return collection


def decode_import(raw) -> ImportResult:
    if not isinstance(raw, Mapping):
        return ImportResult(accepted=False, reason="Import file must contain a JSON object")
    entries = raw.get("habits")
    if not isinstance(entries, list):
        return ImportResult(accepted=False, reason="Import file has no 'habits' list")
    return ImportResult(accepted=True, habits=decode_habits(entries))


def export_document(collection: HabitCollection) -> str:
    return json.dumps({"habits": collection_to_list(collection)}, indent=2)


def export_filename(today: date) -> str:
    return f"habits-{day_key(today)}.json"


class HabitStore:
    """Habit collection kept in one slot of a LocalStorage"""

    def __init__(self, storage, key: str = "habits"):
        self.storage = storage
        self.key = key

    def load(self) -> HabitCollection:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return default_collection()
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            logger.warning("Stored habits are not valid JSON, starting from defaults")
            return default_collection()
        if not isinstance(data, list):
            logger.warning("Stored habits are not a list, starting from defaults")
            return default_collection()
        return decode_habits(data)

    def save(self, collection: HabitCollection) -> None:
        self.storage.set_item(self.key, json.dumps(collection_to_list(collection)))
        logger.debug("Saved %d habits", len(collection))

    def add_habit(self, collection: HabitCollection, name: str) -> bool:
        name = (name or "").strip()
        if not name or collection.find(name) is not None:
            return False

        collection.habits.append(Habit(name=name))
        self.save(collection)
        logger.info("Added habit %r", name)
        return True

    def set_day_completion(self, collection: HabitCollection, habit_index: int, key: str, completed: bool) -> None:
        habit = collection[habit_index]
        if completed:
            habit.completed_dates.add(key)
        else:
            habit.completed_dates.discard(key)
        self.save(collection)

    def apply_changes(self, collection: HabitCollection, changes) -> int:
        """Apply (habit_index, day_key, completed) edits from the grid"""
        for habit_index, key, completed in changes:
            self.set_day_completion(collection, habit_index, key, completed)
        return len(changes)

    def import_collection(self, raw) -> ImportResult:
        result = decode_import(raw)
        if not result.accepted:
            logger.warning("Import rejected: %s", result.reason)
            return result

        self.save(result.habits)
        logger.info("Imported %d habits", len(result.habits))
        return result

    def import_json(self, text) -> ImportResult:
        try:
            raw = json.loads(text)
        except (ValueError, RecursionError):
            result = ImportResult(accepted=False, reason="Import file is not valid JSON")
            logger.warning("Import rejected: %s", result.reason)
            return result
        return self.import_collection(raw)

    def import_into(self, state: AppState, text) -> ImportResult:
        """Import JSON text and, when accepted, replace the in-memory habits"""
        result = self.import_json(text)
        if result.accepted:
            state.habits = result.habits
        return result
